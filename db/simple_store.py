"""
Simple in-memory vector store.

Vectors are kept in a flat list and searched by brute-force cosine
similarity. Nothing is persisted; the store is rebuilt on every start.
"""

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity
from typing import List, Dict, Any, Optional, Callable
import logging

logger = logging.getLogger(__name__)


class SimpleVectorStore:
    def __init__(self,
                 collection_name: str = "documents",
                 embedding_function: Optional[Callable] = None):
        """Create an empty store

        Args:
            collection_name: Name reported in stats and logs
            embedding_function: Function mapping a text (or a list of texts)
                to its embedding (or a list of embeddings)
        """
        self.collection_name = collection_name
        self.embedding_function = embedding_function

        self._ids: List[str] = []
        self._texts: List[str] = []
        self._metadatas: List[Dict] = []
        self._vectors: List[List[float]] = []

    def add_documents(self,
                      texts: List[str],
                      metadata: List[Dict],
                      embeddings: Optional[List[List[float]]] = None,
                      ids: Optional[List[str]] = None):
        """Add documents to the store

        Args:
            texts: List of document texts to add
            metadata: List of metadata dictionaries for each document
            embeddings: Optional pre-computed embeddings
            ids: Optional list of IDs for documents
        """
        if not texts:
            logger.warning("No texts provided to add_documents")
            return

        if len(texts) != len(metadata):
            raise ValueError("Length of texts and metadata must match")

        if ids is None:
            start = len(self._ids)
            ids = [str(start + i) for i in range(len(texts))]
        elif len(ids) != len(texts):
            raise ValueError("Length of ids must match texts")

        if embeddings is None:
            if self.embedding_function is None:
                raise ValueError("No embeddings given and no embedding function configured")
            embeddings = self.embedding_function(list(texts))

        if len(embeddings) != len(texts):
            raise ValueError("Length of embeddings must match texts")

        self._ids.extend(ids)
        self._texts.extend(texts)
        self._metadatas.extend(dict(m) for m in metadata)
        self._vectors.extend([float(x) for x in vector] for vector in embeddings)

        logger.info(f"Added {len(texts)} documents to collection {self.collection_name}")

    def search(self,
               query: str,
               k: int = 5,
               query_embedding: Optional[List[float]] = None) -> List[Dict[str, Any]]:
        """Search for similar documents

        Args:
            query: The text query
            k: Number of results to return
            query_embedding: Optional pre-computed embedding for the query

        Returns:
            List of document dictionaries with id, metadata, text and similarity,
            best match first. Equal scores keep insertion order.
        """
        if k <= 0 or not self._vectors:
            return []

        if query_embedding is None:
            if self.embedding_function is None:
                raise ValueError("No query embedding given and no embedding function configured")
            query_embedding = self.embedding_function(query)

        try:
            similarities = cosine_similarity(
                np.asarray([query_embedding], dtype=float),
                np.asarray(self._vectors, dtype=float),
            )[0]
        except ValueError as e:
            logger.error(f"Search error in collection {self.collection_name}: {e}")
            raise

        top_indices = np.argsort(-similarities, kind="stable")[:k]

        documents = []
        for idx in top_indices:
            documents.append({
                'id': self._ids[idx],
                'text': self._texts[idx],
                'metadata': dict(self._metadatas[idx]),
                'similarity': float(similarities[idx]),
            })

        return documents

    def count(self) -> int:
        return len(self._ids)

    def get_collection_stats(self) -> Dict[str, Any]:
        """Get statistics about the collection"""
        return {
            "name": self.collection_name,
            "document_count": self.count(),
            "dimension": len(self._vectors[0]) if self._vectors else 0,
        }

    def reset(self):
        """Drop every stored document"""
        self._ids = []
        self._texts = []
        self._metadatas = []
        self._vectors = []
        logger.info(f"Reset collection: {self.collection_name}")
