import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from langchain_core.documents import Document
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import PromptTemplate

from backend.document_loader import load_documents
from backend.prompts import INSIGHTS_PROMPT, NO_ANSWER_FALLBACK, QA_TEMPLATE
from config import ModelConfig
from db import SimpleVectorStore
from models import ModelFactory

logger = logging.getLogger(__name__)


class RAGNotInitializedError(RuntimeError):
    """Raised when retrieval or generation runs before initialization finished."""


class RAGQueryError(RuntimeError):
    """Raised when answering a question fails anywhere along the pipeline."""


class UmkmRAGSystem:
    """Question answering over the UMKM dataset.

    Documents are embedded once at initialization and kept in a
    :class:`SimpleVectorStore`. Each question is embedded with the same
    model, the top-k records are stuffed into the prompt and the chat model
    writes the answer.
    """

    def __init__(
        self,
        dataset_path: str = None,
        temperature: float = None,
        top_k: int = None,
        config: Optional[ModelConfig] = None,
        embedding_model=None,
        llm=None,
        auto_initialize: bool = True,
    ):
        self.config = config or ModelConfig()
        self.dataset_path = dataset_path or self.config.dataset_path
        self.source_label = self.config.source_label or os.path.basename(self.dataset_path)
        self.temperature = self.config.temperature if temperature is None else temperature
        self.top_k = self.config.top_k if top_k is None else top_k

        self.embedding_model = embedding_model
        self.llm = llm

        self.documents: List[Document] = []
        self.vector_store: Optional[SimpleVectorStore] = None
        self.prompt: Optional[PromptTemplate] = None
        self.chain = None
        self._initialized = False

        if auto_initialize:
            self.initialize_system()
        else:
            logger.info("Auto-initialization disabled. Call initialize_system() manually.")

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize_system(self):
        """Create the models, index the dataset and compile the prompt chain."""
        try:
            logger.info("Initializing RAG system...")

            self._init_models()

            self.documents = load_documents(self.dataset_path, self.source_label)
            self._build_index()

            self.prompt = PromptTemplate.from_template(QA_TEMPLATE).partial(
                assistant_name=self.config.assistant_name
            )
            self.chain = self.prompt | self.llm | StrOutputParser()

            self._initialized = True
            logger.info(
                f"RAG system initialized successfully with {len(self.documents)} documents"
            )

        except Exception as e:
            logger.error(f"Failed to initialize RAG system: {e}", exc_info=True)
            raise

    def _init_models(self):
        if self.embedding_model is not None and self.llm is not None:
            logger.info("Using provided embedding and chat models")
            return

        if not self.config.validate_credentials():
            raise ValueError("GEMINI_API_KEY is not configured")

        current_config = self.config.get_current_config()

        if self.embedding_model is None:
            self.embedding_model = ModelFactory.create_embedding_model(
                current_config, self.config.api_provider
            )
            if not self.embedding_model:
                raise ValueError("Failed to initialize embedding model")

        if self.llm is None:
            self.llm = ModelFactory.create_llm_model(
                current_config, self.config.api_provider, temperature=self.temperature
            )
            if not self.llm:
                raise ValueError("Failed to initialize LLM model")

        logger.info("Google Gemini models initialized successfully.")

    def _embed(self, text):
        """Embedding function handed to the vector store"""
        if isinstance(text, list):
            return self.embedding_model.embed_documents(text)
        return self.embedding_model.embed_query(text)

    def _build_index(self):
        logger.info(f"Building index from {len(self.documents)} documents...")

        self.vector_store = SimpleVectorStore(
            collection_name="umkm_documents", embedding_function=self._embed
        )
        self.vector_store.add_documents(
            texts=[doc.page_content for doc in self.documents],
            metadata=[doc.metadata for doc in self.documents],
        )

        logger.info(f"Index built successfully with {self.vector_store.count()} documents")

    def retrieve_with_scores(self, question: str, k: int = None) -> List[Tuple[Document, float]]:
        if not self._initialized:
            raise RAGNotInitializedError("RAG system is not initialized")

        hits = self.vector_store.search(query=question, k=self.top_k if k is None else k)
        logger.info(f"Retrieved {len(hits)} documents for query: {question[:100]}")

        return [
            (Document(page_content=hit["text"], metadata=hit["metadata"]), hit["similarity"])
            for hit in hits
        ]

    def retrieve(self, question: str, k: int = None) -> List[Document]:
        return [doc for doc, _ in self.retrieve_with_scores(question, k)]

    @staticmethod
    def build_context(documents: List[Document]) -> str:
        return "\n\n".join(doc.page_content for doc in documents)

    @staticmethod
    def format_sources(documents: List[Document]) -> List[str]:
        """Render ``<source> (Document <index>)`` per document, without duplicates."""
        sources = []
        for position, doc in enumerate(documents):
            metadata = doc.metadata or {}
            source = metadata.get("source") or "Unknown source"
            doc_index = metadata.get("index")
            if doc_index is None:
                doc_index = position
            sources.append(f"{source} (Document {doc_index})")

        return list(dict.fromkeys(sources))

    def ask_question(self, question: str) -> Dict[str, Any]:
        try:
            if not self._initialized:
                raise RAGNotInitializedError("RAG system is not initialized")

            logger.info(f"Processing query: {question[:100]}")

            documents = self.retrieve(question)
            answer = self.chain.invoke(
                {"context": self.build_context(documents), "question": question}
            )

            return {
                "answer": answer if answer and answer.strip() else NO_ANSWER_FALLBACK,
                "sources": self.format_sources(documents),
            }

        except Exception as e:
            logger.error(f"Error processing query: {e}", exc_info=True)
            raise RAGQueryError(f"Failed to process query: {e}") from e

    def get_insights(self) -> Dict[str, Any]:
        try:
            return self.ask_question(INSIGHTS_PROMPT)
        except Exception as e:
            logger.error(f"Error getting insights: {e}")
            raise RAGQueryError(f"Failed to generate insights: {e}") from e

    def get_system_status(self) -> Dict[str, Any]:
        """Get current system status and loaded data information"""
        models_ready = {
            "embedding_model": self.embedding_model is not None,
            "llm": self.llm is not None,
        }
        vector_store_stats = (
            self.vector_store.get_collection_stats() if self.vector_store else {}
        )

        status = {
            "dataset_path": self.dataset_path,
            "total_documents": len(self.documents),
            "vector_store_ready": self.vector_store is not None,
            "vector_store_stats": vector_store_stats,
            "models_ready": models_ready,
            "top_k": self.top_k,
            "system_ready": self._initialized and all(models_ready.values()),
        }

        if status["system_ready"]:
            status["status_message"] = "System fully operational"
        elif not all(models_ready.values()):
            unready_models = [name for name, ready in models_ready.items() if not ready]
            status["status_message"] = f"Models not ready: {', '.join(unready_models)}"
        else:
            status["status_message"] = "RAG system is not initialized"

        return status


def create_rag_system(dataset_path: str = None, **kwargs) -> UmkmRAGSystem:
    """
    Create a RAG system and index the dataset.

    Args:
        dataset_path: Path to the UMKM JSON dataset (default: from config)
        **kwargs: Additional parameters for UmkmRAGSystem

    Returns:
        Initialized RAG system ready to use
    """
    return UmkmRAGSystem(dataset_path=dataset_path, **kwargs)
