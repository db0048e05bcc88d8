"""
Turn the UMKM JSON dataset into LangChain documents.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

from langchain_core.documents import Document

logger = logging.getLogger(__name__)

# Fields rendered into the searchable text, in this order
CONTENT_FIELDS = [
    "nama",
    "name",
    "title",
    "judul",
    "deskripsi",
    "description",
    "desc",
    "kategori",
    "category",
    "jenis",
    "type",
    "alamat",
    "address",
    "lokasi",
    "location",
    "produk",
    "product",
    "layanan",
    "service",
    "keterangan",
    "info",
    "detail",
]

# Fields copied into document metadata
METADATA_FIELDS = [
    "id",
    "kategori",
    "category",
    "jenis",
    "type",
    "alamat",
    "address",
    "kota",
    "city",
    "provinsi",
    "province",
]


def extract_content_from_item(item: Any) -> str:
    """Render the allow-listed string fields as ``field: value`` lines.

    Falls back to the pretty-printed JSON of the whole item when none of
    the fields are present.
    """
    content_parts = []

    if isinstance(item, dict):
        for field in CONTENT_FIELDS:
            value = item.get(field)
            if isinstance(value, str) and value:
                content_parts.append(f"{field}: {value}")

    if not content_parts:
        content_parts.append(json.dumps(item, indent=2, ensure_ascii=False))

    return "\n".join(content_parts)


def extract_metadata_from_item(item: Any) -> Dict[str, Any]:
    metadata = {}

    if not isinstance(item, dict):
        return metadata

    for field in METADATA_FIELDS:
        if item.get(field):
            metadata[field] = item[field]

    return metadata


def build_document(item: Any, index: int, source: str) -> Document:
    metadata = {
        "source": source,
        "index": index,
        **extract_metadata_from_item(item),
    }
    return Document(page_content=extract_content_from_item(item), metadata=metadata)


def load_documents(json_path: str, source: Optional[str] = None) -> List[Document]:
    """Load the dataset file and build one document per record.

    A top-level array gives one document per element, a top-level object
    gives a single document with index 0.
    """
    source = source or os.path.basename(json_path)

    try:
        if not os.path.exists(json_path):
            raise FileNotFoundError(f"Dataset file not found at: {json_path}")

        with open(json_path, "r", encoding="utf-8") as f:
            json_data = json.load(f)

        if isinstance(json_data, list):
            documents = [
                build_document(item, index, source)
                for index, item in enumerate(json_data)
            ]
        else:
            documents = [build_document(json_data, 0, source)]

        logger.info(f"Loaded {len(documents)} documents from JSON file {json_path}")
        return documents

    except Exception as e:
        logger.error(f"Error loading documents from {json_path}: {e}")
        raise
