import json

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding
from langchain_core.language_models import FakeListChatModel

from backend.rag_system import UmkmRAGSystem
from config import ModelConfig

RECORDS = [
    {
        "id": "UMKM-001",
        "nama": "Keripik Tempe Bu Sri",
        "kategori": "Makanan",
        "kota": "Bandung",
        "produk": "Keripik tempe pedas",
    },
    {
        "id": "UMKM-002",
        "nama": "Batik Tulis Lestari",
        "kategori": "Fashion",
        "kota": "Pekalongan",
    },
    {"omzet": 12000000, "tahun": 2023},
]


@pytest.fixture
def dataset_path(tmp_path):
    path = tmp_path / "dataset_umkm.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")
    return str(path)


@pytest.fixture
def model_config(monkeypatch, dataset_path):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("UMKM_DATASET_PATH", dataset_path)
    monkeypatch.delenv("UMKM_SOURCE_LABEL", raising=False)
    monkeypatch.delenv("RAG_TOP_K", raising=False)
    return ModelConfig()


@pytest.fixture
def fake_embeddings():
    return DeterministicFakeEmbedding(size=32)


@pytest.fixture
def fake_llm():
    return FakeListChatModel(responses=["Keripik Tempe Bu Sri ada di Bandung."])


@pytest.fixture
def rag_system(model_config, fake_embeddings, fake_llm):
    return UmkmRAGSystem(
        config=model_config, embedding_model=fake_embeddings, llm=fake_llm
    )
