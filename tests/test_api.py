import os

os.environ.setdefault("RAG_LOG_FILE", "")

import pytest
from fastapi.testclient import TestClient

from backend.api_endpoints import api_app
from backend.rag_system import RAGQueryError
from config import ModelConfig


@pytest.fixture
def client(monkeypatch, rag_system):
    monkeypatch.setattr(api_app, "rag_system", rag_system)
    return TestClient(api_app.app)


@pytest.fixture
def uninitialized_client(monkeypatch):
    monkeypatch.setattr(api_app, "rag_system", None)
    return TestClient(api_app.app)


def test_query_returns_answer_and_sources(client):
    response = client.post("/rag/query", json={"question": "  Di mana Keripik Tempe?  "})

    assert response.status_code == 200
    body = response.json()
    assert body["answer"] == "Keripik Tempe Bu Sri ada di Bandung."
    assert "dataset_umkm.json (Document 0)" in body["sources"]


def test_query_rejects_blank_question(client):
    response = client.post("/rag/query", json={"question": "   "})

    assert response.status_code == 422


def test_query_rejects_missing_question(client):
    response = client.post("/rag/query", json={})

    assert response.status_code == 422


def test_query_before_initialization(uninitialized_client):
    response = uninitialized_client.post("/rag/query", json={"question": "kopi"})

    assert response.status_code == 503
    assert response.json() == {"detail": "RAG system not initialized", "status_code": 503}


def test_query_failure_maps_to_500(client, monkeypatch, rag_system):
    def fail(question):
        raise RAGQueryError("Failed to process query: quota exceeded")

    monkeypatch.setattr(rag_system, "ask_question", fail)

    response = client.post("/rag/query", json={"question": "kopi"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to process query: quota exceeded"


def test_insights(client):
    response = client.get("/rag/insights")

    assert response.status_code == 200
    assert set(response.json()) == {"answer", "sources"}


def test_retrieve_returns_scored_documents(client, rag_system):
    question = rag_system.documents[1].page_content

    response = client.post("/rag/retrieve", json={"question": question})

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert body["documents"][0]["metadata"]["id"] == "UMKM-002"
    assert body["documents"][0]["similarity"] == pytest.approx(1.0)


def test_health_and_status(client):
    health = client.get("/health").json()
    status = client.get("/status").json()

    assert health["status"] == "healthy"
    assert health["ready"] is True
    assert status["initialized"] is True
    assert status["total_documents"] == 3


def test_status_without_system(uninitialized_client):
    body = uninitialized_client.get("/status").json()

    assert body["initialized"] is False
    assert body["system_ready"] is False


def test_startup_fails_without_api_key(monkeypatch, dataset_path):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.setenv("UMKM_DATASET_PATH", dataset_path)
    monkeypatch.setattr(api_app, "model_config", ModelConfig())
    monkeypatch.setattr(api_app, "rag_system", None)

    with pytest.raises(ValueError, match="GEMINI_API_KEY"):
        api_app.initialize_on_startup()


def test_lifespan_builds_system(monkeypatch, model_config, fake_embeddings, fake_llm):
    monkeypatch.setattr(api_app, "model_config", model_config)
    monkeypatch.setattr(api_app, "rag_system", None)
    monkeypatch.setattr(
        "backend.rag_system.ModelFactory.create_embedding_model",
        lambda *args, **kwargs: fake_embeddings,
    )
    monkeypatch.setattr(
        "backend.rag_system.ModelFactory.create_llm_model",
        lambda *args, **kwargs: fake_llm,
    )

    with TestClient(api_app.app) as client:
        assert client.get("/health").json()["ready"] is True
        response = client.post("/rag/query", json={"question": "batik"})

    assert response.status_code == 200


def test_insights_failure_maps_to_500(client, monkeypatch, rag_system):
    class BrokenChain:
        def invoke(self, inputs):
            raise RuntimeError("quota exceeded")

    monkeypatch.setattr(rag_system, "chain", BrokenChain())

    response = client.get("/rag/insights")

    assert response.status_code == 500
    body = response.json()
    assert body["status_code"] == 500
    assert body["detail"].startswith("Failed to generate insights: Failed to process query")
