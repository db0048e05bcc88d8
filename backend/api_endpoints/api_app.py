# FastAPI Imports
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi import Request
from contextlib import asynccontextmanager

# for uvicorn web server
import uvicorn

# For logging
import logging
import datetime
from typing import Optional

# Local imports
from config import ModelConfig
from schema.pydantic_models import (
    QueryRequest,
    QueryResponse,
    RetrievedDocument,
    RetrieveResponse,
)
from backend.rag_system import UmkmRAGSystem, RAGQueryError


model_config = ModelConfig()

# Configure logging to file unless RAG_LOG_FILE is empty
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=model_config.log_file or None,
    filemode="a",
)

logger = logging.getLogger(__name__)

# Global variable to hold the RAG system instance
rag_system: Optional[UmkmRAGSystem] = None


def initialize_on_startup():
    global rag_system
    try:
        logger.info("Auto-initializing RAG system on startup...")
        rag_system = UmkmRAGSystem(config=model_config)

        status = rag_system.get_system_status()
        logger.info(f"System initialization status: {status}")

    except Exception as e:
        logger.error(f"Failed to auto-initialize RAG system: {e}", exc_info=True)
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    initialize_on_startup()
    yield
    logger.info("Shutting down UMKM RAG API")


app = FastAPI(
    title="UMKM RAG API",
    description="Question answering over the UMKM dataset with Google Gemini",
    version="1.0.0",
    lifespan=lifespan,
)

# This is for passing all the hosts where requests are being sent
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_ready_system() -> UmkmRAGSystem:
    if rag_system is None or not rag_system.is_initialized:
        raise HTTPException(status_code=503, detail="RAG system not initialized")
    return rag_system


# Exception handler for better error responses
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "status_code": exc.status_code},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):

    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500, content={"detail": "Internal server error", "error": str(exc)}
    )


@app.post("/rag/query", response_model=QueryResponse)
async def query_system(request: QueryRequest):
    """Answer a question from the UMKM dataset"""

    system = get_ready_system()

    try:
        logger.info(f"Processing query: {request.question[:100]}...")
        result = system.ask_question(request.question)
        logger.info("Query processed successfully")
        return QueryResponse(**result)

    except RAGQueryError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/rag/insights", response_model=QueryResponse)
async def get_insights():
    """Generate marketing insights and strategy from the dataset"""

    system = get_ready_system()

    try:
        result = system.get_insights()
        return QueryResponse(**result)

    except RAGQueryError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/rag/retrieve", response_model=RetrieveResponse)
async def retrieve_documents(request: QueryRequest):
    """Retrieve relevant documents without generating a response"""

    system = get_ready_system()

    try:
        logger.info(f"Retrieving documents for query: {request.question[:100]}...")
        hits = system.retrieve_with_scores(request.question)

        documents = [
            RetrievedDocument(
                content=doc.page_content, metadata=doc.metadata, similarity=score
            )
            for doc, score in hits
        ]
        return RetrieveResponse(
            question=request.question, documents=documents, count=len(documents)
        )

    except Exception as e:
        logger.error(f"Error retrieving documents: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Document retrieval failed: {str(e)}"
        )


@app.get("/status")
async def get_system_status(request: Request):
    """Get current system status and information"""

    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"Status check from {client_ip}")

    if rag_system is None:
        return JSONResponse(content={
            "initialized": False,
            "system_ready": False,
            "status_message": "RAG system not initialized",
            "vector_store_ready": False,
            "total_documents": 0,
            "models_ready": {
                "embedding_model": False,
                "llm": False,
            }
        })

    status = rag_system.get_system_status()
    status["initialized"] = rag_system.is_initialized
    return JSONResponse(content=status)


@app.get("/health")
async def health_check():
    """Health check endpoint"""

    is_ready = rag_system is not None and rag_system.is_initialized

    return {
        "status": "healthy" if is_ready else "initializing",
        "timestamp": datetime.datetime.now().isoformat(),
        "system_initialized": rag_system is not None,
        "ready": is_ready,
    }


@app.get("/")
async def api_info():
    """API information endpoint"""
    return {
        "message": "UMKM RAG API",
        "version": "1.0.0",
        "endpoints": {
            "POST /rag/query": "Answer a question with sources",
            "GET /rag/insights": "Generate key insights and strategy",
            "POST /rag/retrieve": "Retrieve documents without generation",
            "GET /status": "Get system status",
            "GET /health": "Health check",
        },
    }


if __name__ == "__main__":

    logger.info("Starting UMKM RAG API server...")

    uvicorn.run(
        "backend.api_endpoints.api_app:app",
        host="0.0.0.0",
        port=8000,
        log_level="info",
        access_log=True,
    )
