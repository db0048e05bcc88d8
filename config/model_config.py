from dotenv import load_dotenv
import os

load_dotenv()

DEFAULT_DATASET_PATH = os.path.join("data", "json", "dataset_umkm.json")


class ModelConfig:
    def __init__(self):
        # API Provider Configuration (Google only)
        self.api_provider = "google"

        # Google API Configuration
        self.google_config = {
            "api_key": os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
            "llm_model": os.getenv("GEMINI_LLM_MODEL", "gemini-2.0-flash"),
            "embedding_model": os.getenv(
                "GEMINI_EMBEDDING_MODEL", "models/gemini-embedding-001"
            ),
        }

        # Retrieval / generation settings
        self.temperature = float(os.getenv("RAG_TEMPERATURE", "0.7"))
        self.top_k = int(os.getenv("RAG_TOP_K", "5"))
        self.assistant_name = os.getenv("RAG_ASSISTANT_NAME", "Sentinela")

        # Dataset
        self.dataset_path = os.getenv("UMKM_DATASET_PATH", DEFAULT_DATASET_PATH)
        # Falls back to the dataset file name when unset
        self.source_label = os.getenv("UMKM_SOURCE_LABEL") or None

        # Empty string means log to stderr
        self.log_file = os.getenv("RAG_LOG_FILE", "umkm_rag_api.log")

    def validate_credentials(self):
        """Validate Google API credentials"""
        return bool(self.google_config["api_key"])

    def get_current_config(self):
        """Get the Google configuration"""
        return self.google_config
