from langchain_google_genai import ChatGoogleGenerativeAI, GoogleGenerativeAIEmbeddings
import logging

logger = logging.getLogger(__name__)


class ModelFactory:
    @staticmethod
    def create_embedding_model(config, api_provider="google"):
        """Create embedding model - only supports Google Gemini"""
        try:
            if api_provider == "google":
                return GoogleGenerativeAIEmbeddings(
                    model=config["embedding_model"],
                    google_api_key=config["api_key"],
                )
            else:
                logger.error(f"Only 'google' API provider is supported, got: {api_provider}")
                return None
        except Exception as e:
            logger.error(f"Failed to initialize embedding model: {e}")
            return None

    @staticmethod
    def create_llm_model(config, api_provider="google", temperature=0.7):
        """Create chat model - only supports Google Gemini"""
        try:
            if api_provider == "google":
                return ChatGoogleGenerativeAI(
                    model=config["llm_model"],
                    google_api_key=config["api_key"],
                    temperature=temperature,
                )
            else:
                logger.error(f"Only 'google' API provider is supported, got: {api_provider}")
                return None
        except Exception as e:
            logger.error(f"Failed to initialize LLM model: {e}")
            return None
