import os

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "production").lower()
    mongodb_uri: str = os.getenv("MONGODB_URI", "")
    mongodb_uri_test: str = os.getenv("MONGODB_URI_TEST", "")
    database_name: str = os.getenv("DATABASE_NAME", "aitinerary_db")
    database_name_test: str = os.getenv("DATABASE_NAME_TEST", "aitinerary_db_test")

    secret_key: str = os.getenv("SECRET_KEY", "")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    aisuite_model: str = os.getenv("AISUITE_MODEL", "openai:gpt-4o-mini")
    llm_temperature: float = float(os.getenv("LLM_TEMPERATURE", "0.7"))
    generation_attempts: int = int(os.getenv("GENERATION_ATTEMPTS", "2"))
    max_itinerary_days: int = int(os.getenv("MAX_ITINERARY_DAYS", "14"))

    google_maps_api_key: str = os.getenv("GOOGLE_MAPS_API_KEY", "")
    google_search_api_key: str = os.getenv("GOOGLE_SEARCH_API_KEY", "")
    google_search_engine_id: str = os.getenv("GOOGLE_SEARCH_ENGINE_ID", "")

    allowed_origins: str = os.getenv("ALLOWED_ORIGINS", "")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def extra_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    return Settings()
