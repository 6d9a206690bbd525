from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB: str = "placement_prep"
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]
    UPLOAD_DIR: str = "uploads"
    MAX_RESUME_BYTES: int = 5 * 1024 * 1024
    LOG_LEVEL: str = "INFO"

    DEFAULT_QUESTION_LIMIT: int = 20
    MAX_QUESTION_LIMIT: int = 100
    RECENT_RESULTS_LIMIT: int = 10

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
