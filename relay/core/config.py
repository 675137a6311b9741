# relay/core/config.py

from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # MongoDB settings
    MONGODB_URI: str = Field(default="mongodb://localhost:27017")
    MONGODB_DB: str = Field(default="chatapp")
    MONGODB_COLLECTION: str = Field(default="messages")
    MONGODB_TIMEOUT_MS: int = Field(default=5000)

    # Storage selection
    USE_IN_MEMORY_STORAGE: bool = Field(default=False)
    STORAGE_AWAIT_CONNECTION: bool = Field(default=True)

    # Server settings
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3001)

    # CORS settings
    CORS_ALLOW_ORIGINS: List[str] = Field(default=["*"])
    CORS_ALLOW_METHODS: List[str] = Field(default=["GET", "POST"])

    LOG_LEVEL: str = Field(default="INFO")

settings = Settings()
