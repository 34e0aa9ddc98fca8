# config.py
"""Application configuration loaded from the environment / .env file"""
import json
from typing import Annotated, Any, List, Literal, Optional

from pydantic import SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from utils.common import get_log_file_path


class Settings(BaseSettings):
    """Application configuration"""

    # Provider and store credentials (required)
    GOOGLE_API_KEY: SecretStr
    POSTGRES_URL: str

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    ENVIRONMENT: Literal["development", "production"] = "production"

    # Shared secret for protected routes. Unset means nobody gets in.
    X_API_KEY: Optional[SecretStr] = None

    # Logger configuration
    LOGGER_NAME: str = "bitai"
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: str = get_log_file_path()

    # Database pool
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600  # Recycle connections after 1 hour

    # Generative AI provider
    GENAI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GENAI_MODEL: str = "gemini-2.5-flash"
    GENAI_TIMEOUT: float = 60.0
    GENAI_THINKING_BUDGET: int = -1
    GENAI_URL_CONTEXT: bool = True
    ASSISTANT_NAME: str = "BitAI"

    # Embeddings / retrieval
    EMBEDDING_MODEL: str = "text-embedding-004"
    EMBEDDING_DIM: int = 768
    RETRIEVAL_TOP_K: int = 9

    # CORS
    CORS_ORIGINS: Annotated[List[str], NoDecode] = [
        "https://bitai.millerbit.biz",
        "http://localhost:3000",
    ]

    # Donation slip uploads
    UPLOADS_DIR: str = "uploads"
    MAX_SLIP_SIZE: int = 10 * 1024 * 1024
    SLIP_EXTENSIONS: Annotated[List[str], NoDecode] = ["jpg", "jpeg", "png"]

    # App metadata
    APP_TITLE: str = "BitAI Backend"
    APP_VERSION: str = "1.0.0"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("GOOGLE_API_KEY", "POSTGRES_URL", mode="before")
    @classmethod
    def reject_blank(cls, v: Any, info: ValidationInfo) -> Any:
        raw = v.get_secret_value() if isinstance(v, SecretStr) else v
        if raw is None or not str(raw).strip():
            raise ValueError(f"{info.field_name} is required")
        return v

    @field_validator("CORS_ORIGINS", "SLIP_EXTENSIONS", mode="before")
    @classmethod
    def parse_comma_separated_list(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @property
    def async_database_url(self) -> str:
        """POSTGRES_URL rewritten for the asyncpg driver."""
        url = self.POSTGRES_URL
        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                return "postgresql+asyncpg://" + url[len(prefix):]
        return url

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def api_key(self) -> Optional[str]:
        if self.X_API_KEY is None:
            return None
        return self.X_API_KEY.get_secret_value() or None


settings = Settings()
