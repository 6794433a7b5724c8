"""
Configuration for the records API, read from the environment and backend/.env.
Secrets are only required in production (see validate_for_production).
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import List
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from backend root so it loads when running from backend/ or project root
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"

DEFAULT_MONGODB_URI = "mongodb://localhost:27017/1mind"
DEFAULT_DATABASE_NAME = "1mind"


class Settings(BaseSettings):
    """
    Settings for MongoDB, the Integration.app workspace and import bounds.
    All fields have defaults for local dev; validate for production.
    """

    # Application
    ENVIRONMENT: str = "development"
    # Store as string so env never triggers json.loads; parsed in cors_origins_list.
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated origins or JSON array",
        validation_alias="CORS_ORIGINS",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def normalize_cors_origins(cls, v: object) -> str:
        """Ensure we always have a string (avoid empty env causing json.loads in pydantic-settings)."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return "http://localhost:3000"
        if isinstance(v, list):
            return ",".join(str(x).strip() for x in v if str(x).strip())
        return str(v).strip()

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # MongoDB
    mongodb_uri: str = Field(
        default=DEFAULT_MONGODB_URI,
        description="MongoDB connection string",
        validation_alias="MONGODB_URI",
    )
    mongodb_db: str = Field(
        default="",
        description="Database name; defaults to the database in MONGODB_URI",
        validation_alias="MONGODB_DB",
    )

    # Integration.app workspace (tokens are signed with the workspace secret)
    integration_app_api_url: str = Field(
        default="https://api.integration.app",
        validation_alias="INTEGRATION_APP_API_URL",
    )
    integration_app_workspace_key: str = Field(
        default="",
        description="Workspace key, used as token issuer",
        validation_alias="INTEGRATION_APP_WORKSPACE_KEY",
    )
    integration_app_workspace_secret: str = Field(
        default="",
        description="Workspace secret, used to sign customer tokens",
        validation_alias="INTEGRATION_APP_WORKSPACE_SECRET",
    )

    # Import and listing bounds
    import_max_pages: int = Field(default=50, ge=1, validation_alias="IMPORT_MAX_PAGES")
    import_max_seconds: float = Field(default=120.0, gt=0, validation_alias="IMPORT_MAX_SECONDS")
    records_page_size: int = Field(default=100, ge=1, validation_alias="RECORDS_PAGE_SIZE")

    @field_validator("mongodb_uri", mode="before")
    @classmethod
    def default_mongodb_uri(cls, v: object) -> str:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_MONGODB_URI
        return str(v).strip()

    @field_validator("integration_app_api_url", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def mongodb_database_name(self) -> str:
        """MONGODB_DB if set, else the path segment of MONGODB_URI, else the default name."""
        if self.mongodb_db.strip():
            return self.mongodb_db.strip()
        path = urlparse(self.mongodb_uri).path.lstrip("/")
        return path or DEFAULT_DATABASE_NAME

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS from comma-separated or JSON array string."""
        raw = (self.cors_origins or "").strip()
        if not raw:
            return ["http://localhost:3000"]
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
                if isinstance(parsed, list):
                    return [x.strip() for x in parsed if isinstance(x, str) and x.strip()]
            except ValueError:
                pass
        return [x.strip() for x in raw.split(",") if x.strip()] or ["http://localhost:3000"]

    def validate_for_production(self) -> None:
        """
        Call to validate that required env vars are set (e.g. on startup in production).
        Raises ValueError with missing keys.
        """
        missing: List[str] = []
        if not self.integration_app_workspace_key:
            missing.append("INTEGRATION_APP_WORKSPACE_KEY")
        if not self.integration_app_workspace_secret:
            missing.append("INTEGRATION_APP_WORKSPACE_SECRET")
        if self.mongodb_uri == DEFAULT_MONGODB_URI:
            missing.append("MONGODB_URI")
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
