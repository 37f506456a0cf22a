"""
Settings for the admin API and the knowledge tool process.

Every value comes from the process environment, then from a `.env` file in
the working directory; unknown keys are ignored. `SECRET_KEY` and
`BOOTSTRAP_ADMIN_EMAIL` have no default, so importing this module without
them fails with a validation error.

The store location is either `DATABASE_URL` or the `DB_*` parts; see
`StoreClient.from_settings`.

    from visakha_backend.database.config.config import settings

    settings.MAX_PAGE_LIMIT
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Typed view of the environment. Field descriptions document each key.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Document store
    DATABASE_URL: Optional[str] = Field(None, description="Full SQLAlchemy URL; overrides the DB_* parts when set.")
    DB_DRIVER_NAME: str = Field("postgresql+psycopg2", description="Database driver (e.g., `postgresql+psycopg2`, `sqlite`).")
    DB_USERNAME: Optional[str] = Field("postgres", description="Database username credential.")
    DB_PASSWORD: Optional[str] = Field("postgres", description="Database password credential.")
    DB_HOST: Optional[str] = Field("localhost", description="Hostname or IP address of the database server.")
    DB_PORT: Optional[int] = Field(5432, description="Port of the database server.")
    DB_DATABASE_NAME: str = Field("visakha", description="Name of the application's database.")

    # Session tokens
    SECRET_KEY: str = Field(..., description="Secret key for signing session tokens.")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing (e.g., `HS256`).")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(1440, description="Duration (in minutes) before session tokens expire.")

    # Identity & authorization
    GOOGLE_CLIENT_ID: str = Field("", description="OAuth client id expected as the audience of Google ID tokens.")
    BOOTSTRAP_ADMIN_EMAIL: str = Field(..., description="Identity provisioned as super_admin when no administrators exist.")
    ENVIRONMENT: str = Field("development", description="Runtime environment; `production` disables dev login.")

    # Web client
    FRONTEND_URLS: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed by CORS.",
    )
    FRONTEND_DIST_DIR: str = Field("web/dist", description="Directory of the built web client, served when present.")

    # Pagination & limits
    DEFAULT_PAGE_LIMIT: int = Field(10, description="Page size used when `limit` is missing or unparseable.")
    MAX_PAGE_LIMIT: int = Field(1000, description="Upper bound applied to any requested page size.")
    KNOWLEDGE_LIST_LIMIT: int = Field(100, description="Safety cap on golden knowledge listings.")

    LOG_LEVEL: str = Field("INFO", description="Root logging level.")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


# Shared instance
settings = Settings()
