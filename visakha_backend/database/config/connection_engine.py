"""
Connection Engine (SQLAlchemy)

Purpose
-------
Centralizes document store initialization for the application:
- Builds a SQLAlchemy connection URL from environment-backed settings.
- Wraps the Engine and session factory in an explicitly constructed
  `StoreClient` with its own connect/close lifecycle.
- Defines shared MetaData for table and schema objects.
- Exposes a Declarative Base class for ORM models.

Notes
-----
- The process entry point (the FastAPI lifespan or the knowledge tool server)
  owns the `StoreClient` and hands it to every service by reference. There is
  no module-level engine.
- `connect()` is idempotent: the first caller creates the engine and the
  tables, later callers reuse them.
- All ORM models must inherit from `declarativeBase` to participate in schema
  creation.
"""

import json
import logging
from typing import Any, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.schema import MetaData

from visakha_backend.database.config.config import Settings, settings

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------
# Metadata object: stores schema-level information about tables,
# constraints, indexes, etc. Shared across all models.
# --------------------------------------------------------------------
metadata = MetaData()
"""
Metadata object: Stores schema-level information about tables, constraints, indexes, etc. Shared across all models.
"""

# --------------------------------------------------------------------
# Declarative Base: root class for ORM models.
# --------------------------------------------------------------------
declarativeBase = declarative_base(metadata=metadata)
"""Declarative Base: Root class for ORM models.
All model classes should inherit from this to gain ORM features and automatic schema generation.
 """


def build_connection_url(config: Settings = settings):
    """
    Construct the SQLAlchemy connection URL from `Settings`.

    `DATABASE_URL` wins when present; otherwise the URL is assembled with
    `URL.create(...)` so credentials never end up hardcoded.
    """
    if config.DATABASE_URL:
        return config.DATABASE_URL
    return URL.create(
        drivername=config.DB_DRIVER_NAME,
        username=config.DB_USERNAME,
        password=config.DB_PASSWORD,
        host=config.DB_HOST,
        port=config.DB_PORT,
        database=config.DB_DATABASE_NAME,
    )


class StoreClient:
    """
    Process-lifetime handle to the document store.

    Parameters
    ----------
    url : str | URL
        SQLAlchemy connection URL.
    engine_kwargs :
        Passed through to `create_engine` (pool class, connect args, ...).

    Example
    -------
    >>> store = StoreClient("sqlite+pysqlite:///:memory:")
    >>> store.connect()
    >>> with store.session() as session:
    ...     ...
    >>> store.close()
    """

    def __init__(self, url, **engine_kwargs: Any):
        self.url = url
        # Non-ASCII text stays literal inside JSON columns so substring search can see it.
        engine_kwargs.setdefault("json_serializer", lambda obj: json.dumps(obj, ensure_ascii=False))
        self.engine_kwargs = engine_kwargs
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "StoreClient":
        return cls(build_connection_url(config), pool_pre_ping=True)

    @property
    def connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("StoreClient is not connected; call connect() first.")
        return self._engine

    def connect(self) -> "StoreClient":
        """Create the engine and the collections on first use; reuse afterwards."""
        if self._engine is None:
            # Entities must be imported so their tables are registered on `metadata`.
            import visakha_backend.database.entities  # noqa: F401

            self._engine = create_engine(self.url, **self.engine_kwargs)
            metadata.create_all(self._engine)
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
            logger.info("Document store connected (%s)", self._engine.url.render_as_string(hide_password=True))
        return self

    def new_session(self) -> Session:
        """Open a new session, connecting lazily if needed."""
        if self._session_factory is None:
            self.connect()
        return self._session_factory()

    def session(self) -> Session:
        """Session usable as a context manager (`with store.session() as s:`)."""
        return self.new_session()

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Document store connection closed")
        self._engine = None
        self._session_factory = None
