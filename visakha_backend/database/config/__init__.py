"""
The `config` package provides two core building blocks for establishing and managing the document store connection.

Contents:
    - config: Configuration layer - strongly typed app settings loaded from environment variables (with .env support), exposed through a singleton Settings object
    - connection_engine: Store layer - `StoreClient`, an explicitly constructed handle that builds the connection URL from those settings, owns the Engine and session factory, plus the shared MetaData and the declarative base for ORM models

Together they provide environment-driven configuration and a clean ORM foundation.
"""
