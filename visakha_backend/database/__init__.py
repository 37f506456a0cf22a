"""
The `database` package owns everything between the services and the document
store.

Contents:
    - config:
        Settings and the injected `StoreClient` (engine, sessions, lifecycle).

    - entities:
        SQLAlchemy models for conversations, messages, users, knowledge,
        admin users and FAQs.

    - daos:
        Query objects per entity; callers own the session.

    - core:
        Services that routers and the knowledge tool call into.

    - helpers:
        Transactions, identifiers, document conversion, pagination.
"""
