"""
DAOs Package — Data Access Layer (SQLAlchemy 2.0)
=================================================

The `daos` package provides the Data Access Layer for the application.
It encapsulates all interactions with SQLAlchemy ORM entities, providing
clean query APIs for the service layer while hiding direct query details.

Conventions
-----------
- SQLAlchemy 2.0 typed mappings (Mapped[...] / mapped_column)
- Session lifecycle (open/commit/rollback) is handled by callers
- DAOs log and re-raise so upper layers decide error policy

Contents
--------
- ConversationDao
    * Feedback grouping query (latest feedback date per conversation)
    * Resolved toggle as a single update-by-filter

- MessageDao
    * Member messages by id, chronologically
    * Negative feedback feed, rating counters, daily question timeline

- UserDao
    * Batch lookup of message authors, user count

- AdminUserDao
    * Authorization records: lookup, list, add, remove, count

- GoldenKnowledgeDao / RagKnowledgeDao
    * Curated entry CRUD; wholesale replace and substring search of the
      search store

- CollectionDao
    * Generic paging/CRUD over one entity class
"""
