"""
Entities Package — SQLAlchemy 2.0 ORM Models (UUID + UTC)
=========================================================

The `entities` package defines the ORM models of the application, mapping the
document store's collections to Python classes using SQLAlchemy 2.0-typed
mappings. These classes are consumed by DAOs (`daos` package).

Tech Stack & Conventions
------------------------
- Portable `Uuid` primary keys (native on PostgreSQL, CHAR(32) on SQLite)
- Timezone-aware timestamps (UTC)
- Schemaless sub-documents (`feedback`, `content`, `tags`, membership lists)
  stored as JSON columns
- Cross-collection references are strings, never foreign keys

Contents
--------
- User              (`users`)            end users of the chatbot
- Conversation      (`conversations`)    correlation key, title, resolved flag, membership list
- Message           (`messages`)         sender-specific body, optional feedback
- GoldenKnowledge   (`golden_knowledge`) curated question/answer pairs
- RagKnowledge      (`rag_knowledge`)    derived, fully replaced search copy
- AdminUser         (`admin_users`)      dashboard operators and their roles
- Faq               (`questions`)        FAQ entries, exposed as `faqs`

Importing this package registers every table on the shared `metadata`.
"""

from visakha_backend.database.entities.admin_user import AdminUser
from visakha_backend.database.entities.conversations import Conversation
from visakha_backend.database.entities.faq import Faq
from visakha_backend.database.entities.knowledge import GoldenKnowledge, RagKnowledge
from visakha_backend.database.entities.messages import Message
from visakha_backend.database.entities.user import User

__all__ = ["AdminUser", "Conversation", "Faq", "GoldenKnowledge", "Message", "RagKnowledge", "User"]
