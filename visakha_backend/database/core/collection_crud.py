"""
Generic CRUD over an allow-list of collections.

Only the names in `COLLECTIONS` are reachable; anything else is rejected
before a query is built. Documents travel as camelCase dicts.
"""

import logging
from typing import Any, Dict

from visakha_backend.api.models import CollectionPage
from visakha_backend.database.core.errors import InvalidRequestError, NotFoundError
from visakha_backend.database.daos.collection_dao import CollectionDao
from visakha_backend.database.entities.conversations import Conversation
from visakha_backend.database.entities.faq import Faq
from visakha_backend.database.entities.messages import Message
from visakha_backend.database.entities.user import User
from visakha_backend.database.helpers.documents import apply_document, document_columns, to_document, utcnow
from visakha_backend.database.helpers.identifiers import parse_object_id
from visakha_backend.database.helpers.pagination import PageParams, total_pages
from visakha_backend.database.helpers.transactionManagement import transactional

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "users": User,
    "conversations": Conversation,
    "messages": Message,
    "faqs": Faq,
}
TIMESTAMP_FIELDS = ("created_at", "updated_at")


class CollectionService:
    def __init__(self, store):
        self.store = store

    def _dao(self, collection: str) -> CollectionDao:
        entity = COLLECTIONS.get(collection)
        if entity is None:
            raise InvalidRequestError("Invalid collection")
        return CollectionDao(entity)

    @transactional
    def list_documents(self, collection: str, params: PageParams, session=None) -> CollectionPage:
        dao = self._dao(collection)
        documents = dao.fetchPage(session, params.skip, params.limit)
        total = dao.countDocuments(session)
        return CollectionPage(
            data=[to_document(document) for document in documents],
            total=total,
            page=params.page,
            limit=params.limit,
            total_pages=total_pages(total, params.limit),
        )

    @transactional
    def create_document(self, collection: str, data: Dict[str, Any], session=None) -> Dict[str, Any]:
        """
        Insert a document. `id`/`_id` are ignored and timestamps are stamped
        where the collection has them.
        """
        dao = self._dao(collection)
        document = dao.entity()
        apply_document(document, data, read_only=("id",) + TIMESTAMP_FIELDS)
        columns = document_columns(dao.entity)
        now = utcnow()
        for field in TIMESTAMP_FIELDS:
            if field in columns:
                setattr(document, field, now)
        missing = [
            name for name, column in columns.items()
            if not column.nullable and column.default is None and getattr(document, name) is None
        ]
        if missing:
            raise InvalidRequestError("Invalid request", f"Missing required fields: {', '.join(sorted(missing))}")
        dao.createDocument(session, document)
        logger.info("Created %s document %s", collection, document.id)
        return to_document(document)

    @transactional
    def update_document(self, collection: str, document_id: str, data: Dict[str, Any], session=None) -> Dict[str, Any]:
        dao = self._dao(collection)
        key = parse_object_id(document_id)
        document = dao.fetchById(session, key)
        if document is None:
            raise NotFoundError("Document not found")
        apply_document(document, data, read_only=("id", "created_at"))
        if "updated_at" in document_columns(dao.entity) and "updatedAt" not in data and "updated_at" not in data:
            document.updated_at = utcnow()
        session.flush()
        return to_document(document)

    @transactional
    def delete_document(self, collection: str, document_id: str, session=None) -> None:
        dao = self._dao(collection)
        key = parse_object_id(document_id)
        document = dao.fetchById(session, key)
        if document is None:
            raise NotFoundError("Document not found")
        dao.deleteDocument(session, document)
        logger.info("Deleted %s document %s", collection, document_id)
