"""
Curation Store Manager.

Service-layer operations over the two knowledge collections:

- golden knowledge CRUD (the source of truth curators edit);
- `sync_to_search_store`, a full replace of `rag_knowledge` from golden;
- substring search over `rag_knowledge`;
- the negative-feedback feed curators work from.

Sync is not atomic. The delete and the insert run in separate transactions, so
a reader between the two sees an empty search store and a failed insert leaves
it empty until the next successful sync. The failure is reported, never
swallowed.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from visakha_backend.api.models import (
    ConversationSummary,
    KnowledgeEntry,
    KnowledgeSearchHit,
    NegativeFeedbackItem,
    PaginatedNegativeFeedback,
)
from visakha_backend.database.config.config import settings
from visakha_backend.database.core.errors import InvalidRequestError, NotFoundError
from visakha_backend.database.core.feedback_conversations import shape_message
from visakha_backend.database.daos.knowledge_dao import GoldenKnowledgeDao, RagKnowledgeDao
from visakha_backend.database.daos.message_dao import NEGATIVE_RATINGS, MessageDao
from visakha_backend.database.entities.knowledge import TAG_SEPARATOR, GoldenKnowledge, RagKnowledge
from visakha_backend.database.helpers.documents import utcnow
from visakha_backend.database.helpers.identifiers import parse_object_id
from visakha_backend.database.helpers.pagination import PageParams, total_pages
from visakha_backend.database.helpers.transactionManagement import transactional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncReplaced:
    """The search store now holds exactly `count` entries."""
    count: int


@dataclass(frozen=True)
class SyncFailed:
    """Sync stopped at `stage` ("read", "delete" or "insert")."""
    stage: str
    reason: str


SyncResult = Union[SyncReplaced, SyncFailed]


def to_knowledge_entry(entry: GoldenKnowledge) -> KnowledgeEntry:
    return KnowledgeEntry(
        id=str(entry.id),
        question=entry.question,
        answer=entry.answer,
        tags=list(entry.tags or []),
        source_message_id=str(entry.source_message_id) if entry.source_message_id else None,
        created_by=entry.created_by,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    )


def _require_text(question: Optional[str], answer: Optional[str]) -> None:
    if not question or not question.strip() or not answer or not answer.strip():
        raise InvalidRequestError("Question and Answer are required")


def _clean_tags(tags) -> List[str]:
    if tags is None:
        return []
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise InvalidRequestError("Invalid request", "tags must be a list of strings")
    if any(TAG_SEPARATOR in tag for tag in tags):
        raise InvalidRequestError("Invalid request", "tags must not contain control characters")
    return list(tags)


class CurationService:
    """
    Golden knowledge, sync and search.

    Parameters
    ----------
    store : StoreClient
        Injected document store handle. The knowledge tool process builds
        its own instance over its own store client.
    """

    def __init__(self, store):
        self.store = store
        self.golden_dao = GoldenKnowledgeDao()
        self.rag_dao = RagKnowledgeDao()
        self.message_dao = MessageDao()

    # ------------------------------------------------------------------
    # Golden knowledge CRUD
    # ------------------------------------------------------------------

    @transactional
    def create_entry(
        self,
        question: Optional[str],
        answer: Optional[str],
        tags=None,
        source_message_id: Optional[str] = None,
        created_by: Optional[str] = None,
        session=None,
    ) -> KnowledgeEntry:
        """
        Insert a golden entry, typically promoted from a flagged message.

        Raises
        ------
        InvalidRequestError
            Missing/blank question or answer, or a malformed `source_message_id`.
        """
        _require_text(question, answer)
        source = parse_object_id(source_message_id, "sourceMessageId") if source_message_id else None
        now = utcnow()
        entry = GoldenKnowledge(
            question=question,
            answer=answer,
            tags=_clean_tags(tags),
            source_message_id=source,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        self.golden_dao.createEntry(session, entry)
        logger.info("Golden knowledge entry %s created by %s", entry.id, created_by)
        return to_knowledge_entry(entry)

    @transactional
    def list_entries(self, q: Optional[str] = None, session=None) -> List[KnowledgeEntry]:
        """Newest first, optionally filtered; never more than `KNOWLEDGE_LIST_LIMIT` rows."""
        entries = self.golden_dao.fetchEntries(session, q.strip() if q else None, settings.KNOWLEDGE_LIST_LIMIT)
        return [to_knowledge_entry(entry) for entry in entries]

    @transactional
    def update_entry(
        self,
        entry_id: str,
        question: Optional[str],
        answer: Optional[str],
        tags=None,
        session=None,
    ) -> KnowledgeEntry:
        """
        Replace question, answer and tags of an entry and stamp `updated_at`.

        Raises
        ------
        InvalidRequestError
            Malformed id or missing question/answer.
        NotFoundError
            No entry with this id.
        """
        key = parse_object_id(entry_id)
        _require_text(question, answer)
        entry = self.golden_dao.fetchEntryById(session, key)
        if entry is None:
            raise NotFoundError("Entry not found")
        entry.question = question
        entry.answer = answer
        entry.tags = _clean_tags(tags)
        entry.updated_at = utcnow()
        return to_knowledge_entry(entry)

    @transactional
    def delete_entry(self, entry_id: str, session=None) -> None:
        key = parse_object_id(entry_id)
        entry = self.golden_dao.fetchEntryById(session, key)
        if entry is None:
            raise NotFoundError("Entry not found")
        self.golden_dao.deleteEntry(session, entry)
        logger.info("Golden knowledge entry %s deleted", entry_id)

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def sync_to_search_store(self) -> SyncResult:
        """
        Rebuild `rag_knowledge` from `golden_knowledge`.

        Read, delete-all and insert each run in their own transaction. The
        search store is emptied even when there is nothing to insert.
        """
        try:
            snapshot = self._snapshot_golden()
        except Exception as e:
            logger.error("Sync failed while reading golden knowledge: %s", e)
            return SyncFailed(stage="read", reason=str(e))

        try:
            removed = self._clear_search_store()
        except Exception as e:
            logger.error("Sync failed while clearing the search store: %s", e)
            return SyncFailed(stage="delete", reason=str(e))

        if snapshot:
            try:
                self._insert_search_entries(snapshot)
            except Exception as e:
                logger.error("Sync failed while inserting %d entries; search store left empty: %s", len(snapshot), e)
                return SyncFailed(stage="insert", reason=str(e))

        logger.info("Search store replaced: %d removed, %d inserted", removed, len(snapshot))
        return SyncReplaced(count=len(snapshot))

    @transactional
    def _snapshot_golden(self, session=None) -> List[RagKnowledge]:
        synced_at = utcnow()
        return [RagKnowledge.from_golden(entry, synced_at) for entry in self.golden_dao.fetchAllEntries(session)]

    @transactional
    def _clear_search_store(self, session=None) -> int:
        return self.rag_dao.deleteAllEntries(session)

    @transactional
    def _insert_search_entries(self, entries: List[RagKnowledge], session=None) -> int:
        return self.rag_dao.createEntries(session, entries)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    @transactional
    def search_entries(self, query: str, limit: int = 3, session=None) -> List[KnowledgeSearchHit]:
        """
        Case-insensitive substring search over the search store.

        Matches question, answer or any tag. Results come in storage order
        and carry only question, answer and tags.
        """
        if not query:
            return []
        entries = self.rag_dao.searchEntries(session, query, limit)
        return [KnowledgeSearchHit(question=entry.question, answer=entry.answer, tags=list(entry.tags or [])) for entry in entries]

    # ------------------------------------------------------------------
    # Negative feedback feed
    # ------------------------------------------------------------------

    def negative_feedback(self, params: PageParams) -> PaginatedNegativeFeedback:
        data = self._fetch_negative_page(params)
        total = self._count_negative()
        return PaginatedNegativeFeedback(
            data=data,
            total=total,
            page=params.page,
            limit=params.limit,
            total_pages=total_pages(total, params.limit),
        )

    @transactional
    def _fetch_negative_page(self, params: PageParams, session=None) -> List[NegativeFeedbackItem]:
        rows = self.message_dao.fetchNegativeFeedback(session, params.skip, params.limit)
        items = []
        for message, conversation in rows:
            shaped = shape_message(message)
            items.append(
                NegativeFeedbackItem(
                    **shaped.model_dump(),
                    conversation_id=message.conversation_id,
                    conversation=ConversationSummary(
                        id=str(conversation.id),
                        conversation_id=conversation.conversation_id,
                        title=conversation.title,
                        resolved=bool(conversation.resolved),
                    ),
                )
            )
        return items

    @transactional
    def _count_negative(self, session=None) -> int:
        return self.message_dao.countByRatings(session, NEGATIVE_RATINGS)
