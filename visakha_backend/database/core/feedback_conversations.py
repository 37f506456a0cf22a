"""
Conversation Aggregation Engine.

Turns per-message feedback records into conversation-level, UI-ready objects:

1. messages with feedback are grouped by correlation key, keeping the latest
   `updated_at` as the conversation's freshness signal;
2. each group is inner-joined to its conversation;
3. the conversation's full membership list is loaded (not just the flagged
   messages), oldest first;
4. User messages get their author resolved from `users`;
5. every message is reshaped so `text` is only set for User messages and
   `content` only for the others.

Listing order is latest feedback first. The page and the total are two
independent queries: under concurrent writes `total` may disagree with the
rows returned across pages until the next refresh.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from visakha_backend.api.models import (
    FeedbackConversation,
    FeedbackMessage,
    FeedbackUser,
    PaginatedFeedbackConversations,
    ResolvedToggleResponse,
)
from visakha_backend.database.core.errors import InvalidRequestError, NotFoundError
from visakha_backend.database.daos.conversation_dao import ConversationDao
from visakha_backend.database.daos.message_dao import MessageDao
from visakha_backend.database.daos.user_dao import UserDao
from visakha_backend.database.entities.conversations import Conversation
from visakha_backend.database.entities.messages import USER_SENDER, Message
from visakha_backend.database.entities.user import User
from visakha_backend.database.helpers.identifiers import partition_refs, report_missing, try_parse_object_id
from visakha_backend.database.helpers.pagination import PageParams, total_pages
from visakha_backend.database.helpers.transactionManagement import transactional

logger = logging.getLogger(__name__)


def shape_user(user: Optional[User]) -> Optional[FeedbackUser]:
    if user is None:
        return None
    return FeedbackUser(id=str(user.id), name=user.name, username=user.username, email=user.email)


def shape_message(message: Message, author: Optional[User] = None) -> FeedbackMessage:
    """Project a stored message into the inbox shape."""
    from_user = message.sender == USER_SENDER
    return FeedbackMessage(
        message_id=str(message.id),
        sender=message.sender,
        created_at=message.created_at,
        updated_at=message.updated_at,
        model=message.model,
        feedback=message.feedback,
        text=message.text if from_user else None,
        content=message.content if not from_user else None,
        user=shape_user(author) if from_user else None,
    )


class FeedbackConversationService:
    """
    Read side of the feedback inbox plus the resolved toggle.

    Parameters
    ----------
    store : StoreClient
        Injected document store handle.
    """

    def __init__(self, store):
        self.store = store
        self.conversation_dao = ConversationDao()
        self.message_dao = MessageDao()
        self.user_dao = UserDao()

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_feedback_conversations(self, params: PageParams) -> PaginatedFeedbackConversations:
        """
        One page of feedback conversations, latest feedback first.

        `data` and `total` come from two separate transactions.
        """
        data = self.fetch_feedback_page(params)
        total = self.count_feedback_conversations()
        return PaginatedFeedbackConversations(
            page=params.page,
            limit=params.limit,
            count=len(data),
            total=total,
            total_pages=total_pages(total, params.limit),
            data=data,
        )

    @transactional
    def fetch_feedback_page(self, params: PageParams, session=None) -> List[FeedbackConversation]:
        rows = self.conversation_dao.fetchFeedbackConversations(session, offset=params.skip, limit=params.limit)
        return self._assemble(session, rows)

    @transactional
    def count_feedback_conversations(self, session=None) -> int:
        return self.message_dao.countFeedbackConversations(session)

    # ------------------------------------------------------------------
    # Detail
    # ------------------------------------------------------------------

    @transactional
    def get_feedback_conversation(self, conversation_id: str, session=None) -> FeedbackConversation:
        """
        A single feedback conversation.

        Raises
        ------
        NotFoundError
            When no message of the conversation carries feedback, or the
            conversation record itself is missing.
        """
        rows = self.conversation_dao.fetchFeedbackConversations(session, limit=1, conversation_id=conversation_id)
        if not rows:
            raise NotFoundError("Conversation not found")
        return self._assemble(session, rows)[0]

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    @transactional
    def fetch_conversations_for_export(self, session=None) -> List[FeedbackConversation]:
        """
        Every conversation whose membership contains at least one feedback
        message, newest conversation first.
        """
        candidates = self.conversation_dao.fetchConversationsWithFeedbackKeys(session)
        assembled = self._assemble(session, [(conversation, None) for conversation in candidates])
        return [item for item in assembled if any(message.feedback is not None for message in item.messages)]

    # ------------------------------------------------------------------
    # Resolution state
    # ------------------------------------------------------------------

    @transactional
    def set_resolved(self, conversation_id: str, resolved, session=None) -> ResolvedToggleResponse:
        """
        Set `resolved` on one conversation. Never touches messages.

        Raises
        ------
        InvalidRequestError
            `resolved` is not a boolean.
        NotFoundError
            No conversation has this correlation key.
        """
        if not isinstance(resolved, bool):
            raise InvalidRequestError("Invalid request", "resolved must be a boolean")
        matched = self.conversation_dao.updateResolved(session, conversation_id, resolved)
        if matched == 0:
            raise NotFoundError("Conversation not found")
        logger.info("Conversation %s marked resolved=%s", conversation_id, resolved)
        return ResolvedToggleResponse(conversation_id=conversation_id, resolved=resolved)

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def _assemble(self, session, rows: Sequence[Tuple[Conversation, object]]) -> List[FeedbackConversation]:
        """Attach member messages and their authors to each conversation row."""
        memberships: Dict[str, Dict] = {}
        wanted = {}
        for conversation, _ in rows:
            parsed, malformed = partition_refs(conversation.messages or [])
            report_missing("message", conversation.conversation_id, list(malformed))
            memberships[conversation.conversation_id] = parsed
            wanted.update(parsed)

        # One query for every member of the page, already in chronological order.
        messages = self.message_dao.fetchMessagesByIds(session, wanted.keys())
        authors = self._resolve_authors(session, messages)

        result = []
        for conversation, latest_feedback_date in rows:
            members = memberships[conversation.conversation_id]
            ordered = [message for message in messages if message.id in members]
            missing = set(members) - {message.id for message in ordered}
            report_missing("message", conversation.conversation_id, [members[key] for key in missing])
            result.append(
                FeedbackConversation(
                    id=str(conversation.id),
                    conversation_id=conversation.conversation_id,
                    title=conversation.title,
                    created_at=conversation.created_at,
                    updated_at=conversation.updated_at,
                    latest_feedback_date=latest_feedback_date,
                    resolved=bool(conversation.resolved),
                    messages=[shape_message(message, authors.get(message.id)) for message in ordered],
                )
            )
        return result

    def _resolve_authors(self, session, messages: Iterable[Message]) -> Dict[object, User]:
        """Map message id → author for User messages whose `user` ref resolves."""
        user_messages = [message for message in messages if message.sender == USER_SENDER and message.user]
        parsed, malformed = partition_refs(message.user for message in user_messages)
        users = {user.id: user for user in self.user_dao.fetchUsersByIds(session, parsed.keys())}

        authors = {}
        unresolved = set(malformed)
        for message in user_messages:
            user = users.get(try_parse_object_id(message.user))
            if user is None:
                unresolved.add(message.user)
            else:
                authors[message.id] = user
        report_missing("user", "messages", list(unresolved))
        return authors
