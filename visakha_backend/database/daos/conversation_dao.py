"""
Conversation DAO

Purpose
-------
Data-access layer for the `Conversation` entity, including the grouping
query behind the feedback inbox:

- messages with feedback → grouped by `conversation_id` with
  `max(updated_at)` as the latest feedback date
- inner join to `conversations` on the correlation key
- ordered by latest feedback date (newest first), then by key
- offset / limit pagination

Design
------
- Requires an active SQLAlchemy `Session` supplied by the caller (no session
  creation inside the DAO). Transaction boundaries live in the service layer.
- Uses ORM queries (`session.query(...)`).

Error Handling
--------------
- Methods catch generic `Exception`, log the failing operation and re-raise.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import asc, desc, func, select, update
from sqlalchemy.orm import Session

from visakha_backend.database.entities.conversations import Conversation
from visakha_backend.database.entities.messages import Message

logger = logging.getLogger(__name__)


class ConversationDao:
    """
    Data Access Object (DAO) for managing Conversation entities.
    """

    def feedbackGroups(self, session: Session, conversation_id: Optional[str] = None):
        """
        Subquery of `(conversation_id, latest_feedback_date)` over messages
        that carry feedback, optionally narrowed to one correlation key.
        """
        query = (
            session.query(
                Message.conversation_id.label("conversation_id"),
                func.max(Message.updated_at).label("latest_feedback_date"),
            )
            .filter(Message.feedback.isnot(None))
        )
        if conversation_id is not None:
            query = query.filter(Message.conversation_id == conversation_id)
        return query.group_by(Message.conversation_id).subquery()

    def fetchFeedbackConversations(
        self,
        session: Session,
        offset: int = 0,
        limit: Optional[int] = None,
        conversation_id: Optional[str] = None,
    ) -> List[Tuple[Conversation, datetime]]:
        """
        Fetch conversations that have at least one feedback message.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        offset, limit : int
            Pagination window over the ordered result.
        conversation_id : str, optional
            Restrict to a single correlation key.

        Returns
        -------
        list[tuple[Conversation, datetime]]
            Conversation with its latest feedback date, newest first.
            Feedback groups without a conversation record are dropped.
        """
        try:
            groups = self.feedbackGroups(session, conversation_id)
            query = (
                session.query(Conversation, groups.c.latest_feedback_date)
                .join(groups, Conversation.conversation_id == groups.c.conversation_id)
                .order_by(desc(groups.c.latest_feedback_date), asc(Conversation.conversation_id))
            )
            if offset:
                query = query.offset(offset)
            if limit is not None:
                query = query.limit(limit)
            return [(conversation, latest) for conversation, latest in query.all()]
        except Exception as e:
            logger.error("Error in ConversationDao.fetchFeedbackConversations. Error: %s", e)
            raise

    def fetchConversationsWithFeedbackKeys(self, session: Session) -> List[Conversation]:
        """
        Conversations whose correlation key appears on at least one feedback
        message, newest conversation first.
        """
        try:
            keys = select(Message.conversation_id).where(Message.feedback.isnot(None)).distinct()
            return (
                session.query(Conversation)
                .filter(Conversation.conversation_id.in_(keys))
                .order_by(desc(Conversation.created_at))
                .all()
            )
        except Exception as e:
            logger.error("Error in ConversationDao.fetchConversationsWithFeedbackKeys. Error: %s", e)
            raise

    def updateResolved(self, session: Session, conversation_id: str, resolved: bool) -> int:
        """
        Set `resolved` on the conversation matching the correlation key.

        Single update-by-filter; no read-modify-write.

        Returns
        -------
        int
            Number of matched rows (0 means not found).
        """
        try:
            result = session.execute(
                update(Conversation)
                .where(Conversation.conversation_id == conversation_id)
                .values(resolved=resolved)
            )
            return result.rowcount
        except Exception as e:
            logger.error("Error in ConversationDao.updateResolved. Error: %s", e)
            raise

    def fetchConversationByKey(self, session: Session, conversation_id: str) -> Optional[Conversation]:
        try:
            return (
                session.query(Conversation)
                .filter(Conversation.conversation_id == conversation_id)
                .one_or_none()
            )
        except Exception as e:
            logger.error("Error in ConversationDao.fetchConversationByKey. Error: %s", e)
            raise

    def countConversations(self, session: Session) -> int:
        try:
            return session.query(func.count(Conversation.id)).scalar() or 0
        except Exception as e:
            logger.error("Error in ConversationDao.countConversations. Error: %s", e)
            raise
