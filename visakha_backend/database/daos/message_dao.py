"""
Message DAO

Purpose
-------
Data-access layer for the `Message` entity:
- Count feedback conversations (independent of the paginated fetch)
- Fetch member messages by id, chronologically
- Negative feedback feed and rating counters
- Daily question histogram for the statistics page

Rating encodings
----------------
Two encodings of a negative rating coexist in stored feedback: the canonical
string ``"thumbsDown"`` and a legacy numeric ``0``. Rating filters compare the
rating rendered as text, so both ``0`` and ``"0"`` match the legacy form.

Transaction Model
-----------------
- The caller supplies the session and controls commit/rollback.
"""

import logging
import uuid
from datetime import datetime
from typing import Iterable, List, Sequence, Tuple

from sqlalchemy import String, asc, cast, desc, func
from sqlalchemy.orm import Session

from visakha_backend.database.entities.conversations import Conversation
from visakha_backend.database.entities.messages import USER_SENDER, Message

logger = logging.getLogger(__name__)

NEGATIVE_RATINGS = ("thumbsDown", "0")
POSITIVE_RATINGS = ("thumbsUp",)


def rating_in(ratings: Sequence[str]):
    """Filter clause: `feedback.rating`, as text, is one of `ratings`."""
    return cast(Message.feedback["rating"].as_string(), String).in_(list(ratings))


class MessageDao:
    """
    Data Access Object (DAO) for Message entities.
    """

    def countFeedbackConversations(self, session: Session) -> int:
        """
        Number of distinct correlation keys among messages with feedback.

        Runs independently of `ConversationDao.fetchFeedbackConversations`;
        groups whose conversation record is missing are still counted.
        """
        try:
            groups = (
                session.query(Message.conversation_id)
                .filter(Message.feedback.isnot(None))
                .group_by(Message.conversation_id)
                .subquery()
            )
            return session.query(func.count()).select_from(groups).scalar() or 0
        except Exception as e:
            logger.error("Error in MessageDao.countFeedbackConversations. Error: %s", e)
            raise

    def fetchMessagesByIds(self, session: Session, ids: Iterable[uuid.UUID]) -> List[Message]:
        """
        Fetch messages by primary key, ordered by creation time (ascending).

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        ids : iterable of UUID
            Primary keys to load; unknown ids are simply absent from the result.
        """
        ids = list(ids)
        if not ids:
            return []
        try:
            return (
                session.query(Message)
                .filter(Message.id.in_(ids))
                .order_by(asc(Message.created_at), asc(Message.id))
                .all()
            )
        except Exception as e:
            logger.error("Error in MessageDao.fetchMessagesByIds. Error: %s", e)
            raise

    def fetchNegativeFeedback(self, session: Session, offset: int, limit: int) -> List[Tuple[Message, Conversation]]:
        """
        Messages rated negatively, joined to their conversation (inner join),
        newest message first.
        """
        try:
            return (
                session.query(Message, Conversation)
                .join(Conversation, Conversation.conversation_id == Message.conversation_id)
                .filter(Message.feedback.isnot(None))
                .filter(rating_in(NEGATIVE_RATINGS))
                .order_by(desc(Message.created_at), asc(Message.id))
                .offset(offset)
                .limit(limit)
                .all()
            )
        except Exception as e:
            logger.error("Error in MessageDao.fetchNegativeFeedback. Error: %s", e)
            raise

    def countByRatings(self, session: Session, ratings: Sequence[str]) -> int:
        try:
            return (
                session.query(func.count(Message.id))
                .filter(Message.feedback.isnot(None))
                .filter(rating_in(ratings))
                .scalar()
                or 0
            )
        except Exception as e:
            logger.error("Error in MessageDao.countByRatings. Error: %s", e)
            raise

    def countMessages(self, session: Session) -> int:
        try:
            return session.query(func.count(Message.id)).scalar() or 0
        except Exception as e:
            logger.error("Error in MessageDao.countMessages. Error: %s", e)
            raise

    def fetchQuestionsTimeline(self, session: Session, since: datetime) -> List[Tuple[str, int]]:
        """
        Count User messages per calendar day since `since`, oldest day first.

        Returns
        -------
        list[tuple[str, int]]
            `("YYYY-MM-DD", count)` pairs.
        """
        try:
            day = func.date(Message.created_at)
            rows = (
                session.query(day.label("day"), func.count(Message.id))
                .filter(Message.sender == USER_SENDER)
                .filter(Message.created_at >= since)
                .group_by(day)
                .order_by(asc(day))
                .all()
            )
            return [(str(row_day), count) for row_day, count in rows]
        except Exception as e:
            logger.error("Error in MessageDao.fetchQuestionsTimeline. Error: %s", e)
            raise
