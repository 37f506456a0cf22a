"""
Knowledge DAOs — Golden & RAG
=============================

Purpose
-------
- `GoldenKnowledgeDao`: CRUD over curated entries plus the free-text listing
  used by the curation workspace.
- `RagKnowledgeDao`: the wholesale replace used by sync (delete-all,
  bulk-insert) and the substring search used by the admin test endpoint and
  the knowledge tool process.

Search semantics
----------------
Case-insensitive substring match. LIKE wildcards (``%``, ``_``) and the escape
character in the user's query are escaped, so the query is always matched
literally. Tags are matched one entry at a time through `tag_text`; a query
holding `TAG_SEPARATOR` cannot lie inside a single tag and skips that check.

Transaction Model
-----------------
- Caller-owned sessions; nothing here commits.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import desc, func, or_
from sqlalchemy.orm import Session

from visakha_backend.database.entities.knowledge import TAG_SEPARATOR, GoldenKnowledge, RagKnowledge

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def contains_pattern(query: str) -> str:
    """Build a literal `%query%` LIKE pattern."""
    escaped = (
        query.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def icontains(column, query: str):
    return column.ilike(contains_pattern(query), escape=LIKE_ESCAPE)


class GoldenKnowledgeDao:
    """
    Data Access Object for `GoldenKnowledge`.
    """

    def createEntry(self, session: Session, entry: GoldenKnowledge) -> GoldenKnowledge:
        try:
            session.add(entry)
            session.flush()
            return entry
        except Exception as e:
            logger.error("Error in GoldenKnowledgeDao.createEntry. Error Message: %s", e)
            raise

    def fetchEntries(self, session: Session, query: Optional[str], limit: int) -> List[GoldenKnowledge]:
        """
        List entries newest first, optionally filtered by a free-text query
        over question and answer.

        Parameters
        ----------
        query : str | None
            Substring to look for; empty or None lists everything.
        limit : int
            Hard cap on the number of rows returned.
        """
        try:
            rows = session.query(GoldenKnowledge)
            if query:
                rows = rows.filter(or_(icontains(GoldenKnowledge.question, query), icontains(GoldenKnowledge.answer, query)))
            return rows.order_by(desc(GoldenKnowledge.created_at)).limit(limit).all()
        except Exception as e:
            logger.error("Error in GoldenKnowledgeDao.fetchEntries. Error Message: %s", e)
            raise

    def fetchEntryById(self, session: Session, entry_id: uuid.UUID) -> Optional[GoldenKnowledge]:
        try:
            return session.get(GoldenKnowledge, entry_id)
        except Exception as e:
            logger.error("Error in GoldenKnowledgeDao.fetchEntryById. Error Message: %s", e)
            raise

    def fetchAllEntries(self, session: Session) -> List[GoldenKnowledge]:
        try:
            return session.query(GoldenKnowledge).all()
        except Exception as e:
            logger.error("Error in GoldenKnowledgeDao.fetchAllEntries. Error Message: %s", e)
            raise

    def deleteEntry(self, session: Session, entry: GoldenKnowledge) -> None:
        try:
            session.delete(entry)
        except Exception as e:
            logger.error("Error in GoldenKnowledgeDao.deleteEntry. Error Message: %s", e)
            raise


class RagKnowledgeDao:
    """
    Data Access Object for `RagKnowledge`.
    """

    def deleteAllEntries(self, session: Session) -> int:
        try:
            return session.query(RagKnowledge).delete(synchronize_session=False)
        except Exception as e:
            logger.error("Error in RagKnowledgeDao.deleteAllEntries. Error Message: %s", e)
            raise

    def createEntries(self, session: Session, entries: List[RagKnowledge]) -> int:
        try:
            session.add_all(entries)
            session.flush()
            return len(entries)
        except Exception as e:
            logger.error("Error in RagKnowledgeDao.createEntries. Error Message: %s", e)
            raise

    def countEntries(self, session: Session) -> int:
        try:
            return session.query(func.count(RagKnowledge.id)).scalar() or 0
        except Exception as e:
            logger.error("Error in RagKnowledgeDao.countEntries. Error Message: %s", e)
            raise

    def searchEntries(self, session: Session, query: str, limit: int) -> List[RagKnowledge]:
        """
        First `limit` entries whose question, answer or any tag contains
        `query` (case-insensitive), in storage order. Not ranked.
        """
        matches = [icontains(RagKnowledge.question, query), icontains(RagKnowledge.answer, query)]
        if TAG_SEPARATOR not in query:
            matches.append(icontains(RagKnowledge.tag_text, query))
        try:
            return session.query(RagKnowledge).filter(or_(*matches)).limit(limit).all()
        except Exception as e:
            logger.error("Error in RagKnowledgeDao.searchEntries. Error Message: %s", e)
            raise
