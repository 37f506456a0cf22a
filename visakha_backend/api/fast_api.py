"""
FastAPI Router — Feedback Inbox • Export
========================================

Purpose
-------
Defines the public HTTP API the dashboard's inbox uses:
- Feedback conversations: paginated list, detail, resolved toggle
- Markdown export of every conversation with feedback

Key Notes
---------
- Input validation via Pydantic models in `visakha_backend.api.models`.
- `page`/`limit` arrive as raw strings and go through `parse_page_params`, so
  junk values fall back to defaults instead of failing the request.
- Domain errors from the service layer are translated here with
  `to_http_exception`; store faults propagate to the app-level handler (500).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from visakha_backend.api.dependencies import get_feedback_service
from visakha_backend.api.markdown_export import render_export
from visakha_backend.api.models import (
    FeedbackConversation,
    PaginatedFeedbackConversations,
    ResolvedToggle,
    ResolvedToggleResponse,
)
from visakha_backend.database.config.config import settings
from visakha_backend.database.core.errors import InvalidRequestError, NotFoundError
from visakha_backend.database.core.feedback_conversations import FeedbackConversationService
from visakha_backend.database.helpers.documents import utcnow
from visakha_backend.database.helpers.pagination import parse_page_params

logger = logging.getLogger(__name__)

router = APIRouter()
"""Creates the FastAPI router in which we define its routes"""


def to_http_exception(error: Exception) -> HTTPException:
    """Map a service-layer error to the `{error, message?}` HTTP shape."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=error.detail)
    if isinstance(error, InvalidRequestError):
        detail = {"error": error.detail}
        if error.message:
            detail["message"] = error.message
        return HTTPException(status_code=400, detail=detail)
    return HTTPException(status_code=500, detail=str(error))


@router.get("/feedback-conversations", response_model=PaginatedFeedbackConversations)
def list_feedback_conversations(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    service: FeedbackConversationService = Depends(get_feedback_service),
):
    """Paginated feedback inbox, most recent feedback first.

    Response:
        200: {page, limit, count, total, totalPages, data}
    """
    params = parse_page_params(page, limit, settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)
    return service.list_feedback_conversations(params)


@router.get("/feedback-conversations/{conversation_id}", response_model=FeedbackConversation)
def get_feedback_conversation(
    conversation_id: str,
    service: FeedbackConversationService = Depends(get_feedback_service),
):
    """Single feedback conversation with all of its messages; 404 when it has no feedback."""
    try:
        return service.get_feedback_conversation(conversation_id)
    except NotFoundError as e:
        raise to_http_exception(e)


@router.patch("/feedback-conversations/{conversation_id}/resolved", response_model=ResolvedToggleResponse)
def set_resolved(
    conversation_id: str,
    data: ResolvedToggle,
    service: FeedbackConversationService = Depends(get_feedback_service),
):
    """Mark a conversation resolved or open. Body: {resolved: true|false}."""
    try:
        return service.set_resolved(conversation_id, data.resolved)
    except (NotFoundError, InvalidRequestError) as e:
        raise to_http_exception(e)


@router.get("/conversations/export")
def export_conversations(service: FeedbackConversationService = Depends(get_feedback_service)):
    """Download every conversation that has feedback as one Markdown document."""
    conversations = service.fetch_conversations_for_export()
    logger.info("Exporting %d conversations", len(conversations))
    return Response(
        content=render_export(conversations, utcnow()),
        media_type="text/markdown",
        headers={"Content-Disposition": 'attachment; filename="conversations.md"'},
    )
