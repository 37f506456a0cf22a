"""
FastAPI Router — Admin (super admin only)
=========================================

Purpose
-------
- Team management: list, add and remove dashboard operators
- Knowledge curation: negative feedback feed, golden knowledge CRUD,
  sync to the search store, search test
- Statistics
- Generic CRUD over the allow-listed collections

Every route requires `Authorization: Bearer <token>` with the `super_admin`
role; the router-level dependency rejects anything else before the handler
runs.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from visakha_backend.api.auth import require_super_admin
from visakha_backend.api.dependencies import (
    get_collection_service,
    get_curation_service,
    get_stats_service,
    get_team_service,
)
from visakha_backend.api.fast_api import to_http_exception
from visakha_backend.api.models import (
    CollectionPage,
    KnowledgeEntry,
    KnowledgeEntryCreated,
    KnowledgeEntryRequest,
    KnowledgeSearchHit,
    PaginatedNegativeFeedback,
    StatsResponse,
    SyncResponse,
    TeamMember,
    TeamMemberAdded,
    TeamMemberRequest,
)
from visakha_backend.database.config.config import settings
from visakha_backend.database.core.collection_crud import CollectionService
from visakha_backend.database.core.curation import CurationService, SyncFailed
from visakha_backend.database.core.errors import InvalidRequestError, NotFoundError
from visakha_backend.database.core.stats import StatsService
from visakha_backend.database.core.team import TeamService
from visakha_backend.database.helpers.pagination import parse_page_params

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_super_admin)])
"""Admin router; every route is guarded by `require_super_admin`."""

NEGATIVE_FEED_LIMIT = 20
COLLECTION_PAGE_LIMIT = 20
ADMIN_SEARCH_LIMIT = 10

# -----------------------
# Team
# -----------------------


@router.get("/moderators", response_model=List[TeamMember])
def list_moderators(team: TeamService = Depends(get_team_service)):
    return team.list_members()


@router.post("/moderators", response_model=TeamMemberAdded)
def add_moderator(
    data: TeamMemberRequest,
    user: Dict[str, str] = Depends(require_super_admin),
    team: TeamService = Depends(get_team_service),
):
    """Authorize a new operator. Role defaults to moderator."""
    try:
        return team.add_member(data.email, data.role, added_by=user["email"])
    except InvalidRequestError as e:
        raise to_http_exception(e)


@router.delete("/moderators")
def remove_moderator(
    data: TeamMemberRequest,
    user: Dict[str, str] = Depends(require_super_admin),
    team: TeamService = Depends(get_team_service),
):
    """Revoke an operator. Body: {email}. Removing yourself is refused."""
    try:
        team.remove_member(data.email, requested_by=user["email"])
    except (InvalidRequestError, NotFoundError) as e:
        raise to_http_exception(e)
    return {"success": True}


# -----------------------
# Knowledge curation
# -----------------------


@router.get("/feedback/negative", response_model=PaginatedNegativeFeedback)
def negative_feedback(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    curation: CurationService = Depends(get_curation_service),
):
    """Negatively rated messages with their conversation, newest first."""
    params = parse_page_params(page, limit, NEGATIVE_FEED_LIMIT, settings.MAX_PAGE_LIMIT)
    return curation.negative_feedback(params)


@router.post("/knowledge", response_model=KnowledgeEntryCreated)
def create_knowledge(
    data: KnowledgeEntryRequest,
    user: Dict[str, str] = Depends(require_super_admin),
    curation: CurationService = Depends(get_curation_service),
):
    """Promote a question/answer pair to golden knowledge."""
    try:
        entry = curation.create_entry(
            data.question,
            data.answer,
            tags=data.tags,
            source_message_id=data.source_message_id,
            created_by=user["email"],
        )
    except InvalidRequestError as e:
        raise to_http_exception(e)
    return KnowledgeEntryCreated(**entry.model_dump())


@router.get("/knowledge", response_model=List[KnowledgeEntry])
def list_knowledge(q: Optional[str] = None, curation: CurationService = Depends(get_curation_service)):
    return curation.list_entries(q)


@router.post("/knowledge/sync", response_model=SyncResponse)
def sync_knowledge(curation: CurationService = Depends(get_curation_service)):
    """Rebuild the search store from golden knowledge."""
    result = curation.sync_to_search_store()
    if isinstance(result, SyncFailed):
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to sync to RAG DB", "message": f"{result.stage}: {result.reason}"},
        )
    if result.count == 0:
        return SyncResponse(success=True, count=0, message="No items to sync")
    return SyncResponse(success=True, count=result.count, message="Golden knowledge successfully synced to RAG DB")


@router.get("/knowledge/search", response_model=List[KnowledgeSearchHit])
def search_knowledge(q: Optional[str] = None, curation: CurationService = Depends(get_curation_service)):
    if not q:
        raise HTTPException(status_code=400, detail="Search query 'q' is required")
    return curation.search_entries(q, limit=ADMIN_SEARCH_LIMIT)


@router.put("/knowledge/{entry_id}", response_model=KnowledgeEntryCreated)
def update_knowledge(
    entry_id: str,
    data: KnowledgeEntryRequest,
    curation: CurationService = Depends(get_curation_service),
):
    try:
        entry = curation.update_entry(entry_id, data.question, data.answer, tags=data.tags)
    except (InvalidRequestError, NotFoundError) as e:
        raise to_http_exception(e)
    return KnowledgeEntryCreated(**entry.model_dump())


@router.delete("/knowledge/{entry_id}")
def delete_knowledge(entry_id: str, curation: CurationService = Depends(get_curation_service)):
    try:
        curation.delete_entry(entry_id)
    except (InvalidRequestError, NotFoundError) as e:
        raise to_http_exception(e)
    return {"success": True}


# -----------------------
# Statistics
# -----------------------


@router.get("/stats", response_model=StatsResponse)
def stats(service: StatsService = Depends(get_stats_service)):
    return service.get_stats()


# -----------------------
# Generic collections
# -----------------------


@router.get("/db/{collection}", response_model=CollectionPage)
def list_documents(
    collection: str,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    service: CollectionService = Depends(get_collection_service),
):
    params = parse_page_params(page, limit, COLLECTION_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)
    try:
        return service.list_documents(collection, params)
    except InvalidRequestError as e:
        raise to_http_exception(e)


@router.post("/db/{collection}")
def create_document(
    collection: str,
    data: Dict[str, Any] = Body(...),
    service: CollectionService = Depends(get_collection_service),
):
    try:
        return service.create_document(collection, data)
    except InvalidRequestError as e:
        raise to_http_exception(e)


@router.put("/db/{collection}/{document_id}")
def update_document(
    collection: str,
    document_id: str,
    data: Dict[str, Any] = Body(...),
    service: CollectionService = Depends(get_collection_service),
):
    try:
        return service.update_document(collection, document_id, data)
    except (InvalidRequestError, NotFoundError) as e:
        raise to_http_exception(e)


@router.delete("/db/{collection}/{document_id}")
def delete_document(
    collection: str,
    document_id: str,
    service: CollectionService = Depends(get_collection_service),
):
    try:
        service.delete_document(collection, document_id)
    except (InvalidRequestError, NotFoundError) as e:
        raise to_http_exception(e)
    return {"success": True}
