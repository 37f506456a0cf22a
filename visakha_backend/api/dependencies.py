"""
FastAPI dependencies that hand request handlers the services built at startup.

`create_app` stores one instance of each service on `app.state`; all of them
share the app's single `StoreClient`.
"""

from fastapi import Request

from visakha_backend.database.core.collection_crud import CollectionService
from visakha_backend.database.core.curation import CurationService
from visakha_backend.database.core.feedback_conversations import FeedbackConversationService
from visakha_backend.database.core.stats import StatsService
from visakha_backend.database.core.team import TeamService


def get_feedback_service(request: Request) -> FeedbackConversationService:
    return request.app.state.feedback_service


def get_curation_service(request: Request) -> CurationService:
    return request.app.state.curation_service


def get_team_service(request: Request) -> TeamService:
    return request.app.state.team_service


def get_stats_service(request: Request) -> StatsService:
    return request.app.state.stats_service


def get_collection_service(request: Request) -> CollectionService:
    return request.app.state.collection_service
