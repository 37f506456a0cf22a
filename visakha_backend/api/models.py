"""
Pydantic models used for request/response validation and API data contracts.

Each class defines the structure of data expected in API endpoints, ensuring
validation and automatic OpenAPI schema generation. Field names are
snake_case in Python and camelCase on the wire (`CamelModel`).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases, populated by either name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------
# Feedback inbox
# -----------------------

class FeedbackUser(CamelModel):
    """Reduced projection of the user who wrote a message."""
    id: str
    name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None


class FeedbackMessage(CamelModel):
    """
    A message as shown in the inbox. `text` is only set for User messages and
    `content` only for other senders.
    """
    message_id: str
    sender: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model: Optional[str] = None
    feedback: Optional[Dict[str, Any]] = None
    text: Optional[str] = None
    content: Optional[Union[str, List[Dict[str, Any]]]] = None
    user: Optional[FeedbackUser] = None


class FeedbackConversation(CamelModel):
    """A conversation with at least one feedback message, with all of its messages."""
    id: str
    conversation_id: str
    title: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    latest_feedback_date: Optional[datetime] = None
    resolved: bool = False
    messages: List[FeedbackMessage] = []


class PaginatedFeedbackConversations(CamelModel):
    page: int
    limit: int
    count: int
    total: int
    total_pages: int
    data: List[FeedbackConversation]


class ResolvedToggle(BaseModel):
    """Body of the resolved toggle. Only a JSON boolean is accepted."""
    resolved: StrictBool


class ResolvedToggleResponse(CamelModel):
    success: bool = True
    conversation_id: str
    resolved: bool


# -----------------------
# Auth & team
# -----------------------

class GoogleLogin(BaseModel):
    """Google ID token obtained by the web client."""
    token: Optional[str] = None


class SessionUser(BaseModel):
    email: str
    role: str


class SessionResponse(BaseModel):
    """Session token issued after a successful login."""
    token: str
    user: SessionUser


class TeamMemberRequest(BaseModel):
    """Add/remove member request. Missing email is reported by the service."""
    email: Optional[str] = None
    role: Optional[str] = None


class TeamMember(CamelModel):
    id: str
    email: str
    role: str
    added_by: Optional[str] = None
    created_at: Optional[datetime] = None


class TeamMemberAdded(BaseModel):
    success: bool = True
    email: str
    role: str


# -----------------------
# Curation
# -----------------------

class KnowledgeEntryRequest(CamelModel):
    """
    Create/update payload for golden knowledge. Presence of `question` and
    `answer` is enforced by the service so the error message stays specific.
    """
    question: Optional[str] = None
    answer: Optional[str] = None
    tags: Optional[List[str]] = None
    source_message_id: Optional[str] = None


class KnowledgeEntry(CamelModel):
    id: str
    question: str
    answer: str
    tags: List[str] = []
    source_message_id: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class KnowledgeEntryCreated(KnowledgeEntry):
    success: bool = True


class SyncResponse(BaseModel):
    success: bool
    count: int
    message: str


class KnowledgeSearchHit(BaseModel):
    """What the knowledge tool returns per match: bookkeeping fields stripped."""
    question: str
    answer: str
    tags: List[str] = []


class ConversationSummary(CamelModel):
    id: str
    conversation_id: str
    title: Optional[str] = None
    resolved: bool = False


class NegativeFeedbackItem(FeedbackMessage):
    conversation_id: str
    conversation: ConversationSummary


class PaginatedNegativeFeedback(CamelModel):
    data: List[NegativeFeedbackItem]
    total: int
    page: int
    limit: int
    total_pages: int


# -----------------------
# Statistics & generic CRUD
# -----------------------

class StatsTotals(CamelModel):
    users: int
    conversations: int
    messages: int
    thumbs_up: int
    thumbs_down: int


class TimelinePoint(BaseModel):
    date: str
    count: int


class StatsResponse(CamelModel):
    totals: StatsTotals
    questions_timeline: List[TimelinePoint]


class CollectionPage(CamelModel):
    data: List[Dict[str, Any]]
    total: int
    page: int
    limit: int
    total_pages: int = Field(..., description="ceil(total / limit)")
