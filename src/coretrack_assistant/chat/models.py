"""Chat request/response models."""

from enum import Enum

from pydantic import BaseModel, Field


class ChatContext(BaseModel):
    """Session context supplied by the auth/subscription layer."""

    tenant_id: str | None = Field(None, description="Tenant identifier")
    subscription_plan: str | None = Field(None, description="Subscription plan name")
    user_role: str | None = Field(None, description="owner, manager or staff")
    business_type: str | None = Field(None, description="restaurant, retail, ...")
    current_page: str | None = Field(None, description="Page the user is on")


class ResponseSource(str, Enum):
    """Where a chat answer came from."""

    AI = "ai"
    KNOWLEDGE_BASE = "knowledge_base"
    FALLBACK = "fallback"


class ChatRequest(BaseModel):
    """Chat request body."""

    message: str = Field(..., min_length=1, description="User message")
    context: ChatContext = Field(default_factory=ChatContext)
    contextual_data: str | None = Field(
        None, description="Live business data to include in the answer"
    )


class ChatResponse(BaseModel):
    """Chat response body."""

    response: str = Field(..., description="Text shown to the user")
    source: ResponseSource = Field(..., description="Origin of the text")
    backend: str | None = Field(None, description="Backend that produced AI text")
    wait_seconds: int | None = Field(
        None, description="Seconds until AI answers are available again"
    )
