"""
Pydantic v2 schemas for the assistant chat API
==============================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from ridelytics.api.schemas.ads import CamelModel
from ridelytics.services.chatService import ConversationTurn


class HistoryMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str

    def to_turn(self) -> ConversationTurn:
        return ConversationTurn(role=self.role, content=self.content)


class ChatRequest(CamelModel):
    """Request body for one assistant turn."""

    message: str = Field(min_length=1, max_length=4000)
    user_location: Optional[tuple[float, float]] = Field(
        default=None, description="[latitude, longitude] of the rider, if known"
    )
    conversation_history: list[HistoryMessage] = Field(default_factory=list)


class ChatResponse(CamelModel):
    response: str
    timestamp: datetime
    nearby_businesses: int = Field(ge=0)
    current_location: str


class ChatErrorResponse(ChatResponse):
    error: str
