"""
Assistant chat REST API endpoint
================================

Endpoints:
  - POST /api/chat   One conversational turn with the in-ride assistant
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from ridelytics.api.deps import ChatServiceDep
from ridelytics.api.schemas.chat import ChatErrorResponse, ChatRequest, ChatResponse
from ridelytics.models import Coordinate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post(
    "",
    response_model=ChatResponse,
    responses={status.HTTP_502_BAD_GATEWAY: {"model": ChatErrorResponse}},
    summary="Send a message to the in-ride assistant",
)
async def chat_endpoint(body: ChatRequest, chat_service: ChatServiceDep):
    """Reply to the rider, grounded in the partner businesses near them.

    When text generation fails the body still carries a polite ``response``
    for display, alongside ``error`` and a 502 status.
    """
    user_location = (
        Coordinate(*body.user_location) if body.user_location is not None else None
    )

    reply = await chat_service.handle_message(
        body.message,
        user_location,
        [message.to_turn() for message in body.conversation_history],
    )

    payload = ChatResponse(
        response=reply.response,
        timestamp=reply.timestamp,
        nearby_businesses=reply.nearby_businesses,
        current_location=reply.current_location,
    )
    if reply.degraded:
        error_payload = ChatErrorResponse(
            **payload.model_dump(), error="Failed to process chat message"
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=error_payload.model_dump(mode="json", by_alias=True),
        )
    return payload
