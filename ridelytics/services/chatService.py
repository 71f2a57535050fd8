"""
Chat Service
============

Runs one turn of the in-ride assistant conversation:

  1. Resolve a display label for the rider's location (reverse geocoder).
  2. Collect the closest partner businesses under the conversation radius
     policy and render them with the context assembler.
  3. Fill the injected prompt template, append the conversation history and
     the new message.
  4. Ask the text generator for a reply.

A generation failure never reaches the rider as a raw error: the reply
carries a polite fallback message and ``degraded`` is set.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from string import Template
from typing import Literal, Protocol, Sequence

from ridelytics.integrations.llm import TextGenerator, UpstreamGenerationError
from ridelytics.models import Coordinate
from ridelytics.services.catalogReader import CatalogReader
from ridelytics.services.contextAssembler import DEFAULT_CONTEXT_LIMIT, assemble_nearby_context
from ridelytics.services.matchingEngine import (
    CONVERSATION_RADIUS_CEILING_M,
    find_nearby_businesses,
)

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I'm sorry, I'm having trouble right now. Please try again in a moment."


class LocationDescriber(Protocol):
    async def describe_location(self, location: Coordinate | None) -> str:
        ...


@dataclass(frozen=True)
class ConversationTurn:
    role: Literal["user", "assistant"]
    content: str


@dataclass(frozen=True)
class ChatReply:
    response: str
    timestamp: datetime
    nearby_businesses: int
    current_location: str
    degraded: bool = False
    error: str | None = None


def render_history(history: Sequence[ConversationTurn]) -> str:
    lines = []
    for turn in history:
        speaker = "User" if turn.role == "user" else "Assistant"
        lines.append(f"{speaker}: {turn.content}\n")
    return "".join(lines)


class ChatService:
    def __init__(
        self,
        catalog_reader: CatalogReader,
        location_describer: LocationDescriber,
        text_generator: TextGenerator,
        prompt_template: Template,
        *,
        radius_ceiling_m: float = CONVERSATION_RADIUS_CEILING_M,
        max_businesses: int = DEFAULT_CONTEXT_LIMIT,
    ) -> None:
        self._catalog_reader = catalog_reader
        self._location_describer = location_describer
        self._text_generator = text_generator
        self._prompt_template = prompt_template
        self._radius_ceiling_m = radius_ceiling_m
        self._max_businesses = max_businesses

    def build_prompt(
        self,
        message: str,
        history: Sequence[ConversationTurn],
        *,
        current_location: str,
        user_location: Coordinate | None,
        nearby_context: str,
    ) -> str:
        coordinates_line = (
            f"Coordinates: {user_location.latitude:.4f}, {user_location.longitude:.4f}"
            if user_location is not None
            else ""
        )
        system_prompt = self._prompt_template.safe_substitute(
            current_location=current_location,
            coordinates_line=coordinates_line,
            nearby_businesses=nearby_context,
        )
        return (
            f"{system_prompt}\n\nConversation history:\n"
            f"{render_history(history)}"
            f"\nUser's new message: {message}"
        )

    async def handle_message(
        self,
        message: str,
        user_location: Coordinate | None,
        history: Sequence[ConversationTurn] = (),
    ) -> ChatReply:
        logger.info(
            "Chat request: %r | Location: %s",
            message[:50],
            "provided" if user_location is not None else "none",
        )

        current_location = await self._location_describer.describe_location(user_location)

        nearby = await asyncio.to_thread(
            find_nearby_businesses,
            user_location,
            self._catalog_reader,
            radius_ceiling_m=self._radius_ceiling_m,
            limit=self._max_businesses,
        )
        nearby_context = assemble_nearby_context(nearby, limit=self._max_businesses)
        logger.info("Found %d nearby businesses near %s", len(nearby), current_location)

        prompt = self.build_prompt(
            message,
            history,
            current_location=current_location,
            user_location=user_location,
            nearby_context=nearby_context,
        )

        try:
            response_text = await self._text_generator.generate(prompt)
            degraded, error = False, None
        except UpstreamGenerationError as exc:
            logger.error("Text generation failed: %s", exc)
            response_text, degraded, error = FALLBACK_REPLY, True, str(exc)
        except Exception:
            logger.exception("Unexpected text generation error")
            response_text, degraded, error = FALLBACK_REPLY, True, "Text generation failed"
        else:
            logger.info("Response generated (%d chars)", len(response_text))

        return ChatReply(
            response=response_text,
            timestamp=datetime.now(timezone.utc),
            nearby_businesses=len(nearby),
            current_location=current_location,
            degraded=degraded,
            error=error,
        )
