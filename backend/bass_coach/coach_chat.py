"""Stateless client for the conversational bass coach."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Dict, List, Literal, Optional, Sequence

from openai import AuthenticationError, OpenAI, OpenAIError
from pydantic import BaseModel, Field

from .config import get_settings
from .constants import COACH_INSTRUCTIONS, MODEL
from .telemetry import emit_event

logger = logging.getLogger(__name__)


class CoachChatError(RuntimeError):
    """Raised when the coach service cannot produce a reply."""


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    text: str = Field(..., min_length=1)


class CoachChatClient:
    """Sends the conversation to the model behind the fixed coach persona.

    The client keeps no conversation state; callers pass the history they
    want the coach to see on every call.
    """

    def __init__(self, client: Optional[Any] = None, *, model: Optional[str] = None) -> None:
        self._client = client
        self._model = model or MODEL

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self) -> Any:
        if self._client is None:
            try:
                self._client = OpenAI()
            except OpenAIError as exc:
                raise CoachChatError("The coach is not configured. Set OPENAI_API_KEY and try again.") from exc
        return self._client

    def _build_input(self, message: str, history: Sequence[ChatMessage]) -> List[Dict[str, str]]:
        limit = get_settings().coach_max_history
        recent = list(history)[-limit:] if limit else []
        turns = [{"role": item.role, "content": item.text} for item in recent]
        turns.append({"role": "user", "content": message})
        return turns

    def reply(self, message: str, history: Sequence[ChatMessage] = ()) -> str:
        text = message.strip()
        if not text:
            raise ValueError("Message cannot be empty.")
        client = self._get_client()
        started_at = perf_counter()
        try:
            response = client.responses.create(
                model=self._model,
                instructions=COACH_INSTRUCTIONS,
                input=self._build_input(text, history),
            )
        except AuthenticationError as exc:
            logger.error("OpenAI authentication error while calling the coach: %s", exc)
            raise CoachChatError("The coach is not authorized with OpenAI. Update OPENAI_API_KEY and try again.") from exc
        except OpenAIError as exc:
            logger.warning("Coach request failed: %s", exc)
            raise CoachChatError("The coach is unavailable right now. Try again shortly.") from exc

        reply = (getattr(response, "output_text", "") or "").strip()
        emit_event(
            "coach_reply",
            model=self._model,
            status="success" if reply else "empty",
            history_length=len(history),
            duration_ms=round((perf_counter() - started_at) * 1000.0, 2),
        )
        if not reply:
            raise CoachChatError("The coach returned an empty reply.")
        return reply


__all__ = ["ChatMessage", "CoachChatClient", "CoachChatError"]
