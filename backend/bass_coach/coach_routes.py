"""Coaching chat endpoint."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from .coach_chat import ChatMessage, CoachChatClient, CoachChatError

router = APIRouter(prefix="/api/coach", tags=["coach"])
logger = logging.getLogger(__name__)

_coach_client: Optional[CoachChatClient] = None


def get_coach_client() -> CoachChatClient:
    global _coach_client
    if _coach_client is None:
        _coach_client = CoachChatClient()
    return _coach_client


class CoachChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)
    history: List[ChatMessage] = Field(default_factory=list)


class CoachChatResponse(BaseModel):
    reply: str
    model: str


@router.post("/chat", response_model=CoachChatResponse, status_code=status.HTTP_200_OK)
def chat(request: CoachChatRequest, client: CoachChatClient = Depends(get_coach_client)) -> CoachChatResponse:
    try:
        reply = client.reply(request.message, request.history)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except CoachChatError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return CoachChatResponse(reply=reply, model=client.model)
