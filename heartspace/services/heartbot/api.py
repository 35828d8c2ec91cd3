#!/usr/bin/env python3
"""
HeartSpace - HeartBot HTTP API

Endpoints:
- GET /heartbot/prompts: Suggested conversation starters
- POST /heartbot/sessions: Start a chat (seeded with the welcome message)
- GET /heartbot/sessions/{session_id}: Current transcript
- POST /heartbot/sessions/{session_id}/messages: Send a message, get HeartBot's reply
- DELETE /heartbot/sessions/{session_id}: End a chat
"""

from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI
from pydantic import BaseModel, Field

from heartspace.services.accounts import User
from .engine import SessionRegistry, TurnOrchestrator
from .topics import SUGGESTED_PROMPTS


# Request/Response Models
class MessageRequest(BaseModel):
    """A message typed by the user."""
    content: str = Field(..., description="Message text")


class SessionResponse(BaseModel):
    """A chat session and its transcript."""
    session_id: str
    created_at: float
    pending: bool
    messages: List[Dict[str, Any]]


class TurnResponse(BaseModel):
    """HeartBot's reply and the updated transcript."""
    session_id: str
    reply: Dict[str, Any]
    messages: List[Dict[str, Any]]


class PromptsResponse(BaseModel):
    prompts: List[str]


def register_routes(app: FastAPI, registry: SessionRegistry, orchestrator: TurnOrchestrator, optional_user) -> None:
    """Register HeartBot routes on the app.

    ``optional_user`` is a FastAPI dependency yielding the signed-in User or None.
    """

    @app.get("/heartbot/prompts", response_model=PromptsResponse)
    async def suggested_prompts():
        return PromptsResponse(prompts=list(SUGGESTED_PROMPTS))

    @app.post("/heartbot/sessions", response_model=SessionResponse, status_code=201)
    async def start_session(user: Optional[User] = Depends(optional_user)):
        session = registry.create(user_id=user.id if user else None)
        return SessionResponse(**_session_view(session))

    @app.get("/heartbot/sessions/{session_id}", response_model=SessionResponse)
    async def get_session(session_id: str):
        session = registry.get(session_id)
        return SessionResponse(**_session_view(session))

    @app.post("/heartbot/sessions/{session_id}/messages", response_model=TurnResponse)
    async def send_message(session_id: str, request: MessageRequest):
        """
        Send a message to HeartBot.

        The request resolves once HeartBot's reply has been appended; clients
        should keep their input disabled until then.
        """
        session = registry.get(session_id)
        messages, reply = await orchestrator.submit_user_message(session, request.content)
        return TurnResponse(
            session_id=session.session_id,
            reply=reply.to_dict(),
            messages=[m.to_dict() for m in messages],
        )

    @app.delete("/heartbot/sessions/{session_id}", status_code=204)
    async def end_session(session_id: str):
        registry.get(session_id)
        registry.close(session_id)


def _session_view(session) -> Dict[str, Any]:
    data = session.to_dict()
    data.pop("user_id", None)
    return data
