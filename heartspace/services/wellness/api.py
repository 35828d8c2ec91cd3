#!/usr/bin/env python3
"""
HeartSpace - Wellness HTTP API

Endpoints:
- POST /gratitude, GET /gratitude?category=: Journal entries
- DELETE /gratitude/{entry_id}, POST /gratitude/{entry_id}/like
- POST /moods, GET /moods, GET /moods/insights: Mood check-ins
- POST /affirmations, GET /affirmations, GET /affirmations/shuffle
- POST /affirmations/{affirmation_id}/like, DELETE /affirmations/{affirmation_id}
- POST /comments/{post_type}/{post_id}, GET /comments/{post_type}/{post_id}
- DELETE /comments/{comment_id}
- GET /dashboard: Per-user summary
"""

from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI
from pydantic import BaseModel, Field

from heartspace.services.accounts import User
from heartspace.services.heartbot import SessionRegistry
from .affirmations import AffirmationBoard
from .comments import CommentThread, parse_post_type
from .dashboard import build_summary
from .gratitude import CATEGORIES, EMOJIS, GratitudeJournal
from .mood import MOOD_DESCRIPTIONS, MOOD_EMOJI, MoodTracker


# Request/Response Models
class GratitudeRequest(BaseModel):
    content: str = Field(..., description="What you're grateful for")
    category: Optional[str] = Field(None, description="Health, Relationships, Self or Work")
    emoji: Optional[str] = Field(None, description="Optional emoji")


class MoodRequest(BaseModel):
    mood: str = Field(..., description="Happy, Neutral, Sad, Anxious or Excited")
    note: str = Field("", description="Why do you feel this way?")


class AffirmationRequest(BaseModel):
    content: str
    is_anonymous: bool = False


class CommentRequest(BaseModel):
    content: str
    is_anonymous: bool = False


class ItemsResponse(BaseModel):
    items: List[Dict[str, Any]]
    total: int


def _items(objs) -> ItemsResponse:
    items = [o.to_dict() for o in objs]
    return ItemsResponse(items=items, total=len(items))


def register_routes(
    app: FastAPI,
    journal: GratitudeJournal,
    tracker: MoodTracker,
    board: AffirmationBoard,
    comments: CommentThread,
    sessions: SessionRegistry,
    current_user,
    optional_user,
) -> None:
    """Register all wellness routes on the app."""

    # --- Gratitude ---

    @app.get("/gratitude/options")
    async def gratitude_options():
        return {"categories": list(CATEGORIES), "emojis": list(EMOJIS)}

    @app.post("/gratitude", status_code=201)
    async def add_gratitude(request: GratitudeRequest, user: User = Depends(current_user)):
        entry = await journal.add_entry(user.id, request.content, request.category, request.emoji)
        return entry.to_dict()

    @app.get("/gratitude", response_model=ItemsResponse)
    async def list_gratitude(category: Optional[str] = None, user: User = Depends(current_user)):
        return _items(await journal.list_entries(user.id, category))

    @app.post("/gratitude/{entry_id}/like")
    async def like_gratitude(entry_id: str, user: User = Depends(current_user)):
        return (await journal.toggle_like(user.id, entry_id)).to_dict()

    @app.delete("/gratitude/{entry_id}", status_code=204)
    async def delete_gratitude(entry_id: str, user: User = Depends(current_user)):
        await journal.delete_entry(user.id, entry_id)

    # --- Mood ---

    @app.get("/moods/options")
    async def mood_options():
        return {
            "moods": [
                {"name": mood.value, "emoji": MOOD_EMOJI[mood], "description": MOOD_DESCRIPTIONS[mood]}
                for mood in MOOD_EMOJI
            ]
        }

    @app.post("/moods", status_code=201)
    async def track_mood(request: MoodRequest, user: User = Depends(current_user)):
        entry = await tracker.track(user.id, request.mood, request.note)
        return entry.to_dict()

    @app.get("/moods", response_model=ItemsResponse)
    async def recent_moods(limit: int = 10, user: User = Depends(current_user)):
        return _items(await tracker.recent(user.id, limit=max(1, min(limit, 100))))

    @app.get("/moods/insights")
    async def mood_insights(user: User = Depends(current_user)):
        return (await tracker.insights(user.id)).to_dict()

    # --- Affirmations ---

    @app.post("/affirmations", status_code=201)
    async def post_affirmation(request: AffirmationRequest, user: User = Depends(current_user)):
        return (await board.post(user, request.content, request.is_anonymous)).to_dict()

    @app.get("/affirmations", response_model=ItemsResponse)
    async def affirmation_feed(user: Optional[User] = Depends(optional_user)):
        return _items(await board.feed(user.id if user else None))

    @app.get("/affirmations/shuffle", response_model=ItemsResponse)
    async def shuffle_affirmations(user: Optional[User] = Depends(optional_user)):
        return _items(await board.shuffled(user.id if user else None))

    @app.post("/affirmations/{affirmation_id}/like")
    async def like_affirmation(affirmation_id: str, user: User = Depends(current_user)):
        return (await board.toggle_like(user.id, affirmation_id)).to_dict()

    @app.delete("/affirmations/{affirmation_id}", status_code=204)
    async def delete_affirmation(affirmation_id: str, user: User = Depends(current_user)):
        await board.delete(user.id, affirmation_id)

    # --- Comments ---

    @app.post("/comments/{post_type}/{post_id}", status_code=201)
    async def add_comment(post_type: str, post_id: str, request: CommentRequest, user: User = Depends(current_user)):
        comment = await comments.add(user, parse_post_type(post_type), post_id, request.content, request.is_anonymous)
        return comment.to_dict()

    @app.get("/comments/{post_type}/{post_id}", response_model=ItemsResponse)
    async def list_comments(post_type: str, post_id: str):
        return _items(await comments.list(parse_post_type(post_type), post_id))

    @app.delete("/comments/{comment_id}", status_code=204)
    async def delete_comment(comment_id: str, user: User = Depends(current_user)):
        await comments.delete(user.id, comment_id)

    # --- Dashboard ---

    @app.get("/dashboard")
    async def dashboard(user: User = Depends(current_user)):
        summary = await build_summary(user, journal, tracker, board, sessions)
        return summary.to_dict()
