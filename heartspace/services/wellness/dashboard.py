"""Per-user dashboard summary."""
from dataclasses import dataclass, asdict
from typing import Any, Dict

from heartspace.services.accounts import User
from heartspace.services.heartbot import SessionRegistry
from .affirmations import AffirmationBoard
from .gratitude import GratitudeJournal
from .mood import MoodTracker

DAILY_QUOTE = "Every moment is a fresh beginning. Take a deep breath and start again."


@dataclass
class DashboardSummary:
    greeting_name: str
    gratitude_entries: int
    days_tracked: int
    heartbot_chats: int
    affirmations_liked: int
    quote: str = DAILY_QUOTE

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


async def build_summary(
    user: User,
    journal: GratitudeJournal,
    tracker: MoodTracker,
    board: AffirmationBoard,
    sessions: SessionRegistry,
) -> DashboardSummary:
    names = (user.name or "").split()
    first_name = names[0] if names else ""
    return DashboardSummary(
        greeting_name=first_name,
        gratitude_entries=await journal.count_entries(user.id),
        days_tracked=await tracker.days_tracked(user.id),
        heartbot_chats=sessions.chats_started(user.id),
        affirmations_liked=await board.liked_count(user.id),
    )
