"""Mood tracker: one check-in per user per day, with weekly insights."""
import time
from collections import Counter
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from heartspace.common.errors import ConflictError, ValidationError
from heartspace.common.logging import setup_logging
from heartspace.services.content import ContentStore
from . import keys

logger = setup_logging("mood")

COLLECTION = keys.MOODS
INSIGHT_WINDOW = 7


class Mood(str, Enum):
    HAPPY = "Happy"
    NEUTRAL = "Neutral"
    SAD = "Sad"
    ANXIOUS = "Anxious"
    EXCITED = "Excited"


MOOD_EMOJI = {
    Mood.HAPPY: "😊",
    Mood.NEUTRAL: "😐",
    Mood.SAD: "😢",
    Mood.ANXIOUS: "😰",
    Mood.EXCITED: "🤩",
}

MOOD_DESCRIPTIONS = {
    Mood.HAPPY: "Feeling great and positive",
    Mood.NEUTRAL: "Balanced and calm",
    Mood.SAD: "Feeling down or blue",
    Mood.ANXIOUS: "Worried or stressed",
    Mood.EXCITED: "Energetic and enthusiastic",
}


class MoodAlreadyTrackedError(ConflictError):
    """Raised on a second check-in within the same day"""
    title = "Already tracked today"


@dataclass
class MoodEntry:
    id: str
    user_id: str
    mood: str
    note: str
    created_at: float

    @property
    def emoji(self) -> str:
        return MOOD_EMOJI[Mood(self.mood)]

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "MoodEntry":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            mood=record["mood"],
            note=record.get("note") or "",
            created_at=record["created_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["emoji"] = self.emoji
        return data


@dataclass
class MoodInsights:
    entries_considered: int
    most_common: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entries_considered": self.entries_considered,
            "most_common": self.most_common,
            "most_common_emoji": MOOD_EMOJI[Mood(self.most_common)] if self.most_common else None,
        }


def parse_mood(value: str) -> Mood:
    for mood in Mood:
        if mood.value.lower() == (value or "").strip().lower():
            return mood
    raise ValidationError(f"Mood must be one of: {', '.join(m.value for m in Mood)}")


class MoodTracker:
    def __init__(self, store: ContentStore, clock: Callable[[], float] = time.time):
        self.store = store
        self._clock = clock

    async def track(self, user_id: str, mood: str, note: str = "") -> MoodEntry:
        selected = parse_mood(mood)
        today = datetime.fromtimestamp(self._clock()).date()
        latest = await self.store.list(COLLECTION, {"user_id": user_id}, limit=1)
        if latest and datetime.fromtimestamp(latest[0]["created_at"]).date() == today:
            raise MoodAlreadyTrackedError("You can track your mood once per day. Come back tomorrow!")

        record = await self.store.insert(COLLECTION, {
            "user_id": user_id,
            "mood": selected.value,
            "note": (note or "").strip(),
        })
        logger.info(f"Mood {selected.value} tracked for {user_id}")
        return MoodEntry.from_record(record)

    async def recent(self, user_id: str, limit: int = 10) -> List[MoodEntry]:
        records = await self.store.list(COLLECTION, {"user_id": user_id}, limit=limit)
        return [MoodEntry.from_record(r) for r in records]

    async def days_tracked(self, user_id: str) -> int:
        return await self.store.count(COLLECTION, {"user_id": user_id})

    async def insights(self, user_id: str) -> MoodInsights:
        """Summary over the latest seven check-ins."""
        window = await self.recent(user_id, limit=INSIGHT_WINDOW)
        if not window:
            return MoodInsights(entries_considered=0, most_common=None)
        # most_common keeps first-seen order on ties, i.e. the most recent mood
        counts = Counter(entry.mood for entry in window)
        return MoodInsights(entries_considered=len(window), most_common=counts.most_common(1)[0][0])
