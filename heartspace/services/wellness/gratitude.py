"""Gratitude journal: private entries with a category and an optional emoji."""
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from heartspace.common.errors import EmptyMessageError, NotFoundError, PermissionDeniedError, ValidationError
from heartspace.common.logging import setup_logging
from heartspace.services.content import ContentStore
from . import keys

logger = setup_logging("gratitude")

COLLECTION = keys.GRATITUDE
CATEGORIES = ("Health", "Relationships", "Self", "Work")
DEFAULT_CATEGORY = "Self"
EMOJIS = ("💖", "🌟", "🌈", "🙏", "☀️", "🌸", "✨", "🎉")


@dataclass
class GratitudeEntry:
    id: str
    user_id: str
    content: str
    category: str
    emoji: str
    created_at: float
    likes: int = 0

    @classmethod
    def from_record(cls, record: Dict[str, Any], likes: int = 0) -> "GratitudeEntry":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            content=record["content"],
            category=record.get("category") or DEFAULT_CATEGORY,
            emoji=record.get("emoji") or "",
            created_at=record["created_at"],
            likes=likes,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class GratitudeJournal:
    def __init__(self, store: ContentStore):
        self.store = store

    async def add_entry(self, user_id: str, content: str, category: Optional[str] = None, emoji: Optional[str] = None) -> GratitudeEntry:
        content = (content or "").strip()
        if not content:
            raise EmptyMessageError("Your gratitude entry cannot be empty")
        category = category or DEFAULT_CATEGORY
        if category not in CATEGORIES:
            raise ValidationError(f"Category must be one of: {', '.join(CATEGORIES)}")
        emoji = emoji or ""
        if emoji and emoji not in EMOJIS:
            raise ValidationError("Please pick one of the offered emoji")

        record = await self.store.insert(COLLECTION, {
            "user_id": user_id,
            "content": content,
            "category": category,
            "emoji": emoji,
        })
        logger.info(f"Gratitude entry {record['id']} saved for {user_id}")
        return GratitudeEntry.from_record(record)

    async def list_entries(self, user_id: str, category: Optional[str] = None) -> List[GratitudeEntry]:
        """Own entries, newest first. ``category`` of None or "all" means no filter."""
        filters = {"user_id": user_id}
        if category and category.lower() != "all":
            if category not in CATEGORIES:
                raise ValidationError(f"Category must be one of: {', '.join(CATEGORIES)}")
            filters["category"] = category
        records = await self.store.list(COLLECTION, filters)
        return [
            GratitudeEntry.from_record(r, likes=await self.store.count_likes(COLLECTION, r["id"]))
            for r in records
        ]

    async def count_entries(self, user_id: str) -> int:
        return await self.store.count(COLLECTION, {"user_id": user_id})

    async def get_entry(self, entry_id: str) -> GratitudeEntry:
        record = await self.store.get(COLLECTION, entry_id)
        if not record:
            raise NotFoundError("Gratitude entry not found")
        return GratitudeEntry.from_record(record, likes=await self.store.count_likes(COLLECTION, entry_id))

    async def toggle_like(self, user_id: str, entry_id: str) -> GratitudeEntry:
        await self.get_entry(entry_id)
        if not await self.store.add_like(COLLECTION, user_id, entry_id):
            await self.store.remove_like(COLLECTION, user_id, entry_id)
        return await self.get_entry(entry_id)

    async def delete_entry(self, user_id: str, entry_id: str) -> None:
        entry = await self.get_entry(entry_id)
        if entry.user_id != user_id:
            raise PermissionDeniedError("You can only delete your own entries")
        await self.store.delete(COLLECTION, entry_id)
        await self.store.clear_likes(COLLECTION, entry_id)
        await self.store.delete_where(keys.COMMENTS, {keys.COMMENT_POST_FIELD[COLLECTION]: entry_id})
        logger.info(f"Gratitude entry {entry_id} deleted")
