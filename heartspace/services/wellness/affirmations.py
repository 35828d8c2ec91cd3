"""Community affirmations: shared posts with likes and a shuffled feed."""
import random
import time
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from heartspace.common.errors import EmptyMessageError, NotFoundError, PermissionDeniedError
from heartspace.common.logging import setup_logging
from heartspace.services.accounts import User
from heartspace.services.content import ContentStore
from . import keys

logger = setup_logging("affirmations")

COLLECTION = keys.AFFIRMATIONS
DAY = 86400

# (content, author, base likes, age in days)
STARTER_AFFIRMATIONS = (
    ("You are capable of amazing things. Trust in your journey and believe in your strength. 💪✨", "Sarah M.", 12, 1),
    ("Every sunset brings the promise of a new dawn. Your story isn't over yet. 🌅", None, 8, 2),
    ("You don't have to be perfect to be worthy of love and respect. You are enough, exactly as you are. 💖", "Alex K.", 15, 3),
    ("Your feelings are valid. Your struggles are real. Your healing matters. Take it one day at a time. 🌱", None, 20, 4),
    ("Progress isn't always linear. Sometimes the bravest thing you can do is rest and recharge. 🌙", "Jordan L.", 9, 5),
)


@dataclass
class Affirmation:
    id: str
    content: str
    author: Optional[str]
    is_anonymous: bool
    likes: int
    created_at: float
    user_id: Optional[str] = None
    liked: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class AffirmationBoard:
    def __init__(self, store: ContentStore, rng: Optional[random.Random] = None):
        self.store = store
        self.rng = rng or random.Random()

    async def _view(self, record: Dict[str, Any], viewer_id: Optional[str]) -> Affirmation:
        likes = record.get("base_likes", 0) + await self.store.count_likes(COLLECTION, record["id"])
        liked = bool(viewer_id) and await self.store.has_like(COLLECTION, viewer_id, record["id"])
        return Affirmation(
            id=record["id"],
            content=record["content"],
            author=None if record["is_anonymous"] else record.get("author"),
            is_anonymous=record["is_anonymous"],
            likes=likes,
            created_at=record["created_at"],
            user_id=record.get("user_id"),
            liked=liked,
        )

    async def seed(self, now: Optional[float] = None) -> int:
        """Add the starter affirmations to an empty board."""
        if await self.store.count(COLLECTION):
            return 0
        now = now if now is not None else time.time()
        for content, author, likes, age_days in STARTER_AFFIRMATIONS:
            await self.store.insert(COLLECTION, {
                "content": content,
                "author": author,
                "is_anonymous": author is None,
                "base_likes": likes,
                "user_id": None,
                "created_at": now - age_days * DAY,
            })
        logger.info(f"Seeded {len(STARTER_AFFIRMATIONS)} starter affirmations")
        return len(STARTER_AFFIRMATIONS)

    async def post(self, user: User, content: str, is_anonymous: bool = False) -> Affirmation:
        content = (content or "").strip()
        if not content:
            raise EmptyMessageError("Share something positive with the community")
        record = await self.store.insert(COLLECTION, {
            "content": content,
            "author": None if is_anonymous else (user.name or "Anonymous"),
            "is_anonymous": is_anonymous,
            "base_likes": 0,
            "user_id": user.id,
        })
        logger.info(f"Affirmation {record['id']} shared")
        return await self._view(record, user.id)

    async def feed(self, viewer_id: Optional[str] = None, limit: Optional[int] = None) -> List[Affirmation]:
        records = await self.store.list(COLLECTION, limit=limit)
        return [await self._view(r, viewer_id) for r in records]

    async def shuffled(self, viewer_id: Optional[str] = None) -> List[Affirmation]:
        items = await self.feed(viewer_id)
        self.rng.shuffle(items)
        return items

    async def get(self, affirmation_id: str, viewer_id: Optional[str] = None) -> Affirmation:
        record = await self.store.get(COLLECTION, affirmation_id)
        if not record:
            raise NotFoundError("Affirmation not found")
        return await self._view(record, viewer_id)

    async def toggle_like(self, user_id: str, affirmation_id: str) -> Affirmation:
        """Like if not yet liked, otherwise unlike. Returns the refreshed view."""
        await self.get(affirmation_id)
        if await self.store.has_like(COLLECTION, user_id, affirmation_id):
            await self.store.remove_like(COLLECTION, user_id, affirmation_id)
        else:
            await self.store.add_like(COLLECTION, user_id, affirmation_id)
        return await self.get(affirmation_id, user_id)

    async def liked_count(self, user_id: str) -> int:
        return await self.store.count_liked(COLLECTION, user_id)

    async def delete(self, user_id: str, affirmation_id: str) -> None:
        affirmation = await self.get(affirmation_id)
        if affirmation.user_id != user_id:
            raise PermissionDeniedError("You can only delete your own affirmations")
        await self.store.delete(COLLECTION, affirmation_id)
        await self.store.clear_likes(COLLECTION, affirmation_id)
        await self.store.delete_where(keys.COMMENTS, {keys.COMMENT_POST_FIELD[COLLECTION]: affirmation_id})
        logger.info(f"Affirmation {affirmation_id} deleted")
