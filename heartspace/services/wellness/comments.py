"""Comments on affirmations and gratitude entries."""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

from heartspace.common.errors import EmptyMessageError, NotFoundError, PermissionDeniedError, ValidationError
from heartspace.common.logging import setup_logging
from heartspace.services.accounts import User
from heartspace.services.content import ContentStore
from . import keys

logger = setup_logging("comments")

COLLECTION = keys.COMMENTS


class PostType(str, Enum):
    AFFIRMATION = "affirmation"
    GRATITUDE = "gratitude"

    @property
    def collection(self) -> str:
        return keys.AFFIRMATIONS if self is PostType.AFFIRMATION else keys.GRATITUDE

    @property
    def foreign_key(self) -> str:
        return keys.COMMENT_POST_FIELD[self.collection]


def parse_post_type(value: str) -> PostType:
    try:
        return PostType(value)
    except ValueError:
        raise ValidationError(f"Comments can be added to: {', '.join(p.value for p in PostType)}") from None


@dataclass
class Comment:
    id: str
    user_id: str
    content: str
    author_name: Optional[str]
    is_anonymous: bool
    created_at: float

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Comment":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            content=record["content"],
            author_name=record.get("author_name"),
            is_anonymous=record.get("is_anonymous", False),
            created_at=record["created_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class CommentThread:
    def __init__(self, store: ContentStore):
        self.store = store

    async def _require_post(self, post_type: PostType, post_id: str) -> None:
        if not await self.store.get(post_type.collection, post_id):
            raise NotFoundError(f"That {post_type.value} no longer exists")

    async def add(self, user: User, post_type: PostType, post_id: str, content: str, is_anonymous: bool = False) -> Comment:
        content = (content or "").strip()
        if not content:
            raise EmptyMessageError("Your comment cannot be empty")
        await self._require_post(post_type, post_id)
        record = await self.store.insert(COLLECTION, {
            "user_id": user.id,
            "content": content,
            "is_anonymous": is_anonymous,
            "author_name": None if is_anonymous else user.name,
            post_type.foreign_key: post_id,
        })
        logger.info(f"Comment {record['id']} added to {post_type.value} {post_id}")
        return Comment.from_record(record)

    async def list(self, post_type: PostType, post_id: str) -> List[Comment]:
        """Comments on a post, oldest first."""
        records = await self.store.list(COLLECTION, {post_type.foreign_key: post_id}, descending=False)
        return [Comment.from_record(r) for r in records]

    async def count(self, post_type: PostType, post_id: str) -> int:
        return await self.store.count(COLLECTION, {post_type.foreign_key: post_id})

    async def delete(self, user_id: str, comment_id: str) -> None:
        record = await self.store.get(COLLECTION, comment_id)
        if not record:
            raise NotFoundError("Comment not found")
        if record["user_id"] != user_id:
            raise PermissionDeniedError("You can only delete your own comments")
        await self.store.delete(COLLECTION, comment_id)
