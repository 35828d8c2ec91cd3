#!/usr/bin/env python3
"""
HeartSpace - Content Store

Row-oriented storage for user content (gratitude entries, moods,
affirmations, comments, accounts) plus a like junction keyed by
(collection, user_id, item_id).

Backends:
- InMemoryContentStore: process-local, used for development and tests
- RedisContentStore: JSON records in Redis with a sorted-set index per
  collection ordered by creation time

Records are plain dicts. Every stored record carries ``id`` and
``created_at`` (epoch seconds).
"""

import itertools
import json
import time
import uuid
from typing import Any, Callable, Dict, List, Optional

import redis.asyncio as redis

from heartspace.common.errors import StorageError
from heartspace.common.logging import setup_logging

logger = setup_logging("content")

Record = Dict[str, Any]


def _matches(record: Record, filters: Optional[Dict[str, Any]]) -> bool:
    if not filters:
        return True
    return all(record.get(k) == v for k, v in filters.items())


class ContentStore:
    """Interface for content backends."""

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def insert(self, collection: str, record: Record) -> Record:
        raise NotImplementedError

    async def get(self, collection: str, record_id: str) -> Optional[Record]:
        raise NotImplementedError

    async def list(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Record]:
        raise NotImplementedError

    async def count(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> int:
        raise NotImplementedError

    async def delete(self, collection: str, record_id: str) -> bool:
        raise NotImplementedError

    async def add_like(self, collection: str, user_id: str, item_id: str) -> bool:
        """Record a like. Returns False if it already existed."""
        raise NotImplementedError

    async def remove_like(self, collection: str, user_id: str, item_id: str) -> bool:
        """Remove a like. Returns False if there was none."""
        raise NotImplementedError

    async def has_like(self, collection: str, user_id: str, item_id: str) -> bool:
        raise NotImplementedError

    async def count_likes(self, collection: str, item_id: str) -> int:
        raise NotImplementedError

    async def count_liked(self, collection: str, user_id: str) -> int:
        """Number of items in ``collection`` the user has liked."""
        raise NotImplementedError

    async def clear_likes(self, collection: str, item_id: str) -> int:
        """Drop every like on an item. Returns how many were removed."""
        raise NotImplementedError

    async def delete_where(self, collection: str, filters: Dict[str, Any]) -> int:
        """Delete every record matching ``filters``. Returns how many went."""
        removed = 0
        for record in await self.list(collection, filters):
            if await self.delete(collection, record["id"]):
                removed += 1
        return removed

    def _new_record(self, record: Record, now: float) -> Record:
        stored = dict(record)
        stored.setdefault("id", uuid.uuid4().hex)
        stored.setdefault("created_at", now)
        return stored


class InMemoryContentStore(ContentStore):
    """Process-local store. Insertion order breaks created_at ties."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._collections: Dict[str, Dict[str, Record]] = {}
        self._order: Dict[str, int] = {}
        self._seq = itertools.count()
        self._likes: Dict[str, set] = {}
        logger.info("InMemoryContentStore initialized")

    async def insert(self, collection: str, record: Record) -> Record:
        stored = self._new_record(record, self._clock())
        rows = self._collections.setdefault(collection, {})
        rows[stored["id"]] = stored
        self._order[stored["id"]] = next(self._seq)
        return dict(stored)

    async def get(self, collection: str, record_id: str) -> Optional[Record]:
        record = self._collections.get(collection, {}).get(record_id)
        return dict(record) if record else None

    async def list(self, collection, filters=None, descending=True, limit=None):
        rows = [r for r in self._collections.get(collection, {}).values() if _matches(r, filters)]
        rows.sort(key=lambda r: (r["created_at"], self._order.get(r["id"], 0)), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return [dict(r) for r in rows]

    async def count(self, collection, filters=None):
        return sum(1 for r in self._collections.get(collection, {}).values() if _matches(r, filters))

    async def delete(self, collection, record_id):
        removed = self._collections.get(collection, {}).pop(record_id, None)
        self._order.pop(record_id, None)
        return removed is not None

    async def add_like(self, collection, user_id, item_id):
        likes = self._likes.setdefault(collection, set())
        key = (user_id, item_id)
        if key in likes:
            return False
        likes.add(key)
        return True

    async def remove_like(self, collection, user_id, item_id):
        likes = self._likes.get(collection, set())
        key = (user_id, item_id)
        if key not in likes:
            return False
        likes.discard(key)
        return True

    async def has_like(self, collection, user_id, item_id):
        return (user_id, item_id) in self._likes.get(collection, set())

    async def count_likes(self, collection, item_id):
        return sum(1 for _, item in self._likes.get(collection, set()) if item == item_id)

    async def count_liked(self, collection, user_id):
        return sum(1 for user, _ in self._likes.get(collection, set()) if user == user_id)

    async def clear_likes(self, collection, item_id):
        likes = self._likes.get(collection, set())
        stale = {key for key in likes if key[1] == item_id}
        likes -= stale
        return len(stale)


class RedisContentStore(ContentStore):
    """
    Redis backend.

    Keys (under ``prefix``):
    - {collection}:{id}            JSON record
    - {collection}:index           ZSET of ids scored by created_at
    - likes:{collection}:{item}    SET of user ids
    - liked:{collection}:{user}    SET of item ids
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: str = "",
        prefix: str = "heartspace:",
        clock: Callable[[], float] = time.time,
    ):
        self.redis_host = host
        self.redis_port = port
        self.redis_db = db
        self.redis_password = password
        self.prefix = prefix
        self._clock = clock
        self.redis_client: Optional[redis.Redis] = None

    async def connect(self):
        """Connect to Redis."""
        try:
            self.redis_client = redis.Redis(
                host=self.redis_host,
                port=self.redis_port,
                db=self.redis_db,
                password=self.redis_password or None,
                decode_responses=True,
            )
            await self.redis_client.ping()
            logger.info(f"Connected to Redis at {self.redis_host}:{self.redis_port}")
        except redis.RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise StorageError(f"Could not connect to Redis: {e}") from e

    async def disconnect(self):
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None

    def _record_key(self, collection: str, record_id: str) -> str:
        return f"{self.prefix}{collection}:{record_id}"

    def _index_key(self, collection: str) -> str:
        return f"{self.prefix}{collection}:index"

    def _likes_key(self, collection: str, item_id: str) -> str:
        return f"{self.prefix}likes:{collection}:{item_id}"

    def _liked_key(self, collection: str, user_id: str) -> str:
        return f"{self.prefix}liked:{collection}:{user_id}"

    def _client(self) -> redis.Redis:
        if self.redis_client is None:
            raise StorageError("Content store is not connected")
        return self.redis_client

    async def insert(self, collection, record):
        stored = self._new_record(record, self._clock())
        client = self._client()
        try:
            pipe = client.pipeline(transaction=True)
            pipe.set(self._record_key(collection, stored["id"]), json.dumps(stored))
            pipe.zadd(self._index_key(collection), {stored["id"]: stored["created_at"]})
            await pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Failed to insert into {collection}: {e}")
            raise StorageError(f"Could not save to {collection}") from e
        return stored

    async def get(self, collection, record_id):
        try:
            raw = await self._client().get(self._record_key(collection, record_id))
        except redis.RedisError as e:
            raise StorageError(f"Could not read from {collection}") from e
        return json.loads(raw) if raw else None

    async def _load_all(self, collection: str, descending: bool) -> List[Record]:
        client = self._client()
        try:
            if descending:
                ids = await client.zrevrange(self._index_key(collection), 0, -1)
            else:
                ids = await client.zrange(self._index_key(collection), 0, -1)
            if not ids:
                return []
            raws = await client.mget([self._record_key(collection, i) for i in ids])
        except redis.RedisError as e:
            logger.error(f"Failed to list {collection}: {e}")
            raise StorageError(f"Could not read from {collection}") from e
        return [json.loads(raw) for raw in raws if raw]

    async def list(self, collection, filters=None, descending=True, limit=None):
        rows = [r for r in await self._load_all(collection, descending) if _matches(r, filters)]
        if limit is not None:
            rows = rows[:limit]
        return rows

    async def count(self, collection, filters=None):
        if not filters:
            try:
                return await self._client().zcard(self._index_key(collection))
            except redis.RedisError as e:
                raise StorageError(f"Could not count {collection}") from e
        return len(await self.list(collection, filters))

    async def delete(self, collection, record_id):
        client = self._client()
        try:
            pipe = client.pipeline(transaction=True)
            pipe.delete(self._record_key(collection, record_id))
            pipe.zrem(self._index_key(collection), record_id)
            deleted, _ = await pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Failed to delete {collection}/{record_id}: {e}")
            raise StorageError(f"Could not delete from {collection}") from e
        return bool(deleted)

    async def add_like(self, collection, user_id, item_id):
        client = self._client()
        try:
            pipe = client.pipeline(transaction=True)
            pipe.sadd(self._likes_key(collection, item_id), user_id)
            pipe.sadd(self._liked_key(collection, user_id), item_id)
            added, _ = await pipe.execute()
        except redis.RedisError as e:
            raise StorageError("Could not save your like") from e
        return bool(added)

    async def remove_like(self, collection, user_id, item_id):
        client = self._client()
        try:
            pipe = client.pipeline(transaction=True)
            pipe.srem(self._likes_key(collection, item_id), user_id)
            pipe.srem(self._liked_key(collection, user_id), item_id)
            removed, _ = await pipe.execute()
        except redis.RedisError as e:
            raise StorageError("Could not remove your like") from e
        return bool(removed)

    async def has_like(self, collection, user_id, item_id):
        try:
            return bool(await self._client().sismember(self._likes_key(collection, item_id), user_id))
        except redis.RedisError as e:
            raise StorageError("Could not read likes") from e

    async def count_likes(self, collection, item_id):
        try:
            return await self._client().scard(self._likes_key(collection, item_id))
        except redis.RedisError as e:
            raise StorageError("Could not read likes") from e

    async def count_liked(self, collection, user_id):
        try:
            return await self._client().scard(self._liked_key(collection, user_id))
        except redis.RedisError as e:
            raise StorageError("Could not read likes") from e

    async def clear_likes(self, collection, item_id):
        client = self._client()
        likes_key = self._likes_key(collection, item_id)
        try:
            user_ids = await client.smembers(likes_key)
            pipe = client.pipeline(transaction=True)
            for user_id in user_ids:
                pipe.srem(self._liked_key(collection, user_id), item_id)
            pipe.delete(likes_key)
            await pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Failed to clear likes on {collection}/{item_id}: {e}")
            raise StorageError("Could not remove likes") from e
        return len(user_ids)


def create_store(config) -> ContentStore:
    """Build the content store selected by ``config.storage.backend``."""
    backend = config.storage.backend.lower()
    if backend == "memory":
        return InMemoryContentStore()
    if backend == "redis":
        cfg = config.redis
        return RedisContentStore(
            host=cfg.host,
            port=cfg.port,
            db=cfg.db,
            password=cfg.password,
            prefix=cfg.prefix,
        )
    raise ValueError(f"Unknown storage backend: {config.storage.backend}")
