"""
Media Store - image upload with a size ceiling.

upload(blob, path) -> url. Oversized blobs are refused before anything is
written. LocalMediaStore keeps files under a root directory that the web
service also serves statically.
"""
import asyncio
from pathlib import Path, PurePosixPath
from typing import AsyncIterable, Optional

from heartspace.common.errors import MediaError, MediaTooLargeError, ValidationError
from heartspace.common.logging import setup_logging

logger = setup_logging("media")

DEFAULT_MAX_BYTES = 5 * 1024 * 1024


class MediaStore:
    """Interface for media backends."""

    max_bytes: int = DEFAULT_MAX_BYTES

    def check_size(self, size: int) -> None:
        if size > self.max_bytes:
            limit_mb = self.max_bytes / (1024 * 1024)
            raise MediaTooLargeError(f"Files must be {limit_mb:g} MB or smaller")

    async def read_limited(self, chunks: AsyncIterable[bytes], declared_size: Optional[int] = None) -> bytes:
        """
        Collect an upload body, refusing it as soon as it passes ``max_bytes``.

        ``declared_size`` (the Content-Length, when the client sent one) is
        checked before the first chunk is read.
        """
        if declared_size is not None:
            self.check_size(declared_size)
        parts = []
        received = 0
        async for chunk in chunks:
            received += len(chunk)
            self.check_size(received)
            parts.append(chunk)
        return b"".join(parts)

    async def upload(self, blob: bytes, path: str) -> str:
        raise NotImplementedError


class LocalMediaStore(MediaStore):
    """Stores uploads on the local filesystem."""

    def __init__(self, root: str, base_url: str = "/media", max_bytes: int = DEFAULT_MAX_BYTES):
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"LocalMediaStore at {self.root} (max {max_bytes} bytes)")

    def _target(self, path: str) -> Path:
        relative = PurePosixPath((path or "").strip().lstrip("/"))
        if not relative.parts or any(part in ("..", ".") for part in relative.parts):
            raise ValidationError(f"Invalid upload path: {path!r}")
        target = (self.root / Path(*relative.parts)).resolve()
        if self.root not in target.parents:
            raise ValidationError(f"Invalid upload path: {path!r}")
        return target

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{PurePosixPath(path.strip().lstrip('/'))}"

    async def upload(self, blob: bytes, path: str) -> str:
        self.check_size(len(blob))
        target = self._target(path)
        try:
            await asyncio.to_thread(self._write, target, blob)
        except OSError as e:
            logger.error(f"Failed to store upload {path}: {e}")
            raise MediaError("Could not store the uploaded file") from e
        logger.info(f"Stored upload {path} ({len(blob)} bytes)")
        return self.url_for(path)

    @staticmethod
    def _write(target: Path, blob: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(blob)


def create_media_store(config) -> MediaStore:
    cfg = config.media
    return LocalMediaStore(root=cfg.root, base_url=cfg.base_url, max_bytes=cfg.max_bytes)
