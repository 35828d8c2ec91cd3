"""Media store for user uploads."""
from .engine import LocalMediaStore, MediaStore, create_media_store

__all__ = ["LocalMediaStore", "MediaStore", "create_media_store"]
