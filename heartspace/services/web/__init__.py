"""HeartSpace web service - the HTTP surface for every feature."""
from .api import HeartSpaceService

__all__ = ["HeartSpaceService"]
