"""Wellness features: gratitude journal, mood tracker, affirmations, comments."""
from .affirmations import AffirmationBoard
from .comments import CommentThread, PostType
from .gratitude import GratitudeJournal
from .mood import Mood, MoodAlreadyTrackedError, MoodTracker

__all__ = [
    "AffirmationBoard",
    "CommentThread",
    "PostType",
    "GratitudeJournal",
    "Mood",
    "MoodAlreadyTrackedError",
    "MoodTracker",
]
