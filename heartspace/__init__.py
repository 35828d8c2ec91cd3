"""HeartSpace - gratitude journal, mood tracker, community affirmations and HeartBot."""

__version__ = "0.1.0"
