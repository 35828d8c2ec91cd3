"""HeartSpace services."""
