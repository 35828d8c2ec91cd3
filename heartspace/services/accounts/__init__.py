"""Account service: sign up, sign in, sign out, current user."""
from .engine import AccountService, User

__all__ = ["AccountService", "User"]
