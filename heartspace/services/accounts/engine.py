"""
Account Service - sign up, sign in, sign out and current-user lookup.

Users and bearer tokens are rows in the content store ("users" and
"auth_tokens" collections). Passwords are salted PBKDF2-SHA256 hashes.
"""
import hashlib
import hmac
import secrets
import time
from dataclasses import dataclass
from typing import Optional, Dict, Any, Tuple

from heartspace.common.errors import AuthenticationError, ConflictError, ValidationError
from heartspace.common.logging import setup_logging
from heartspace.services.content import ContentStore

logger = setup_logging("accounts")

USERS = "users"
TOKENS = "auth_tokens"


@dataclass
class User:
    """Public view of an account."""
    id: str
    email: str
    name: str

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "User":
        return cls(id=record["id"], email=record["email"], name=record["name"])

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "name": self.name}


def _hash_password(password: str, salt: Optional[str] = None, iterations: int = 100000) -> Tuple[str, str]:
    """Hash password with salt"""
    if salt is None:
        salt = secrets.token_hex(16)
    hashed = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
    ).hex()
    return hashed, salt


def _verify_password(password: str, hashed: str, salt: str, iterations: int = 100000) -> bool:
    """Verify password against hash"""
    check_hash, _ = _hash_password(password, salt, iterations)
    return hmac.compare_digest(check_hash, hashed)


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class AccountService:
    """Content-store backed authentication service"""

    def __init__(
        self,
        store: ContentStore,
        min_password_length: int = 6,
        token_ttl: int = 604800,
        hash_iterations: int = 100000,
        clock=time.time,
    ):
        self.store = store
        self.min_password_length = min_password_length
        self.token_ttl = token_ttl
        self.hash_iterations = hash_iterations
        self._clock = clock

    async def _find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        rows = await self.store.list(USERS, {"email": email}, limit=1)
        return rows[0] if rows else None

    async def sign_up(self, name: str, email: str, password: str) -> User:
        """Create an account. Raises ValidationError or ConflictError."""
        name = (name or "").strip()
        email = _normalize_email(email)
        if not name or not email or not password:
            raise ValidationError("All fields are required to create your account")
        if "@" not in email:
            raise ValidationError("Please enter a valid email address")
        if len(password) < self.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.min_password_length} characters long"
            )
        if await self._find_by_email(email):
            raise ConflictError("An account with this email already exists")

        password_hash, salt = _hash_password(password, iterations=self.hash_iterations)
        record = await self.store.insert(USERS, {
            "name": name,
            "email": email,
            "password_hash": password_hash,
            "salt": salt,
        })
        logger.info(f"New account created: {record['id']}")
        return User.from_record(record)

    async def sign_in(self, email: str, password: str) -> Tuple[User, str]:
        """Check credentials and issue a bearer token."""
        email = _normalize_email(email)
        if not email or not password:
            raise ValidationError("Please enter your email and password")

        record = await self._find_by_email(email)
        if not record or not _verify_password(
            password, record["password_hash"], record["salt"], self.hash_iterations
        ):
            logger.info("Failed sign-in attempt")
            raise AuthenticationError("Invalid email or password")

        token = secrets.token_urlsafe(32)
        await self.store.insert(TOKENS, {
            "id": token,
            "user_id": record["id"],
            "expires_at": self._clock() + self.token_ttl,
        })
        logger.info(f"User {record['id']} signed in")
        return User.from_record(record), token

    async def sign_out(self, token: str) -> None:
        if token and await self.store.delete(TOKENS, token):
            logger.info("Token revoked")

    async def get_current_user(self, token: Optional[str]) -> Optional[User]:
        """Resolve a bearer token to its user, or None."""
        if not token:
            return None
        token_row = await self.store.get(TOKENS, token)
        if not token_row:
            return None
        if token_row["expires_at"] < self._clock():
            await self.store.delete(TOKENS, token)
            return None
        record = await self.store.get(USERS, token_row["user_id"])
        return User.from_record(record) if record else None
