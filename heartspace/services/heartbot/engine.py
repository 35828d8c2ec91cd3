#!/usr/bin/env python3
"""
HeartBot - Scripted Emotional Support Chat Engine

Pieces:
- IntentClassifier: lower-cased substring matching over ordered keyword rules
- ResponseSelector: uniform random pick from a topic's reply pool
- ChatSession / Transcript: per-visit, append-only message history
- TurnOrchestrator: user message -> "thinking" delay -> classify -> select -> bot message
- SessionRegistry: in-process sessions with idle expiry

Nothing here touches durable storage. A session lives as long as the
process (or until it idles out) and is never shared between users.
"""

import asyncio
import random
import time
import uuid
from dataclasses import dataclass, asdict, field
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from heartspace.common.errors import EmptyMessageError, HeartSpaceError, NotFoundError
from heartspace.common.logging import setup_logging
from .topics import KEYWORD_RULES, RESPONSE_POOLS, WELCOME_MESSAGE, Topic

logger = setup_logging("heartbot")


class HeartBotError(HeartSpaceError):
    """Base exception for HeartBot"""
    pass


class TurnInProgressError(HeartBotError):
    """Raised when a message arrives before the previous reply was appended"""
    title = "HeartBot is still typing"
    status = 409


class SessionClosedError(HeartBotError):
    """Raised when the session ends while a reply is pending"""
    title = "Chat ended"
    status = 410


@dataclass(frozen=True)
class Message:
    """Single chat message. Immutable once created."""
    content: str
    is_from_bot: bool
    timestamp: float = field(default_factory=time.time)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def to_dict(self) -> Dict:
        return asdict(self)


class Transcript:
    """Ordered, append-only message history for one session."""

    def __init__(self, welcome: Optional[str] = WELCOME_MESSAGE):
        self._messages: List[Message] = []
        if welcome:
            self._messages.append(Message(content=welcome, is_from_bot=True))

    def append(self, message: Message) -> None:
        self._messages.append(message)

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(tuple(self._messages))

    def to_list(self) -> List[Dict]:
        return [m.to_dict() for m in self._messages]


class IntentClassifier:
    """Maps free text to a Topic with first-match-wins keyword rules."""

    def __init__(self, rules: Sequence[Tuple[Topic, Sequence[str]]] = KEYWORD_RULES):
        self.rules = tuple((topic, tuple(k.lower() for k in keywords)) for topic, keywords in rules)

    def matched_keyword(self, text: str) -> Tuple[Topic, Optional[str]]:
        """Return the winning topic and the keyword that triggered it."""
        lowered = (text or "").lower()
        for topic, keywords in self.rules:
            for keyword in keywords:
                if keyword in lowered:
                    return topic, keyword
        return Topic.DEFAULT, None

    def classify(self, text: str) -> Topic:
        topic, _ = self.matched_keyword(text)
        return topic


class ResponseSelector:
    """Picks a reply uniformly at random from a topic's pool."""

    def __init__(self, pools=RESPONSE_POOLS, rng: Optional[random.Random] = None):
        self.pools = pools
        self.rng = rng or random.Random()

    def pool(self, topic: Topic) -> Tuple[str, ...]:
        return tuple(self.pools.get(topic) or self.pools[Topic.DEFAULT])

    def select_reply(self, topic: Topic) -> str:
        candidates = self.pool(topic)
        return candidates[self.rng.randrange(len(candidates))]


@dataclass
class ChatSession:
    """One visit's conversation with HeartBot."""
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    user_id: Optional[str] = None
    transcript: Transcript = field(default_factory=Transcript)
    created_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)
    pending: bool = False
    closed: bool = False
    clock: Callable[[], float] = field(default=time.time, repr=False, compare=False)

    def touch(self) -> None:
        self.last_activity = self.clock()

    def to_dict(self) -> Dict:
        return {
            "session_id": self.session_id,
            "user_id": self.user_id,
            "created_at": self.created_at,
            "pending": self.pending,
            "messages": self.transcript.to_list(),
        }


class TurnOrchestrator:
    """Runs a single chat turn against a session."""

    def __init__(
        self,
        classifier: Optional[IntentClassifier] = None,
        selector: Optional[ResponseSelector] = None,
        min_delay: float = 1.0,
        max_delay: float = 3.0,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError(f"Invalid typing delay range: {min_delay}..{max_delay}")
        self.classifier = classifier or IntentClassifier()
        self.selector = selector or ResponseSelector()
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.rng = rng or random.Random()
        self._sleep = sleep

    def typing_delay(self) -> float:
        if self.max_delay <= 0:
            return 0.0
        return self.rng.uniform(self.min_delay, self.max_delay)

    def reply_for(self, text: str) -> Tuple[Topic, str]:
        topic, keyword = self.classifier.matched_keyword(text)
        logger.debug(f"Classified message as {topic.value} (keyword={keyword!r})")
        return topic, self.selector.select_reply(topic)

    async def submit_user_message(self, session: ChatSession, text: str) -> Tuple[Tuple[Message, ...], Message]:
        """
        Append the user's message, wait a moment, then append HeartBot's reply.

        Returns:
            (transcript snapshot, bot message)

        Raises:
            EmptyMessageError: text is empty or whitespace only
            TurnInProgressError: the previous reply has not been appended yet
            SessionClosedError: the session ended during the typing delay
        """
        if session.closed:
            raise SessionClosedError("This chat has ended. Start a new one to keep talking.")
        if text is None or not text.strip():
            raise EmptyMessageError("Your message cannot be empty")
        if session.pending:
            raise TurnInProgressError("Please wait for HeartBot to reply before sending another message")

        session.pending = True
        try:
            session.transcript.append(Message(content=text, is_from_bot=False))
            session.touch()
            topic, reply = self.reply_for(text)

            delay = self.typing_delay()
            if delay > 0:
                await self._sleep(delay)

            if session.closed:
                logger.info(f"Session {session.session_id} closed while replying, discarding reply")
                raise SessionClosedError("This chat ended before HeartBot could reply")

            bot_message = Message(content=reply, is_from_bot=True)
            session.transcript.append(bot_message)
            session.touch()
            logger.info(f"Session {session.session_id}: replied on topic '{topic.value}'")
            return session.transcript.messages, bot_message
        finally:
            session.pending = False


class SessionRegistry:
    """In-process HeartBot sessions with idle expiry."""

    def __init__(self, ttl_seconds: int = 1800, max_sessions: int = 1000, clock: Callable[[], float] = time.time):
        self._sessions: Dict[str, ChatSession] = {}
        self._chats_per_user: Dict[str, int] = {}
        self._ttl = ttl_seconds
        self._max_sessions = max_sessions
        self._clock = clock
        logger.info(f"SessionRegistry initialized (TTL={ttl_seconds}s)")

    def _expired(self, session: ChatSession) -> bool:
        return self._clock() - session.last_activity > self._ttl

    def _evict_expired(self) -> None:
        for session_id in [s.session_id for s in self._sessions.values() if self._expired(s)]:
            self.close(session_id)

    def create(self, user_id: Optional[str] = None) -> ChatSession:
        self._evict_expired()
        if len(self._sessions) >= self._max_sessions:
            oldest = min(self._sessions.values(), key=lambda s: s.last_activity)
            self.close(oldest.session_id)

        now = self._clock()
        session = ChatSession(user_id=user_id, created_at=now, last_activity=now, clock=self._clock)
        self._sessions[session.session_id] = session
        if user_id:
            self._chats_per_user[user_id] = self._chats_per_user.get(user_id, 0) + 1
        logger.info(f"Created HeartBot session {session.session_id}")
        return session

    def get(self, session_id: str) -> ChatSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"Chat session {session_id} not found")
        if self._expired(session) and not session.pending:
            self.close(session_id)
            raise NotFoundError(f"Chat session {session_id} has expired")
        session.last_activity = self._clock()
        return session

    def close(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.closed = True
        logger.info(f"Closed HeartBot session {session_id}")
        return True

    def chats_started(self, user_id: str) -> int:
        return self._chats_per_user.get(user_id, 0)

    def __len__(self) -> int:
        return len(self._sessions)
