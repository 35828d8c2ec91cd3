"""HeartBot - scripted emotional support chat."""
from .engine import (
    ChatSession,
    HeartBotError,
    IntentClassifier,
    Message,
    ResponseSelector,
    SessionClosedError,
    SessionRegistry,
    Transcript,
    TurnInProgressError,
    TurnOrchestrator,
)
from .topics import KEYWORD_RULES, RESPONSE_POOLS, SUGGESTED_PROMPTS, WELCOME_MESSAGE, Topic

__all__ = [
    "ChatSession",
    "HeartBotError",
    "IntentClassifier",
    "Message",
    "ResponseSelector",
    "SessionClosedError",
    "SessionRegistry",
    "Transcript",
    "TurnInProgressError",
    "TurnOrchestrator",
    "KEYWORD_RULES",
    "RESPONSE_POOLS",
    "SUGGESTED_PROMPTS",
    "WELCOME_MESSAGE",
    "Topic",
]
