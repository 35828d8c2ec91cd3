#!/usr/bin/env python3
"""
HeartBot Tests

Tests cover:
- Keyword classification and rule priority
- Reply selection from topic pools
- Turn orchestration (validation, typing delay, one pending turn, teardown)
- Session registry expiry and isolation
- Terminal chat front end
"""

import asyncio
import dataclasses
import random
from unittest.mock import patch

import pytest

from heartspace.common.errors import EmptyMessageError, NotFoundError, ValidationError
from heartspace.services.heartbot import (
    KEYWORD_RULES,
    RESPONSE_POOLS,
    WELCOME_MESSAGE,
    ChatSession,
    IntentClassifier,
    Message,
    ResponseSelector,
    SessionClosedError,
    SessionRegistry,
    Topic,
    TurnInProgressError,
    TurnOrchestrator,
)
from heartspace.services.heartbot.__main__ import TerminalChat


def instant_orchestrator(seed=1):
    rng = random.Random(seed)
    return TurnOrchestrator(selector=ResponseSelector(rng=rng), min_delay=0.0, max_delay=0.0, rng=rng)


class TestIntentClassifier:
    """Test keyword classification"""

    @pytest.fixture
    def classifier(self):
        return IntentClassifier()

    @pytest.mark.parametrize("text, expected", [
        ("I'm feeling overwhelmed", Topic.OVERWHELMED),
        ("I need something positive to read", Topic.POSITIVE),
        ("Help me relax", Topic.RELAX),
        ("I'm having a difficult day", Topic.DIFFICULT),
        ("Can you guide me through breathing?", Topic.BREATHING),
        ("I need motivation", Topic.MOTIVATION),
        ("I feel so anxious tonight", Topic.ANXIETY),
        ("I've been so lonely lately", Topic.LONELINESS),
        ("I can't sleep at all", Topic.SLEEP),
        ("My boss keeps piling things on", Topic.WORK),
        ("My partner and I had a fight", Topic.RELATIONSHIPS),
        ("I want to practice more self-care", Topic.SELFCARE),
        ("I'm so thankful for my dog", Topic.GRATITUDE),
    ])
    def test_topics(self, classifier, text, expected):
        """Test each topic is reachable"""
        assert classifier.classify(text) == expected

    def test_no_match_is_default(self, classifier):
        """Test unmatched text falls back to default"""
        assert classifier.classify("asdkfj random text") == Topic.DEFAULT

    def test_empty_text_is_default(self, classifier):
        """Test classification never fails"""
        assert classifier.classify("") == Topic.DEFAULT
        assert classifier.classify(None) == Topic.DEFAULT

    def test_case_insensitive(self, classifier):
        """Test matching ignores case"""
        assert classifier.classify("HELP ME RELAX") == Topic.RELAX
        assert classifier.classify("Breathing Exercise") == Topic.BREATHING

    def test_overlapping_keyword_uses_first_rule(self, classifier):
        """Test 'burnout' belongs to both work and self-care; work is declared first"""
        work_keywords = dict(KEYWORD_RULES)[Topic.WORK]
        selfcare_keywords = dict(KEYWORD_RULES)[Topic.SELFCARE]
        assert "burnout" in work_keywords
        assert "burnout" in selfcare_keywords

        assert classifier.classify("I think I'm heading for burnout") == Topic.WORK

    def test_earlier_rule_wins_over_later_rule(self, classifier):
        """Test anxiety framing wins over work when both appear"""
        assert classifier.classify("work is making me so anxious") == Topic.ANXIETY
        assert classifier.classify("I feel stressed about my job") == Topic.WORK

    def test_matched_keyword(self, classifier):
        """Test the triggering keyword is reported"""
        assert classifier.matched_keyword("a tough week") == (Topic.DIFFICULT, "tough")
        assert classifier.matched_keyword("zzz") == (Topic.DEFAULT, None)

    @pytest.mark.parametrize("text", [
        "I'm feeling overwhelmed",
        "work is making me so anxious",
        "Nothing much, just saying hi",
        "It was a really good walk by the sea",
        "My family visited and I felt calm",
        "qwerty",
    ])
    def test_result_keyword_is_in_text(self, classifier, text):
        """Test the chosen topic has a keyword in the text and no earlier rule matched"""
        lowered = text.lower()
        topic = classifier.classify(text)
        for rule_topic, keywords in KEYWORD_RULES:
            hit = any(k in lowered for k in keywords)
            if rule_topic == topic:
                assert hit
                break
            assert not hit
        else:
            assert topic == Topic.DEFAULT

    def test_every_rule_topic_has_keywords(self):
        """Test rule table is well formed"""
        seen = [topic for topic, _ in KEYWORD_RULES]
        assert len(seen) == len(set(seen))
        assert Topic.DEFAULT not in seen
        for _, keywords in KEYWORD_RULES:
            assert keywords


class TestResponseSelector:
    """Test reply selection"""

    def test_all_pools_non_empty(self):
        """Test every topic, including default, has replies"""
        for topic in Topic:
            assert len(RESPONSE_POOLS[topic]) > 0

    def test_reply_is_from_pool(self):
        """Test replies always come from the topic's pool"""
        selector = ResponseSelector(rng=random.Random(3))
        for topic in Topic:
            for _ in range(20):
                assert selector.select_reply(topic) in RESPONSE_POOLS[topic]

    def test_every_reply_is_reachable(self):
        """Test uniform picks cover the pool over many calls"""
        selector = ResponseSelector(rng=random.Random(11))
        seen = {selector.select_reply(Topic.BREATHING) for _ in range(1000)}
        assert seen == set(RESPONSE_POOLS[Topic.BREATHING])

    def test_seeded_rng_is_repeatable(self):
        """Test an injected seeded generator makes picks deterministic"""
        first = ResponseSelector(rng=random.Random(42))
        second = ResponseSelector(rng=random.Random(42))
        picks_a = [first.select_reply(Topic.DEFAULT) for _ in range(10)]
        picks_b = [second.select_reply(Topic.DEFAULT) for _ in range(10)]
        assert picks_a == picks_b

    def test_pools_are_read_only(self):
        """Test pools cannot be mutated at runtime"""
        with pytest.raises(TypeError):
            RESPONSE_POOLS[Topic.DEFAULT] = ("changed",)


class TestMessageAndTranscript:
    """Test message model"""

    def test_message_is_immutable(self):
        message = Message(content="hi", is_from_bot=False)
        with pytest.raises(dataclasses.FrozenInstanceError):
            message.content = "changed"

    def test_session_starts_with_welcome(self):
        session = ChatSession()
        messages = session.transcript.messages
        assert len(messages) == 1
        assert messages[0].is_from_bot
        assert messages[0].content == WELCOME_MESSAGE

    def test_snapshot_is_not_live(self):
        session = ChatSession()
        snapshot = session.transcript.messages
        session.transcript.append(Message(content="later", is_from_bot=False))
        assert len(snapshot) == 1
        assert len(session.transcript) == 2


class TestTurnOrchestrator:
    """Test chat turns"""

    @pytest.mark.asyncio
    async def test_difficult_day_scenario(self):
        """Test a full turn appends user then bot message"""
        orchestrator = instant_orchestrator()
        session = ChatSession()

        messages, reply = await orchestrator.submit_user_message(session, "I'm having a difficult day")

        assert len(messages) == 3
        assert messages[1].content == "I'm having a difficult day"
        assert not messages[1].is_from_bot
        assert messages[2] is reply
        assert reply.is_from_bot
        assert reply.content in RESPONSE_POOLS[Topic.DIFFICULT]
        assert any("Difficult days don't last" in r for r in RESPONSE_POOLS[Topic.DIFFICULT])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_empty_message_rejected(self, text):
        """Test empty input is a validation failure and records nothing"""
        orchestrator = instant_orchestrator()
        session = ChatSession()

        with pytest.raises(EmptyMessageError):
            await orchestrator.submit_user_message(session, text)

        assert len(session.transcript) == 1
        assert not session.pending

    def test_empty_message_is_validation_error(self):
        assert issubclass(EmptyMessageError, ValidationError)

    @pytest.mark.asyncio
    async def test_typing_delay_within_range(self):
        """Test the cosmetic delay is drawn from the configured range"""
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        orchestrator = TurnOrchestrator(min_delay=1.0, max_delay=3.0, rng=random.Random(5), sleep=fake_sleep)
        session = ChatSession()
        for text in ("hello", "help me relax", "thanks"):
            await orchestrator.submit_user_message(session, text)

        assert len(delays) == 3
        assert all(1.0 <= d <= 3.0 for d in delays)

    @pytest.mark.asyncio
    async def test_zero_delay_skips_sleep(self):
        """Test a 0..0 range never sleeps"""
        async def fail_sleep(seconds):
            raise AssertionError("should not sleep")

        orchestrator = TurnOrchestrator(min_delay=0.0, max_delay=0.0, sleep=fail_sleep)
        await orchestrator.submit_user_message(ChatSession(), "hi")

    def test_invalid_delay_range(self):
        with pytest.raises(ValueError):
            TurnOrchestrator(min_delay=2.0, max_delay=1.0)

    @pytest.mark.asyncio
    async def test_second_message_while_pending_rejected(self):
        """Test only one turn may be pending per session"""
        gate = asyncio.Event()

        async def slow_sleep(seconds):
            await gate.wait()

        orchestrator = TurnOrchestrator(min_delay=1.0, max_delay=1.0, sleep=slow_sleep)
        session = ChatSession()

        first = asyncio.create_task(orchestrator.submit_user_message(session, "I need motivation"))
        await asyncio.sleep(0)
        assert session.pending

        with pytest.raises(TurnInProgressError):
            await orchestrator.submit_user_message(session, "hello?")

        gate.set()
        messages, reply = await first
        assert not session.pending
        assert [m.is_from_bot for m in messages] == [True, False, True]
        assert reply.content in RESPONSE_POOLS[Topic.MOTIVATION]

    @pytest.mark.asyncio
    async def test_reply_discarded_when_session_closed(self):
        """Test tearing down a session mid-turn drops the pending reply"""
        session = ChatSession()

        async def closing_sleep(seconds):
            session.closed = True

        orchestrator = TurnOrchestrator(min_delay=1.0, max_delay=1.0, sleep=closing_sleep)

        with pytest.raises(SessionClosedError):
            await orchestrator.submit_user_message(session, "I'm feeling overwhelmed")

        assert not any(m.is_from_bot for m in session.transcript.messages[1:])
        assert not session.pending

    @pytest.mark.asyncio
    async def test_closed_session_rejects_messages(self):
        session = ChatSession(closed=True)
        with pytest.raises(SessionClosedError):
            await instant_orchestrator().submit_user_message(session, "hi")

    @pytest.mark.asyncio
    async def test_sessions_do_not_share_state(self):
        """Test classification and transcripts are independent across sessions"""
        orchestrator = instant_orchestrator()
        one, two = ChatSession(), ChatSession()

        _, reply_two = await orchestrator.submit_user_message(two, "I need motivation")
        _, reply_one = await orchestrator.submit_user_message(one, "I'm feeling overwhelmed")

        assert reply_one.content in RESPONSE_POOLS[Topic.OVERWHELMED]
        assert reply_two.content in RESPONSE_POOLS[Topic.MOTIVATION]
        assert len(one.transcript) == 3
        assert len(two.transcript) == 3
        assert one.transcript.messages[1].content == "I'm feeling overwhelmed"


class TestSessionRegistry:
    """Test session lifecycle"""

    def test_create_and_get(self, clock):
        registry = SessionRegistry(ttl_seconds=60, clock=clock)
        session = registry.create(user_id="u1")
        assert registry.get(session.session_id) is session
        assert registry.chats_started("u1") == 1
        assert registry.chats_started("u2") == 0

    def test_unknown_session(self, clock):
        registry = SessionRegistry(clock=clock)
        with pytest.raises(NotFoundError):
            registry.get("missing")

    def test_idle_session_expires(self, clock):
        registry = SessionRegistry(ttl_seconds=60, clock=clock)
        session = registry.create()
        clock.advance(61)
        with pytest.raises(NotFoundError):
            registry.get(session.session_id)
        assert session.closed
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_session_expires_after_a_turn(self, clock):
        registry = SessionRegistry(ttl_seconds=60, clock=clock)
        session = registry.create()

        clock.advance(30)
        await instant_orchestrator().submit_user_message(session, "I feel anxious")
        assert session.last_activity == clock.now

        clock.advance(59)
        assert registry.get(session.session_id) is session

        clock.advance(3600)
        with pytest.raises(NotFoundError):
            registry.get(session.session_id)
        assert session.closed

    def test_close_marks_session(self, clock):
        registry = SessionRegistry(clock=clock)
        session = registry.create()
        assert registry.close(session.session_id)
        assert session.closed
        assert not registry.close(session.session_id)

    def test_capacity_evicts_oldest(self, clock):
        registry = SessionRegistry(ttl_seconds=600, max_sessions=2, clock=clock)
        first = registry.create()
        clock.advance(1)
        registry.create()
        clock.advance(1)
        registry.create()
        assert first.closed
        assert len(registry) == 2


class TestTerminalChat:
    """Test suite for the terminal chat front end"""

    @pytest.mark.asyncio
    async def test_send_prints_reply(self, capsys):
        chat = TerminalChat(no_delay=True, seed=3)

        await chat.send("I can't sleep again")

        out = capsys.readouterr().out
        assert any(reply in out for reply in RESPONSE_POOLS[Topic.SLEEP])
        assert len(chat.session.transcript) == 3

    @pytest.mark.asyncio
    async def test_run_until_quit(self, capsys):
        chat = TerminalChat(no_delay=True, seed=3)

        with patch("builtins.input", side_effect=["", "   ", "thank you", "quit", "never read"]):
            await chat.run()

        out = capsys.readouterr().out
        assert WELCOME_MESSAGE in out
        assert any(reply in out for reply in RESPONSE_POOLS[Topic.GRATITUDE])
        assert "Goodbye" in out
        # welcome + one exchange; blank lines are skipped
        assert len(chat.session.transcript) == 3

    @pytest.mark.asyncio
    async def test_run_stops_on_eof(self):
        chat = TerminalChat(no_delay=True)
        with patch("builtins.input", side_effect=EOFError):
            await chat.run()
        assert len(chat.session.transcript) == 1
