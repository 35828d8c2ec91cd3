"""Shared fixtures for HeartSpace tests."""

import logging
import random

import httpx
import pytest

from heartspace.config import HeartSpaceConfig
from heartspace.services.accounts import AccountService
from heartspace.services.content import InMemoryContentStore
from heartspace.services.web import HeartSpaceService

# Suppress logging during tests
logging.disable(logging.CRITICAL)

# 2024-03-14 12:00:00 UTC
START = 1710417600.0
DAY = 86400


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = START):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryContentStore(clock=clock)


@pytest.fixture
def accounts(store, clock):
    return AccountService(store, hash_iterations=1000, token_ttl=3600, clock=clock)


@pytest.fixture
async def alice(accounts):
    return await accounts.sign_up("Alice Rivers", "alice@example.com", "secret123")


@pytest.fixture
async def bob(accounts):
    return await accounts.sign_up("Bob Stone", "bob@example.com", "hunter22")


@pytest.fixture
def test_config(tmp_path):
    config = HeartSpaceConfig()
    config.heartbot.min_delay = 0.0
    config.heartbot.max_delay = 0.0
    config.accounts.hash_iterations = 1000
    config.media.root = str(tmp_path / "media")
    config.media.max_bytes = 1024
    return config


@pytest.fixture
async def service(test_config):
    service = HeartSpaceService(config=test_config, store=InMemoryContentStore(), rng=random.Random(7))
    await service.setup()
    yield service
    await service.teardown()


@pytest.fixture
async def client(service):
    transport = httpx.ASGITransport(app=service.get_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

