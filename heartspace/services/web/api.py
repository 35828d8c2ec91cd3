#!/usr/bin/env python3
"""
HeartSpace - Web Service

Single FastAPI service exposing the whole application:
- /auth/*        accounts
- /heartbot/*    scripted support chat
- /gratitude, /moods, /affirmations, /comments, /dashboard
- POST /media    raw image upload (served back under media.base_url)
- GET /health
"""

import random
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.staticfiles import StaticFiles

from heartspace.common.errors import ValidationError
from heartspace.common.logging import configure_root
from heartspace.common.service_base import HeartSpaceServiceBase
from heartspace.config import HeartSpaceConfig
from heartspace.services.accounts import AccountService, User
from heartspace.services.accounts import api as accounts_api
from heartspace.services.content import ContentStore, create_store
from heartspace.services.heartbot import ResponseSelector, SessionRegistry, TurnOrchestrator
from heartspace.services.heartbot import api as heartbot_api
from heartspace.services.media import LocalMediaStore, MediaStore, create_media_store
from heartspace.services.wellness import AffirmationBoard, CommentThread, GratitudeJournal, MoodTracker
from heartspace.services.wellness import api as wellness_api


class HeartSpaceService(HeartSpaceServiceBase):
    """HeartSpace web service with FastAPI HTTP interface."""

    def __init__(
        self,
        config: Optional[HeartSpaceConfig] = None,
        store: Optional[ContentStore] = None,
        media: Optional[MediaStore] = None,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(name="web", config=config)
        configure_root(self.config.logging.level, self.config.logging.json)
        self.rng = rng or random.Random()
        self.store = store or create_store(self.config)
        self.media = media
        self.accounts: Optional[AccountService] = None
        self.sessions: Optional[SessionRegistry] = None
        self.orchestrator: Optional[TurnOrchestrator] = None
        self.board: Optional[AffirmationBoard] = None
        self._routes_registered = False

    async def setup(self):
        """Connect the content store, build the features and register routes."""
        await self.store.connect()
        self.logger.info(f"Content store ready ({type(self.store).__name__})")

        if self.media is None:
            self.media = create_media_store(self.config)

        cfg = self.config
        self.accounts = AccountService(
            self.store,
            min_password_length=cfg.accounts.min_password_length,
            token_ttl=cfg.accounts.token_ttl,
            hash_iterations=cfg.accounts.hash_iterations,
        )
        self.sessions = SessionRegistry(
            ttl_seconds=cfg.heartbot.session_ttl,
            max_sessions=cfg.heartbot.max_sessions,
        )
        self.orchestrator = TurnOrchestrator(
            selector=ResponseSelector(rng=self.rng),
            min_delay=cfg.heartbot.min_delay,
            max_delay=cfg.heartbot.max_delay,
            rng=self.rng,
        )
        self.board = AffirmationBoard(self.store, rng=self.rng)
        journal = GratitudeJournal(self.store)
        tracker = MoodTracker(self.store)
        comments = CommentThread(self.store)

        if cfg.storage.seed_affirmations:
            await self.board.seed()

        if not self._routes_registered:
            app = self.get_app()
            bearer_token, optional_user, current_user = accounts_api.auth_dependencies(self.accounts)
            accounts_api.register_routes(app, self.accounts, bearer_token, current_user)
            heartbot_api.register_routes(app, self.sessions, self.orchestrator, optional_user)
            wellness_api.register_routes(
                app, journal, tracker, self.board, comments, self.sessions, current_user, optional_user
            )
            self._register_media_routes(app, current_user)
            self._routes_registered = True

    async def teardown(self):
        """Close the content store."""
        await self.store.disconnect()

    def _register_media_routes(self, app: FastAPI, current_user):

        @app.post("/media", status_code=201)
        async def upload_media(request: Request, path: str, user: User = Depends(current_user)):
            """
            Upload an image.

            The raw request body is the file; ``path`` is where it is stored,
            relative to the user's own folder.
            """
            declared = request.headers.get("content-length", "")
            blob = await self.media.read_limited(
                request.stream(),
                declared_size=int(declared) if declared.isdigit() else None,
            )
            if not blob:
                raise ValidationError("The uploaded file is empty")
            url = await self.media.upload(blob, f"{user.id}/{path}")
            return {"url": url, "size": len(blob)}

        if isinstance(self.media, LocalMediaStore):
            app.mount(self.config.media.base_url, StaticFiles(directory=str(self.media.root)), name="media")
