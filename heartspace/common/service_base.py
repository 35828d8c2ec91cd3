"""Base class for HeartSpace HTTP services.

Provides:
- FastAPI app with CORS and a /health endpoint
- Uniform rendering of HeartSpaceError as a user-visible notice
- Structured logging
- Graceful shutdown on SIGTERM/SIGINT
- Central config loading
"""

import asyncio
import signal
from typing import Optional, List
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from heartspace.config import get_config, HeartSpaceConfig
from heartspace.common.errors import HeartSpaceError
from heartspace.common.logging import setup_logging


def error_payload(exc: HeartSpaceError) -> dict:
    """Body sent to clients for a HeartSpaceError."""
    return {
        "error": type(exc).__name__,
        "title": exc.title,
        "detail": str(exc) or exc.title,
    }


class HeartSpaceServiceBase:
    """Base class for HeartSpace services."""

    def __init__(self, name: str, http_port: Optional[int] = None, config: Optional[HeartSpaceConfig] = None):
        self.name = name
        self.config: HeartSpaceConfig = config or get_config()
        self.http_port = http_port if http_port is not None else self.config.server.port
        self.logger = setup_logging(name, json_output=self.config.logging.json)
        self._running = False
        self._tasks: List[asyncio.Task] = []
        self._server: Optional[uvicorn.Server] = None
        self._app: Optional[FastAPI] = None

    # --- HTTP ---

    def get_app(self) -> FastAPI:
        """Get or create the FastAPI app."""
        if self._app is None:
            @asynccontextmanager
            async def lifespan(app):
                yield

            self._app = FastAPI(
                title=f"HeartSpace - {self.name.title()} Service",
                lifespan=lifespan,
            )
            origins = [o.strip() for o in self.config.server.cors_origins.split(",") if o.strip()]
            self._app.add_middleware(
                CORSMiddleware,
                allow_origins=origins or ["*"],
                allow_methods=["*"],
                allow_headers=["*"],
            )

            @self._app.exception_handler(HeartSpaceError)
            async def heartspace_error_handler(request: Request, exc: HeartSpaceError):
                if exc.status >= 500:
                    self.logger.error(f"{request.method} {request.url.path} failed: {exc}")
                else:
                    self.logger.info(f"{request.method} {request.url.path} rejected: {type(exc).__name__}: {exc}")
                return JSONResponse(status_code=exc.status, content=error_payload(exc))

            @self._app.get("/health")
            async def health():
                return {
                    "service": self.name,
                    "status": "healthy",
                    "running": self._running,
                }
        return self._app

    async def _run_http(self):
        """Run the FastAPI HTTP server."""
        app = self.get_app()
        config = uvicorn.Config(
            app,
            host=self.config.server.host,
            port=self.http_port,
            log_level="warning",
        )
        self._server = uvicorn.Server(config)
        # uvicorn would otherwise install its own signal handlers
        self._server.install_signal_handlers = lambda: None
        await self._server.serve()

    # --- Lifecycle ---

    async def setup(self):
        """Override in subclass for service-specific initialization."""
        pass

    async def teardown(self):
        """Override in subclass for service-specific cleanup."""
        pass

    async def run(self):
        """Main entry point. Starts HTTP and runs until shutdown."""
        self._running = True
        self.logger.info(f"Starting {self.name} service...")

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, lambda: asyncio.create_task(self.shutdown()))

        await self.setup()

        self._tasks.append(asyncio.create_task(self._run_http()))

        self.logger.info(f"{self.name} service started on {self.config.server.host}:{self.http_port}")

        try:
            await asyncio.gather(*self._tasks)
        except asyncio.CancelledError:
            pass
        finally:
            await self.teardown()
            self.logger.info(f"{self.name} service stopped")

    async def shutdown(self):
        """Graceful shutdown."""
        self.logger.info(f"Shutting down {self.name}...")
        self._running = False
        if self._server is not None:
            self._server.should_exit = True
        for task in self._tasks:
            task.cancel()
