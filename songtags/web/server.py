"""
Web Server Module for songtags.

This module provides the WebServer class that creates and manages the
FastAPI application, registers all routes, and runs it under uvicorn.

The WebServer integrates:
- REST API for libraries and songs
- Label management and tagging endpoints
- Label modes
- The AND filter endpoint
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Sequence

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from songtags import __version__
from songtags.core.filtering import FilterEngine
from songtags.core.labels import LabelService
from songtags.core.libraries import LibraryService
from songtags.core.modes import LabelModeService
from songtags.core.songs import SongService
from songtags.core.tagging import TaggingService
from songtags.web.errors import register_error_handlers
from songtags.web.routes.api import register_api_routes
from songtags.web.routes.filter import register_filter_routes
from songtags.web.routes.labels import register_label_routes
from songtags.web.routes.modes import register_mode_routes

if TYPE_CHECKING:
    from songtags.core.library_db import LibraryDb

logger = logging.getLogger(__name__)


class WebServer:
    """
    FastAPI-based web server for songtags.

    Builds the core services on top of one `LibraryDb` and exposes them
    over HTTP.
    """

    def __init__(
        self,
        db: LibraryDb,
        *,
        cors_origins: Sequence[str] = ("*",),
    ) -> None:
        """
        Initialize the WebServer.

        Args:
            db: Open LibraryDb shared by all services
            cors_origins: Origins allowed by the CORS middleware
        """
        self.db = db

        self.library_service = LibraryService(db=db)
        self.song_service = SongService(db=db)
        self.label_service = LabelService(db=db)
        self.tagging_service = TaggingService(db=db)
        self.mode_service = LabelModeService(db=db)
        self.filter_engine = FilterEngine(db)

        self.app = FastAPI(
            title="songtags",
            description="Label-based song library with AND filtering",
            version=__version__,
        )

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        register_error_handlers(self.app)

        # Server state
        self._server: uvicorn.Server | None = None
        self._serve_task: asyncio.Task | None = None
        self._host = "127.0.0.1"
        self._port = 8080

        self._register_routes()

    def _register_routes(self) -> None:
        """Register all routes with the FastAPI app."""

        @self.app.get("/health")
        async def health_check() -> dict[str, str]:
            """Health check endpoint."""
            return {"status": "ok", "server": "songtags"}

        register_api_routes(
            self.app,
            db=self.db,
            library_service=self.library_service,
            song_service=self.song_service,
        )
        register_label_routes(
            self.app,
            library_service=self.library_service,
            label_service=self.label_service,
            tagging_service=self.tagging_service,
        )
        register_filter_routes(
            self.app,
            filter_engine=self.filter_engine,
            library_service=self.library_service,
        )
        register_mode_routes(self.app, mode_service=self.mode_service)

    async def start(self, host: str = "127.0.0.1", port: int = 8080) -> None:
        """
        Start the web server in the background.

        Args:
            host: Host address to bind to
            port: Port to listen on
        """
        self._host = host
        self._port = port

        config = uvicorn.Config(
            self.app,
            host=host,
            port=port,
            log_level="warning",
            access_log=False,
        )
        self._server = uvicorn.Server(config)
        self._serve_task = asyncio.create_task(self._server.serve())

        logger.info("Web server started on http://%s:%d", host, port)

    async def stop(self) -> None:
        """Stop the web server."""
        if self._server is not None:
            self._server.should_exit = True
            if self._serve_task is not None:
                await self._serve_task
            self._server = None
            self._serve_task = None

        logger.info("Web server stopped")

    @property
    def port(self) -> int:
        """Get the server port."""
        return self._port

    @property
    def host(self) -> str:
        """Get the server host."""
        return self._host
