"""
songtags - Main Server Module

This module contains the SongTagsServer class that wires the library DB and
the web server together and manages the application lifecycle.
"""

from __future__ import annotations

import asyncio
import logging
import signal

from songtags.config import AppConfig
from songtags.core.library_db import LibraryDb
from songtags.web.server import WebServer

logger = logging.getLogger(__name__)


class SongTagsServer:
    """
    Main songtags server.

    The server manages:
    - The SQLite library DB (schema/migrations on start)
    - The web server for the HTTP API
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()

        self.library_db = LibraryDb(self.config.database.path)
        self.web_server: WebServer | None = None

        self._running = False
        self._shutdown_event: asyncio.Event | None = None

    async def start(self) -> None:
        """Start all server components."""
        logger.info("Opening library database %s", self.config.database.path)

        self._running = True
        self._shutdown_event = asyncio.Event()

        await self.library_db.open()
        await self.library_db.ensure_schema()

        self.web_server = WebServer(
            self.library_db,
            cors_origins=self.config.server.cors_origins,
        )
        await self.web_server.start(host=self.config.server.host, port=self.config.server.port)

        logger.info("songtags server started successfully")

    async def stop(self) -> None:
        """Stop all server components gracefully."""
        if not self._running:
            return

        logger.info("Stopping songtags server...")
        self._running = False

        if self.web_server:
            await self.web_server.stop()

        # Close library DB last, after the web layer has stopped.
        await self.library_db.close()

        if self._shutdown_event:
            self._shutdown_event.set()

        logger.info("songtags server stopped")

    async def run(self) -> None:
        """
        Run the server until shutdown is requested (SIGINT or SIGTERM).
        """
        await self.start()

        loop = asyncio.get_running_loop()

        def handle_signal() -> None:
            logger.info("Received shutdown signal")
            if self._shutdown_event:
                self._shutdown_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, handle_signal)
            except NotImplementedError:
                # Signal handlers not supported on Windows
                pass

        if self._shutdown_event:
            await self._shutdown_event.wait()

        await self.stop()

    @property
    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running
