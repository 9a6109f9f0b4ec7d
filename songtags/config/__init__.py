"""
Configuration management for songtags.

Settings are loaded from a TOML file:

    [server]
    host = "127.0.0.1"
    port = 8080
    cors_origins = ["*"]

    [database]
    path = "songtags.sqlite3"

Every key is optional; missing keys keep their defaults. Command line flags
override whatever the file provides (see `songtags.__main__`).
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "songtags.toml"


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server settings."""

    host: str = "127.0.0.1"
    port: int = 8080
    cors_origins: tuple[str, ...] = ("*",)


@dataclass(frozen=True)
class DatabaseConfig:
    """SQLite settings."""

    path: str = "songtags.sqlite3"


@dataclass(frozen=True)
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        db_path: str | Path | None = None,
    ) -> AppConfig:
        """Return a copy with any non-None override applied."""
        server = self.server
        if host is not None:
            server = replace(server, host=host)
        if port is not None:
            server = replace(server, port=int(port))

        database = self.database
        if db_path is not None:
            database = replace(database, path=str(db_path))

        return AppConfig(server=server, database=database)


def _parse_server(data: dict[str, Any]) -> ServerConfig:
    defaults = ServerConfig()
    origins = data.get("cors_origins", list(defaults.cors_origins))
    if not isinstance(origins, list) or not all(isinstance(o, str) for o in origins):
        raise ValueError("server.cors_origins must be a list of strings")
    return ServerConfig(
        host=str(data.get("host", defaults.host)),
        port=int(data.get("port", defaults.port)),
        cors_origins=tuple(origins),
    )


def _parse_database(data: dict[str, Any]) -> DatabaseConfig:
    defaults = DatabaseConfig()
    return DatabaseConfig(path=str(data.get("path", defaults.path)))


def load_config(config_path: Path | None = None) -> AppConfig:
    """
    Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML file. If None, `songtags.toml` in the
            working directory is used when present, defaults otherwise.

    Returns:
        Loaded AppConfig instance.
    """
    if config_path is None:
        candidate = Path(DEFAULT_CONFIG_FILENAME)
        if not candidate.is_file():
            logger.debug("No %s found, using defaults", DEFAULT_CONFIG_FILENAME)
            return AppConfig()
        config_path = candidate

    logger.debug("Loading config from %s", config_path)

    with config_path.open("rb") as f:
        data = tomllib.load(f)

    return AppConfig(
        server=_parse_server(data.get("server", {})),
        database=_parse_database(data.get("database", {})),
    )


# Global singleton instance (lazy loaded)
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """
    Get the global configuration (lazy loaded singleton).

    Returns:
        The AppConfig instance.
    """
    global _config

    if _config is None:
        _config = load_config()

    return _config


def reload_config(config_path: Path | None = None) -> AppConfig:
    """
    Force reload of configuration.

    Returns:
        The newly loaded AppConfig instance.
    """
    global _config
    _config = load_config(config_path)
    return _config
