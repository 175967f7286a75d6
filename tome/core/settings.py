"""Centralised settings for the wiki engine.

:class:`WikiSettings` consolidates every configuration lookup.  Production code
builds it from the process environment (after loading an optional ``.env``
file), while the Flask integration and the tests build it from a plain mapping
such as ``app.config``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

_BOOL_TRUE = {"1", "true", "yes", "on"}

DEFAULT_DATABASE_URI = "sqlite://"
DEFAULT_POOL_RECYCLE = 1800
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class _ConfigFacade:
    """Thin wrapper that provides ``Mapping`` compatible access to settings."""

    source: Mapping[str, Any]

    def get(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        return self.source.get(key, default)

    def get_str(self, key: str, default: str) -> str:
        value = self.get(key)
        if value is None:
            return default
        text = str(value).strip()
        return text or default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _BOOL_TRUE

    def get_int(self, key: str, default: int) -> int:
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            return default


@dataclass(frozen=True)
class WikiSettings:
    """Resolved configuration values for the wiki engine."""

    database_uri: str = DEFAULT_DATABASE_URI
    sql_echo: bool = False
    pool_recycle: int = DEFAULT_POOL_RECYCLE
    log_level: str = DEFAULT_LOG_LEVEL
    engine_overrides: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, source: Mapping[str, Any]) -> "WikiSettings":
        config = _ConfigFacade(source)
        return cls(
            database_uri=config.get_str("TOME_DATABASE_URI", DEFAULT_DATABASE_URI),
            sql_echo=config.get_bool("TOME_SQL_ECHO"),
            pool_recycle=config.get_int("TOME_POOL_RECYCLE", DEFAULT_POOL_RECYCLE),
            log_level=config.get_str("TOME_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            engine_overrides=dict(config.get("TOME_ENGINE_OPTIONS") or {}),
        )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "WikiSettings":
        if env is None:
            load_dotenv()
            env = os.environ
        return cls.from_mapping(env)

    @property
    def is_sqlite(self) -> bool:
        return self.database_uri.startswith("sqlite")

    def engine_options(self) -> Dict[str, Any]:
        """Return keyword arguments for :func:`sqlalchemy.create_engine`."""

        options: Dict[str, Any] = {
            "echo": self.sql_echo,
            "pool_pre_ping": True,
        }
        if not self.is_sqlite:
            options.update({
                "pool_recycle": self.pool_recycle,
                "pool_size": 10,
                "max_overflow": 20,
            })
            if self.database_uri.startswith("mysql"):
                options["connect_args"] = {"connect_timeout": 10}
        options.update(self.engine_overrides)
        return options


__all__ = ["WikiSettings"]
