"""Flask extension that owns the wiki engine inside an application."""

from __future__ import annotations

from typing import Optional

from flask import Flask, current_app

from tome.application.wiki.services import WikiPageService
from tome.core.db import Database
from tome.core.logging_config import configure_logging
from tome.core.settings import WikiSettings
from tome.infrastructure.wiki.pages import PageRepository
from tome.webapp.error_handlers import register_error_handlers

EXTENSION_KEY = "tome"


class TomeWiki:
    """Open the storage handle at startup and expose the page service.

    ``shutdown`` must be called by the hosting process when it stops.
    """

    def __init__(self, app: Optional[Flask] = None, database: Optional[Database] = None) -> None:
        self.database = database
        self.repository: Optional[PageRepository] = None
        self.service: Optional[WikiPageService] = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        settings = WikiSettings.from_mapping(app.config)
        configure_logging(settings.log_level)

        if self.database is None:
            self.database = Database(settings)
        self.database.open()
        if app.config.get("TOME_CREATE_SCHEMA"):
            self.database.create_schema()

        self.repository = PageRepository(self.database)
        self.service = WikiPageService(self.repository)

        app.extensions[EXTENSION_KEY] = self
        register_error_handlers(app)

    def shutdown(self) -> None:
        if self.database is not None:
            self.database.close()


def current_wiki() -> TomeWiki:
    """Return the extension registered on the active application."""

    return current_app.extensions[EXTENSION_KEY]


__all__ = ["EXTENSION_KEY", "TomeWiki", "current_wiki"]
