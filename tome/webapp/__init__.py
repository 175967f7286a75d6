"""Flask integration for the wiki engine."""

from .error_handlers import register_error_handlers
from .extension import TomeWiki, current_wiki

__all__ = ["TomeWiki", "current_wiki", "register_error_handlers"]
