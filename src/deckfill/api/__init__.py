"""HTTP interface for DeckFill."""

from .app import create_app

__all__ = ["create_app"]
