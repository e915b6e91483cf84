"""Web server for the salesboard TV displays."""

from salesboard.web.app import create_app

__all__ = ["create_app"]
