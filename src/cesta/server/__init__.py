"""ASGI application factory and dependencies for the Cesta server."""

from cesta.server.app import app, create_app

__all__ = ["app", "create_app"]
