"""Command line interface for archext."""

from .app import app

__all__ = ["app"]
