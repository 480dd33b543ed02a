"""CLI commands for archext."""

from . import (
    resolve,
    validate,
    config_cmd,
)

__all__ = [
    "resolve",
    "validate",
    "config_cmd",
]
