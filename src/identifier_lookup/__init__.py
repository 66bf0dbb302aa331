"""Identifier Lookup primary package."""

from . import (
    config,
    errors,
    models,
    normalizer,
    registry,
    session,
    transport,
)

__all__ = [
    "config",
    "errors",
    "models",
    "normalizer",
    "registry",
    "session",
    "transport",
]
