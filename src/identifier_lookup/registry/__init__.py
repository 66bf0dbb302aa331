"""Identifier type table: patterns, query templates and result schemas."""

from identifier_lookup.registry.registry import (
    DEFAULT_PLACEHOLDER,
    IdentifierRegistry,
    default_registry,
    load_registry,
    packaged_registry_path,
    profile_from_config,
)

__all__ = [
    "DEFAULT_PLACEHOLDER",
    "IdentifierRegistry",
    "default_registry",
    "load_registry",
    "packaged_registry_path",
    "profile_from_config",
]
