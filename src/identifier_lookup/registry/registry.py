from __future__ import annotations

import re
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml  # type: ignore[import-untyped]

from identifier_lookup.errors import RegistryError
from identifier_lookup.models import (
    IdentifierType,
    NormalizedView,
    Query,
    TypeProfile,
)
from identifier_lookup.normalizer import project_result

DEFAULT_PLACEHOLDER = "Enter value"


class IdentifierRegistry:
    """Lookup table of identifier types and the three pure operations on it.

    The same ``IdentifierType`` key selects the pattern used by
    :meth:`validate` and the schema used by :meth:`normalize`, so a caller
    that passes one type through a whole request cannot mix them up.
    """

    def __init__(self, profiles: Iterable[TypeProfile] = ()) -> None:
        self._profiles: dict[IdentifierType, TypeProfile] = {}
        for profile in profiles:
            self.register(profile)

    def register(self, profile: TypeProfile) -> None:
        self._profiles[profile.identifier_type] = profile

    def get(self, identifier_type: IdentifierType) -> TypeProfile:
        if identifier_type not in self._profiles:
            raise KeyError(f"Identifier type '{identifier_type}' is not registered")
        return self._profiles[identifier_type]

    def available(self) -> list[IdentifierType]:
        return [member for member in IdentifierType if member in self._profiles]

    def profiles(self) -> list[TypeProfile]:
        return [self._profiles[member] for member in self.available()]

    def missing(self) -> list[IdentifierType]:
        return [member for member in IdentifierType if member not in self._profiles]

    def placeholder(self, identifier_type: IdentifierType | None) -> str:
        profile = self._profiles.get(identifier_type) if identifier_type else None
        if profile is None or not profile.placeholder:
            return DEFAULT_PLACEHOLDER
        return profile.placeholder

    def validate(self, identifier_type: IdentifierType, raw_input: Any) -> bool:
        profile = self._profiles.get(identifier_type)
        if profile is None or not isinstance(raw_input, str):
            return False
        return profile.pattern.fullmatch(raw_input) is not None

    def build_query(self, identifier_type: IdentifierType, raw_input: str) -> Query:
        return self.get(identifier_type).query_for(raw_input)

    def normalize(
        self, identifier_type: IdentifierType, result: Any
    ) -> NormalizedView:
        profile = self._profiles.get(identifier_type)
        if profile is None:
            return NormalizedView()
        return project_result(profile.fields, result)


def _compile(name: str, pattern: Any) -> re.Pattern[str]:
    if not isinstance(pattern, str) or not pattern:
        raise RegistryError(f"Identifier type '{name}' has no pattern")
    try:
        # ASCII keeps [0-9]/\d from matching other scripts' digits.
        return re.compile(pattern, re.ASCII)
    except re.error as exc:
        raise RegistryError(
            f"Identifier type '{name}' has a bad pattern: {exc}"
        ) from exc


def profile_from_config(name: str, cfg: Mapping[str, Any]) -> TypeProfile:
    try:
        identifier_type = IdentifierType.parse(name)
    except ValueError as exc:
        raise RegistryError(str(exc)) from exc

    endpoint = str(cfg.get("endpoint") or "")
    param = str(cfg.get("param") or "")
    if not endpoint.startswith("/") or not param:
        raise RegistryError(f"Identifier type '{name}' needs an endpoint and param")

    fields = cfg.get("fields") or {}
    if not isinstance(fields, Mapping):
        raise RegistryError(f"Identifier type '{name}' fields must be a mapping")

    return TypeProfile(
        identifier_type=identifier_type,
        pattern=_compile(name, cfg.get("pattern")),
        endpoint=endpoint,
        param=param,
        fields=tuple((str(key), str(label)) for key, label in fields.items()),
        title=str(cfg.get("title") or identifier_type.value),
        placeholder=str(cfg.get("placeholder") or ""),
    )


def load_registry(path: str | Path) -> IdentifierRegistry:
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, Mapping):
        raise RegistryError(f"Registry file {path} must contain a mapping")
    types = data.get("types") or {}
    if not isinstance(types, Mapping):
        raise RegistryError(f"Registry file {path} has no 'types' mapping")
    return IdentifierRegistry(
        profile_from_config(str(name), cfg or {}) for name, cfg in types.items()
    )


def packaged_registry_path() -> Path:
    packaged = resources.files("identifier_lookup.registry").joinpath(
        "identifier_types.yaml"
    )
    return Path(str(packaged))


@lru_cache(maxsize=1)
def default_registry() -> IdentifierRegistry:
    """Return the packaged registry, requiring a row for every type."""

    registry = load_registry(packaged_registry_path())
    missing = registry.missing()
    if missing:
        names = ", ".join(member.value for member in missing)
        raise RegistryError(f"Packaged registry is missing: {names}")
    return registry


__all__ = [
    "DEFAULT_PLACEHOLDER",
    "IdentifierRegistry",
    "default_registry",
    "load_registry",
    "packaged_registry_path",
    "profile_from_config",
]
