from __future__ import annotations

import json
from typing import Any, Iterable, Mapping

from identifier_lookup.models import NormalizedView

NO_DATA_MESSAGE = "No data found."


def _field_value(result: Mapping[str, Any], key: str) -> Any:
    try:
        return result[key]
    except (KeyError, TypeError, IndexError):
        return None


def project_result(fields: Iterable[tuple[str, str]], result: Any) -> NormalizedView:
    """Project a raw lookup result onto an ordered ``(key, label)`` schema.

    Missing and null fields are skipped. Anything that is not a mapping has
    no fields at all, so the view is simply empty.
    """

    if not isinstance(result, Mapping):
        return NormalizedView()

    pairs: list[tuple[str, Any]] = []
    for key, label in fields:
        value = _field_value(result, key)
        if value is None:
            continue
        pairs.append((label, value))
    return NormalizedView(pairs=tuple(pairs), has_data=bool(pairs))


def display_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def fallback_text(result: Any) -> str:
    """Text shown when no schema field matched.

    Composite values are dumped as indented JSON; null, absent and scalar
    results get the fixed no-data message.
    """

    if isinstance(result, (Mapping, list, tuple)):
        return json.dumps(result, indent=2, ensure_ascii=False, default=str)
    return NO_DATA_MESSAGE


def render_view(view: NormalizedView, result: Any) -> str:
    lines = ["Result:", ""]
    if view.has_data:
        lines.extend(f"{label}: {display_value(value)}" for label, value in view.pairs)
    else:
        lines.append(fallback_text(result))
    return "\n".join(lines)


__all__ = [
    "NO_DATA_MESSAGE",
    "display_value",
    "fallback_text",
    "project_result",
    "render_view",
]
