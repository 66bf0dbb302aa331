"""CLI entry points for Identifier Lookup."""

import importlib
from typing import Any, cast

_cli_mod = importlib.import_module("identifier_lookup.cli.app")
app = cast(Any, _cli_mod).app
gui = cast(Any, _cli_mod).gui
lookup = cast(Any, _cli_mod).lookup
query = cast(Any, _cli_mod).query
run = cast(Any, _cli_mod).run
validate = cast(Any, _cli_mod).validate

__all__ = [
    "app",
    "gui",
    "lookup",
    "query",
    "run",
    "validate",
]
