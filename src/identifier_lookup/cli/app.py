from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import typer

from identifier_lookup.config import LookupSettings
from identifier_lookup.models import IdentifierType
from identifier_lookup.registry import default_registry
from identifier_lookup.session import LookupController, LookupOutcome

app = typer.Typer(
    help="Validate identifiers locally and look them up on the lookup service",
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log HTTP requests and failures"
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_type(text: str) -> IdentifierType:
    try:
        return IdentifierType.parse(text)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _require_value(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise typer.BadParameter("VALUE must not be empty")
    return trimmed


def build_settings(
    *,
    api_base: str | None = None,
    timeout_s: float | None = None,
    user_agent: str | None = None,
) -> LookupSettings:
    """Public wrapper for the settings the CLI passes to the controller."""

    return LookupSettings.from_options(
        {
            "api_base": api_base,
            "timeout_s": timeout_s,
            "user_agent": user_agent,
        }
    )


def outcome_to_dict(outcome: LookupOutcome) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": outcome.identifier_type.value,
        "value": outcome.value,
        "ok": outcome.ok,
    }
    if outcome.response is not None:
        data["url"] = outcome.response.url
        data["status_code"] = outcome.response.status_code
        data["retrieved_at"] = outcome.response.retrieved_at
        data["result"] = outcome.response.payload
    if outcome.view is not None:
        data["has_data"] = outcome.view.has_data
        data["fields"] = [[label, value] for label, value in outcome.view.pairs]
    if outcome.error is not None:
        data["error"] = {
            "code": outcome.error.code,
            "message": outcome.error.message,
            "details": outcome.error.details,
        }
    return data


@app.command("types")
def list_types() -> None:
    """List supported identifier types."""

    for profile in default_registry().profiles():
        typer.echo(
            " - {name}: {title} | {endpoint}?{param}= | {placeholder}".format(
                name=profile.identifier_type.value,
                title=profile.title,
                endpoint=profile.endpoint,
                param=profile.param,
                placeholder=profile.placeholder,
            )
        )


@app.command()
def validate(
    identifier_type: str = typer.Argument(
        ..., metavar="TYPE", help="Identifier type (e.g., phone, postalCode, ifsc)"
    ),
    value: str = typer.Argument(..., help="Value to check"),
) -> None:
    """Check a value against its identifier type's format."""

    resolved = _resolve_type(identifier_type)
    if default_registry().validate(resolved, value.strip()):
        typer.echo("valid")
        return
    typer.echo("invalid")
    raise typer.Exit(1)


@app.command()
def query(
    identifier_type: str = typer.Argument(..., metavar="TYPE", help="Identifier type"),
    value: str = typer.Argument(..., help="Value to look up"),
    api_base: str | None = typer.Option(
        None, help="Lookup service base URL (env: IDENTIFIER_LOOKUP_API_BASE)"
    ),
) -> None:
    """Print the request URL a lookup would use, without sending it."""

    resolved = _resolve_type(identifier_type)
    trimmed = _require_value(value)
    registry = default_registry()
    if not registry.validate(resolved, trimmed):
        typer.echo("Invalid input format!", err=True)
        raise typer.Exit(1)
    settings = build_settings(api_base=api_base)
    typer.echo(registry.build_query(resolved, trimmed).url(settings.api_base))


@app.command()
def lookup(
    identifier_type: str = typer.Argument(..., metavar="TYPE", help="Identifier type"),
    value: str = typer.Argument(..., help="Value to look up"),
    api_base: str | None = typer.Option(
        None, help="Lookup service base URL (env: IDENTIFIER_LOOKUP_API_BASE)"
    ),
    timeout: float | None = typer.Option(
        None, help="Request timeout in seconds (env: IDENTIFIER_LOOKUP_TIMEOUT)"
    ),
    user_agent: str | None = typer.Option(None, help="User-Agent for HTTP requests"),
    json_output: bool = typer.Option(
        False, "--json", help="Print the raw result and fields as JSON"
    ),
) -> None:
    """Validate a value, query the lookup service and print the record."""

    resolved = _resolve_type(identifier_type)
    trimmed = _require_value(value)
    controller = LookupController(
        settings=build_settings(
            api_base=api_base,
            timeout_s=timeout,
            user_agent=user_agent,
        )
    )
    controller.select_type(resolved)
    outcome = asyncio.run(controller.submit(trimmed))
    if outcome is None:  # pragma: no cover - guarded by _require_value
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(outcome_to_dict(outcome), indent=2, ensure_ascii=False))
    else:
        typer.echo(controller.state.panel.text, err=not outcome.ok)
    if not outcome.ok:
        raise typer.Exit(1)


@app.command()
def gui(
    port: int = typer.Option(8080, help="Port for the NiceGUI server"),
) -> None:
    """Launch the lookup form (NiceGUI primary, Streamlit fallback)."""

    import importlib

    try:
        gui_mod = importlib.import_module("identifier_lookup.gui.app")
        launch_gui = gui_mod.launch_gui
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dep
        typer.echo(f"GUI not available: {exc}")
        raise SystemExit(1) from exc

    launch_gui(port=port)


def run() -> None:
    app()


__all__ = [
    "app",
    "build_settings",
    "gui",
    "list_types",
    "lookup",
    "outcome_to_dict",
    "query",
    "run",
    "validate",
]


if __name__ == "__main__":
    run()
