from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx
import pytest

from identifier_lookup.config import LookupSettings
from identifier_lookup.errors import (
    ConnectivityError,
    IdentifierLookupError,
    LookupCancelledError,
    LookupTimeoutError,
    ResponseDecodeError,
    ServerError,
    ValidationError,
)
from identifier_lookup.models import IdentifierType, RawResponse
from identifier_lookup.normalizer import NO_DATA_MESSAGE
from identifier_lookup.registry import DEFAULT_PLACEHOLDER
from identifier_lookup.session import LookupController, PanelKind, SessionState
from identifier_lookup.transport import CancellationToken, HttpTransport

API_BASE = "https://lookup.test"


@dataclass
class _FakeTransport:
    payload: Any = None
    error: IdentifierLookupError | None = None
    during: Callable[[], None] | None = None
    wait_for_cancel: bool = False
    calls: list[str] = field(default_factory=list)
    tokens: list[CancellationToken] = field(default_factory=list)

    async def fetch(self, url: str, token: CancellationToken) -> RawResponse:
        self.calls.append(url)
        self.tokens.append(token)
        if self.during is not None:
            self.during()
        if self.wait_for_cancel:
            await token.wait()
            raise LookupCancelledError(details={"url": url})
        if self.error is not None:
            raise self.error
        return RawResponse(
            url=url,
            status_code=200,
            payload=self.payload,
            retrieved_at="2026-01-01T00:00:00+00:00",
        )


def _controller(transport: _FakeTransport) -> LookupController:
    return LookupController(
        transport=transport,
        settings=LookupSettings(api_base=API_BASE, timeout_s=10.0),
    )


def test_select_type_resets_form() -> None:
    controller = _controller(_FakeTransport())
    controller.set_input("110001")
    controller.show_result("old", PanelKind.SUCCESS)

    controller.select_type(IdentifierType.POSTAL_CODE)

    state = controller.state
    assert state.selected_type is IdentifierType.POSTAL_CODE
    assert state.raw_input == ""
    assert state.placeholder == "e.g. 110001"
    assert state.panel.visible is False

    controller.select_type(None)
    assert controller.state.placeholder == DEFAULT_PLACEHOLDER


def test_successful_lookup_renders_schema_fields() -> None:
    transport = _FakeTransport(
        payload={"post_office": "X", "district": None, "state": "Y"}
    )
    controller = _controller(transport)
    controller.select_type(IdentifierType.POSTAL_CODE)

    outcome = asyncio.run(controller.submit("  110001 "))

    assert outcome is not None and outcome.ok
    assert transport.calls == [f"{API_BASE}/search_pincode?pincode=110001"]
    assert transport.tokens[0].timeout_s == 10.0
    assert outcome.value == "110001"
    assert outcome.view is not None and outcome.view.has_data
    assert controller.state.panel.kind is PanelKind.SUCCESS
    assert controller.state.panel.text == "Result:\n\nPost Office: X\nState: Y"
    assert controller.state.busy is False


def test_invalid_input_never_reaches_transport() -> None:
    transport = _FakeTransport()
    controller = _controller(transport)
    controller.select_type(IdentifierType.ROUTING_CODE)

    outcome = asyncio.run(controller.submit("SBINO001234"))

    assert outcome is not None
    assert isinstance(outcome.error, ValidationError)
    assert outcome.ok is False
    assert transport.calls == []
    assert controller.state.panel.kind is PanelKind.ERROR
    assert controller.state.panel.text == "Invalid input format!"


@pytest.mark.parametrize("raw", ["", "   "])
def test_blank_input_is_a_no_op(raw: str) -> None:
    transport = _FakeTransport()
    controller = _controller(transport)
    controller.select_type(IdentifierType.PHONE)

    assert asyncio.run(controller.submit(raw)) is None
    assert transport.calls == []
    assert controller.state.panel.visible is False


def test_no_selected_type_is_a_no_op() -> None:
    transport = _FakeTransport()
    controller = _controller(transport)

    assert asyncio.run(controller.submit("9876543210")) is None
    assert transport.calls == []


def test_busy_session_rejects_new_submission() -> None:
    transport = _FakeTransport(payload={"name": "Asha"})
    controller = LookupController(
        SessionState(selected_type=IdentifierType.PHONE, busy=True),
        transport=transport,
        settings=LookupSettings(api_base=API_BASE),
    )

    assert asyncio.run(controller.submit("9876543210")) is None
    assert transport.calls == []


def test_busy_flag_is_set_only_while_request_runs() -> None:
    seen: list[tuple[bool, str, bool]] = []
    controller: LookupController

    def during() -> None:
        state = controller.state
        seen.append((state.busy, state.submit_label, state.panel.visible))

    transport = _FakeTransport(payload={"name": "Asha"}, during=during)
    controller = _controller(transport)
    controller.select_type(IdentifierType.PHONE)
    assert controller.state.submit_label == "Submit"

    asyncio.run(controller.submit("9876543210"))

    assert seen == [(True, "Searching...", False)]
    assert controller.state.busy is False
    assert controller.state.submit_label == "Submit"


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (LookupTimeoutError(), "Request timed out. Please try again."),
        (ConnectivityError(), "Network error. Check your internet connection."),
        (ServerError(500), "Server error (HTTP 500). Try again later."),
    ],
)
def test_transport_errors_become_error_panel(
    error: IdentifierLookupError, message: str
) -> None:
    controller = _controller(_FakeTransport(error=error))
    controller.select_type(IdentifierType.PHONE)

    outcome = asyncio.run(controller.submit("9876543210"))

    assert outcome is not None and outcome.error is error
    assert outcome.view is None
    assert controller.state.panel.kind is PanelKind.ERROR
    assert controller.state.panel.text == message
    assert controller.state.busy is False


def test_result_is_normalized_with_type_used_at_submit() -> None:
    controller: LookupController

    def switch_type() -> None:
        controller.select_type(IdentifierType.PHONE)

    transport = _FakeTransport(
        payload={"post_office": "X", "name": "ignored"}, during=switch_type
    )
    controller = _controller(transport)
    controller.select_type(IdentifierType.POSTAL_CODE)

    outcome = asyncio.run(controller.submit("110001"))

    assert outcome is not None and outcome.view is not None
    assert outcome.identifier_type is IdentifierType.POSTAL_CODE
    assert outcome.view.pairs == (("Post Office", "X"),)


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"unexpected": 1}, '{\n  "unexpected": 1\n}'),
        (None, NO_DATA_MESSAGE),
        ("plain", NO_DATA_MESSAGE),
    ],
)
def test_fallback_when_no_field_matches(payload: Any, expected: str) -> None:
    controller = _controller(_FakeTransport(payload=payload))
    controller.select_type(IdentifierType.VEHICLE_REG)

    outcome = asyncio.run(controller.submit("DL01AA1234"))

    assert outcome is not None and outcome.view is not None
    assert outcome.view.has_data is False
    assert controller.state.panel.kind is PanelKind.SUCCESS
    assert controller.state.panel.text == f"Result:\n\n{expected}"


def test_cancel_aborts_in_flight_lookup() -> None:
    controller = _controller(_FakeTransport(wait_for_cancel=True))
    controller.select_type(IdentifierType.PHONE)
    assert controller.cancel() is False

    async def scenario() -> Any:
        task = asyncio.ensure_future(controller.submit("9876543210"))
        await asyncio.sleep(0)
        assert controller.cancel() is True
        return await task

    outcome = asyncio.run(scenario())

    assert isinstance(outcome.error, LookupCancelledError)
    assert controller.state.panel.text == "Request cancelled."
    assert controller.state.busy is False
    assert controller.cancel() is False


def test_corrupt_response_encoding_becomes_error_panel() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, content=b"not gzip", headers={"Content-Encoding": "gzip"}
        )

    settings = LookupSettings(api_base=API_BASE, timeout_s=10.0)
    controller = LookupController(
        transport=HttpTransport(settings, transport=httpx.MockTransport(handler)),
        settings=settings,
    )
    controller.select_type(IdentifierType.PHONE)

    outcome = asyncio.run(controller.submit("9876543210"))

    assert outcome is not None
    assert isinstance(outcome.error, ResponseDecodeError)
    assert controller.state.panel.kind is PanelKind.ERROR
    assert controller.state.panel.text == "Failed to fetch data. Try again later."
    assert controller.state.busy is False
