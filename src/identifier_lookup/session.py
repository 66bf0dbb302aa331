from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from identifier_lookup.config import LookupSettings
from identifier_lookup.errors import IdentifierLookupError, ValidationError
from identifier_lookup.models import (
    IdentifierType,
    NormalizedView,
    Query,
    RawResponse,
)
from identifier_lookup.normalizer import render_view
from identifier_lookup.registry import (
    DEFAULT_PLACEHOLDER,
    IdentifierRegistry,
    default_registry,
)
from identifier_lookup.transport import CancellationToken, HttpTransport, Transport

logger = logging.getLogger(__name__)


class PanelKind(str, Enum):
    HIDDEN = "hidden"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class ResultPanel:
    kind: PanelKind = PanelKind.HIDDEN
    text: str = ""

    @property
    def visible(self) -> bool:
        return self.kind is not PanelKind.HIDDEN


@dataclass
class SessionState:
    selected_type: IdentifierType | None = None
    raw_input: str = ""
    placeholder: str = DEFAULT_PLACEHOLDER
    busy: bool = False
    panel: ResultPanel = field(default_factory=ResultPanel)

    @property
    def submit_label(self) -> str:
        return "Searching..." if self.busy else "Submit"


@dataclass
class LookupOutcome:
    identifier_type: IdentifierType
    value: str
    query: Query | None = None
    response: RawResponse | None = None
    view: NormalizedView | None = None
    error: IdentifierLookupError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.response is not None


class LookupController:
    """Drives one form session: type selection, validation, one request.

    Only one request is in flight at a time; :meth:`submit` returns ``None``
    without doing anything while ``state.busy`` is set.
    """

    def __init__(
        self,
        state: SessionState | None = None,
        *,
        registry: IdentifierRegistry | None = None,
        transport: Transport | None = None,
        settings: LookupSettings | None = None,
    ) -> None:
        self.state = state or SessionState()
        self.registry = registry or default_registry()
        self.settings = settings or LookupSettings.from_options()
        self.transport = transport or HttpTransport(self.settings)
        self._token: CancellationToken | None = None

    def select_type(self, identifier_type: IdentifierType | None) -> None:
        self.state.selected_type = identifier_type
        self.state.raw_input = ""
        self.state.placeholder = self.registry.placeholder(identifier_type)
        self.hide_result()

    def set_input(self, raw_input: str) -> None:
        self.state.raw_input = raw_input

    def show_result(self, text: str, kind: PanelKind) -> None:
        self.state.panel = ResultPanel(kind=kind, text=text)

    def hide_result(self) -> None:
        self.state.panel = ResultPanel()

    def prepare(self, identifier_type: IdentifierType, value: str) -> Query:
        if not self.registry.validate(identifier_type, value):
            raise ValidationError(identifier_type.value, value)
        return self.registry.build_query(identifier_type, value)

    def cancel(self) -> bool:
        if self._token is None or self._token.cancelled:
            return False
        self._token.cancel()
        return True

    async def submit(self, raw_input: str | None = None) -> LookupOutcome | None:
        if self.state.busy:
            logger.debug("Submission ignored: a lookup is already running")
            return None
        if raw_input is not None:
            self.set_input(raw_input)

        identifier_type = self.state.selected_type
        value = self.state.raw_input.strip()
        if identifier_type is None or not value:
            return None

        outcome = LookupOutcome(identifier_type=identifier_type, value=value)
        try:
            outcome.query = self.prepare(identifier_type, value)
        except ValidationError as exc:
            outcome.error = exc
            self.show_result(exc.message, PanelKind.ERROR)
            return outcome

        self.state.busy = True
        self.hide_result()
        token = CancellationToken(self.settings.timeout_s)
        self._token = token
        try:
            outcome.response = await self.transport.fetch(
                outcome.query.url(self.settings.api_base), token
            )
        except IdentifierLookupError as exc:
            logger.warning(
                "Lookup failed (%s, %s): %s",
                identifier_type.value,
                exc.code,
                exc.details,
            )
            outcome.error = exc
            self.show_result(exc.message, PanelKind.ERROR)
            return outcome
        finally:
            self.state.busy = False
            self._token = None

        # Normalize with the type recorded at submit time, not the current
        # selection, which the user may have changed mid-request.
        outcome.view = self.registry.normalize(
            identifier_type, outcome.response.payload
        )
        self.show_result(
            render_view(outcome.view, outcome.response.payload),
            PanelKind.SUCCESS,
        )
        return outcome


__all__ = [
    "LookupController",
    "LookupOutcome",
    "PanelKind",
    "ResultPanel",
    "SessionState",
]
