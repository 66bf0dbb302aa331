from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Protocol

import httpx

from identifier_lookup.config import LookupSettings
from identifier_lookup.errors import (
    ConnectivityError,
    LookupCancelledError,
    LookupTimeoutError,
    ResponseDecodeError,
    ServerError,
)
from identifier_lookup.models import RawResponse

logger = logging.getLogger(__name__)

TIMEOUT_REASON = "timeout"
CANCEL_REASON = "cancelled"


class CancellationToken:
    """Fires once, either through :meth:`cancel` or when ``timeout_s`` elapses.

    The timeout is applied by the transport that awaits the token; whoever
    owns the token may cancel it early (e.g. a superseding submission).
    """

    def __init__(self, timeout_s: float | None = None) -> None:
        self.timeout_s = timeout_s
        self.reason: str | None = None
        self._event: asyncio.Event | None = None

    @property
    def cancelled(self) -> bool:
        return self.reason is not None

    def cancel(self, reason: str = CANCEL_REASON) -> None:
        if self.reason is None:
            self.reason = reason
        if self._event is not None:
            self._event.set()

    async def wait(self) -> None:
        if self._event is None:
            self._event = asyncio.Event()
        if self.reason is not None:
            self._event.set()
        await self._event.wait()


class Transport(Protocol):
    async def fetch(self, url: str, token: CancellationToken) -> RawResponse: ...


_client_factory: Callable[..., httpx.AsyncClient] = httpx.AsyncClient


class HttpTransport(Transport):
    def __init__(
        self,
        settings: LookupSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or LookupSettings()
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "application/json",
        }

    async def _get(self, url: str) -> RawResponse:
        logger.debug("GET %s", url)
        client_kwargs: dict[str, Any] = {
            "headers": self._headers(),
            "timeout": self.settings.timeout_s,
        }
        if self._transport is not None:
            client_kwargs["transport"] = self._transport
        try:
            async with _client_factory(**client_kwargs) as client:
                resp = await client.get(url)
        except httpx.TimeoutException as exc:
            raise LookupTimeoutError(details={"url": url, "error": str(exc)}) from exc
        except httpx.DecodingError as exc:
            raise ResponseDecodeError(details={"url": url, "error": str(exc)}) from exc
        except httpx.HTTPError as exc:
            raise ConnectivityError(details={"url": url, "error": str(exc)}) from exc

        if not resp.is_success:
            raise ServerError(resp.status_code, details={"url": url})
        try:
            payload = resp.json()
        except ValueError as exc:
            raise ResponseDecodeError(details={"url": url, "error": str(exc)}) from exc

        return RawResponse(
            url=url,
            status_code=resp.status_code,
            payload=payload,
            retrieved_at=datetime.now(timezone.utc).isoformat(),
        )

    async def fetch(self, url: str, token: CancellationToken) -> RawResponse:
        if token.cancelled:
            raise LookupCancelledError(details={"url": url})

        request = asyncio.ensure_future(self._get(url))
        cancelled = asyncio.ensure_future(token.wait())
        try:
            done, _ = await asyncio.wait(
                {request, cancelled},
                timeout=token.timeout_s,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            cancelled.cancel()
            if not request.done():
                request.cancel()
                await asyncio.gather(request, return_exceptions=True)

        if request in done:
            return request.result()

        token.cancel(TIMEOUT_REASON)
        if token.reason == TIMEOUT_REASON:
            raise LookupTimeoutError(
                details={"url": url, "timeout_s": token.timeout_s},
            )
        raise LookupCancelledError(details={"url": url})


__all__ = [
    "CANCEL_REASON",
    "CancellationToken",
    "HttpTransport",
    "TIMEOUT_REASON",
    "Transport",
]
