from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import quote

# Characters left unescaped by JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE = "-_.!~*'()"


class IdentifierType(str, Enum):
    PHONE = "phone"
    NATIONAL_ID = "nationalId"
    TAX_ID = "taxId"
    PAYMENT_ADDRESS = "paymentAddress"
    ROUTING_CODE = "routingCode"
    POSTAL_CODE = "postalCode"
    VEHICLE_REG = "vehicleReg"

    @classmethod
    def parse(cls, text: str) -> IdentifierType:
        """Resolve a tag or a lookup-service slug (e.g. ``aadhaar``)."""

        key = str(text or "").strip().lower()
        for member in cls:
            if key == member.value.lower():
                return member
        alias = _ALIASES.get(key)
        if alias is not None:
            return alias
        choices = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown identifier type '{text}' (expected: {choices})")


_ALIASES: dict[str, IdentifierType] = {
    "aadhaar": IdentifierType.NATIONAL_ID,
    "gst": IdentifierType.TAX_ID,
    "upi": IdentifierType.PAYMENT_ADDRESS,
    "ifsc": IdentifierType.ROUTING_CODE,
    "pincode": IdentifierType.POSTAL_CODE,
    "vehicle": IdentifierType.VEHICLE_REG,
    "rc": IdentifierType.VEHICLE_REG,
}


@dataclass(frozen=True)
class TypeProfile:
    identifier_type: IdentifierType
    pattern: re.Pattern[str]
    endpoint: str
    param: str
    fields: tuple[tuple[str, str], ...]
    title: str = ""
    placeholder: str = ""

    def query_for(self, value: str) -> Query:
        return Query(path=self.endpoint, param=self.param, value=value)


@dataclass(frozen=True)
class Query:
    path: str
    param: str
    value: str

    @property
    def encoded_value(self) -> str:
        return quote(self.value, safe=_URI_COMPONENT_SAFE)

    @property
    def target(self) -> str:
        return f"{self.path}?{self.param}={self.encoded_value}"

    def url(self, api_base: str) -> str:
        return f"{api_base.rstrip('/')}{self.target}"


@dataclass
class RawResponse:
    url: str
    status_code: int
    payload: Any
    retrieved_at: str


@dataclass(frozen=True)
class NormalizedView:
    pairs: tuple[tuple[str, Any], ...] = field(default_factory=tuple)
    has_data: bool = False


__all__ = [
    "IdentifierType",
    "NormalizedView",
    "Query",
    "RawResponse",
    "TypeProfile",
]
