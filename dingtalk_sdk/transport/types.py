"""Transport level request and response records."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..errors.types import DingTalkError

_IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})


@dataclass(frozen=True, slots=True)
class HttpRequest:
    """One HTTP exchange as issued by the services.

    ``url`` is already path-encoded; ``query`` pairs are form-encoded by the
    transport.
    """

    method: str
    url: str
    query: Sequence[tuple[str, str]] = ()
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None

    @classmethod
    def json(
        cls,
        method: str,
        url: str,
        payload: Any,
        *,
        query: Sequence[tuple[str, str]] = (),
        headers: Mapping[str, str] | None = None,
    ) -> HttpRequest:
        """Build a request carrying ``payload`` as a UTF-8 JSON body."""
        try:
            body = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode(
                "utf-8"
            )
        except (TypeError, ValueError) as e:
            raise DingTalkError.serialization(f"failed to encode request body: {e}") from e
        merged = {"Content-Type": "application/json"}
        if headers:
            merged.update(headers)
        return cls(method=method.upper(), url=url, query=tuple(query), headers=merged, body=body)

    @property
    def idempotent(self) -> bool:
        return self.method.upper() in _IDEMPOTENT_METHODS


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Successful (status < 400) HTTP response."""

    status: int
    headers: Mapping[str, str]
    body: bytes

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    def text(self) -> str:
        """Body decoded as UTF-8, invalid sequences replaced."""
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        try:
            return json.loads(self.text())
        except ValueError as e:
            raise DingTalkError.serialization(f"invalid JSON response: {e}") from e


def lower_headers(headers: Mapping[str, str] | Any) -> dict[str, str]:
    """Copy response headers into a dict keyed by lower-case name."""
    return {str(k).lower(): str(v) for k, v in headers.items()}


__all__ = ["HttpRequest", "HttpResponse", "lower_headers"]
