"""Base URL validation and endpoint assembly."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

from ..errors.types import DingTalkError

# Characters allowed unescaped inside a single path segment (RFC 3986 pchar
# minus "/"), so an embedded slash always becomes %2F.
_SEGMENT_SAFE = "!$&'()*+,;=:@"


def normalize_base_url(raw: str) -> str:
    """Validate and canonicalize a configured base URL.

    Raises:
        DingTalkError: ``INVALID_CONFIG`` when the value has no scheme or
            host, or carries a query string or fragment.
    """
    value = (raw or "").strip()
    try:
        parts = urlsplit(value)
    except ValueError as e:
        raise DingTalkError.invalid_config(f"Invalid base_url `{value}`: {e}") from e

    if not parts.scheme:
        raise DingTalkError.invalid_config(f"Invalid base_url `{value}`")
    if not parts.netloc:
        raise DingTalkError.invalid_config(f"base_url `{value}` must include a host")
    if parts.query or parts.fragment or "?" in value or "#" in value:
        raise DingTalkError.invalid_config("base_url must not contain query or fragment")

    path = parts.path
    if path != "/":
        path = path.rstrip("/") or "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc, path, "", ""))


def endpoint_url(base_url: str, segments: Sequence[str]) -> str:
    """Append percent-encoded path segments to a normalized base URL."""
    parts = urlsplit(base_url)
    encoded = "/".join(quote(segment, safe=_SEGMENT_SAFE) for segment in segments)
    path = parts.path.rstrip("/")
    if encoded:
        path = f"{path}/{encoded}"
    return urlunsplit((parts.scheme, parts.netloc, path or "/", "", ""))


def append_query(url: str, pairs: Iterable[tuple[str, str]]) -> str:
    """Form-encode ``pairs`` onto ``url``, keeping any existing query."""
    extra = urlencode(list(pairs))
    if not extra:
        return url
    separator = "&" if urlsplit(url).query else "?"
    return f"{url}{separator}{extra}"


def strip_query(url: str) -> str:
    """Return ``url`` without query or fragment (safe for logging)."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


__all__ = ["append_query", "endpoint_url", "normalize_base_url", "strip_query"]
