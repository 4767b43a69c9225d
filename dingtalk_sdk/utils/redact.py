"""Masking and truncation for response bodies retained in errors.

Redaction is a textual heuristic: it looks for well-known key names and masks
a fixed-width window after the first occurrence of each. It does not parse
JSON, so values stored under unusual key names are not masked.
"""

from __future__ import annotations

import re

from ..constants import REDACTION_WINDOW_CHARS

SENSITIVE_KEYS: tuple[str, ...] = (
    "token",
    "access_token",
    "appsecret",
    "authorization",
    "cookie",
    "passwd",
    "password",
    "secret",
)

REDACTION_MARKER = "=<redacted>"
TRUNCATION_MARKER = "...(truncated)"

_KEY_PATTERNS = tuple(re.compile(re.escape(key), re.IGNORECASE) for key in SENSITIVE_KEYS)


def redact_text(text: str, window: int = REDACTION_WINDOW_CHARS) -> str:
    """Mask the ``window`` characters following each sensitive key.

    Keys are processed in order against the progressively redacted text, so
    a later key may land inside an earlier mask.
    """
    output = text
    for pattern in _KEY_PATTERNS:
        match = pattern.search(output)
        if match is None:
            continue
        start = match.end()
        end = min(start + window, len(output))
        if start < end:
            output = output[:start] + REDACTION_MARKER + output[end:]
    return output


def truncate_snippet(text: str, max_bytes: int) -> str:
    """Cut ``text`` to at most ``max_bytes`` UTF-8 bytes plus a marker.

    The cut never splits a multi-byte character; the truncation marker is
    appended whenever anything was dropped.
    """
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    # Input is valid UTF-8, so "ignore" only drops the partial trailing character.
    head = encoded[: max(max_bytes, 0)].decode("utf-8", errors="ignore")
    return head + TRUNCATION_MARKER


__all__ = [
    "REDACTION_MARKER",
    "SENSITIVE_KEYS",
    "TRUNCATION_MARKER",
    "redact_text",
    "truncate_snippet",
]
