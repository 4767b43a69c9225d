"""Utility package: URL assembly and body redaction."""

from .redact import redact_text, truncate_snippet
from .url import append_query, endpoint_url, normalize_base_url, strip_query

__all__ = [
    "append_query",
    "endpoint_url",
    "normalize_base_url",
    "redact_text",
    "strip_query",
    "truncate_snippet",
]
