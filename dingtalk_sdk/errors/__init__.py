"""Error model: public ``DingTalkError`` plus internal transport failures."""

from .internal import InternalError, TransportError, TransportErrorCode
from .types import DingTalkError, ErrorKind, HttpError

__all__ = [
    "DingTalkError",
    "ErrorKind",
    "HttpError",
    "InternalError",
    "TransportError",
    "TransportErrorCode",
]
