"""HTTP collaborators: ``send(request) -> response`` or a ``TransportError``."""

from .async_transport import AsyncTransport
from .blocking_transport import BlockingTransport
from .types import HttpRequest, HttpResponse

__all__ = ["AsyncTransport", "BlockingTransport", "HttpRequest", "HttpResponse"]
