"""Access token handling: credentials and the in-memory token cache."""

from .cache import AccessTokenCache, CachedToken, normalize_token_ttl
from .credentials import AppCredentials

__all__ = ["AccessTokenCache", "AppCredentials", "CachedToken", "normalize_token_ttl"]
