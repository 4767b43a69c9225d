"""Enterprise application credentials."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class AppCredentials:
    """``appkey`` / ``appsecret`` pair used to issue access tokens.

    The secret never shows up in ``repr``.
    """

    appkey: str
    appsecret: str = field(repr=False)

    def __repr__(self) -> str:
        return f"AppCredentials(appkey={self.appkey!r}, appsecret='<redacted>')"


__all__ = ["AppCredentials"]
