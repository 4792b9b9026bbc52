"""Authentication state for cookie/modhash sessions and OAuth bearer tokens.

Two credential sets are tracked side by side.  A session login yields a
modhash (and, on native hosts, a cookie); an OAuth grant yields a token.  Both
can be present at once: the token decides which URL variant is used, while
the session headers are still attached when a modhash is known.

All mutation goes through the transition methods below, under one lock.
Callers read a consistent :class:`AuthSnapshot` before dispatching and write
back through :meth:`AuthState.update_session` after the response arrives.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class OAuthToken(BaseModel):
    """Token payload produced by an OAuth grant."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="allow")

    access_token: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    scope: Optional[str] = None
    refresh_token: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.access_token is not None and self.token_type is not None

    @property
    def authorization(self) -> str:
        """Value for the ``Authorization`` header."""
        return f"{self.token_type} {self.access_token}"


TokenData = Union[OAuthToken, Mapping[str, Any]]


@dataclass(frozen=True)
class AuthSnapshot:
    """Point-in-time copy of the credentials used to decorate one request."""

    modhash: str = ""
    cookie: str = ""
    token: Optional[OAuthToken] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.token.is_complete

    @property
    def is_logged_in(self) -> bool:
        return bool(self.modhash)


class AuthState:
    """Mutable credential holder owned by a single client instance."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._modhash = ""
        self._cookie = ""
        self._token: Optional[OAuthToken] = None

    def __repr__(self) -> str:
        snap = self.snapshot()
        return (
            f"AuthState(logged_in={snap.is_logged_in}, "
            f"authenticated={snap.is_authenticated})"
        )

    # ------------------------------------------------------------------ reads

    @property
    def modhash(self) -> str:
        with self._lock:
            return self._modhash

    @property
    def cookie(self) -> str:
        with self._lock:
            return self._cookie

    @property
    def token(self) -> Optional[OAuthToken]:
        with self._lock:
            return self._token

    def snapshot(self) -> AuthSnapshot:
        with self._lock:
            return AuthSnapshot(modhash=self._modhash, cookie=self._cookie, token=self._token)

    def is_authenticated(self) -> bool:
        """True when the OAuth token carries both an access token and a type."""
        return self.snapshot().is_authenticated

    def is_logged_in(self) -> bool:
        """True when a session modhash is known."""
        return self.snapshot().is_logged_in

    # ------------------------------------------------------------ transitions

    def set_oauth(self, token_data: TokenData) -> OAuthToken:
        """Install an OAuth token, replacing any previous one."""
        token = (
            token_data
            if isinstance(token_data, OAuthToken)
            else OAuthToken.model_validate(dict(token_data))
        )
        with self._lock:
            self._token = token
        logger.debug("OAuth token installed", extra={"token_type": token.token_type})
        return token

    def clear_oauth(self) -> None:
        with self._lock:
            self._token = None

    def set_session(self, modhash: str, cookie: str = "") -> None:
        """Install a complete session, replacing both modhash and cookie."""
        with self._lock:
            self._modhash = modhash or ""
            self._cookie = cookie or ""

    def update_session(
        self,
        *,
        modhash: Optional[str] = None,
        cookie: Optional[str] = None,
    ) -> None:
        """Overwrite only the session pieces a response carried."""
        with self._lock:
            if modhash is not None:
                self._modhash = modhash
            if cookie is not None:
                self._cookie = cookie

    def clear_session(self) -> None:
        with self._lock:
            self._modhash = ""
            self._cookie = ""


__all__ = ["AuthSnapshot", "AuthState", "OAuthToken", "TokenData"]
