"""Thin OAuth helpers producing token data for :meth:`Snoocore.auth`.

Only the two grants a script or web app needs are covered: exchanging an
authorization code, and the application-only client-credentials grant.
"""

from __future__ import annotations

import json
import logging
from typing import Iterable, Optional, Union
from urllib.parse import urlencode

import httpx

from .auth import OAuthToken
from .errors import OAuthError, TransportError
from .settings import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://ssl.reddit.com/api/v1/authorize"
ACCESS_TOKEN_URL = "https://ssl.reddit.com/api/v1/access_token"


def get_auth_url(
    client_id: str,
    redirect_uri: str,
    scope: Union[str, Iterable[str]] = ("identity",),
    *,
    state: str = "snoocore",
    duration: str = "temporary",
    authorize_url: str = AUTHORIZE_URL,
) -> str:
    """Build the URL a user visits to grant access."""
    scopes = scope if isinstance(scope, str) else ",".join(scope)
    query = urlencode(
        {
            "client_id": client_id,
            "response_type": "code",
            "state": state,
            "redirect_uri": redirect_uri,
            "duration": duration,
            "scope": scopes,
        }
    )
    return f"{authorize_url}?{query}"


def _request_token(
    form: dict,
    *,
    client_id: str,
    client_secret: str,
    http: Optional[httpx.Client],
    user_agent: str,
    token_url: str,
) -> OAuthToken:
    owned = http is None
    session = http or httpx.Client()
    try:
        response = session.post(
            token_url,
            data=form,
            auth=(client_id, client_secret),
            headers={"User-Agent": user_agent},
        )
        response.raise_for_status()
    except httpx.HTTPError as exc:
        status_code = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
        raise TransportError(f"token request failed: {exc}", status_code=status_code) from exc
    finally:
        if owned:
            session.close()

    try:
        data = json.loads(response.text)
    except ValueError as exc:
        raise OAuthError(response.text) from exc

    if not isinstance(data, dict):
        raise OAuthError(data)
    if "error" in data:
        raise OAuthError(data["error"])

    logger.debug("OAuth token granted", extra={"grant_type": form.get("grant_type")})
    return OAuthToken.model_validate(data)


def get_auth_data(
    code: str,
    *,
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    http: Optional[httpx.Client] = None,
    user_agent: str = DEFAULT_USER_AGENT,
    token_url: str = ACCESS_TOKEN_URL,
) -> OAuthToken:
    """Exchange an authorization ``code`` for a token.

    Raises:
        TransportError: The token endpoint could not be reached.
        OAuthError: The token endpoint refused the grant.
    """
    return _request_token(
        {"grant_type": "authorization_code", "code": code, "redirect_uri": redirect_uri},
        client_id=client_id,
        client_secret=client_secret,
        http=http,
        user_agent=user_agent,
        token_url=token_url,
    )


def get_app_only_auth_data(
    *,
    client_id: str,
    client_secret: str,
    http: Optional[httpx.Client] = None,
    user_agent: str = DEFAULT_USER_AGENT,
    token_url: str = ACCESS_TOKEN_URL,
) -> OAuthToken:
    """Client-credentials grant for application-only access."""
    return _request_token(
        {"grant_type": "client_credentials"},
        client_id=client_id,
        client_secret=client_secret,
        http=http,
        user_agent=user_agent,
        token_url=token_url,
    )


__all__ = [
    "ACCESS_TOKEN_URL",
    "AUTHORIZE_URL",
    "get_app_only_auth_data",
    "get_auth_data",
    "get_auth_url",
]
