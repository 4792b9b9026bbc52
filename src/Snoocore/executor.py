# === NAVMAP v1 ===
# {
#   "module": "Snoocore.executor",
#   "purpose": "Perform one throttled, credential-decorated call against an endpoint",
#   "sections": [
#     {"id": "callexecutor", "name": "CallExecutor", "anchor": "class-callexecutor", "kind": "class"},
#     {"id": "endpointcall", "name": "EndpointCall", "anchor": "class-endpointcall", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""Perform one throttled, credential-decorated call against an endpoint.

**Flow**
--------
1. Acquire a throttle slot (released on every exit path).
2. Read an :class:`~Snoocore.auth.AuthSnapshot` and build the request from it:
   URL variant, template substitution, extension, payload, headers.
3. Send through the shared ``httpx.Client``.
4. Write back session side effects (modhash in the body, ``Set-Cookie``).
5. Normalise: transport failures, unparsable bodies and ``error`` payloads
   all raise; anything else is returned as parsed JSON.

Reading credentials (step 2) and writing them back (step 4) are separate
steps, so concurrent calls never hold the auth lock across I/O.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from .auth import AuthSnapshot, AuthState
from .descriptors import EndpointDescriptor
from .errors import RemoteApiError, TransportError
from .throttle import ThrottleScheduler
from .urls import build_payload, build_url

logger = logging.getLogger(__name__)

FILE_FIELD = "file"


def extract_modhash(data: Any) -> Optional[str]:
    """Return ``data["json"]["data"]["modhash"]`` when the body carries it."""
    try:
        modhash = data["json"]["data"]["modhash"]
    except (KeyError, TypeError, IndexError):
        return None
    return modhash if isinstance(modhash, str) else None


def extract_cookie(headers: httpx.Headers) -> Optional[str]:
    """Collapse ``Set-Cookie`` headers into a ``Cookie`` request value."""
    values = headers.get_list("set-cookie")
    if not values:
        return None
    pairs = [value.split(";", 1)[0].strip() for value in values]
    return "; ".join(pair for pair in pairs if pair)


class CallExecutor:
    """Executes endpoint calls for one client instance."""

    def __init__(
        self,
        *,
        http: httpx.Client,
        auth: AuthState,
        throttle: ThrottleScheduler,
        user_agent: str,
        native: bool = True,
    ) -> None:
        self.http = http
        self.auth = auth
        self.throttle = throttle
        self.user_agent = user_agent
        self.native = native

    def bind(self, descriptor: EndpointDescriptor) -> "EndpointCall":
        return EndpointCall(self, descriptor)

    # ------------------------------------------------------------ requests

    def session_headers(self, auth: AuthSnapshot) -> Dict[str, str]:
        """User-Agent and cookie/modhash session headers, without OAuth."""
        headers: Dict[str, str] = {}
        # Browser hosts cannot set User-Agent or Cookie
        if self.native:
            headers["User-Agent"] = self.user_agent
        if auth.is_logged_in:
            headers["X-Modhash"] = auth.modhash
            if self.native and auth.cookie:
                headers["Cookie"] = auth.cookie
        return headers

    def build_headers(self, auth: AuthSnapshot) -> Dict[str, str]:
        headers = self.session_headers(auth)
        if auth.is_authenticated and auth.token is not None:
            headers["Authorization"] = auth.token.authorization
        return headers

    def build_request(
        self,
        descriptor: EndpointDescriptor,
        auth: AuthSnapshot,
        args: Mapping[str, Any],
    ) -> httpx.Request:
        """Construct the outgoing request; raises before any I/O on bad input."""
        method = descriptor.method
        url = build_url(descriptor, auth, args)
        payload = build_payload(args, native=self.native, user_agent=self.user_agent)
        headers = self.build_headers(auth)

        if method == "GET":
            return self.http.build_request(method, url, params=payload, headers=headers)

        if FILE_FIELD in payload:
            upload = payload.pop(FILE_FIELD)
            return self.http.build_request(
                method,
                url,
                data=payload,
                files={FILE_FIELD: upload},
                headers=headers,
            )
        return self.http.build_request(method, url, data=payload, headers=headers)

    def _send(self, request: httpx.Request) -> httpx.Response:
        response = self.http.send(request)
        response.raise_for_status()
        return response

    # ----------------------------------------------------------- execution

    def post_session_form(self, url: str, form: Mapping[str, Any]) -> httpx.Response:
        """Throttled form POST carrying only the session headers.

        No OAuth header and no ``app`` field are added, and the body is
        returned unparsed.

        Raises:
            TransportError: On network failure or an HTTP error status.
        """
        with self.throttle.slot() as wait_s:
            headers = self.session_headers(self.auth.snapshot())
            request = self.http.build_request("POST", url, data=dict(form), headers=headers)
            self._log_dispatch(request, wait_s)
            try:
                return self._send(request)
            except httpx.HTTPError as exc:
                raise _transport_error(request, exc) from exc

    def execute(
        self,
        descriptor: EndpointDescriptor,
        args: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Throttled, decorated call returning the parsed JSON body.

        Raises:
            MissingParameterError: A ``$`` URL variable was not supplied.
            UnsupportedExtensionError: The endpoint cannot be served as JSON.
            TransportError: Network failure or HTTP error status.
            RemoteApiError: The body was not JSON or carried an ``error`` field.
        """
        with self.throttle.slot() as wait_s:
            request = self.build_request(descriptor, self.auth.snapshot(), args or {})
            self._log_dispatch(request, wait_s)
            result = self._exchange(request)
            return self._normalize(request, result)

    def _exchange(self, request: httpx.Request) -> Any:
        """Send ``request``; failures come back as ``{"error": ...}`` payloads."""
        try:
            response = self._send(request)
        except httpx.HTTPError as exc:
            return {"error": exc}

        try:
            data = json.loads(response.text)
        except ValueError:
            return {"error": response.text}

        self._record_session(data, response.headers)
        return data

    def _record_session(self, data: Any, headers: httpx.Headers) -> None:
        modhash = extract_modhash(data)
        cookie = extract_cookie(headers)
        if modhash is None and cookie is None:
            return
        self.auth.update_session(modhash=modhash, cookie=cookie)
        logger.debug(
            "Session updated from response",
            extra={"modhash_updated": modhash is not None, "cookie_updated": cookie is not None},
        )

    def _normalize(self, request: httpx.Request, result: Any) -> Any:
        if not (isinstance(result, dict) and "error" in result):
            return result

        error = result["error"]
        logger.warning(
            "Call failed",
            extra={"method": request.method, "url": str(request.url), "reason": str(error)},
        )
        if isinstance(error, httpx.HTTPError):
            raise _transport_error(request, error) from error
        raise RemoteApiError(error)

    def _log_dispatch(self, request: httpx.Request, wait_s: float) -> None:
        logger.debug(
            "Dispatching call",
            extra={"method": request.method, "url": str(request.url), "wait_s": wait_s},
        )


def _transport_error(request: httpx.Request, exc: httpx.HTTPError) -> TransportError:
    status_code = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
    return TransportError(f"{request.method} {request.url} failed: {exc}", status_code=status_code)


class EndpointCall:
    """Callable bound to one descriptor; ``call(args, **kwargs)``."""

    def __init__(self, executor: CallExecutor, descriptor: EndpointDescriptor) -> None:
        self._executor = executor
        self.descriptor = descriptor

    def __call__(self, args: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Any:
        merged = dict(args or {})
        merged.update(kwargs)
        return self._executor.execute(self.descriptor, merged)

    def __repr__(self) -> str:
        d = self.descriptor
        return f"<EndpointCall {d.method} {d.path or d.url.standard}>"


__all__ = ["CallExecutor", "EndpointCall", "extract_cookie", "extract_modhash"]
