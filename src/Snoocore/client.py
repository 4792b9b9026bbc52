# === NAVMAP v1 ===
# {
#   "module": "Snoocore.client",
#   "purpose": "Public facade: endpoint tree access plus session and OAuth helpers",
#   "sections": [
#     {"id": "snoocore", "name": "Snoocore", "anchor": "class-snoocore", "kind": "class"},
#     {"id": "create-http-client", "name": "create_http_client", "anchor": "function-create-http-client", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Public facade: endpoint tree access plus session and OAuth helpers.

Example:
    >>> from Snoocore import Snoocore
    >>> reddit = Snoocore(user_agent="my-bot/0.1 by someone")
    >>> listing = reddit.r["$subreddit"].new.get({"$subreddit": "python"})
    >>> listing = reddit("/r/$subreddit/new").get({"$subreddit": "python"})
    >>> reddit.login(username="someone", password="hunter2")
    >>> reddit.api.submit.post(sr="test", kind="self", title="hi", text="")
    >>> reddit.logout()

Every call made through one instance shares its throttle and its
credentials.  Instances are independent of each other.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import Any, Callable, List, Optional, Tuple, Union

import httpx

from .auth import AuthState, OAuthToken, TokenData
from .descriptors import DescriptorSource, load_descriptors
from .errors import InvalidArgumentError
from .executor import CallExecutor
from .settings import SnoocoreSettings, get_settings
from .throttle import ThrottleScheduler
from .tree import EndpointNode, EndpointTree, build_endpoint_tree, build_raw_node

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/login"
ME_PATH = "/api/me.json"


def create_http_client(settings: SnoocoreSettings) -> httpx.Client:
    """Create the session owned by a client.

    The cookie jar refuses every cookie: the only cookie ever sent is the one
    tracked by :class:`~Snoocore.auth.AuthState`.
    """
    jar = CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))
    return httpx.Client(
        timeout=settings.timeout,
        follow_redirects=True,
        cookies=jar,
    )


class Snoocore:
    """Client for a REST API described by an endpoint descriptor table.

    Attribute and item access fall through to the endpoint tree, and the
    instance itself is callable as :meth:`path`.  A top-level segment named
    like a client attribute (``login``, ``path``, ``settings`` ...) resolves to
    the attribute; reach the segment with ``client["login"]`` instead.
    """

    def __init__(
        self,
        settings: Optional[SnoocoreSettings] = None,
        *,
        user_agent: Optional[str] = None,
        throttle: Optional[int] = None,
        browser: Optional[bool] = None,
        descriptors: DescriptorSource = None,
        http: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Base settings (defaults to :func:`get_settings`).
            user_agent: Override ``settings.user_agent``.
            throttle: Override ``settings.throttle`` (milliseconds).
            browser: Override ``settings.browser``.
            descriptors: Descriptor source; defaults to
                ``settings.endpoints_file`` or the bundled table.
            http: Injected ``httpx.Client``; never closed by this instance.
            sleep: Sleep function used by the throttle.
        """
        base = settings or get_settings()
        overrides = {
            key: value
            for key, value in (
                ("user_agent", user_agent),
                ("throttle", throttle),
                ("browser", browser),
            )
            if value is not None
        }
        self.settings = (
            SnoocoreSettings(**{**base.model_dump(), **overrides}) if overrides else base
        )

        self._auth = AuthState()
        self._throttle = ThrottleScheduler(self.settings.throttle, sleep=sleep)
        self._owns_http = http is None
        self._http = http if http is not None else create_http_client(self.settings)
        self._executor = CallExecutor(
            http=self._http,
            auth=self._auth,
            throttle=self._throttle,
            user_agent=self.settings.user_agent,
            native=not self.settings.browser,
        )

        source = descriptors if descriptors is not None else self.settings.endpoints_file
        self._tree: EndpointTree = build_endpoint_tree(
            load_descriptors(source), self._executor.bind
        )
        for segment in sorted(FACADE_ATTRIBUTES.intersection(self._tree.root)):
            logger.warning(
                "Top-level segment shadowed by a client attribute; use item access",
                extra={"segment": segment},
            )
        logger.debug(
            "Client initialized",
            extra={
                "endpoints": len(self._tree.registry),
                "throttle_ms": self.settings.throttle,
                "browser": self.settings.browser,
            },
        )

    # ------------------------------------------------------------ navigation

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._tree.root, name)

    def __getitem__(self, segment: str) -> EndpointNode:
        return self._tree.root[segment]

    def __call__(self, path: str) -> EndpointNode:
        return self.path(path)

    def __repr__(self) -> str:
        return f"<Snoocore endpoints={len(self._tree.registry)} {self._auth!r}>"

    def path(self, path: str) -> EndpointNode:
        """Return the leaf for ``path`` (leading slash optional).

        Raises:
            InvalidPathError: If the path is unknown or has no methods.
        """
        return self._tree.lookup(path)

    def raw(self, url: str) -> EndpointNode:
        """Leaf with all six methods for an absolute URL outside the table."""
        return build_raw_node(url, self._executor.bind)

    def endpoints(self) -> List[Tuple[str, Tuple[str, ...]]]:
        return self._tree.endpoints()

    @property
    def auth_state(self) -> AuthState:
        return self._auth

    @property
    def throttle(self) -> ThrottleScheduler:
        return self._throttle

    @property
    def is_authenticated(self) -> bool:
        return self._auth.is_authenticated()

    @property
    def is_logged_in(self) -> bool:
        return self._auth.is_logged_in()

    # --------------------------------------------------------------- session

    def login(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        rem: bool = True,
        api_type: str = "json",
        modhash: Optional[str] = None,
        cookie: Optional[str] = None,
    ) -> Any:
        """Start a cookie/modhash session.

        Either ``username`` and ``password`` (one login call), or an existing
        ``modhash`` and ``cookie`` (installed without a network call).

        Raises:
            InvalidArgumentError: If neither credential pair is complete.
        """
        if modhash and cookie and not (username or password):
            self._auth.set_session(modhash, cookie)
            return None

        if not username or not password:
            raise InvalidArgumentError(
                "login expects either a username/password, or a cookie/modhash"
            )

        return self.path(LOGIN_PATH).post(
            {"user": username, "passwd": password, "rem": rem, "api_type": api_type}
        )

    def logout(self) -> None:
        """End the current session; a no-op when no modhash can be found."""
        modhash = self._auth.modhash
        if not modhash:
            result = self.path(ME_PATH).get()
            data = result.get("data") if isinstance(result, dict) else None
            modhash = data.get("modhash") if isinstance(data, dict) else None

        if not modhash:
            return

        self._executor.post_session_form(self.settings.logout_url, {"uh": modhash})
        self._auth.clear_session()
        logger.debug("Session cleared after logout")

    # ----------------------------------------------------------------- oauth

    def auth(self, auth_data: Union[TokenData, "Future[TokenData]"]) -> OAuthToken:
        """Install OAuth token data, waiting on it first if it is a future."""
        if isinstance(auth_data, Future):
            auth_data = auth_data.result()
        return self._auth.set_oauth(auth_data)

    def deauth(self) -> None:
        self._auth.clear_oauth()

    # ------------------------------------------------------------- lifecycle

    def close(self) -> None:
        """Close the HTTP session if this instance created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "Snoocore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


# Names attribute access resolves on the client rather than on the tree root.
FACADE_ATTRIBUTES = frozenset(
    name for name in dir(Snoocore) if not name.startswith("_")
) | {"settings"}


__all__ = ["FACADE_ATTRIBUTES", "LOGIN_PATH", "ME_PATH", "Snoocore", "create_http_client"]
