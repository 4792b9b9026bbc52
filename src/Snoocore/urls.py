"""URL resolution and payload building for endpoint calls.

Everything here is pure: the same descriptor, credentials and arguments always
produce the same URL and payload.  The three URL steps compose in order:

1. :func:`select_base_url` picks the OAuth or standard URL variant.
2. :func:`substitute_template` fills ``$name`` variables from the arguments.
3. :func:`apply_extension` appends ``.json`` when the endpoint needs it.

:func:`build_payload` then drops the ``$`` bindings consumed by step 2 and, on
browser hosts, carries the user agent in an ``app`` field.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Sequence

from .auth import AuthSnapshot
from .descriptors import EndpointDescriptor
from .errors import MissingParameterError, UnsupportedExtensionError

TEMPLATE_PATTERN = re.compile(r"\$[\w.]+")
JSON_EXTENSION = ".json"


def select_base_url(descriptor: EndpointDescriptor, auth: AuthSnapshot) -> str:
    """Return the OAuth URL when authenticated and one exists, else the standard URL."""
    if auth.is_authenticated and descriptor.url.oauth:
        return descriptor.url.oauth
    return descriptor.url.standard


def substitute_template(url: str, args: Mapping[str, Any]) -> str:
    """Replace every ``$name`` token in ``url`` with ``str(args["$name"])``.

    Raises:
        MissingParameterError: If a token has no exactly matching key.
    """
    if "$" not in url:
        return url

    for token in TEMPLATE_PATTERN.findall(url):
        if token not in args:
            raise MissingParameterError(token)

    return TEMPLATE_PATTERN.sub(lambda match: str(args[match.group(0)]), url)


def apply_extension(url: str, extensions: Sequence[str]) -> str:
    """Append ``.json`` for endpoints that declare format extensions.

    Raises:
        UnsupportedExtensionError: If extensions are declared but ``.json`` is
            not among them.
    """
    if not extensions:
        return url
    if JSON_EXTENSION not in extensions:
        raise UnsupportedExtensionError(extensions)
    return url + JSON_EXTENSION


def build_url(descriptor: EndpointDescriptor, auth: AuthSnapshot, args: Mapping[str, Any]) -> str:
    url = select_base_url(descriptor, auth)
    url = substitute_template(url, args)
    return apply_extension(url, descriptor.extensions)


def build_payload(args: Mapping[str, Any], *, native: bool, user_agent: str) -> Dict[str, Any]:
    """Copy request fields out of ``args``, skipping ``$`` template bindings.

    Hosts that cannot set a ``User-Agent`` header (``native=False``) send the
    agent string as an ``app`` field instead, unless the caller supplied one.
    """
    payload = {key: value for key, value in args.items() if not key.startswith("$")}
    if not native and not payload.get("app"):
        payload["app"] = user_agent
    return payload


__all__ = [
    "JSON_EXTENSION",
    "TEMPLATE_PATTERN",
    "apply_extension",
    "build_payload",
    "build_url",
    "select_base_url",
    "substitute_template",
]
