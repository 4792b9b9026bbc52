"""Snoocore: declarative REST endpoint tree with throttled, authenticated calls.

This facade exposes the client, its configuration and error hierarchy, and
the descriptor helpers used to build endpoint tables.
"""

from __future__ import annotations

from .auth import AuthSnapshot, AuthState, OAuthToken
from .client import Snoocore
from .descriptors import EndpointDescriptor, EndpointUrls, load_descriptors
from .errors import (
    DescriptorLoadError,
    InvalidArgumentError,
    InvalidPathError,
    MissingParameterError,
    OAuthError,
    RemoteApiError,
    SnoocoreError,
    TransportError,
    UnsupportedExtensionError,
)
from .settings import SnoocoreSettings, get_settings, reset_settings
from .throttle import ThrottleScheduler
from .tree import EndpointNode, EndpointTree

__version__ = "1.0.0"

__all__ = [
    "AuthSnapshot",
    "AuthState",
    "DescriptorLoadError",
    "EndpointDescriptor",
    "EndpointNode",
    "EndpointTree",
    "EndpointUrls",
    "InvalidArgumentError",
    "InvalidPathError",
    "MissingParameterError",
    "OAuthError",
    "OAuthToken",
    "RemoteApiError",
    "Snoocore",
    "SnoocoreError",
    "SnoocoreSettings",
    "ThrottleScheduler",
    "TransportError",
    "UnsupportedExtensionError",
    "__version__",
    "get_settings",
    "load_descriptors",
    "reset_settings",
]
