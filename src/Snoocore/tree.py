"""Endpoint tree: dot and path addressable call leaves built from descriptors.

The descriptor table is flat; callers address endpoints the way the remote
API documents them (``/api/login``, ``/r/$subreddit/new``).  The tree keeps
one :class:`EndpointNode` per path segment and a registry from full path to
node, so both ``tree.api.login.post(...)`` and ``tree.lookup("/api/login")``
reach the same leaf.  Built once per client, read-only afterwards.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .descriptors import HTTP_METHODS, EndpointDescriptor
from .errors import InvalidPathError

logger = logging.getLogger(__name__)

CallFactory = Callable[[EndpointDescriptor], Callable[..., Any]]


class EndpointNode:
    """One path segment; may hold both child segments and method callables.

    Attribute access resolves methods first, then child segments.  Segments
    named like a node attribute (``path``, ``methods``, ``child`` ...) are
    only reachable through item access: ``node["path"]``.
    """

    def __init__(self, path: str = "") -> None:
        self.path = path
        self._children: Dict[str, EndpointNode] = {}
        self._methods: Dict[str, Callable[..., Any]] = {}

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._methods:
            return self._methods[name]
        if name in self._children:
            return self._children[name]
        raise AttributeError(f"{self.path or '/'} has no segment or method {name!r}")

    def __getitem__(self, segment: str) -> "EndpointNode":
        return self._children[segment]

    def __contains__(self, segment: object) -> bool:
        return segment in self._children

    def __iter__(self) -> Iterator[str]:
        return iter(self._children)

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | set(self._children) | set(self._methods))

    def __repr__(self) -> str:
        methods = ",".join(m.upper() for m in self._methods) or "-"
        return f"<EndpointNode {self.path or '/'} [{methods}]>"

    @property
    def methods(self) -> Mapping[str, Callable[..., Any]]:
        return dict(self._methods)

    @property
    def has_methods(self) -> bool:
        return bool(self._methods)

    def child(self, segment: str) -> Optional["EndpointNode"]:
        return self._children.get(segment)

    def ensure_child(self, segment: str) -> "EndpointNode":
        node = self._children.get(segment)
        if node is None:
            node = EndpointNode(f"{self.path}/{segment}")
            if segment in RESERVED_SEGMENTS:
                logger.warning(
                    "Path segment shadowed by a node attribute; use item access",
                    extra={"segment": segment, "path": node.path},
                )
            self._children[segment] = node
        return node

    def attach(self, method: str, call: Callable[..., Any]) -> bool:
        """Attach ``call`` under ``method``; returns True if it replaced one."""
        key = method.lower()
        replaced = key in self._methods
        self._methods[key] = call
        return replaced


# Names attribute access resolves on the node itself rather than on a segment.
RESERVED_SEGMENTS = frozenset(
    name for name in dir(EndpointNode) if not name.startswith("_")
) | {"path"}


class EndpointTree:
    """Root node plus a registry from normalised path to leaf."""

    def __init__(self) -> None:
        self.root = EndpointNode()
        self.registry: Dict[str, EndpointNode] = {}

    def add(self, descriptor: EndpointDescriptor, call: Callable[..., Any]) -> None:
        node = self.root
        for segment in descriptor.segments:
            node = node.ensure_child(segment)

        if node.attach(descriptor.method, call):
            # Later descriptors win; the table is not expected to repeat pairs.
            logger.warning(
                "Duplicate endpoint descriptor replaced earlier call",
                extra={"path": descriptor.path, "method": descriptor.method},
            )
        self.registry[node.path] = node

    def lookup(self, path: str) -> EndpointNode:
        """Walk ``path`` one segment at a time.

        Raises:
            InvalidPathError: If a segment is missing or the node has no methods.
        """
        trimmed = path[1:] if path.startswith("/") else path
        node = self.root
        for segment in trimmed.split("/"):
            found = node.child(segment)
            if found is None:
                raise InvalidPathError(path)
            node = found
        if not node.has_methods:
            raise InvalidPathError(path)
        return node

    def endpoints(self) -> List[Tuple[str, Tuple[str, ...]]]:
        """``(path, METHODS)`` pairs in registration order."""
        return [
            (path, tuple(method.upper() for method in node.methods))
            for path, node in self.registry.items()
        ]


def build_endpoint_tree(
    descriptors: Iterable[EndpointDescriptor],
    factory: CallFactory,
) -> EndpointTree:
    """Build the call tree, binding each descriptor through ``factory``."""
    tree = EndpointTree()
    for descriptor in descriptors:
        if descriptor.method not in HTTP_METHODS:
            logger.debug(
                "Skipping descriptor with unsupported method",
                extra={"path": descriptor.path, "method": descriptor.method},
            )
            continue
        tree.add(descriptor, factory(descriptor))
    return tree


def build_raw_node(url: str, factory: CallFactory) -> EndpointNode:
    """Leaf exposing all six methods for an absolute URL outside the table."""
    node = EndpointNode(url)
    for method in HTTP_METHODS:
        node.attach(method, factory(EndpointDescriptor.for_url(url, method)))
    return node


__all__ = [
    "CallFactory",
    "EndpointNode",
    "EndpointTree",
    "RESERVED_SEGMENTS",
    "build_endpoint_tree",
    "build_raw_node",
]
