# === NAVMAP v1 ===
# {
#   "module": "Snoocore.descriptors",
#   "purpose": "Endpoint descriptor models and descriptor table loading",
#   "sections": [
#     {"id": "endpointurls", "name": "EndpointUrls", "anchor": "class-endpointurls", "kind": "class"},
#     {"id": "endpointdescriptor", "name": "EndpointDescriptor", "anchor": "class-endpointdescriptor", "kind": "class"},
#     {"id": "load-descriptors", "name": "load_descriptors", "anchor": "function-load-descriptors", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Endpoint descriptor models and descriptor table loading.

A descriptor is the static record for one remote operation: its path in the
call tree, its HTTP method, the standard and OAuth URL variants, and the
format extensions the endpoint accepts.  Tables are loaded once when a client
is built and never change afterwards.

Sources accepted by :func:`load_descriptors`:

- ``None``: the table bundled with the package (``data/endpoints.json``)
- a path to a ``.json``, ``.yaml`` or ``.yml`` file holding a list of records
- an iterable of mappings or :class:`EndpointDescriptor` instances
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, ClassVar, Iterable, List, Mapping, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import DescriptorLoadError

logger = logging.getLogger(__name__)

HTTP_METHODS: Tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE", "UPDATE")

DescriptorSource = Union[None, str, Path, Iterable[Union[Mapping[str, Any], "EndpointDescriptor"]]]


class EndpointUrls(BaseModel):
    """Standard and OAuth URL variants for one endpoint."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    standard: str = Field(description="URL used without an OAuth bearer token")
    oauth: Optional[str] = Field(default=None, description="URL used with an OAuth token")


class EndpointDescriptor(BaseModel):
    """Static description of one remote operation."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    path: str = Field(default="", description="Slash separated path in the call tree")
    method: str = Field(description="HTTP verb, upper-cased")
    url: EndpointUrls
    extensions: Tuple[str, ...] = Field(default=(), description="Allowed format suffixes")

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            return (v,)
        return v

    @property
    def segments(self) -> Tuple[str, ...]:
        """Path sections below the root, ignoring the leading separator."""
        trimmed = self.path[1:] if self.path.startswith("/") else self.path
        return tuple(trimmed.split("/"))

    @classmethod
    def for_url(cls, url: str, method: str) -> "EndpointDescriptor":
        """Build an ad-hoc descriptor for an absolute URL outside the table."""
        return cls(path="", method=method, url=EndpointUrls(standard=url))


def _read_table(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DescriptorLoadError(f"Unable to read descriptor table {path}: {exc}") from exc

    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            return yaml.safe_load(text)
        return json.loads(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise DescriptorLoadError(f"Descriptor table {path} is not valid: {exc}") from exc


def _bundled_table() -> Any:
    text = resources.files("Snoocore").joinpath("data/endpoints.json").read_text(encoding="utf-8")
    return json.loads(text)


def load_descriptors(source: DescriptorSource = None) -> List[EndpointDescriptor]:
    """Load an ordered list of descriptors from ``source``.

    Args:
        source: ``None`` for the bundled table, a file path, or an iterable of
            records.

    Returns:
        Descriptors in table order.

    Raises:
        DescriptorLoadError: If the table is unreadable, not a list, or holds
            a record that fails validation.
    """
    if source is None:
        records: Any = _bundled_table()
        origin = "bundled"
    elif isinstance(source, (str, Path)):
        records = _read_table(Path(source))
        origin = str(source)
    else:
        records = list(source)
        origin = "inline"

    if not isinstance(records, list):
        raise DescriptorLoadError(f"Descriptor table ({origin}) must be a list of records")

    descriptors: List[EndpointDescriptor] = []
    for index, record in enumerate(records):
        if isinstance(record, EndpointDescriptor):
            descriptors.append(record)
            continue
        try:
            descriptors.append(EndpointDescriptor.model_validate(record))
        except ValidationError as exc:
            raise DescriptorLoadError(
                f"Descriptor #{index} in {origin} table is invalid: {exc}"
            ) from exc

    logger.debug(
        "Loaded endpoint descriptors",
        extra={"origin": origin, "count": len(descriptors)},
    )
    return descriptors


__all__ = [
    "HTTP_METHODS",
    "DescriptorSource",
    "EndpointDescriptor",
    "EndpointUrls",
    "load_descriptors",
]
