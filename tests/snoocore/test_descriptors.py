"""Tests for descriptor models and table loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from Snoocore.descriptors import EndpointDescriptor, load_descriptors
from Snoocore.errors import DescriptorLoadError


def test_bundled_table_loads() -> None:
    descriptors = load_descriptors()
    keys = {(d.path, d.method) for d in descriptors}

    assert ("/api/login", "POST") in keys
    assert ("/api/me.json", "GET") in keys
    assert ("/r/$subreddit/new", "GET") in keys


def test_method_is_upper_cased_and_extras_ignored() -> None:
    descriptor = EndpointDescriptor.model_validate(
        {
            "path": "/api/vote",
            "method": "post",
            "url": {"standard": "https://x/api/vote"},
            "oauth": ["vote"],
        }
    )
    assert descriptor.method == "POST"
    assert descriptor.extensions == ()
    assert descriptor.url.oauth is None


def test_segments_ignore_leading_separator() -> None:
    descriptor = EndpointDescriptor.model_validate(
        {"path": "/r/$subreddit/new", "method": "GET", "url": {"standard": "u"}}
    )
    assert descriptor.segments == ("r", "$subreddit", "new")


def test_descriptors_are_immutable() -> None:
    descriptor = EndpointDescriptor.for_url("https://x", "GET")
    with pytest.raises(ValidationError):
        descriptor.method = "POST"  # type: ignore[misc]


def test_load_json_file(tmp_path: Path) -> None:
    table = tmp_path / "endpoints.json"
    table.write_text(
        json.dumps([{"path": "/a", "method": "GET", "url": {"standard": "https://x/a"}}]),
        encoding="utf-8",
    )
    descriptors = load_descriptors(table)
    assert [d.path for d in descriptors] == ["/a"]


def test_load_yaml_file(tmp_path: Path) -> None:
    table = tmp_path / "endpoints.yaml"
    table.write_text(
        "- path: /a/$id\n"
        "  method: delete\n"
        "  url:\n"
        "    standard: https://x/a/$id\n"
        "    oauth: https://oauth.x/a/$id\n"
        "  extensions: ['.json']\n",
        encoding="utf-8",
    )
    (descriptor,) = load_descriptors(str(table))
    assert descriptor.method == "DELETE"
    assert descriptor.url.oauth == "https://oauth.x/a/$id"
    assert descriptor.extensions == (".json",)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(DescriptorLoadError):
        load_descriptors(tmp_path / "missing.json")


def test_malformed_file_raises(tmp_path: Path) -> None:
    table = tmp_path / "broken.json"
    table.write_text("[{", encoding="utf-8")
    with pytest.raises(DescriptorLoadError):
        load_descriptors(table)


def test_non_list_table_raises(tmp_path: Path) -> None:
    table = tmp_path / "object.json"
    table.write_text('{"path": "/a"}', encoding="utf-8")
    with pytest.raises(DescriptorLoadError, match="must be a list"):
        load_descriptors(table)


def test_invalid_record_reports_index() -> None:
    with pytest.raises(DescriptorLoadError, match="#1"):
        load_descriptors(
            [
                {"path": "/a", "method": "GET", "url": {"standard": "https://x/a"}},
                {"path": "/b", "method": "GET"},
            ]
        )


def test_descriptor_instances_pass_through() -> None:
    descriptor = EndpointDescriptor.for_url("https://x", "GET")
    assert load_descriptors([descriptor]) == [descriptor]
