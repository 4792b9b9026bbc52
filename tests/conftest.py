"""
Pytest Configuration

Puts ``src`` on ``sys.path`` and provides the shared fixtures used by the
Snoocore suite: a mocked HTTP API, a recording sleep for the throttle, a small
descriptor table, and a ready-made client wired to all three.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator

import pytest

# --- Globals ---

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
for _path in (SRC, ROOT):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from Snoocore import Snoocore  # noqa: E402
from Snoocore.settings import SnoocoreSettings, reset_settings  # noqa: E402
from tests.fixtures.http_mocking import MockApi  # noqa: E402

TEST_DESCRIPTORS = [
    {
        "path": "/api/login",
        "method": "POST",
        "url": {"standard": "https://ssl.example.com/api/login"},
        "extensions": [],
    },
    {
        "path": "/api/me.json",
        "method": "GET",
        "url": {"standard": "https://www.example.com/api/me.json"},
        "extensions": [],
    },
    {
        "path": "/api/info",
        "method": "GET",
        "url": {
            "standard": "https://www.example.com/api/info",
            "oauth": "https://oauth.example.com/api/info",
        },
        "extensions": [".json", ".xml"],
    },
    {
        "path": "/api/submit",
        "method": "POST",
        "url": {
            "standard": "https://www.example.com/api/submit",
            "oauth": "https://oauth.example.com/api/submit",
        },
        "extensions": [],
    },
    {
        "path": "/r/$subreddit/new",
        "method": "GET",
        "url": {"standard": "https://x/r/$subreddit/new"},
        "extensions": [],
    },
    {
        "path": "/r/$subreddit/api/upload_sr_img",
        "method": "POST",
        "url": {"standard": "https://www.example.com/r/$subreddit/api/upload_sr_img"},
        "extensions": [],
    },
    {
        "path": "/r/$subreddit/about/rss",
        "method": "GET",
        "url": {"standard": "https://www.example.com/r/$subreddit/about"},
        "extensions": [".xml", ".rss"],
    },
    {
        "path": "/api/v1/me/prefs",
        "method": "GET",
        "url": {"standard": "https://www.example.com/api/v1/me/prefs"},
        "extensions": [],
    },
    {
        "path": "/api/v1/me/prefs",
        "method": "PATCH",
        "url": {"standard": "https://www.example.com/api/v1/me/prefs"},
        "extensions": [],
    },
]

LOGOUT_URL = "https://www.example.com/logout"


class SleepRecorder:
    """Stand-in for ``time.sleep`` that records requested waits."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep ``SNOOCORE_*`` variables from leaking into tests."""
    for name in list(os.environ):
        if name.upper().startswith("SNOOCORE_"):
            monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def mock_api() -> MockApi:
    return MockApi()


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_client(mock_api: MockApi, sleeps: SleepRecorder):
    """Factory for clients wired to the mock API and recording sleep."""
    created: list[Snoocore] = []

    def _make(**kwargs) -> Snoocore:
        kwargs.setdefault("descriptors", TEST_DESCRIPTORS)
        kwargs.setdefault("http", mock_api.client())
        kwargs.setdefault("sleep", sleeps)
        settings = kwargs.pop(
            "settings",
            SnoocoreSettings(user_agent="snoocore-test-userAgent", logout_url=LOGOUT_URL),
        )
        client = Snoocore(settings, **kwargs)
        created.append(client)
        return client

    yield _make

    for client in created:
        client._http.close()


@pytest.fixture
def client(make_client) -> Snoocore:
    return make_client()
