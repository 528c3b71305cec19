from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
import requests

from dlxbin.config import DlxSettings
from dlxbin.runner import DlxRunner

START_MS = 1_700_000_000_000


class FakeClock:
    def __init__(self, start: int = START_MS) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeSession:
    """Serves canned bodies keyed by URL and records every GET."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, bytes]] = {}
        self.calls: list[str] = []

    def serve(self, url: str, body: bytes, status: int = 200) -> None:
        self.routes[url] = (status, body)

    def get(self, url: str, timeout: Any = None) -> requests.Response:
        self.calls.append(url)
        if url not in self.routes:
            raise requests.ConnectionError(f"no route to {url}")
        status, body = self.routes[url]
        resp = requests.Response()
        resp.status_code = status
        resp._content = body
        resp.url = url
        resp.reason = "OK" if status < 400 else "Error"
        return resp


@dataclass
class FakeProcess:
    returncode: int = 0

    def wait(self) -> int:
        return self.returncode


@dataclass
class FakeLauncher:
    calls: list[tuple] = field(default_factory=list)
    returncode: int = 0

    def __call__(self, binary: Path, args, options, mode) -> FakeProcess:
        self.calls.append((binary, list(args), dict(options), mode))
        return FakeProcess(self.returncode)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def settings(tmp_path: Path) -> DlxSettings:
    return DlxSettings(cache_dir=tmp_path / "cache", logs_dir=tmp_path / "logs")


@pytest.fixture
def runner(settings, session, clock, launcher) -> DlxRunner:
    return DlxRunner(settings, session=session, clock=clock, launcher=launcher, host_platform="linux")
