"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import zipfile
from pathlib import Path
from types import SimpleNamespace

import pytest

from demo_importer.config import Overrides, Settings
from demo_importer.core.resolver import CombineMatch, RegularMatch
from demo_importer.core.submission import StatsClient


class FakeStore:
    """In-memory MatchStore recording every lookup."""

    def __init__(
        self,
        regular: dict[int, RegularMatch] | None = None,
        combine: dict[int, CombineMatch] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.regular = regular or {}
        self.combine = combine or {}
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def fetch_regular(self, match_id: int) -> RegularMatch | None:
        self.calls.append(("regular", match_id))
        if self.error is not None:
            raise self.error
        return self.regular.get(match_id)

    def fetch_combine(self, match_id: int) -> CombineMatch | None:
        self.calls.append(("combine", match_id))
        if self.error is not None:
            raise self.error
        return self.combine.get(match_id)


class FakeSession:
    """Stand-in for requests.Session answering every POST with ``status``."""

    def __init__(self, status: int = 200, error: Exception | None = None) -> None:
        self.status = status
        self.error = error
        self.posts: list[dict] = []
        self.closed = False

    def post(self, url, json=None, timeout=None):
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(status_code=self.status)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def input_dir(tmp_path: Path) -> Path:
    """Create an input directory for demos.

    Args:
        tmp_path: pytest's temporary directory fixture

    Returns:
        Path to the input directory
    """
    demos = tmp_path / "demos"
    demos.mkdir()
    return demos


@pytest.fixture
def make_settings(input_dir: Path):
    def _make(
        *,
        season: int | None = None,
        tier: str | None = None,
        request_root_dir: str | None = None,
    ) -> Settings:
        return Settings(
            input_dir=input_dir,
            database_url="postgresql://localhost/league",
            stats_api_url="http://stats.local",
            request_root_dir=request_root_dir,
            overrides=Overrides(season=season, tier=tier),
        )

    return _make


@pytest.fixture
def store() -> FakeStore:
    return FakeStore(
        regular={
            777: RegularMatch(match_id="777", season=14, tier="Contender", is_series=True),
            1234: RegularMatch(match_id="1234", season=15, tier="Premier", is_series=False),
        },
        combine={
            55: CombineMatch(match_id="55", tier="Challenger"),
        },
    )


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> StatsClient:
    return StatsClient("http://stats.local", session=session)


@pytest.fixture
def make_zip():
    def _make(archive: Path, member: str, data: bytes = b"HL2DEMO", *, mode: int | None = None) -> Path:
        info = zipfile.ZipInfo(member)
        if mode is not None:
            info.create_system = 3
            info.external_attr = (0o100000 | mode) << 16
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr(info, data)
        return archive

    return _make
