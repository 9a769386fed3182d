from __future__ import annotations

from pathlib import Path

import pytest

from demo_importer.config import ConfigurationError, Settings, build_overrides, load_settings


ENV = {
    "DATABASE_URL": "postgresql://user:pw@db/league",
    "STATS_API_URL": "http://stats.local/",
}


def test_settings_from_mapping(tmp_path: Path) -> None:
    settings = Settings.from_mapping(
        {**ENV, "REQUEST_ROOT_DIR": "/mnt/demos/", "STATS_API_TIMEOUT": "7.5"},
        input_dir=tmp_path,
        season=12,
        tier="Premier",
    )
    assert settings.input_dir == tmp_path
    assert settings.database_url == "postgresql://user:pw@db/league"
    assert settings.stats_api_url == "http://stats.local"
    assert settings.request_root_dir == "/mnt/demos"
    assert settings.request_timeout == 7.5
    assert settings.overrides.season == 12
    assert settings.overrides.tier == "Premier"


def test_optional_values_default_to_none(tmp_path: Path) -> None:
    settings = Settings.from_mapping({**ENV, "REQUEST_ROOT_DIR": "  "}, input_dir=tmp_path)
    assert settings.request_root_dir is None
    assert settings.request_timeout is None
    assert settings.overrides.season is None
    assert settings.overrides.tier is None


@pytest.mark.parametrize("missing", ["DATABASE_URL", "STATS_API_URL"])
def test_missing_required_variable_raises(tmp_path: Path, missing: str) -> None:
    env = dict(ENV)
    del env[missing]
    with pytest.raises(ConfigurationError, match=missing):
        Settings.from_mapping(env, input_dir=tmp_path)


def test_invalid_timeout_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        Settings.from_mapping({**ENV, "STATS_API_TIMEOUT": "soon"}, input_dir=tmp_path)


@pytest.mark.parametrize("season", [0, 256, -3])
def test_season_override_out_of_range(season: int) -> None:
    with pytest.raises(ConfigurationError):
        build_overrides(season=season, tier=None)


def test_blank_tier_override_rejected() -> None:
    with pytest.raises(ConfigurationError):
        build_overrides(season=None, tier="   ")


def test_ensure_ready_only_validates(tmp_path: Path) -> None:
    settings = Settings.from_mapping(ENV, input_dir=tmp_path)
    settings.ensure_ready()
    assert list(tmp_path.iterdir()) == []


def test_ensure_ready_rejects_missing_dir(tmp_path: Path) -> None:
    settings = Settings.from_mapping(ENV, input_dir=tmp_path / "nope")
    with pytest.raises(FileNotFoundError):
        settings.ensure_ready()


def test_ensure_ready_rejects_file(tmp_path: Path) -> None:
    target = tmp_path / "file.dem"
    target.write_bytes(b"")
    settings = Settings.from_mapping(ENV, input_dir=target)
    with pytest.raises(NotADirectoryError):
        settings.ensure_ready()


def test_load_settings_reads_env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # set first so the values loaded from .env are undone after the test
    for name in ("DATABASE_URL", "REQUEST_ROOT_DIR"):
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    monkeypatch.setenv("STATS_API_URL", "http://from-environment")
    env_file = tmp_path / ".env"
    env_file.write_text(
        "DATABASE_URL=postgresql://db/league\n"
        "STATS_API_URL=http://from-file\n"
        "REQUEST_ROOT_DIR=/srv/demos\n",
        encoding="utf-8",
    )

    settings = load_settings(tmp_path, season=3, env_file=env_file)

    assert settings.database_url == "postgresql://db/league"
    # the real environment wins over .env
    assert settings.stats_api_url == "http://from-environment"
    assert settings.request_root_dir == "/srv/demos"
    assert settings.overrides.season == 3


def test_load_settings_missing_env_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path, env_file=tmp_path / "missing.env")
