"""Configuration handling for demo_importer."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from dotenv import find_dotenv, load_dotenv

from .constants import MAX_SEASON, MIN_SEASON


class ConfigurationError(RuntimeError):
    """Raised when configuration values are missing or invalid."""


@dataclass(frozen=True)
class Overrides:
    """Season and tier supplied on the command line.

    Only used for files whose match id cannot be read from the filename, and
    for the season of combine matches.
    """

    season: int | None = None
    tier: str | None = None


@dataclass(frozen=True)
class Settings:
    """Everything a run needs, built once and shared by every file."""

    input_dir: Path
    database_url: str
    stats_api_url: str
    request_root_dir: str | None = None
    request_timeout: float | None = None
    overrides: Overrides = field(default_factory=Overrides)

    def ensure_ready(self) -> None:
        if not self.input_dir.exists():
            raise FileNotFoundError(f"Input directory '{self.input_dir}' does not exist.")
        if not self.input_dir.is_dir():
            raise NotADirectoryError(f"'{self.input_dir}' is not a directory.")

    @classmethod
    def from_mapping(
        cls,
        env: Mapping[str, Any],
        *,
        input_dir: Path | str,
        season: int | None = None,
        tier: str | None = None,
    ) -> "Settings":
        database_url = _read_required(env, "DATABASE_URL")
        stats_api_url = _read_required(env, "STATS_API_URL").rstrip("/")

        request_root_dir = _read_optional(env, "REQUEST_ROOT_DIR")
        if request_root_dir is not None:
            request_root_dir = request_root_dir.rstrip("/") or "/"

        request_timeout = _read_optional_float(env, "STATS_API_TIMEOUT")

        return cls(
            input_dir=Path(input_dir),
            database_url=database_url,
            stats_api_url=stats_api_url,
            request_root_dir=request_root_dir,
            request_timeout=request_timeout,
            overrides=build_overrides(season=season, tier=tier),
        )


def build_overrides(*, season: int | None, tier: str | None) -> Overrides:
    if season is not None:
        try:
            season = int(season)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError("Season override must be an integer") from exc
        if not MIN_SEASON <= season <= MAX_SEASON:
            raise ConfigurationError(
                f"Season override must be between {MIN_SEASON} and {MAX_SEASON}"
            )
    if tier is not None:
        tier = tier.strip()
        if not tier:
            raise ConfigurationError("Tier override must not be empty")
    return Overrides(season=season, tier=tier)


def _read_required(env: Mapping[str, Any], key: str) -> str:
    value = _read_optional(env, key)
    if value is None:
        raise ConfigurationError(f"Environment variable '{key}' is required")
    return value


def _read_optional(env: Mapping[str, Any], key: str) -> str | None:
    value = env.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _read_optional_float(env: Mapping[str, Any], key: str) -> float | None:
    value = _read_optional(env, key)
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError as exc:
        raise ConfigurationError(f"Environment variable '{key}' must be a number") from exc
    if number <= 0:
        raise ConfigurationError(f"Environment variable '{key}' must be > 0")
    return number


def load_settings(
    input_dir: Path | str,
    *,
    season: int | None = None,
    tier: str | None = None,
    env_file: Path | None = None,
) -> Settings:
    """Load ``.env`` (without overriding the real environment) and build settings."""

    if env_file is not None:
        if not env_file.exists():
            raise FileNotFoundError(f"Environment file '{env_file}' does not exist")
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(find_dotenv(usecwd=True), override=False)

    return Settings.from_mapping(os.environ, input_dir=input_dir, season=season, tier=tier)


__all__ = [
    "ConfigurationError",
    "Overrides",
    "Settings",
    "build_overrides",
    "load_settings",
]
