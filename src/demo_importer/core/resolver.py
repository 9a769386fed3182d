"""Resolve a parsed filename to league match metadata."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import psycopg

from ..config import Overrides
from ..constants import COMBINE_ID_PREFIX, SERIES_MAP_SEPARATOR
from ..errors import (
    LookupFailure,
    LookupNotFound,
    OverrideRequired,
    ParseFailure,
    SeriesMapMissing,
)
from .filename import ParsedFilename, require_overrides

_logger = logging.getLogger(__name__)

REGULAR_MATCH_QUERY = """
    SELECT mm.id::varchar AS match_id,
           ls.number AS season,
           pt.name AS tier,
           mm.is_bo3 AS is_series
    FROM matches_matches mm
        JOIN leagues_matchday lm ON lm.id = mm.match_day_id
        JOIN leagues_seasons ls ON ls.id = lm.season_id
        JOIN teams_teams tt ON mm.home_id = tt.id
        JOIN players_tiers pt ON tt.tier_id = pt.id
    WHERE mm.id = %s
"""

COMBINE_MATCH_QUERY = """
    SELECT cm.id::varchar AS match_id,
           pt.name AS tier
    FROM combines_match cm
        JOIN players_tiers pt ON cm.tier_id = pt.id
    WHERE cm.id = %s
"""


@dataclass(frozen=True)
class RegularMatch:
    """League match row."""

    match_id: str | None
    season: int
    tier: str
    is_series: bool = False


@dataclass(frozen=True)
class CombineMatch:
    """Combine match row; combines have no season of their own."""

    match_id: str | None
    tier: str


@dataclass(frozen=True)
class MatchInfo:
    """Metadata submitted for one demo, whatever kind of match it came from."""

    match_id: str | None
    season: int
    tier: str
    is_series: bool = False

    @classmethod
    def from_regular(cls, row: RegularMatch) -> "MatchInfo":
        return cls(
            match_id=row.match_id,
            season=row.season,
            tier=row.tier,
            is_series=row.is_series,
        )

    @classmethod
    def from_combine(cls, row: CombineMatch, *, season: int) -> "MatchInfo":
        return cls(match_id=row.match_id, season=season, tier=row.tier, is_series=False)

    @classmethod
    def from_overrides(cls, filename: str, overrides: Overrides) -> "MatchInfo":
        season, tier = require_overrides(overrides)
        return cls(match_id=filename, season=season, tier=tier, is_series=False)


class MatchStore(Protocol):
    """Read access to the league database."""

    def fetch_regular(self, match_id: int) -> RegularMatch | None: ...

    def fetch_combine(self, match_id: int) -> CombineMatch | None: ...


class PostgresMatchStore:
    """MatchStore backed by a psycopg connection.

    The connection is opened once per run by the caller in autocommit mode;
    queries are read-only.
    """

    def __init__(self, conn: psycopg.Connection) -> None:
        self.conn = conn

    def fetch_regular(self, match_id: int) -> RegularMatch | None:
        row = self._fetch_one(REGULAR_MATCH_QUERY, match_id)
        if row is None:
            return None
        return RegularMatch(
            match_id=row[0],
            season=int(row[1]),
            tier=row[2],
            is_series=bool(row[3]),
        )

    def fetch_combine(self, match_id: int) -> CombineMatch | None:
        row = self._fetch_one(COMBINE_MATCH_QUERY, match_id)
        if row is None:
            return None
        return CombineMatch(match_id=row[0], tier=row[1])

    def _fetch_one(self, query: str, match_id: int) -> tuple | None:
        try:
            row = self.conn.execute(query, (match_id,)).fetchone()
        except psycopg.Error as exc:
            raise LookupFailure(f"query for match {match_id} failed: {exc}") from exc
        return row


def resolve_match(parsed: ParsedFilename, overrides: Overrides, store: MatchStore) -> MatchInfo:
    """Look up the metadata for ``parsed``.

    Files without a match id use the command line overrides and never touch
    the store. Combine matches are read from the combine table and take their
    season from the override.

    Raises:
        ParseFailure: No match id and an override is missing
        LookupNotFound: The store has no such match
        LookupFailure: The store query failed
        OverrideRequired: Combine match without a season override
    """
    if parsed.match_id is None:
        _logger.info("Cannot parse match id from %s, using overrides", parsed.filename)
        return MatchInfo.from_overrides(parsed.filename, overrides)

    if parsed.is_combine:
        if overrides.season is None:
            raise OverrideRequired(
                f"combine match {parsed.match_id} needs --season, combines have no season"
            )
        combine = store.fetch_combine(parsed.match_id)
        if combine is None:
            raise LookupNotFound(parsed.match_id, combine=True)
        _logger.debug("Combine match %s -> tier %s", parsed.match_id, combine.tier)
        return MatchInfo.from_combine(combine, season=overrides.season)

    regular = store.fetch_regular(parsed.match_id)
    if regular is None:
        raise LookupNotFound(parsed.match_id)
    _logger.debug(
        "Match %s -> season %s, tier %s, series=%s",
        parsed.match_id,
        regular.season,
        regular.tier,
        regular.is_series,
    )
    return MatchInfo.from_regular(regular)


def submission_match_id(
    info: MatchInfo,
    parsed: ParsedFilename,
    *,
    combine_prefix: str = COMBINE_ID_PREFIX,
) -> str:
    """Build the id sent to the stats service.

    Series maps get ``_<map>`` appended; anything whose filename carries the
    combine marker gets ``combine_prefix`` in front.
    """
    if not info.match_id:
        raise ParseFailure(f"no match id resolved for {parsed.filename}")

    match_id = info.match_id
    if info.is_series:
        if parsed.series_map is None:
            raise SeriesMapMissing(
                f"match {match_id} is a series but {parsed.filename} has no map number"
            )
        match_id = f"{match_id}{SERIES_MAP_SEPARATOR}{parsed.series_map}"

    if parsed.is_combine:
        match_id = f"{combine_prefix}{match_id}"
    return match_id


__all__ = [
    "COMBINE_MATCH_QUERY",
    "REGULAR_MATCH_QUERY",
    "CombineMatch",
    "MatchInfo",
    "MatchStore",
    "PostgresMatchStore",
    "RegularMatch",
    "resolve_match",
    "submission_match_id",
]
