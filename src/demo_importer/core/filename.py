"""Read match ids and match classification from demo filenames."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..config import Overrides
from ..constants import COMBINE_MARKER, MATCH_ID_RE, SERIES_MAP_RE
from ..errors import ParseFailure


@dataclass(frozen=True)
class FilenameMarkers:
    """Patterns used to classify a filename.

    ``match_id`` must capture the numeric id in group 1 and ``series_map``
    the single map digit in group 1.
    """

    match_id: re.Pattern[str] = MATCH_ID_RE
    series_map: re.Pattern[str] = SERIES_MAP_RE
    combine: str = COMBINE_MARKER


DEFAULT_MARKERS = FilenameMarkers()


@dataclass(frozen=True)
class ParsedFilename:
    """What a filename says about its match.

    Attributes:
        filename: The filename as found in the input directory
        match_id: Numeric match id, or None when the marker is absent
        is_combine: Filename carries the combine marker
        series_map: 1-based map number following the id segment, if any
    """

    filename: str
    match_id: int | None
    is_combine: bool
    series_map: int | None = None

    @property
    def has_match_id(self) -> bool:
        return self.match_id is not None


def parse_filename(filename: str, *, markers: FilenameMarkers = DEFAULT_MARKERS) -> ParsedFilename:
    """Extract the match id and classification flags from ``filename``.

    Args:
        filename: Bare filename (no directory part)
        markers: Patterns to apply, defaults to the league naming scheme

    Returns:
        ParsedFilename; ``match_id`` is None when no id marker is present
    """
    is_combine = markers.combine in filename

    match = markers.match_id.search(filename)
    if match is None:
        return ParsedFilename(filename=filename, match_id=None, is_combine=is_combine)

    series_map: int | None = None
    series = markers.series_map.search(filename)
    if series is not None:
        series_map = int(series.group(1))

    return ParsedFilename(
        filename=filename,
        match_id=int(match.group(1)),
        is_combine=is_combine,
        series_map=series_map,
    )


def require_overrides(overrides: Overrides) -> tuple[int, str]:
    """Return the season and tier overrides or fail naming the missing flag."""
    if overrides.season is None:
        raise ParseFailure(
            "cannot parse match id from filename and --season was not provided",
            missing="season",
        )
    if overrides.tier is None:
        raise ParseFailure(
            "cannot parse match id from filename and --tier was not provided",
            missing="tier",
        )
    return overrides.season, overrides.tier


__all__ = [
    "DEFAULT_MARKERS",
    "FilenameMarkers",
    "ParsedFilename",
    "parse_filename",
    "require_overrides",
]
