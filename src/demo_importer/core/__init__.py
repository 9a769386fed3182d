"""Core business logic for importing match demos."""

from __future__ import annotations

from .filename import FilenameMarkers, ParsedFilename, parse_filename
from .pipeline import FileOutcome, ImportResult, process_directory, process_file
from .resolver import (
    CombineMatch,
    MatchInfo,
    MatchStore,
    PostgresMatchStore,
    RegularMatch,
    resolve_match,
    submission_match_id,
)
from .router import completed_name, route_file, skipped_name
from .submission import StatsClient, SubmissionPayload, build_request_path

__all__ = [
    # Main processing
    "process_directory",
    "process_file",
    "FileOutcome",
    "ImportResult",
    # Filenames
    "FilenameMarkers",
    "ParsedFilename",
    "parse_filename",
    # Metadata
    "CombineMatch",
    "MatchInfo",
    "MatchStore",
    "PostgresMatchStore",
    "RegularMatch",
    "resolve_match",
    "submission_match_id",
    # Routing
    "completed_name",
    "route_file",
    "skipped_name",
    # Submission
    "StatsClient",
    "SubmissionPayload",
    "build_request_path",
]
