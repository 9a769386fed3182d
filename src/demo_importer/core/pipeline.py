"""Per-file import pipeline and the batch driver around it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..config import Settings
from ..errors import ImportFailure, RoutingFailure
from ..extraction import extract_single_member, is_single_file_container
from ..progress import ProgressTracker
from .filename import DEFAULT_MARKERS, FilenameMarkers, parse_filename, require_overrides
from .resolver import MatchStore, resolve_match, submission_match_id
from .router import prepare_outcome_dirs, route_file
from .submission import StatsClient, SubmissionPayload, build_request_path

_logger = logging.getLogger(__name__)


@dataclass
class FileOutcome:
    """What happened to one input file.

    Attributes:
        filename: Name of the file as found in the input directory
        current: Where the file is on disk now; changes when a zip is extracted
        error: The failure that stopped the pipeline, if any
        match_id: Id submitted to the stats service, if submission happened
        destination: Final location after routing
    """

    filename: str
    current: Path
    error: ImportFailure | None = None
    match_id: str | None = None
    destination: Path | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class ImportResult:
    """Result of importing a directory.

    Attributes:
        completed: Files moved to ``_completed``
        skipped: Files moved to ``_skipped``
        routing_failed: Files that could not be moved and need an operator
        outcomes: Every per-file outcome, in processing order
    """

    completed: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    routing_failed: list[Path] = field(default_factory=list)
    outcomes: list[FileOutcome] = field(default_factory=list)


def scan_directory(input_dir: Path) -> list[Path]:
    """List the regular files directly inside ``input_dir``, sorted by name."""
    return sorted(
        (entry for entry in input_dir.iterdir() if entry.is_file()),
        key=lambda path: path.name,
    )


def process_file(
    path: Path,
    settings: Settings,
    store: MatchStore,
    client: StatsClient,
    *,
    markers: FilenameMarkers = DEFAULT_MARKERS,
) -> FileOutcome:
    """Run parse, extract, resolve and submit for a single file.

    Failures never escape: they are recorded on the returned outcome so the
    caller can route the file to ``_skipped``.
    """
    outcome = FileOutcome(filename=path.name, current=path)
    try:
        parsed = parse_filename(path.name, markers=markers)
        if not parsed.has_match_id:
            require_overrides(settings.overrides)

        if is_single_file_container(path):
            outcome.current = extract_single_member(path, settings.input_dir)

        info = resolve_match(parsed, settings.overrides, store)
        match_id = submission_match_id(info, parsed)

        payload = SubmissionPayload(
            path=build_request_path(outcome.current, settings.request_root_dir),
            match_id=match_id,
            season=info.season,
            tier=info.tier,
        )
        _logger.debug("Submitting %s as %s", payload.path, match_id)
        client.submit(payload)
        outcome.match_id = match_id
    except ImportFailure as exc:
        outcome.error = exc
    except Exception as exc:
        _logger.exception("Unexpected error while processing %s", path.name)
        outcome.error = ImportFailure(f"unexpected error: {exc}")
    return outcome


def process_directory(
    settings: Settings,
    store: MatchStore,
    client: StatsClient,
    *,
    markers: FilenameMarkers = DEFAULT_MARKERS,
) -> ImportResult:
    """Import every file in ``settings.input_dir``, one at a time.

    The file list is taken once before anything is processed. Each file ends
    up in ``_completed`` or ``_skipped``; a file that cannot be moved is
    reported and the batch carries on.
    """
    input_dir = settings.input_dir
    prepare_outcome_dirs(input_dir)

    files = scan_directory(input_dir)
    _logger.info("Importing from %s", input_dir)
    _logger.info("Found %d file(s)", len(files))

    result = ImportResult()
    tracker = ProgressTracker(len(files))

    for path in files:
        tracker.start(_logger, f"Processing {path.name}...")
        outcome = process_file(path, settings, store, client, markers=markers)
        result.outcomes.append(outcome)

        if not outcome.success:
            _logger.warning("Skipping %s, error: %s", path.name, outcome.error)

        try:
            outcome.destination = route_file(
                outcome.current, input_dir, outcome.filename, success=outcome.success
            )
        except RoutingFailure as exc:
            tracker.fail(_logger, f"Could not file {path.name}, check the input directory: {exc}")
            result.routing_failed.append(outcome.current)
            continue

        if outcome.success:
            result.completed.append(outcome.destination)
            tracker.advance(_logger, f"Processed {path.name} successfully as {outcome.match_id}")
        else:
            result.skipped.append(outcome.destination)
            tracker.advance(_logger, f"Skipped {path.name}", ok=False)

    return result


__all__ = [
    "FileOutcome",
    "ImportResult",
    "process_directory",
    "process_file",
    "scan_directory",
]
