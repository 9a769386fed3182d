"""File processed demos into the _completed or _skipped directory."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..constants import COMPLETED_DIR_NAME, DEM_SUFFIX, SKIPPED_DIR_NAME, ZIP_SUFFIX
from ..errors import RoutingFailure

_logger = logging.getLogger(__name__)


def _strip_suffix(name: str, suffix: str) -> str:
    if name.endswith(suffix):
        return name[: -len(suffix)]
    return name


def completed_name(filename: str) -> str:
    """Canonical name of a completed demo: exactly one trailing ``.dem``.

    ``match.dem.zip``, ``match.zip`` and ``match.dem`` all become ``match.dem``.
    """
    name = filename
    while name.endswith(DEM_SUFFIX) or name.endswith(ZIP_SUFFIX):
        name = _strip_suffix(_strip_suffix(name, ZIP_SUFFIX), DEM_SUFFIX)
    return f"{name}{DEM_SUFFIX}"


def skipped_name(filename: str) -> str:
    """Name of a skipped demo: a trailing ``.zip`` is dropped, nothing else changes."""
    return _strip_suffix(filename, ZIP_SUFFIX)


def prepare_outcome_dirs(input_dir: Path) -> tuple[Path, Path]:
    """Create ``_completed`` and ``_skipped`` inside ``input_dir`` if missing."""
    completed = input_dir / COMPLETED_DIR_NAME
    skipped = input_dir / SKIPPED_DIR_NAME
    for target in (completed, skipped):
        target.mkdir(parents=True, exist_ok=True)
    return completed, skipped


def _remove_empty_parents(directory: Path, input_dir: Path) -> None:
    while directory != input_dir and input_dir in directory.parents:
        try:
            directory.rmdir()
        except OSError:
            return
        directory = directory.parent


def route_file(current: Path, input_dir: Path, original_name: str, *, success: bool) -> Path:
    """Move the demo currently at ``current`` into its outcome directory.

    ``current`` is wherever the pipeline last left the file (the extracted
    demo once a zip has been unpacked). Completed demos are named after
    ``original_name``. Skipped files keep the name they have on disk, minus a
    trailing ``.zip`` once they have been extracted; a container that was never
    unpacked keeps its ``.zip``. Directories left empty by a nested zip member
    are removed.

    Args:
        current: Path of the file on disk right now
        input_dir: Directory holding the outcome subdirectories
        original_name: Filename as it was found in the input directory
        success: Whether the pipeline succeeded for this file

    Returns:
        The destination path

    Raises:
        RoutingFailure: The source is gone, the destination exists or the move failed
    """
    if success:
        destination = input_dir / COMPLETED_DIR_NAME / completed_name(original_name)
    else:
        if current.name == original_name and current.parent == input_dir:
            name = current.name
        else:
            name = skipped_name(current.name)
        destination = input_dir / SKIPPED_DIR_NAME / name

    if not current.is_file():
        raise RoutingFailure(f"cannot move {current}: file no longer exists")
    if destination.exists():
        raise RoutingFailure(f"cannot move {current}: {destination} already exists")

    destination.parent.mkdir(parents=True, exist_ok=True)
    try:
        shutil.move(str(current), str(destination))
    except OSError as exc:
        raise RoutingFailure(f"failed to move {current} to {destination}: {exc}") from exc

    _logger.info("Moved %s -> %s", current.name, destination)
    _remove_empty_parents(current.parent, input_dir)
    return destination


__all__ = ["completed_name", "prepare_outcome_dirs", "route_file", "skipped_name"]
