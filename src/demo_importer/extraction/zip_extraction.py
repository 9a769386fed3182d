"""Unpacking of single-demo zip containers."""

from __future__ import annotations

import logging
import os
import shutil
import stat
import zipfile
from pathlib import Path, PurePosixPath

from ..constants import ZIP_SUFFIX
from ..errors import ExtractionFailure

_logger = logging.getLogger(__name__)

# ZipInfo.create_system value for archives written on unix
_UNIX_SYSTEM = 3


def is_single_file_container(path: Path) -> bool:
    return path.suffix.lower() == ZIP_SUFFIX


def safe_member_path(member: zipfile.ZipInfo) -> PurePosixPath | None:
    """Return the member's relative path, or None if it would escape the target.

    Absolute paths, drive letters, ``..`` components and directory entries
    are rejected.
    """
    if member.is_dir():
        return None
    raw = member.filename.replace("\\", "/")
    if not raw or "\x00" in raw:
        return None
    candidate = PurePosixPath(raw)
    if candidate.is_absolute() or ":" in candidate.parts[0]:
        return None
    parts = [part for part in candidate.parts if part not in ("", ".")]
    if not parts or ".." in parts:
        return None
    return PurePosixPath(*parts)


def _apply_unix_mode(target: Path, member: zipfile.ZipInfo) -> None:
    if os.name != "posix" or member.create_system != _UNIX_SYSTEM:
        return
    mode = stat.S_IMODE(member.external_attr >> 16)
    if mode:
        target.chmod(mode)


def extract_single_member(archive: Path, target_dir: Path) -> Path:
    """Extract the sole member of ``archive`` into ``target_dir``.

    The member keeps its relative path and permission bits. The archive is
    deleted once the member is written.

    Args:
        archive: Zip file holding one demo
        target_dir: Directory to write the demo to

    Returns:
        Path of the extracted file

    Raises:
        ExtractionFailure: The archive is unreadable, empty or unsafe, the member
            would replace an existing file, or writing failed
    """
    target: Path | None = None
    created = False
    try:
        with zipfile.ZipFile(archive) as zf:
            members = zf.infolist()
            if not members:
                raise ExtractionFailure(f"{archive.name} contains no file")
            if len(members) > 1:
                _logger.warning(
                    "%s holds %d entries, only %s is extracted",
                    archive.name,
                    len(members),
                    members[0].filename,
                )
            member = members[0]
            relative = safe_member_path(member)
            if relative is None:
                raise ExtractionFailure(
                    f"{archive.name} entry {member.filename!r} has no safe enclosed name"
                )

            target = target_dir.joinpath(*relative.parts)
            if target.exists() or target == archive:
                raise ExtractionFailure(
                    f"{archive.name} entry {member.filename!r} would overwrite {target.name}"
                )
            target.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(member) as src, target.open("xb") as dst:
                created = True
                shutil.copyfileobj(src, dst)
            _apply_unix_mode(target, member)
    except ExtractionFailure:
        raise
    except (OSError, EOFError, NotImplementedError, RuntimeError, zipfile.BadZipFile) as exc:
        # RuntimeError covers encrypted members
        if created and target is not None and target.exists():
            target.unlink()
        raise ExtractionFailure(f"failed to extract {archive.name}: {exc}") from exc

    try:
        archive.unlink()
    except OSError as exc:
        raise ExtractionFailure(
            f"extracted {target.name} but could not remove {archive.name}: {exc}"
        ) from exc

    _logger.info("Extracted %s -> %s", archive.name, target.name)
    return target


__all__ = ["extract_single_member", "is_single_file_container", "safe_member_path"]
