from __future__ import annotations

from pathlib import Path

import pytest

from demo_importer.core.router import (
    completed_name,
    prepare_outcome_dirs,
    route_file,
    skipped_name,
)
from demo_importer.errors import RoutingFailure


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("a-mid1-x.dem", "a-mid1-x.dem"),
        ("a-mid1-x.dem.zip", "a-mid1-x.dem"),
        ("a-mid1-x.zip", "a-mid1-x.dem"),
        ("a-mid1-x", "a-mid1-x.dem"),
    ],
)
def test_completed_name(filename: str, expected: str) -> None:
    assert completed_name(filename) == expected


def test_completed_name_is_idempotent() -> None:
    name = completed_name("match.dem.zip")
    assert completed_name(name) == name


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("a.dem.zip", "a.dem"),
        ("a.zip", "a"),
        ("a.dem", "a.dem"),
        ("a.zip.dem", "a.zip.dem"),
    ],
)
def test_skipped_name(filename: str, expected: str) -> None:
    assert skipped_name(filename) == expected


def test_prepare_outcome_dirs_is_idempotent(input_dir: Path) -> None:
    prepare_outcome_dirs(input_dir)
    completed, skipped = prepare_outcome_dirs(input_dir)
    assert completed.is_dir()
    assert skipped.is_dir()


def test_route_success_uses_canonical_name(input_dir: Path) -> None:
    current = input_dir / "inner.dem"
    current.write_bytes(b"x")

    destination = route_file(current, input_dir, "m-mid3-x.dem.zip", success=True)

    assert destination == input_dir / "_completed" / "m-mid3-x.dem"
    assert destination.read_bytes() == b"x"
    assert not current.exists()


def test_route_failure_keeps_unextracted_container_name(input_dir: Path) -> None:
    current = input_dir / "m-mid3-x.dem.zip"
    current.write_bytes(b"zip")

    destination = route_file(current, input_dir, current.name, success=False)

    assert destination == input_dir / "_skipped" / "m-mid3-x.dem.zip"


def test_route_failure_uses_extracted_name(input_dir: Path) -> None:
    current = input_dir / "renamed.dem"
    current.write_bytes(b"demo")

    destination = route_file(current, input_dir, "m-mid1-x.zip", success=False)

    assert destination == input_dir / "_skipped" / "renamed.dem"


def test_route_removes_empty_member_directory(input_dir: Path) -> None:
    nested = input_dir / "inner" / "deeper"
    nested.mkdir(parents=True)
    current = nested / "a.dem"
    current.write_bytes(b"demo")

    destination = route_file(current, input_dir, "a-mid1-x.zip", success=True)

    assert destination == input_dir / "_completed" / "a-mid1-x.dem"
    assert not (input_dir / "inner").exists()
    assert input_dir.is_dir()


def test_route_keeps_non_empty_member_directory(input_dir: Path) -> None:
    nested = input_dir / "inner"
    nested.mkdir()
    (nested / "other.txt").write_bytes(b"keep")
    current = nested / "a.dem"
    current.write_bytes(b"demo")

    route_file(current, input_dir, "a.zip", success=False)

    assert (nested / "other.txt").exists()
    assert (input_dir / "_skipped" / "a.dem").exists()


def test_route_missing_source(input_dir: Path) -> None:
    with pytest.raises(RoutingFailure, match="no longer exists"):
        route_file(input_dir / "gone.dem", input_dir, "gone.dem.zip", success=False)


def test_route_destination_conflict(input_dir: Path) -> None:
    prepare_outcome_dirs(input_dir)
    (input_dir / "_completed" / "a.dem").write_bytes(b"old")
    current = input_dir / "a.dem"
    current.write_bytes(b"new")

    with pytest.raises(RoutingFailure, match="already exists"):
        route_file(current, input_dir, "a.dem", success=True)
    assert current.exists()
