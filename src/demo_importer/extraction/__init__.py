"""Archive detection and extraction functionality."""

from __future__ import annotations

from .zip_extraction import (
    extract_single_member,
    is_single_file_container,
    safe_member_path,
)

__all__ = [
    "extract_single_member",
    "is_single_file_container",
    "safe_member_path",
]
