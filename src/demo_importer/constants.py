"""Constants and regular expressions for demo filename handling."""

from __future__ import annotations

import re

# Demo and container suffixes
DEM_SUFFIX = ".dem"
ZIP_SUFFIX = ".zip"

# Outcome directory names, created inside the input directory
COMPLETED_DIR_NAME = "_completed"
SKIPPED_DIR_NAME = "_skipped"

# Filename markers
# "match-mid777-2-foo.dem": 777 is the match id, 2 is the 1-based series map number
MATCH_ID_RE = re.compile(r"-mid(\d+)-")
SERIES_MAP_RE = re.compile(r"-mid\d+-([1-9])(?!\d)")
COMBINE_MARKER = "combine"

# Submitted ids for combine matches carry this prefix
COMBINE_ID_PREFIX = "combines-"
SERIES_MAP_SEPARATOR = "_"

# Stats service
ADD_MATCH_ENDPOINT = "/api/add-match"
SUCCESS_STATUS = 200

# Season override bounds
MIN_SEASON = 1
MAX_SEASON = 255


__all__ = [
    "DEM_SUFFIX",
    "ZIP_SUFFIX",
    "COMPLETED_DIR_NAME",
    "SKIPPED_DIR_NAME",
    "MATCH_ID_RE",
    "SERIES_MAP_RE",
    "COMBINE_MARKER",
    "COMBINE_ID_PREFIX",
    "SERIES_MAP_SEPARATOR",
    "ADD_MATCH_ENDPOINT",
    "SUCCESS_STATUS",
    "MIN_SEASON",
    "MAX_SEASON",
]
