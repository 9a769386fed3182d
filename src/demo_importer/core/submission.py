"""Stats service integration for submitting resolved demos."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import requests

from ..constants import ADD_MATCH_ENDPOINT, SUCCESS_STATUS
from ..errors import SubmissionFailure

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionPayload:
    """Body of an add-match request."""

    path: str
    match_id: str
    season: int
    tier: str

    def to_json(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "matchId": self.match_id,
            "season": self.season,
            "tier": self.tier,
        }


def build_request_path(file_path: Path, root_dir: str | None) -> str:
    """Return the path the stats service should read the demo from.

    When ``root_dir`` is set the service sees the input directory under a
    different mount, so only the bare filename is kept.
    """
    if root_dir is None:
        return str(file_path)
    return f"{root_dir.rstrip('/')}/{file_path.name}"


class StatsClient:
    """Client for the stats service add-match endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}{ADD_MATCH_ENDPOINT}"
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def submit(self, payload: SubmissionPayload) -> None:
        """POST ``payload``; anything but a 200 response raises SubmissionFailure."""
        _logger.debug("POST %s %s", self.url, payload.to_json())
        try:
            response = self.session.post(self.url, json=payload.to_json(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise SubmissionFailure(f"request to {self.url} failed: {exc}", cause=exc) from exc

        if response.status_code != SUCCESS_STATUS:
            raise SubmissionFailure(
                f"stats service answered {response.status_code} for match {payload.match_id}",
                status=response.status_code,
            )
        _logger.debug("Stats service accepted match %s", payload.match_id)

    def close(self) -> None:
        self.session.close()


__all__ = ["StatsClient", "SubmissionPayload", "build_request_path"]
