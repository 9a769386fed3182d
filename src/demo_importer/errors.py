"""Per-file failure types raised by the import stages.

Every stage raises a subclass of :class:`ImportFailure`. The pipeline catches
them at the per-file boundary and turns them into a skip, so none of these
abort a batch. ``kind`` is a short stable tag used in log lines and results.
"""

from __future__ import annotations


class ImportFailure(RuntimeError):
    """Base class for anything that prevents a single demo from importing."""

    kind = "import"

    def __str__(self) -> str:
        message = super().__str__()
        return f"[{self.kind}] {message}" if message else f"[{self.kind}]"


class ParseFailure(ImportFailure):
    """No match id in the filename and a required override is missing."""

    kind = "parse"

    def __init__(self, message: str, *, missing: str | None = None) -> None:
        super().__init__(message)
        self.missing = missing


class SeriesMapMissing(ImportFailure):
    """The match is a series but the filename carries no map number."""

    kind = "series-map-missing"


class LookupNotFound(ImportFailure):
    """The store has no row for the parsed match id."""

    kind = "lookup-not-found"

    def __init__(self, match_id: int, *, combine: bool = False) -> None:
        table = "combine match" if combine else "match"
        super().__init__(f"no {table} found with id {match_id}")
        self.match_id = match_id
        self.combine = combine


class LookupFailure(ImportFailure):
    """The store query itself failed."""

    kind = "lookup-failure"


class OverrideRequired(ImportFailure):
    """Combine matches need a season supplied on the command line."""

    kind = "override-required"


class ExtractionFailure(ImportFailure):
    """The container could not be unpacked safely."""

    kind = "extraction"


class SubmissionFailure(ImportFailure):
    """The stats service rejected the payload or could not be reached."""

    kind = "submission"

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.cause = cause


class RoutingFailure(ImportFailure):
    """Moving the file into its outcome directory failed.

    This means the on-disk state no longer matches what the importer expected
    and needs an operator to look at it; it is reported separately from
    ordinary skips.
    """

    kind = "routing"


__all__ = [
    "ImportFailure",
    "ParseFailure",
    "SeriesMapMissing",
    "LookupNotFound",
    "LookupFailure",
    "OverrideRequired",
    "ExtractionFailure",
    "SubmissionFailure",
    "RoutingFailure",
]
