"""Domain exceptions for npm_audit_reporter."""

from __future__ import annotations

from pathlib import Path


class ReportError(Exception):
    """Base class for everything that stops a report from being produced."""


class PreconditionError(ReportError):
    """A run precondition did not hold; the run ends without a report.

    These are informational rather than crashes: the pipeline turns them into
    a ``Skipped`` outcome.
    """


class MissingTokenError(PreconditionError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "System exit since no token provided.")


class ManifestAbsentError(PreconditionError):
    """Raised when the project root holds no package.json."""

    def __init__(self, root: Path, message: str | None = None) -> None:
        self.root = root
        if message is None:
            message = (
                "System exit since no project found "
                f"(unable to locate package.json in {root})."
            )
        super().__init__(message)


class ToolVersionTooLowError(PreconditionError):
    """Raised when the npm found in the project is older than required.

    A project-local npm overrides the global one, so ``found`` is whatever
    ``npm --version`` printed inside the project root.
    """

    def __init__(self, found: str, required: str) -> None:
        self.found = found
        self.required = required
        super().__init__(
            f"System exit since npm version too low (below {required}), "
            f"local npm version: {found}."
        )


class NoAuditDataError(PreconditionError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "No audit data available to build a report.")


class UncommittedChangesError(PreconditionError):
    """Raised when the assembled bundle carries the uncommitted-change marker.

    Blame attribution on a dirty working tree is unreliable, so the whole
    bundle is discarded.
    """

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "System exit since you have uncommitted contents.")


class ManifestError(ReportError):
    """Raised when package.json exists but cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid manifest {path}: {reason}")


class WriteError(ReportError):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to write report to {path}: {reason}")


class DeliveryError(ReportError):
    """Raised when the collector could not be reached or rejected the bundle."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        if status_code is None:
            message = f"Report delivery to {url} failed: {reason}"
        else:
            message = f"Report delivery to {url} failed with HTTP {status_code}: {reason}"
        super().__init__(message)
