from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from .exceptions import PreconditionError, ReportError


# git blame reports this author for lines that only exist in the working tree
UNCOMMITTED_MARKER = "Not Committed Yet"

AuditResult = Any
FileInventory = dict[str, Any]
ReportBundle = dict[str, Any]


@dataclass(frozen=True)
class DependencyDescriptor:
    """A dependency as declared in the manifest."""
    name: str
    declared_range: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "declaredRange": self.declared_range}


@dataclass(frozen=True)
class BlameRecord:
    """Ownership of a single manifest line, as reported by version control."""
    author: str
    commit_hash: str
    line_number: int
    line_text: str

    @property
    def is_uncommitted(self) -> bool:
        return self.author == UNCOMMITTED_MARKER

    def to_dict(self) -> dict[str, object]:
        return {
            "author": self.author,
            "commitHash": self.commit_hash,
            "lineNumber": self.line_number,
            "lineText": self.line_text,
        }


@dataclass(frozen=True)
class AttributionEntry:
    dependency: DependencyDescriptor
    blame: BlameRecord | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "dependency": self.dependency.to_dict(),
            "blame": self.blame.to_dict() if self.blame is not None else None,
        }


@dataclass(frozen=True)
class VcsFacts:
    """Repository identity and manifest blame for a tracked project."""
    commit_hash: str | None
    project_name: str | None
    blame: tuple[BlameRecord, ...] = ()
    remote_url: str | None = None


@dataclass(frozen=True)
class ReportRequest:
    """Everything a single run needs to know, fixed at startup."""
    root: Path
    token: str | None
    output_path: Path | None = None
    host: str | None = None
    port: int | None = None


@dataclass(frozen=True)
class DeliveryOutcome:
    """What the collector answered to a delivered bundle."""
    url: str
    status_code: int
    body: str = ""


@dataclass(frozen=True)
class Ok:
    bundle: ReportBundle
    delivery: DeliveryOutcome | None = None
    output_path: Path | None = None


@dataclass(frozen=True)
class Skipped:
    """No report was produced because a precondition did not hold."""
    reason: PreconditionError

    @property
    def message(self) -> str:
        return str(self.reason)


@dataclass(frozen=True)
class Failed:
    """A bundle could not be built or could not reach its destination."""
    error: ReportError

    @property
    def message(self) -> str:
        return str(self.error)


ReportOutcome = Union[Ok, Skipped, Failed]

