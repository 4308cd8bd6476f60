from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol, Optional, Any, Mapping

from .domain.models import DeliveryOutcome, FileInventory, ReportBundle, VcsFacts


class ManifestReaderPort(Protocol):
    """Port for reading the project's dependency manifest."""

    def read(self, root: Path) -> Optional[Mapping[str, Any]]:
        """Return the parsed manifest, or None if the root has none.

        Raises:
            ManifestError: If the manifest exists but cannot be parsed
        """
        ...


class AuditRunnerPort(Protocol):
    """Port for the npm tooling: version probe and vulnerability audit."""

    def tool_version(self, root: Path) -> str:
        """Version string of the npm that would run inside ``root``."""
        ...

    def run_audit(self, root: Path) -> Optional[str]:
        """Ensure a lockfile exists, run the audit and return its raw JSON text.

        Returns None when ``root`` holds no manifest.
        """
        ...


class VcsPort(Protocol):
    """Port for version-control queries on a tracked project."""

    def facts(self, root: Path, manifest_name: str) -> VcsFacts:
        ...


class DirectoryWalkerPort(Protocol):
    def walk(self, root: Path) -> tuple[FileInventory, bool]:
        """Return (inventory, is_tracked_repository) for ``root``."""
        ...


class HostNamePort(Protocol):
    def host_name(self) -> str:
        ...


class ClockPort(Protocol):
    def now(self) -> str:
        ...


class DeliveryPort(Protocol):
    """Port for shipping a bundle to the remote collector."""

    def deliver(
        self,
        bundle: ReportBundle,
        *,
        token: str,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ) -> DeliveryOutcome:
        """Transmit the bundle once; no retries.

        Raises:
            DeliveryError: If the collector is unreachable or rejects the bundle
        """
        ...


class ReportWriterPort(Protocol):
    """Port for persisting a bundle locally."""

    def persist(self, bundle: ReportBundle, path: Path) -> None:
        """Raises WriteError if ``path`` is not writable."""
        ...

    def load(self, path: Path) -> ReportBundle:
        ...


class LoggerPort(Protocol):
    """Port for structured logging.

    Provides structured logging with optional extra fields.
    Implementations should handle JSON serialization and formatting.
    """

    def debug(self, message: str, **kwargs: Any) -> None:
        ...

    def info(self, message: str, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, **kwargs: Any) -> None:
        ...

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        ...

    def exception(self, message: str, **kwargs: Any) -> None:
        ...


class UtcClock:
    def now(self) -> str:
        return datetime.now(timezone.utc).isoformat()


class NullLogger:
    """LoggerPort that drops everything; used when no logger is wired in."""

    def debug(self, message: str, **kwargs: Any) -> None:
        pass

    def info(self, message: str, **kwargs: Any) -> None:
        pass

    def warning(self, message: str, **kwargs: Any) -> None:
        pass

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        pass

    def exception(self, message: str, **kwargs: Any) -> None:
        pass
