from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Optional

from ..core.ports import LoggerPort, NullLogger


class NpmAuditRunner:
    """Runs npm inside the project root.

    ``npm audit`` exits non-zero whenever it finds vulnerabilities, so exit
    codes are not treated as failures; the JSON on stdout is the result.
    """

    def __init__(
        self,
        *,
        npm_executable: str = "npm",
        manifest_name: str = "package.json",
        lockfile_name: str = "package-lock.json",
        logger: LoggerPort | None = None,
        notify: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._npm = npm_executable
        self._manifest_name = manifest_name
        self._lockfile_name = lockfile_name
        self._logger = logger or NullLogger()
        self._notify = notify

    def tool_version(self, root: Path) -> str:
        """Return ``npm --version`` as seen from ``root``, or "" if npm is missing."""
        try:
            proc = self._run(["--version"], root)
        except FileNotFoundError:
            return ""
        return proc.stdout.strip()

    def run_audit(self, root: Path) -> Optional[str]:
        if not (root / self._manifest_name).is_file():
            return None

        if not (root / self._lockfile_name).is_file():
            self._logger.info("lockfile_created", type="lockfile_created", root=str(root))
            if self._notify is not None:
                self._notify("Creating locks for dependency checker.")
            self._run(["i", "--package-lock-only"], root)

        proc = self._run(["audit", "--json"], root)
        return proc.stdout

    def _run(self, args: list[str], root: Path) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            [self._npm, *args],
            cwd=str(root),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
