from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from npm_audit_reporter.core.domain.exceptions import DeliveryError, WriteError
from npm_audit_reporter.core.domain.models import BlameRecord, DeliveryOutcome, VcsFacts
from npm_audit_reporter.core.services import (
    BlameCorrelator,
    DependencyLister,
    ReportAssembler,
    ReportPipeline,
)


def mark_by_dir(items, base_dir, marker):
    base = Path(base_dir).resolve()
    for item in items:
        # pytest 7/8: item.path on newer versions, item.fspath on older ones
        p = getattr(item, "path", None)
        p = Path(p) if p is not None else Path(str(getattr(item, "fspath")))
        try:
            p.resolve().relative_to(base)
        except ValueError:
            continue
        item.add_marker(marker)


MANIFEST = {
    "name": "demo",
    "version": "1.0.0",
    "dependencies": {"lodash": "^4.17.0", "express": "~4.18.2"},
    "devDependencies": {"jest": "^29.0.0"},
}

MANIFEST_LINES = [
    "{",
    '  "name": "demo",',
    '  "version": "1.0.0",',
    '  "dependencies": {',
    '    "lodash": "^4.17.0",',
    '    "express": "~4.18.2"',
    "  },",
    '  "devDependencies": {',
    '    "jest": "^29.0.0"',
    "  }",
    "}",
]

AUDIT = {
    "auditReportVersion": 2,
    "vulnerabilities": {"lodash": {"name": "lodash", "severity": "high"}},
    "metadata": {"vulnerabilities": {"low": 0, "moderate": 0, "high": 1, "critical": 0, "total": 1}},
}


def blame_for(lines: list[str], author: str = "Alice", commit: str = "a" * 40) -> tuple[BlameRecord, ...]:
    return tuple(
        BlameRecord(author=author, commit_hash=commit, line_number=i, line_text=text)
        for i, text in enumerate(lines, start=1)
    )


class Calls:
    """Shared call journal so tests can assert on ordering across fakes."""

    def __init__(self) -> None:
        self.items: list[str] = []

    def add(self, name: str) -> None:
        self.items.append(name)


class FakeManifestReader:
    def __init__(self, calls: Calls, manifest: dict | None = MANIFEST):
        self._calls = calls
        self._manifest = manifest

    def read(self, root: Path):
        self._calls.add("manifest.read")
        return self._manifest


class FakeAuditRunner:
    def __init__(self, calls: Calls, version: str = "8.19.2", output: str | None = json.dumps(AUDIT)):
        self._calls = calls
        self._version = version
        self._output = output

    def tool_version(self, root: Path) -> str:
        self._calls.add("audit.tool_version")
        return self._version

    def run_audit(self, root: Path):
        self._calls.add("audit.run_audit")
        return self._output


class FakeVcs:
    def __init__(self, calls: Calls, facts: VcsFacts | None = None):
        self._calls = calls
        self._facts = facts or VcsFacts(
            commit_hash="f" * 40,
            project_name="demo",
            blame=blame_for(MANIFEST_LINES),
            remote_url="git@github.com:acme/demo.git",
        )

    def facts(self, root: Path, manifest_name: str) -> VcsFacts:
        self._calls.add("vcs.facts")
        return self._facts


class FakeWalker:
    def __init__(self, calls: Calls, tracked: bool = True):
        self._calls = calls
        self._tracked = tracked

    def walk(self, root: Path):
        self._calls.add("walker.walk")
        inventory: dict[str, Any] = {"package.json": None, "src": {"index.js": None}}
        if self._tracked:
            inventory[".git"] = {}
        return inventory, self._tracked


class FakeHost:
    def host_name(self) -> str:
        return "build-box"


class FakeClock:
    def __init__(self) -> None:
        self._ticks = iter(["2024-01-01T00:00:00+00:00", "2024-01-01T00:00:05+00:00"])

    def now(self) -> str:
        return next(self._ticks)


class FakeDelivery:
    def __init__(self, calls: Calls, fail: bool = False):
        self._calls = calls
        self._fail = fail
        self.delivered: list[dict] = []
        self.tokens: list[str] = []

    def deliver(self, bundle, *, token, host=None, port=None):
        self._calls.add("delivery.deliver")
        url = f"https://{host}:{port}/api/v1/reports"
        if self._fail:
            raise DeliveryError(url, "ConnectionError")
        self.delivered.append(bundle)
        self.tokens.append(token)
        return DeliveryOutcome(url=url, status_code=201, body="{}")


class FakeWriter:
    def __init__(self, calls: Calls, fail: bool = False):
        self._calls = calls
        self._fail = fail
        self.written: dict[Path, dict] = {}

    def persist(self, bundle, path: Path) -> None:
        self._calls.add("writer.persist")
        if self._fail:
            raise WriteError(path, "Permission denied")
        self.written[path] = bundle

    def load(self, path: Path):
        return self.written[path]


class RecordingLogger:
    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict]] = []

    def debug(self, message, **kwargs):
        self.records.append(("debug", message, kwargs))

    def info(self, message, **kwargs):
        self.records.append(("info", message, kwargs))

    def warning(self, message, **kwargs):
        self.records.append(("warning", message, kwargs))

    def error(self, message, exc_info=False, **kwargs):
        self.records.append(("error", message, kwargs))

    def exception(self, message, **kwargs):
        self.records.append(("exception", message, kwargs))

    def messages(self) -> list[str]:
        return [m for _, m, _ in self.records]


def make_pipeline(calls: Calls, **overrides) -> ReportPipeline:
    parts: dict[str, Any] = dict(
        manifest_reader=FakeManifestReader(calls),
        audit_runner=FakeAuditRunner(calls),
        vcs=FakeVcs(calls),
        walker=FakeWalker(calls),
        host=FakeHost(),
        clock=FakeClock(),
        delivery=FakeDelivery(calls),
        writer=FakeWriter(calls),
        logger=RecordingLogger(),
        lister=DependencyLister(),
        correlator=BlameCorrelator(),
        assembler=ReportAssembler(),
    )
    parts.update(overrides)
    return ReportPipeline(**parts)
