from __future__ import annotations

import json
import re
from pathlib import Path

from ..domain.exceptions import (
    DeliveryError,
    ManifestAbsentError,
    MissingTokenError,
    NoAuditDataError,
    PreconditionError,
    ReportError,
    ToolVersionTooLowError,
    WriteError,
)
from ..domain.models import (
    AttributionEntry,
    Failed,
    Ok,
    ReportBundle,
    ReportOutcome,
    ReportRequest,
    Skipped,
)
from ..ports import (
    AuditRunnerPort,
    ClockPort,
    DeliveryPort,
    DirectoryWalkerPort,
    HostNamePort,
    LoggerPort,
    ManifestReaderPort,
    ReportWriterPort,
    VcsPort,
)
from .blame_correlator import BlameCorrelator
from .dependency_lister import DependencyLister
from .report_assembler import ReportAssembler


def parse_version(text: str) -> tuple[int, ...] | None:
    """Leading numeric components of a version string ("8.19.2" -> (8, 19, 2))."""
    m = re.match(r"\s*v?(\d+(?:\.\d+)*)", text or "")
    if not m:
        return None
    return tuple(int(part) for part in m.group(1).split("."))


def _pad(version: tuple[int, ...], width: int = 3) -> tuple[int, ...]:
    return version + (0,) * max(0, width - len(version))


class ReportPipeline:
    """Runs one audit-report cycle from configuration to outcome.

    Preconditions are checked before the audit runs. Precondition failures
    end the run as ``Skipped``; a bundle that was built but could not be
    written or delivered ends it as ``Failed``.
    """

    def __init__(
        self,
        *,
        manifest_reader: ManifestReaderPort,
        audit_runner: AuditRunnerPort,
        vcs: VcsPort,
        walker: DirectoryWalkerPort,
        host: HostNamePort,
        clock: ClockPort,
        delivery: DeliveryPort,
        writer: ReportWriterPort,
        logger: LoggerPort,
        lister: DependencyLister,
        correlator: BlameCorrelator,
        assembler: ReportAssembler,
        manifest_name: str = "package.json",
        min_tool_version: str = "5.2.0",
    ) -> None:
        self._manifest_reader = manifest_reader
        self._audit_runner = audit_runner
        self._vcs = vcs
        self._walker = walker
        self._host = host
        self._clock = clock
        self._delivery = delivery
        self._writer = writer
        self._logger = logger
        self._lister = lister
        self._correlator = correlator
        self._assembler = assembler
        self._manifest_name = manifest_name
        self._min_tool_version = min_tool_version

    def run(self, request: ReportRequest) -> ReportOutcome:
        self._logger.info(
            "run_started",
            type="run_started",
            root=str(request.root),
            mode="persist" if request.output_path is not None else "deliver",
        )

        try:
            bundle = self._build(request)
        except PreconditionError as e:
            self._logger.info("precondition_failed", type="precondition_failed", reason=type(e).__name__, detail=str(e))
            return Skipped(reason=e)
        except ReportError as e:
            self._logger.error("report_failed", type="report_failed", reason=type(e).__name__, detail=str(e))
            return Failed(error=e)

        if request.output_path is not None:
            return self._persist(bundle, request.output_path)
        return self._deliver(bundle, request)

    def attributions(self, root: Path) -> list[AttributionEntry]:
        """Correlate the manifest's dependencies with blame, without auditing.

        Raises:
            ManifestAbsentError: If ``root`` holds no manifest
        """
        manifest = self._manifest_reader.read(root)
        if manifest is None:
            raise ManifestAbsentError(root)
        deps = self._lister.list_dependencies(manifest)
        _, is_tracked = self._walker.walk(root)
        blame = self._vcs.facts(root, self._manifest_name).blame if is_tracked else None
        return self._correlator.correlate(blame, deps)

    def _build(self, request: ReportRequest) -> ReportBundle:
        # 1) Preconditions, cheapest first
        if not request.token:
            raise MissingTokenError()

        root = request.root
        manifest = self._manifest_reader.read(root)
        if manifest is None:
            raise ManifestAbsentError(root)

        self._check_tool_version(root)

        # 2) Audit
        start = self._clock.now()
        raw = self._audit_runner.run_audit(root)
        if raw is None:
            raise ManifestAbsentError(root)
        audit = self._parse_audit(raw)
        self._logger.info("audit_completed", type="audit_completed", raw_len=len(raw))

        # 3) Provenance
        host_name = self._host.host_name()
        inventory, is_tracked = self._walker.walk(root)
        facts = self._vcs.facts(root, self._manifest_name) if is_tracked else None

        deps = self._lister.list_dependencies(manifest)
        attributions = self._correlator.correlate(facts.blame if facts else None, deps)

        # 4) Assemble; the end timestamp confirms the guard passed
        bundle = self._assembler.assemble(
            audit=audit,
            start=start,
            vcs_present=is_tracked,
            vcs_facts=facts,
            deps=deps,
            attributions=attributions,
            file_inventory=inventory,
            root_path=str(root),
            host_name=host_name,
        )
        bundle["Date"]["End"] = self._clock.now()

        self._logger.info(
            "bundle_assembled",
            type="bundle_assembled",
            dependencies=len(deps),
            attributed=sum(1 for a in attributions if a.blame is not None),
            vcs_present=is_tracked,
        )
        return bundle

    def _check_tool_version(self, root: Path) -> None:
        found = self._audit_runner.tool_version(root)
        found_v = parse_version(found)
        required_v = parse_version(self._min_tool_version) or ()
        if found_v is None or _pad(found_v) < _pad(required_v):
            raise ToolVersionTooLowError(found=found.strip() or "unknown", required=self._min_tool_version)

    @staticmethod
    def _parse_audit(raw: str) -> object:
        if not raw.strip():
            raise NoAuditDataError("npm audit produced no output.")
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise NoAuditDataError(f"npm audit output is not valid JSON: {e}") from e

    def _persist(self, bundle: ReportBundle, path: Path) -> ReportOutcome:
        try:
            self._writer.persist(bundle, path)
        except WriteError as e:
            self._logger.error("report_failed", type="report_failed", reason="WriteError", detail=str(e))
            return Failed(error=e)
        self._logger.info("report_persisted", type="report_persisted", path=str(path))
        return Ok(bundle=bundle, output_path=path)

    def _deliver(self, bundle: ReportBundle, request: ReportRequest) -> ReportOutcome:
        try:
            outcome = self._delivery.deliver(
                bundle,
                token=request.token or "",
                host=request.host,
                port=request.port,
            )
        except DeliveryError as e:
            self._logger.error("report_failed", type="report_failed", reason="DeliveryError", detail=str(e))
            return Failed(error=e)
        self._logger.info(
            "report_delivered",
            type="report_delivered",
            url=outcome.url,
            status_code=outcome.status_code,
        )
        return Ok(bundle=bundle, delivery=outcome)
