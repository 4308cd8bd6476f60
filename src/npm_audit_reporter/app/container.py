from __future__ import annotations

from dependency_injector import containers, providers

from ..core.ports import UtcClock
from ..core.services import BlameCorrelator, DependencyLister, ReportAssembler, ReportPipeline
from ..core.usecases.attributions import AttributionsUseCase
from ..core.usecases.report import ReportUseCase
from ..infra.audit_runner import NpmAuditRunner
from ..infra.file_walker import DirectoryWalker
from ..infra.git_repo import GitVcs
from ..infra.logging import RunLogger
from ..infra.manifest import ManifestReader
from ..infra.report_store import ReportStore
from ..infra.system import SystemHost
from ..infra.transport import TransportClient


class Container(containers.DeclarativeContainer):
    """DI container fed from an AppConfig via ``config.from_pydantic``."""

    config = providers.Configuration()

    # Logger (Resource: manages lifecycle with init/shutdown)
    logger = providers.Resource(
        RunLogger,
        log_name=config.runtime.log_name,
        logs_dir=config.directories.logs_dir,
        logger_name=config.logging.logger_name,
        console_output=config.logging.console_output,
        level=config.logging.level,
    )

    # Adapters
    manifest_reader = providers.Singleton(
        ManifestReader,
        manifest_name=config.project.manifest_name,
    )

    # Progress messages for the operator (None = silent)
    notifier = providers.Object(None)

    audit_runner = providers.Singleton(
        NpmAuditRunner,
        npm_executable=config.tool.npm_executable,
        manifest_name=config.project.manifest_name,
        lockfile_name=config.project.lockfile_name,
        logger=logger,
        notify=notifier,
    )

    vcs = providers.Singleton(GitVcs, logger=logger)

    walker = providers.Singleton(DirectoryWalker)

    host = providers.Singleton(SystemHost)

    clock = providers.Singleton(UtcClock)

    transport = providers.Singleton(
        TransportClient,
        default_host=config.transport.host,
        default_port=config.transport.port,
        endpoint_path=config.transport.endpoint_path,
        timeout=config.transport.timeout,
    )

    report_store = providers.Singleton(ReportStore)

    # Domain services
    lister = providers.Singleton(DependencyLister)
    correlator = providers.Singleton(BlameCorrelator)
    assembler = providers.Singleton(ReportAssembler)

    pipeline = providers.Factory(
        ReportPipeline,
        manifest_reader=manifest_reader,
        audit_runner=audit_runner,
        vcs=vcs,
        walker=walker,
        host=host,
        clock=clock,
        delivery=transport,
        writer=report_store,
        logger=logger,
        lister=lister,
        correlator=correlator,
        assembler=assembler,
        manifest_name=config.project.manifest_name,
        min_tool_version=config.tool.min_version,
    )

    # Use cases
    report_uc = providers.Factory(ReportUseCase, pipeline=pipeline)

    attributions_uc = providers.Factory(AttributionsUseCase, pipeline=pipeline)
