from __future__ import annotations

from pathlib import Path

from .config import AppConfig
from .container import Container
from ..core.domain.models import AttributionEntry, ReportOutcome, ReportRequest


def _create_container(config: AppConfig | None = None) -> Container:
    """Create and initialize a container.

    Args:
        config: Optional config. If None, loads from environment variables.

    Returns:
        Initialized container instance
    """
    if config is None:
        config = AppConfig()

    container = Container()
    container.config.from_pydantic(config)
    if config.logging.file_output:
        container.config.set("runtime.log_name", log_name_for(config.project.root))
    container.init_resources()
    return container


def log_name_for(root: Path) -> str:
    return root.resolve().name or "root"


def build_request(config: AppConfig) -> ReportRequest:
    """Freeze the run-relevant part of the configuration into a request."""
    return ReportRequest(
        root=config.project.root.resolve(),
        token=config.transport.token,
        output_path=config.transport.output_path,
        host=config.transport.host,
        port=config.transport.port,
    )


def generate_report(
    *,
    token: str | None = None,
    output_path: Path | None = None,
    host: str | None = None,
    port: int | None = None,
    root: Path | None = None,
    config: AppConfig | None = None,
) -> ReportOutcome:
    """Audit a project and deliver or persist its report.

    Args:
        token: Collector token override (otherwise from config/env)
        output_path: Write the report here instead of sending it
        host: Collector host override
        port: Collector port override
        root: Project root override (defaults to the current directory)
        config: Optional config for testing. If None, loads from env vars.

    Returns:
        Ok, Skipped or Failed
    """
    config = (config or AppConfig()).with_overrides(
        token=token, output_path=output_path, host=host, port=port, root=root
    )
    container = _create_container(config)
    try:
        uc = container.report_uc()
        return uc.execute(request=build_request(config))
    finally:
        container.shutdown_resources()


def list_attributions(
    root: Path | None = None,
    config: AppConfig | None = None,
) -> list[AttributionEntry]:
    """Return the blame attribution of each declared dependency.

    Raises:
        ManifestAbsentError: If the root holds no package.json
        ManifestError: If package.json cannot be parsed
    """
    config = (config or AppConfig()).with_overrides(root=root)
    container = _create_container(config)
    try:
        uc = container.attributions_uc()
        return uc.execute(root=config.project.root.resolve())
    finally:
        container.shutdown_resources()
