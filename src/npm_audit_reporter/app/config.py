from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs
from pydantic import BaseModel, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..infra.transport import DEFAULT_ENDPOINT_PATH, DEFAULT_HOST, DEFAULT_PORT


APP_NAME = "npm_audit_reporter"


def _default_home() -> Path:
    """Get default home directory using platformdirs."""
    return Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_cache_dir)


class DirectoryConfig(BaseModel):
    """Directory configuration with computed paths."""

    home: Path = Field(
        default_factory=_default_home,
        description="Base directory for npm_audit_reporter data",
    )

    @computed_field
    @property
    def logs_dir(self) -> Path:
        """Directory for per-project JSONL run logs."""
        path = self.home / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path


class TransportConfig(BaseModel):
    """Where the report goes and how to authenticate."""

    token: str | None = Field(
        default=None,
        description="Token used to identify the report provider (required)",
    )

    output_path: Path | None = Field(
        default=None,
        description="Write the report to this file instead of sending it",
    )

    host: str = Field(
        default=DEFAULT_HOST,
        description="Collector host",
    )

    port: int = Field(
        default=DEFAULT_PORT,
        description="Collector port",
    )

    endpoint_path: str = Field(
        default=DEFAULT_ENDPOINT_PATH,
        description="HTTP path the bundle is POSTed to",
    )

    timeout: float | None = Field(
        default=None,
        description="Request timeout in seconds (None = wait indefinitely)",
    )


class ProjectConfig(BaseModel):
    """Project location and file names."""

    root: Path = Field(
        default_factory=Path.cwd,
        description="Project root to audit",
    )

    manifest_name: str = Field(default="package.json")
    lockfile_name: str = Field(default="package-lock.json")


class ToolConfig(BaseModel):
    """npm tooling."""

    npm_executable: str = Field(default="npm", description="npm executable name or path")

    min_version: str = Field(
        default="5.2.0",
        description="Oldest npm that supports `npm audit --json`",
    )


class LoggingConfig(BaseModel):
    logger_name: str = Field(default=APP_NAME)
    level: str = Field(default="INFO")
    console_output: bool = Field(default=False)
    file_output: bool = Field(default=True, description="Write a JSONL log per project under logs_dir")


class AppConfig(BaseSettings):
    """Root application configuration.

    All configuration is loaded from environment variables with NPM_AUDIT_REPORTER_ prefix.
    Use double underscore for nested config: NPM_AUDIT_REPORTER_TRANSPORT__TOKEN

    Example env vars:
        # Required
        export NPM_AUDIT_REPORTER_TRANSPORT__TOKEN=xxxxxxxx

        # Optional (with defaults)
        export NPM_AUDIT_REPORTER_TRANSPORT__HOST=reshift.softwaresecured.com
        export NPM_AUDIT_REPORTER_TRANSPORT__PORT=443
        export NPM_AUDIT_REPORTER_TRANSPORT__OUTPUT_PATH=/tmp/report.json
        export NPM_AUDIT_REPORTER_TOOL__NPM_EXECUTABLE=npm
        export NPM_AUDIT_REPORTER_DIRECTORIES__HOME=/custom/path

    The model is frozen; CLI flags produce a new instance via ``with_overrides``.
    """

    model_config = SettingsConfigDict(
        env_prefix="NPM_AUDIT_REPORTER_",
        env_nested_delimiter="__",
        frozen=True,
        extra="forbid",
    )

    directories: DirectoryConfig = Field(default_factory=DirectoryConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    tool: ToolConfig = Field(default_factory=ToolConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def with_overrides(
        self,
        *,
        token: str | None = None,
        output_path: Path | None = None,
        host: str | None = None,
        port: int | None = None,
        root: Path | None = None,
        log_level: str | None = None,
        console_output: bool | None = None,
    ) -> "AppConfig":
        """Return a copy with every non-None argument applied."""
        transport_update = {
            k: v
            for k, v in {"token": token, "output_path": output_path, "host": host, "port": port}.items()
            if v is not None
        }
        logging_update = {
            k: v
            for k, v in {"level": log_level, "console_output": console_output}.items()
            if v is not None
        }
        update: dict[str, object] = {}
        if transport_update:
            update["transport"] = self.transport.model_copy(update=transport_update)
        if root is not None:
            update["project"] = self.project.model_copy(update={"root": root})
        if logging_update:
            update["logging"] = self.logging.model_copy(update=logging_update)
        return self.model_copy(update=update) if update else self
