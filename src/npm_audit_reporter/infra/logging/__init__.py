from __future__ import annotations

from .logger import RunLogger
from .handlers import build_json_file_handler, build_human_console_handler
from .formatters import JSONFormatter

__all__ = [
    "RunLogger",
    "build_json_file_handler",
    "build_human_console_handler",
    "JSONFormatter",
]
