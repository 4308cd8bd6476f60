from __future__ import annotations

from pathlib import Path

from ..domain.models import AttributionEntry
from ..services import ReportPipeline


class AttributionsUseCase:
    """Use case for listing dependency blame attribution without auditing."""

    def __init__(self, *, pipeline: ReportPipeline) -> None:
        self._pipeline = pipeline

    def execute(self, *, root: Path) -> list[AttributionEntry]:
        return self._pipeline.attributions(root)
