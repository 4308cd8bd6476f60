from __future__ import annotations

from ..domain.models import ReportOutcome, ReportRequest
from ..services import ReportPipeline


class ReportUseCase:
    """Use case for producing and shipping one audit report.

    Thin orchestration layer that delegates to ReportPipeline.
    """

    def __init__(
        self,
        *,
        pipeline: ReportPipeline,
    ) -> None:
        self._pipeline = pipeline

    def execute(self, *, request: ReportRequest) -> ReportOutcome:
        return self._pipeline.run(request)
