from __future__ import annotations

from .dependency_lister import DependencyLister
from .blame_correlator import BlameCorrelator
from .report_assembler import ReportAssembler
from .report_pipeline import ReportPipeline

__all__ = [
    "DependencyLister",
    "BlameCorrelator",
    "ReportAssembler",
    "ReportPipeline",
]
