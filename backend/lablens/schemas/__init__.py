"""Pydantic schemas."""

from lablens.schemas.analysis import (
    AnalysisResult,
    MarkerFinding,
    MarkerStatus,
    OverallSeverity,
    PanelFinding,
    RangeSource,
)
from lablens.schemas.submission import Marker, Panel, PanelType, Submission

__all__ = [
    # Submission schemas
    "Marker",
    "Panel",
    "PanelType",
    "Submission",
    # Analysis schemas
    "AnalysisResult",
    "MarkerFinding",
    "MarkerStatus",
    "OverallSeverity",
    "PanelFinding",
    "RangeSource",
]
