"""Pydantic schemas for analysis results.

Findings are frozen once computed. ``summary_bullets`` is an ordered script
that the presentation layer renders line by line.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from lablens.schemas.submission import PanelType


class MarkerStatus(str, Enum):
    """Classification of one marker value against its reference range."""

    CRITICAL_LOW = "CRITICAL_LOW"
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    CRITICAL_HIGH = "CRITICAL_HIGH"

    @property
    def is_critical(self) -> bool:
        return self in (MarkerStatus.CRITICAL_LOW, MarkerStatus.CRITICAL_HIGH)


class OverallSeverity(str, Enum):
    """Worst-case aggregate classification across a submission."""

    OK = "OK"
    MILD = "MILD"
    MODERATE = "MODERATE"
    SEVERE = "SEVERE"


RangeSource = Literal["override", "partial", "table", "default"]


class _ResultModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class MarkerFinding(_ResultModel):
    """Classified outcome for one marker.

    Attributes:
        marker: Marker name as submitted.
        status: Resolved classification.
        note: Status sentence embedding the bounds actually used.
        ref_low: Lower bound used (override, table, or open default).
        ref_high: Upper bound used (override, table, or open default).
        range_source: "override" when the report supplied both bounds,
            "partial" when it supplied only one (the other comes from the
            table or the open default), otherwise "table" or "default"
            depending on whether the marker has a reference table entry.
    """

    marker: str
    value: float
    unit: str
    status: MarkerStatus
    note: str
    ref_low: float
    ref_high: float
    range_source: RangeSource


class PanelFinding(_ResultModel):
    """Findings for one panel, in input order, plus the panel summary."""

    panel_name: PanelType
    findings: list[MarkerFinding]
    summary: str | None = None


class AnalysisResult(_ResultModel):
    """Root analysis output."""

    overall_severity: OverallSeverity
    summary_bullets: list[str]
    panel_findings: list[PanelFinding]
