"""Marker classification against reference ranges.

Boundary semantics:
  value <= critical_low  -> CRITICAL_LOW   (inclusive)
  value >= critical_high -> CRITICAL_HIGH  (inclusive)
  value <  low           -> LOW            (exclusive)
  value >  high          -> HIGH           (exclusive)
  otherwise              -> NORMAL

Critical bounds are checked first, so a value at or past a critical bound is
critical regardless of where the normal bounds sit.
"""

from __future__ import annotations

from lablens.schemas import Marker, MarkerFinding, MarkerStatus, RangeSource
from lablens.services.reference_ranges import (
    DEFAULT_REF_HIGH,
    DEFAULT_REF_LOW,
    get_reference_range,
)

_NOTE_TEMPLATES: dict[MarkerStatus, str] = {
    MarkerStatus.CRITICAL_LOW: "Critically low - significantly below reference range ({bounds})",
    MarkerStatus.LOW: "Below reference range ({bounds})",
    MarkerStatus.NORMAL: "Within normal range ({bounds})",
    MarkerStatus.HIGH: "Above reference range ({bounds})",
    MarkerStatus.CRITICAL_HIGH: "Critically high - significantly above reference range ({bounds})",
}


def classify(
    value: float,
    ref_low: float,
    ref_high: float,
    critical_low: float | None = None,
    critical_high: float | None = None,
) -> MarkerStatus:
    """Classify a value against normal and optional critical bounds.

    Args:
        value: Observed marker value.
        ref_low: Lower bound of the normal interval.
        ref_high: Upper bound of the normal interval.
        critical_low: Optional critical-low threshold.
        critical_high: Optional critical-high threshold.

    Returns:
        The MarkerStatus for the value.
    """
    if critical_low is not None and value <= critical_low:
        return MarkerStatus.CRITICAL_LOW
    if critical_high is not None and value >= critical_high:
        return MarkerStatus.CRITICAL_HIGH
    if value < ref_low:
        return MarkerStatus.LOW
    if value > ref_high:
        return MarkerStatus.HIGH
    return MarkerStatus.NORMAL


def format_number(value: float) -> str:
    """Render a number without a trailing ".0" for integral values."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def build_note(status: MarkerStatus, ref_low: float, ref_high: float, unit: str) -> str:
    """Return the status sentence embedding the resolved bounds and unit."""
    bounds = f"{format_number(ref_low)}-{format_number(ref_high)} {unit}".rstrip()
    return _NOTE_TEMPLATES[status].format(bounds=bounds)


def build_marker_finding(marker: Marker) -> MarkerFinding:
    """Resolve bounds for a marker, classify it, and build its finding.

    Each bound is resolved on its own: a per-marker override wins over the
    table, and the table wins over the open default range. Critical bounds
    come from the table only.
    """
    ref_range = get_reference_range(marker.name)

    ref_low = marker.ref_low
    ref_high = marker.ref_high
    source: RangeSource
    if ref_low is not None and ref_high is not None:
        source = "override"
    elif ref_low is not None or ref_high is not None:
        source = "partial"
    else:
        source = "table" if ref_range is not None else "default"
    if ref_low is None:
        ref_low = ref_range.low if ref_range is not None else DEFAULT_REF_LOW
    if ref_high is None:
        ref_high = ref_range.high if ref_range is not None else DEFAULT_REF_HIGH

    critical_low = ref_range.critical_low if ref_range is not None else None
    critical_high = ref_range.critical_high if ref_range is not None else None

    status = classify(marker.value, ref_low, ref_high, critical_low, critical_high)

    return MarkerFinding(
        marker=marker.name,
        value=marker.value,
        unit=marker.unit,
        status=status,
        note=build_note(status, ref_low, ref_high, marker.unit),
        ref_low=ref_low,
        ref_high=ref_high,
        range_source=source,
    )
