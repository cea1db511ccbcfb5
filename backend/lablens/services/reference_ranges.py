"""Laboratory reference ranges keyed by marker name.

Provides a lookup table of common panel markers (CBC, CMP, lipid, A1c,
thyroid, vitamin D, iron) with normal bounds, display unit and optional
critical thresholds, plus an alias map that folds alternate spellings
("FT4", "Hemoglobin A1c", "Transferrin Sat") onto one canonical name.

Reference values are demo-grade adult ranges in US conventional units.
Not for clinical use.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

# Bounds used when a marker has no table entry and no per-marker override.
DEFAULT_REF_LOW = 0.0
DEFAULT_REF_HIGH = 999999.0


@dataclass(frozen=True, slots=True)
class ReferenceRange:
    """Normal interval for one marker.

    Attributes:
        low: Lower bound of the normal interval (value < low is LOW).
        high: Upper bound of the normal interval (value > high is HIGH).
        unit: Display unit the bounds are expressed in.
        critical_low: Optional bound at or below which the value is critical.
        critical_high: Optional bound at or above which the value is critical.
    """

    low: float
    high: float
    unit: str
    critical_low: float | None = None
    critical_high: float | None = None


# ---------------------------------------------------------------------------
# Reference range lookup table
#
# Keyed by canonical marker name. Alternate names resolve through
# MARKER_ALIASES below; never add an alias as a second table entry.
#
# Ordering: critical_low < low <= high < critical_high wherever a critical
# bound is present.
# ---------------------------------------------------------------------------

REFERENCE_RANGES: Mapping[str, ReferenceRange] = MappingProxyType({
    # -----------------------------------------------------------------------
    # CBC (Complete Blood Count)
    # -----------------------------------------------------------------------
    "Hemoglobin": ReferenceRange(12.0, 16.0, "g/dL", critical_low=7.0, critical_high=20.0),
    "Hematocrit": ReferenceRange(36.0, 48.0, "%", critical_low=20.0, critical_high=60.0),
    "WBC": ReferenceRange(4.0, 11.0, "×10^3/µL", critical_low=2.0, critical_high=30.0),
    "Platelets": ReferenceRange(150.0, 400.0, "×10^3/µL", critical_low=50.0, critical_high=1000.0),
    # -----------------------------------------------------------------------
    # CMP (Comprehensive Metabolic Panel)
    # -----------------------------------------------------------------------
    "Sodium": ReferenceRange(135.0, 145.0, "mmol/L", critical_low=120.0, critical_high=160.0),
    "Potassium": ReferenceRange(3.5, 5.1, "mmol/L", critical_low=2.5, critical_high=6.5),
    "Chloride": ReferenceRange(98.0, 107.0, "mmol/L", critical_low=80.0, critical_high=120.0),
    "CO2": ReferenceRange(22.0, 29.0, "mmol/L", critical_low=15.0, critical_high=40.0),
    "BUN": ReferenceRange(7.0, 20.0, "mg/dL", critical_low=0.0, critical_high=100.0),
    "Creatinine": ReferenceRange(0.6, 1.3, "mg/dL", critical_low=0.0, critical_high=10.0),
    "Glucose": ReferenceRange(70.0, 99.0, "mg/dL", critical_low=40.0, critical_high=400.0),
    "Calcium": ReferenceRange(8.6, 10.2, "mg/dL", critical_low=6.0, critical_high=14.0),
    # Liver enzymes have a normal floor of 0, so no critical-low bound applies
    "AST": ReferenceRange(0.0, 40.0, "U/L", critical_high=500.0),
    "ALT": ReferenceRange(0.0, 40.0, "U/L", critical_high=500.0),
    "Alk Phos": ReferenceRange(44.0, 147.0, "U/L", critical_low=0.0, critical_high=1000.0),
    "Albumin": ReferenceRange(3.5, 5.5, "g/dL", critical_low=2.0, critical_high=6.0),
    "Total Bilirubin": ReferenceRange(0.1, 1.2, "mg/dL", critical_low=0.0, critical_high=20.0),
    # -----------------------------------------------------------------------
    # Lipid Panel
    # -----------------------------------------------------------------------
    "Total Cholesterol": ReferenceRange(0.0, 200.0, "mg/dL", critical_high=300.0),
    "LDL": ReferenceRange(0.0, 100.0, "mg/dL", critical_high=190.0),
    "HDL": ReferenceRange(50.0, 200.0, "mg/dL", critical_low=20.0),
    "Triglycerides": ReferenceRange(0.0, 150.0, "mg/dL", critical_high=500.0),
    # -----------------------------------------------------------------------
    # Glycemic control
    # -----------------------------------------------------------------------
    "A1c": ReferenceRange(4.8, 5.6, "%", critical_high=10.0),
    # -----------------------------------------------------------------------
    # Thyroid
    # -----------------------------------------------------------------------
    "TSH": ReferenceRange(0.4, 4.0, "µIU/mL", critical_low=0.01, critical_high=20.0),
    "Free T4": ReferenceRange(0.8, 1.8, "ng/dL", critical_low=0.1, critical_high=5.0),
    # -----------------------------------------------------------------------
    # Vitamin D
    # -----------------------------------------------------------------------
    "Vitamin D 25-OH": ReferenceRange(30.0, 100.0, "ng/mL", critical_low=10.0, critical_high=150.0),
    # -----------------------------------------------------------------------
    # Iron Panel
    # -----------------------------------------------------------------------
    "Ferritin": ReferenceRange(30.0, 150.0, "ng/mL", critical_low=5.0, critical_high=500.0),
    "Serum Iron": ReferenceRange(60.0, 170.0, "µg/dL", critical_low=20.0, critical_high=300.0),
    "TIBC": ReferenceRange(240.0, 450.0, "µg/dL", critical_low=100.0, critical_high=600.0),
    "Transferrin Saturation": ReferenceRange(20.0, 50.0, "%", critical_low=5.0, critical_high=100.0),
})


# Alternate spelling -> canonical table key
MARKER_ALIASES: Mapping[str, str] = MappingProxyType({
    "Bicarbonate": "CO2",
    "AST (SGOT)": "AST",
    "ALT (SGPT)": "ALT",
    "Alkaline Phosphatase": "Alk Phos",
    "Bilirubin": "Total Bilirubin",
    "Hemoglobin A1c": "A1c",
    "HbA1c": "A1c",
    "FT4": "Free T4",
    "Vitamin D": "Vitamin D 25-OH",
    "Iron": "Serum Iron",
    "Transferrin Sat": "Transferrin Saturation",
})


def _normalize(name: str) -> str:
    return " ".join(name.split()).casefold()


_CANONICAL_BY_KEY: Mapping[str, str] = MappingProxyType({
    **{_normalize(name): name for name in REFERENCE_RANGES},
    **{_normalize(alias): canonical for alias, canonical in MARKER_ALIASES.items()},
})


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def canonical_marker_name(name: str) -> str:
    """Return the canonical table name for a marker, or the name unchanged.

    Matching ignores case and collapses runs of whitespace, so "free  t4"
    and "FT4" both resolve to "Free T4". Unknown names pass through as-is.
    """
    return _CANONICAL_BY_KEY.get(_normalize(name), name)


def get_reference_range(name: str) -> ReferenceRange | None:
    """Return the reference range for a marker name or alias.

    Args:
        name: Marker name as submitted (e.g. "Hemoglobin", "FT4").

    Returns:
        The ReferenceRange, or None if the marker is not in the table.
    """
    return REFERENCE_RANGES.get(canonical_marker_name(name))
