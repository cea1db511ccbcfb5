"""Pydantic schemas for lab submissions.

These are the request shapes accepted by the analysis API and CLI. Field
names are camelCase on the wire (``panelName``, ``refLow``) and snake_case
in Python.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PanelType(str, Enum):
    """Panel vocabulary accepted from upstream parsers."""

    CBC = "CBC"
    CMP = "CMP"
    LIPID = "LIPID"
    A1C = "A1C"
    THYROID = "THYROID"
    VITD = "VITD"
    IRON = "IRON"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Marker(_WireModel):
    """A single named lab result."""

    name: str = Field(min_length=1, description="Marker name, e.g. 'Hemoglobin'")
    value: float = Field(allow_inf_nan=False, description="Measured value")
    unit: str = Field(default="", description="Display unit, not used in computation")
    ref_low: float | None = Field(
        default=None,
        allow_inf_nan=False,
        description="Optional lower-bound override from the lab report",
    )
    ref_high: float | None = Field(
        default=None,
        allow_inf_nan=False,
        description="Optional upper-bound override from the lab report",
    )


class Panel(_WireModel):
    """A group of related markers."""

    panel_name: PanelType
    markers: list[Marker] = Field(min_length=1)


class Submission(_WireModel):
    """Root analysis request.

    patient_id and collected_at are carried for the caller's convenience
    only; they are never stored, logged, or used in any rule.
    """

    patient_id: str | None = Field(default=None, description="Never stored")
    collected_at: str | None = Field(default=None, description="ISO collection date")
    panels: list[Panel] = Field(min_length=1)
