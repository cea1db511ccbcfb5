"""Panel-level derived pattern rules.

Each panel type maps to exactly one rule in ``PANEL_RULES``. A rule sees the
panel's markers (by canonical name) and its classified findings and returns a
single summary sentence. Rules only read the markers they care about and fall
back to a generic sentence when their pattern does not apply.

Adding a panel type:
    1. Add the member to PanelType.
    2. Write ``_summarize_<panel>(markers, findings) -> str``.
    3. Register it in PANEL_RULES (import fails until you do).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping

from lablens.schemas import Marker, MarkerFinding, MarkerStatus, Panel, PanelFinding, PanelType
from lablens.services.classifier import build_marker_finding
from lablens.services.reference_ranges import canonical_marker_name

PanelRule = Callable[[Mapping[str, Marker], list[MarkerFinding]], str]

# Pattern thresholds
BUN_CREATININE_RATIO_LIMIT = 20.0
A1C_DIABETES = 6.5
A1C_PREDIABETES = 5.7
LDL_LIMIT = 100.0
HDL_FLOOR = 50.0
TRIGLYCERIDES_LIMIT = 150.0
TSH_HIGH = 4.0
TSH_LOW = 0.4
FREE_T4_LOW = 0.8
FREE_T4_HIGH = 1.8
FERRITIN_FLOOR = 30.0
TRANSFERRIN_SAT_FLOOR = 20.0
VITAMIN_D_DEFICIENT = 20.0
VITAMIN_D_INSUFFICIENT = 30.0


def _count_abnormal(findings: list[MarkerFinding]) -> int:
    return sum(1 for f in findings if f.status is not MarkerStatus.NORMAL)


def _summarize_metabolic(markers: Mapping[str, Marker], findings: list[MarkerFinding]) -> str:
    bun = markers.get("BUN")
    creatinine = markers.get("Creatinine")
    if bun is not None and creatinine is not None and creatinine.value > 0:
        if bun.value / creatinine.value > BUN_CREATININE_RATIO_LIMIT:
            return "Elevated BUN/Creatinine ratio may suggest dehydration or catabolic state."

    abnormal = _count_abnormal(findings)
    if abnormal == 0:
        return "All metabolic markers within normal ranges."
    return f"{abnormal} marker(s) outside normal range."


def _summarize_a1c(markers: Mapping[str, Marker], findings: list[MarkerFinding]) -> str:
    a1c = markers.get("A1c")
    if a1c is None:
        return "A1c analysis complete."
    if a1c.value >= A1C_DIABETES:
        return (
            "A1c level meets diabetes diagnostic criteria (≥6.5%). "
            "Consult healthcare provider for diagnosis."
        )
    if a1c.value >= A1C_PREDIABETES:
        return "A1c level in prediabetes range (5.7-6.4%). Consider lifestyle modifications."
    return "A1c level within normal range (<5.7%)."


def _summarize_lipid(markers: Mapping[str, Marker], findings: list[MarkerFinding]) -> str:
    ldl = markers.get("LDL")
    hdl = markers.get("HDL")
    triglycerides = markers.get("Triglycerides")

    issues: list[str] = []
    if ldl is not None and ldl.value > LDL_LIMIT:
        issues.append("elevated LDL")
    if hdl is not None and hdl.value < HDL_FLOOR:
        issues.append("low HDL")
    if triglycerides is not None and triglycerides.value > TRIGLYCERIDES_LIMIT:
        issues.append("elevated triglycerides")

    if issues:
        return (
            f"Lipid profile shows {', '.join(issues)}. "
            "Consider dietary and lifestyle modifications."
        )
    return "Lipid profile within optimal ranges."


def _summarize_thyroid(markers: Mapping[str, Marker], findings: list[MarkerFinding]) -> str:
    tsh = markers.get("TSH")
    ft4 = markers.get("Free T4")
    if tsh is None or ft4 is None:
        return "Thyroid markers reviewed."

    # Combined patterns take priority over single-marker patterns
    if tsh.value > TSH_HIGH and ft4.value < FREE_T4_LOW:
        return "Pattern consistent with hypothyroid physiology (high TSH, low FT4)."
    if tsh.value < TSH_LOW and ft4.value > FREE_T4_HIGH:
        return "Pattern consistent with hyperthyroid physiology (low TSH, high FT4)."
    if tsh.value > TSH_HIGH:
        return "Elevated TSH may suggest subclinical hypothyroidism."
    if tsh.value < TSH_LOW:
        return "Low TSH may suggest subclinical hyperthyroidism."
    return "Thyroid markers reviewed."


def _summarize_iron(markers: Mapping[str, Marker], findings: list[MarkerFinding]) -> str:
    ferritin = markers.get("Ferritin")
    saturation = markers.get("Transferrin Saturation")

    if ferritin is not None and ferritin.value < FERRITIN_FLOOR:
        if saturation is not None and saturation.value < TRANSFERRIN_SAT_FLOOR:
            return "Pattern suggests iron deficiency (low ferritin and transferrin saturation)."
        return "Low ferritin may indicate depleted iron stores."
    return "Iron panel reviewed."


def _summarize_vitamin_d(markers: Mapping[str, Marker], findings: list[MarkerFinding]) -> str:
    vitamin_d = markers.get("Vitamin D 25-OH")
    if vitamin_d is None:
        return "Vitamin D reviewed."
    if vitamin_d.value < VITAMIN_D_DEFICIENT:
        return "Vitamin D deficiency detected. Supplementation may be beneficial."
    if vitamin_d.value < VITAMIN_D_INSUFFICIENT:
        return "Vitamin D level is insufficient. Consider supplementation."
    return "Vitamin D level is sufficient."


def _summarize_blood_count(markers: Mapping[str, Marker], findings: list[MarkerFinding]) -> str:
    abnormal = _count_abnormal(findings)
    if abnormal == 0:
        return "All blood cell counts within normal ranges."
    return f"{abnormal} marker(s) outside normal range in complete blood count."


# ── Registry: panel type → rule ──────────────────────────────────────────────
PANEL_RULES: Mapping[PanelType, PanelRule] = MappingProxyType({
    PanelType.CBC: _summarize_blood_count,
    PanelType.CMP: _summarize_metabolic,
    PanelType.LIPID: _summarize_lipid,
    PanelType.A1C: _summarize_a1c,
    PanelType.THYROID: _summarize_thyroid,
    PanelType.VITD: _summarize_vitamin_d,
    PanelType.IRON: _summarize_iron,
})

_missing_rules = set(PanelType) - set(PANEL_RULES)
if _missing_rules:
    raise RuntimeError(f"No panel rule registered for: {sorted(p.value for p in _missing_rules)}")


def index_markers(markers: list[Marker]) -> dict[str, Marker]:
    """Index markers by canonical name, keeping the first occurrence."""
    indexed: dict[str, Marker] = {}
    for marker in markers:
        indexed.setdefault(canonical_marker_name(marker.name), marker)
    return indexed


def analyze_panel(panel: Panel) -> PanelFinding:
    """Classify every marker in a panel and run its derived pattern rule.

    Args:
        panel: Validated panel with at least one marker.

    Returns:
        PanelFinding with findings in input order and the rule's summary.
    """
    findings = [build_marker_finding(marker) for marker in panel.markers]
    rule = PANEL_RULES[panel.panel_name]
    summary = rule(index_markers(panel.markers), findings)
    return PanelFinding(panel_name=panel.panel_name, findings=findings, summary=summary)
