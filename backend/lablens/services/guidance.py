"""Patient-facing guidance text and follow-up recommendation rules.

MARKER_GUIDANCE gives one sentence per canonical marker and direction
("low" / "high"). Markers or directions not listed get GENERIC_GUIDANCE.

RECOMMENDATION_RULES are checked in order; each fires once when any finding
for one of its markers has one of its statuses.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping

from lablens.schemas import MarkerFinding, MarkerStatus
from lablens.services.reference_ranges import canonical_marker_name

Direction = Literal["low", "high"]

GENERIC_GUIDANCE = "Consult your healthcare provider about this result."

MARKER_GUIDANCE: Mapping[str, Mapping[Direction, str]] = MappingProxyType({
    # CBC
    "Hemoglobin": {
        "low": "Low hemoglobin can indicate anemia; ask about iron, B12 and folate testing.",
        "high": "High hemoglobin can reflect dehydration or smoking; discuss with your provider.",
    },
    "Hematocrit": {
        "low": "Low hematocrit often accompanies anemia.",
        "high": "High hematocrit can reflect dehydration.",
    },
    "WBC": {
        "low": "A low white cell count can affect how well you fight infection.",
        "high": "A high white cell count may reflect infection or inflammation.",
    },
    "Platelets": {
        "low": "Low platelets can increase bleeding risk.",
        "high": "High platelets can follow inflammation or iron deficiency.",
    },
    # CMP
    "Sodium": {
        "low": "Low sodium can result from excess fluid intake or certain medications.",
        "high": "High sodium usually reflects dehydration.",
    },
    "Potassium": {
        "low": "Low potassium can cause muscle weakness and heart rhythm changes.",
        "high": "High potassium can affect heart rhythm; a repeat test may be needed.",
    },
    "Chloride": {
        "low": "Low chloride often follows vomiting or fluid shifts.",
        "high": "High chloride can reflect dehydration or acid-base changes.",
    },
    "CO2": {
        "low": "Low bicarbonate can indicate an acid-base imbalance.",
        "high": "High bicarbonate can follow vomiting or diuretic use.",
    },
    "BUN": {
        "low": "Low BUN can reflect low protein intake.",
        "high": "High BUN may reflect dehydration, high protein intake or reduced kidney function.",
    },
    "Creatinine": {
        "low": "Low creatinine can reflect low muscle mass.",
        "high": "High creatinine may indicate reduced kidney filtration.",
    },
    "Glucose": {
        "low": "Low glucose can cause shakiness or confusion; discuss meal timing and medications.",
        "high": "High glucose may indicate impaired glucose regulation; confirm whether you were fasting.",
    },
    "Calcium": {
        "low": "Low calcium can relate to vitamin D or albumin levels.",
        "high": "High calcium warrants evaluation of parathyroid function.",
    },
    "AST": {"high": "Elevated AST can reflect liver or muscle strain."},
    "ALT": {"high": "Elevated ALT is a sensitive marker of liver irritation."},
    "Alk Phos": {
        "low": "Low alkaline phosphatase is uncommon and may relate to nutrition.",
        "high": "High alkaline phosphatase can come from liver or bone sources.",
    },
    "Albumin": {
        "low": "Low albumin can reflect nutrition, liver or kidney issues.",
        "high": "High albumin usually reflects dehydration.",
    },
    "Total Bilirubin": {"high": "High bilirubin can cause jaundice and may reflect liver or blood conditions."},
    # Lipid
    "Total Cholesterol": {"high": "High total cholesterol raises cardiovascular risk."},
    "LDL": {"high": "High LDL is a major modifiable cardiovascular risk factor."},
    "HDL": {"low": "Low HDL reduces cardiovascular protection; exercise can help raise it."},
    "Triglycerides": {"high": "High triglycerides respond to reducing sugar, refined carbs and alcohol."},
    # Glycemic control
    "A1c": {
        "low": "A low A1c is uncommon; discuss with your provider.",
        "high": "An elevated A1c reflects higher average blood sugar over about three months.",
    },
    # Thyroid
    "TSH": {
        "low": "Low TSH may indicate an overactive thyroid.",
        "high": "High TSH may indicate an underactive thyroid.",
    },
    "Free T4": {
        "low": "Low Free T4 is consistent with reduced thyroid hormone output.",
        "high": "High Free T4 is consistent with excess thyroid hormone.",
    },
    # Vitamin D
    "Vitamin D 25-OH": {
        "low": "Low vitamin D is common; supplementation and sun exposure can help.",
        "high": "High vitamin D usually reflects over-supplementation.",
    },
    # Iron
    "Ferritin": {
        "low": "Low ferritin indicates depleted iron stores.",
        "high": "High ferritin can reflect inflammation or iron overload.",
    },
    "Serum Iron": {
        "low": "Low serum iron can accompany iron deficiency.",
        "high": "High serum iron may warrant evaluation for iron overload.",
    },
    "TIBC": {
        "low": "Low TIBC can accompany inflammation or iron overload.",
        "high": "High TIBC often accompanies iron deficiency.",
    },
    "Transferrin Saturation": {
        "low": "Low transferrin saturation supports an iron deficiency picture.",
        "high": "High transferrin saturation may warrant evaluation for iron overload.",
    },
})

_LOW_STATUSES = frozenset({MarkerStatus.LOW, MarkerStatus.CRITICAL_LOW})
_ABNORMAL_STATUSES = frozenset(set(MarkerStatus) - {MarkerStatus.NORMAL})


def guidance_for(finding: MarkerFinding) -> str:
    """Return guidance for an abnormal finding, never an empty string."""
    if finding.status is MarkerStatus.NORMAL:
        return GENERIC_GUIDANCE
    direction: Direction = "low" if finding.status in _LOW_STATUSES else "high"
    by_direction = MARKER_GUIDANCE.get(canonical_marker_name(finding.marker), {})
    return by_direction.get(direction) or GENERIC_GUIDANCE


@dataclass(frozen=True, slots=True)
class RecommendationRule:
    """Fire ``text`` when any finding for ``markers`` has one of ``statuses``."""

    markers: frozenset[str]
    statuses: frozenset[MarkerStatus]
    text: str

    def matches(self, findings: list[MarkerFinding]) -> bool:
        return any(
            f.status in self.statuses and canonical_marker_name(f.marker) in self.markers
            for f in findings
        )


RECOMMENDATION_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        markers=frozenset({"BUN", "Creatinine"}),
        statuses=_ABNORMAL_STATUSES,
        text="Consider discussing kidney function markers with your provider",
    ),
    RecommendationRule(
        markers=frozenset({"ALT", "AST", "Alk Phos", "Total Bilirubin"}),
        statuses=_ABNORMAL_STATUSES,
        text="Liver enzyme levels may warrant further evaluation",
    ),
    RecommendationRule(
        markers=frozenset({"TSH", "Free T4"}),
        statuses=_ABNORMAL_STATUSES,
        text="Thyroid function abnormalities detected - endocrinology consultation may be beneficial",
    ),
    RecommendationRule(
        markers=frozenset({"Total Cholesterol", "LDL", "HDL", "Triglycerides"}),
        statuses=_ABNORMAL_STATUSES,
        text="Lipid abnormalities detected - discuss cardiovascular risk assessment with your provider",
    ),
    RecommendationRule(
        markers=frozenset({"A1c", "Glucose"}),
        statuses=_ABNORMAL_STATUSES,
        text="Blood sugar markers are outside normal range - discuss diabetes screening with your provider",
    ),
    RecommendationRule(
        markers=frozenset({"Hemoglobin", "Hematocrit"}),
        statuses=_LOW_STATUSES,
        text="Low red blood cell markers may indicate anemia - ask about follow-up iron studies",
    ),
)


def pattern_recommendations(findings: list[MarkerFinding]) -> list[str]:
    """Return recommendation texts for every rule that fires, in rule order."""
    return [rule.text for rule in RECOMMENDATION_RULES if rule.matches(findings)]
