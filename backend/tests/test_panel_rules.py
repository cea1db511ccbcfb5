"""Tests for panel-level derived pattern rules."""

import pytest

from lablens.schemas import Marker, MarkerStatus, Panel, PanelType
from lablens.services.panel_rules import PANEL_RULES, analyze_panel, index_markers


def _panel(panel_type: PanelType, *markers: tuple[str, float]) -> Panel:
    return Panel(
        panel_name=panel_type,
        markers=[Marker(name=name, value=value, unit="") for name, value in markers],
    )


def _summary(panel_type: PanelType, *markers: tuple[str, float]) -> str:
    return analyze_panel(_panel(panel_type, *markers)).summary


class TestDispatch:
    """Tests for the panel type → rule registry."""

    def test_every_panel_type_has_a_rule(self):
        assert set(PANEL_RULES) == set(PanelType)

    def test_findings_preserve_input_order(self):
        finding = analyze_panel(
            _panel(PanelType.CBC, ("Platelets", 200), ("Hemoglobin", 14), ("WBC", 6))
        )
        assert [f.marker for f in finding.findings] == ["Platelets", "Hemoglobin", "WBC"]
        assert finding.panel_name is PanelType.CBC

    def test_index_markers_keeps_first_occurrence(self):
        first = Marker(name="TSH", value=5.0, unit="")
        second = Marker(name="tsh", value=1.0, unit="")
        assert index_markers([first, second]) == {"TSH": first}


class TestMetabolicPanel:
    """Tests for the CMP rule."""

    def test_elevated_bun_creatinine_ratio(self):
        summary = _summary(PanelType.CMP, ("BUN", 25), ("Creatinine", 1.0))
        assert "ratio" in summary
        assert summary == (
            "Elevated BUN/Creatinine ratio may suggest dehydration or catabolic state."
        )

    def test_ratio_exactly_twenty_not_flagged(self):
        summary = _summary(PanelType.CMP, ("BUN", 20), ("Creatinine", 1.0))
        assert summary == "All metabolic markers within normal ranges."

    def test_ratio_takes_priority_over_count(self):
        summary = _summary(
            PanelType.CMP, ("BUN", 30), ("Creatinine", 1.2), ("Sodium", 150), ("Potassium", 6.0)
        )
        assert "ratio" in summary

    def test_zero_creatinine_skips_ratio(self):
        summary = _summary(PanelType.CMP, ("BUN", 25), ("Creatinine", 0))
        assert summary == "2 marker(s) outside normal range."

    def test_all_normal(self):
        summary = _summary(PanelType.CMP, ("Sodium", 140), ("Potassium", 4.0))
        assert summary == "All metabolic markers within normal ranges."

    def test_abnormal_count(self):
        summary = _summary(PanelType.CMP, ("Sodium", 130), ("Glucose", 110), ("Calcium", 9.0))
        assert summary == "2 marker(s) outside normal range."


class TestA1cPanel:
    """Tests for the glycemic-control rule."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (
                7.0,
                "A1c level meets diabetes diagnostic criteria (≥6.5%). "
                "Consult healthcare provider for diagnosis.",
            ),
            (
                6.5,
                "A1c level meets diabetes diagnostic criteria (≥6.5%). "
                "Consult healthcare provider for diagnosis.",
            ),
            (6.0, "A1c level in prediabetes range (5.7-6.4%). Consider lifestyle modifications."),
            (5.7, "A1c level in prediabetes range (5.7-6.4%). Consider lifestyle modifications."),
            (5.4, "A1c level within normal range (<5.7%)."),
        ],
    )
    def test_thresholds(self, value, expected):
        assert _summary(PanelType.A1C, ("A1c", value)) == expected

    def test_alias_accepted(self):
        assert "prediabetes" in _summary(PanelType.A1C, ("Hemoglobin A1c", 6.1))

    def test_missing_a1c(self):
        assert _summary(PanelType.A1C, ("Glucose", 90)) == "A1c analysis complete."


class TestLipidPanel:
    """Tests for the lipid rule."""

    def test_multiple_issues_joined(self):
        summary = _summary(
            PanelType.LIPID,
            ("Total Cholesterol", 220),
            ("LDL", 150),
            ("HDL", 35),
            ("Triglycerides", 200),
        )
        assert "elevated" in summary
        assert summary == (
            "Lipid profile shows elevated LDL, low HDL, elevated triglycerides. "
            "Consider dietary and lifestyle modifications."
        )

    def test_single_issue(self):
        summary = _summary(PanelType.LIPID, ("LDL", 90), ("HDL", 45))
        assert summary == (
            "Lipid profile shows low HDL. Consider dietary and lifestyle modifications."
        )

    def test_boundaries_not_flagged(self):
        summary = _summary(PanelType.LIPID, ("LDL", 100), ("HDL", 50), ("Triglycerides", 150))
        assert summary == "Lipid profile within optimal ranges."


class TestThyroidPanel:
    """Tests for the thyroid rule."""

    def test_hypothyroid_pattern(self):
        summary = _summary(PanelType.THYROID, ("TSH", 5.5), ("Free T4", 0.7))
        assert "hypothyroid" in summary
        assert summary == "Pattern consistent with hypothyroid physiology (high TSH, low FT4)."

    def test_hyperthyroid_pattern(self):
        summary = _summary(PanelType.THYROID, ("TSH", 0.2), ("Free T4", 2.0))
        assert "hyperthyroid" in summary
        assert summary == "Pattern consistent with hyperthyroid physiology (low TSH, high FT4)."

    def test_subclinical_hypothyroid(self):
        summary = _summary(PanelType.THYROID, ("TSH", 6.0), ("FT4", 1.2))
        assert summary == "Elevated TSH may suggest subclinical hypothyroidism."

    def test_subclinical_hyperthyroid(self):
        summary = _summary(PanelType.THYROID, ("TSH", 0.3), ("FT4", 1.2))
        assert summary == "Low TSH may suggest subclinical hyperthyroidism."

    def test_normal_pair_reviewed(self):
        summary = _summary(PanelType.THYROID, ("TSH", 2.0), ("Free T4", 1.2))
        assert summary == "Thyroid markers reviewed."

    def test_missing_free_t4_reviewed(self):
        assert _summary(PanelType.THYROID, ("TSH", 9.0)) == "Thyroid markers reviewed."


class TestIronPanel:
    """Tests for the iron rule."""

    def test_iron_deficiency_pattern(self):
        summary = _summary(PanelType.IRON, ("Ferritin", 15), ("Transferrin Sat", 12))
        assert "iron deficiency" in summary

    def test_low_ferritin_only(self):
        summary = _summary(PanelType.IRON, ("Ferritin", 15), ("Transferrin Saturation", 25))
        assert summary == "Low ferritin may indicate depleted iron stores."

    def test_low_ferritin_without_saturation(self):
        summary = _summary(PanelType.IRON, ("Ferritin", 20))
        assert summary == "Low ferritin may indicate depleted iron stores."

    def test_normal_ferritin_reviewed(self):
        summary = _summary(PanelType.IRON, ("Ferritin", 80), ("Transferrin Sat", 10))
        assert summary == "Iron panel reviewed."


class TestVitaminDPanel:
    """Tests for the vitamin D rule."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (15, "Vitamin D deficiency detected. Supplementation may be beneficial."),
            (20, "Vitamin D level is insufficient. Consider supplementation."),
            (25, "Vitamin D level is insufficient. Consider supplementation."),
            (30, "Vitamin D level is sufficient."),
        ],
    )
    def test_thresholds(self, value, expected):
        assert _summary(PanelType.VITD, ("Vitamin D 25-OH", value)) == expected

    def test_alias_accepted(self):
        assert _summary(PanelType.VITD, ("Vitamin D", 45)) == "Vitamin D level is sufficient."

    def test_missing_marker(self):
        assert _summary(PanelType.VITD, ("Calcium", 9.5)) == "Vitamin D reviewed."


class TestBloodCountPanel:
    """Tests for the CBC rule."""

    def test_all_normal(self):
        summary = _summary(PanelType.CBC, ("Hemoglobin", 14), ("WBC", 6))
        assert summary == "All blood cell counts within normal ranges."

    def test_abnormal_count_includes_criticals(self):
        finding = analyze_panel(_panel(PanelType.CBC, ("Hemoglobin", 6.0), ("WBC", 12)))
        assert [f.status for f in finding.findings] == [
            MarkerStatus.CRITICAL_LOW,
            MarkerStatus.HIGH,
        ]
        assert finding.summary == "2 marker(s) outside normal range in complete blood count."
