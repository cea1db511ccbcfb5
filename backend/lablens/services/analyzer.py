"""Submission analysis: panel findings, overall severity and summary bullets.

Usage:
    from lablens.services.analyzer import analyze_submission

    result = analyze_submission(submission)
    for line in result.summary_bullets:
        print(line)

The bullet list is a literal script rendered top to bottom:

    header
    critical block           (only when critical values exist)
    panel summaries          (submission order)
    key findings block       (only when non-critical abnormals exist)
    recommendations block    (only when any recommendation applies)
    all-normal encouragement (only when nothing is abnormal)
    disclaimer lines         (always, always last)

Stateless and deterministic: the same Submission always yields an equal
AnalysisResult.
"""

from __future__ import annotations

import logging

from lablens.schemas import (
    AnalysisResult,
    MarkerFinding,
    MarkerStatus,
    OverallSeverity,
    PanelFinding,
    Submission,
)
from lablens.services.classifier import format_number
from lablens.services.guidance import guidance_for, pattern_recommendations
from lablens.services.panel_rules import analyze_panel

logger = logging.getLogger(__name__)

# Abnormal count at or above which severity becomes MODERATE
MODERATE_ABNORMAL_COUNT = 5

ALL_NORMAL_HEADER = (
    "✅ All lab markers are within normal reference ranges - excellent overall health indicators."
)
KEY_FINDINGS_HEADER = "📌 Key findings to discuss with your provider:"
RECOMMENDATIONS_HEADER = "💡 Recommended next steps:"
ALL_NORMAL_CLOSING = (
    "🎯 Continue maintaining your current healthy lifestyle and routine health monitoring."
)
DISCLAIMER_LINES: tuple[str, ...] = (
    "ℹ️ This analysis is informational only and is not a medical diagnosis.",
    "ℹ️ Always review your lab results with a qualified healthcare provider.",
)

CRITICAL_RECOMMENDATION = "Contact your healthcare provider immediately to discuss critical values"
MULTIPLE_ABNORMAL_RECOMMENDATION = (
    "Comprehensive review with your doctor recommended due to multiple abnormal markers"
)
FOLLOW_UP_RECOMMENDATION = "Schedule follow-up with your healthcare provider to discuss these findings"


def determine_severity(criticals: list[MarkerFinding], abnormals: list[MarkerFinding]) -> OverallSeverity:
    """Any critical value forces SEVERE; otherwise grade by abnormal count."""
    if criticals:
        return OverallSeverity.SEVERE
    if len(abnormals) >= MODERATE_ABNORMAL_COUNT:
        return OverallSeverity.MODERATE
    if abnormals:
        return OverallSeverity.MILD
    return OverallSeverity.OK


def _finding_line(finding: MarkerFinding, status_label: str, detail: str) -> str:
    return (
        f"   • {finding.marker}: {format_number(finding.value)} {finding.unit}"
        f" ({status_label}) - {detail}"
    )


def _general_recommendations(criticals: list[MarkerFinding], abnormals: list[MarkerFinding]) -> list[str]:
    recommendations: list[str] = []
    if criticals:
        recommendations.append(CRITICAL_RECOMMENDATION)
    if len(abnormals) >= MODERATE_ABNORMAL_COUNT:
        recommendations.append(MULTIPLE_ABNORMAL_RECOMMENDATION)
    elif abnormals:
        recommendations.append(FOLLOW_UP_RECOMMENDATION)
    return recommendations


def build_summary_bullets(
    panel_findings: list[PanelFinding],
    criticals: list[MarkerFinding],
    abnormals: list[MarkerFinding],
) -> list[str]:
    """Assemble the ordered summary script for a set of panel findings."""
    all_findings = [f for pf in panel_findings for f in pf.findings]
    bullets: list[str] = []

    if abnormals:
        bullets.append(
            f"📊 Lab Analysis Summary: {len(abnormals)} marker(s) outside normal range "
            f"across {len(panel_findings)} panel(s)."
        )
    else:
        bullets.append(ALL_NORMAL_HEADER)

    if criticals:
        bullets.append(
            f"⚠️ URGENT: {len(criticals)} critical value(s) detected "
            "requiring immediate clinical attention."
        )
        for finding in criticals:
            bullets.append(
                _finding_line(finding, finding.status.value.replace("_", " "), finding.note)
            )

    for pf in panel_findings:
        if pf.summary:
            bullets.append(f"🔬 {pf.panel_name.value}: {pf.summary}")

    non_critical = [f for f in abnormals if not f.status.is_critical]
    if non_critical:
        bullets.append(KEY_FINDINGS_HEADER)
        for finding in non_critical:
            bullets.append(
                _finding_line(finding, finding.status.value, f"{finding.note}. {guidance_for(finding)}")
            )

    recommendations = _general_recommendations(criticals, abnormals)
    recommendations.extend(pattern_recommendations(all_findings))
    if recommendations:
        bullets.append(RECOMMENDATIONS_HEADER)
        bullets.extend(f"   • {rec}" for rec in recommendations)

    if not abnormals:
        bullets.append(ALL_NORMAL_CLOSING)

    bullets.extend(DISCLAIMER_LINES)
    return bullets


def analyze_submission(submission: Submission) -> AnalysisResult:
    """Analyze every panel of a submission and aggregate the results.

    Args:
        submission: Validated submission with at least one panel.

    Returns:
        AnalysisResult with overall severity, ordered summary bullets and
        panel findings in submission order.
    """
    panel_findings = [analyze_panel(panel) for panel in submission.panels]

    all_findings = [f for pf in panel_findings for f in pf.findings]
    criticals = [f for f in all_findings if f.status.is_critical]
    abnormals = [f for f in all_findings if f.status is not MarkerStatus.NORMAL]

    severity = determine_severity(criticals, abnormals)
    bullets = build_summary_bullets(panel_findings, criticals, abnormals)

    logger.info(
        "Analyzed submission: panels=%d markers=%d abnormal=%d critical=%d severity=%s",
        len(panel_findings),
        len(all_findings),
        len(abnormals),
        len(criticals),
        severity.value,
    )

    return AnalysisResult(
        overall_severity=severity,
        summary_bullets=bullets,
        panel_findings=panel_findings,
    )
