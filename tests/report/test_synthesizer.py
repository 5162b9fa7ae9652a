"""Tests for report synthesis and the Markdown narrative."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from compaudit.analyzers.accessibility import AccessibilityResult
from compaudit.analyzers.motion import MotionResult
from compaudit.models import AuditReport, ComponentCategory, ComponentRecord
from compaudit.report import (
    REPORT_JSON,
    REPORT_MARKDOWN,
    SECTION_TITLES,
    SUMMARY_JSON,
    ReportSynthesizer,
    build_follow_up_plan,
)
from compaudit.report.synthesizer import FALLBACK_RECOMMENDATIONS
from compaudit.stores.artifacts import ArtifactStore, MissingArtifactError

CARD = ComponentRecord(path="src/components/Card.tsx", name="Card", category=ComponentCategory.CORE)
MODAL = ComponentRecord(
    path="src/components/overlays/Modal.tsx", name="Modal", category=ComponentCategory.OVERLAYS
)


def _results() -> dict:
    return {
        "motion": [
            MotionResult(path=CARD.path, name=CARD.name, has_motion_import=True),
            MotionResult(path=MODAL.path, name=MODAL.name),
        ],
        "accessibility": [
            AccessibilityResult(
                path=MODAL.path,
                name=MODAL.name,
                score=80,
                supports_keyboard_nav=False,
                is_screen_reader_compatible=True,
            )
        ],
    }


def test_empty_inventory_still_renders_every_section(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path)

    output = ReportSynthesizer(store).synthesize([], {})

    summary = output.report.executive_summary
    assert summary.total_components == 0
    assert summary.overall_score == 0
    assert output.report.component_analysis == []
    assert output.report.follow_up_plan == []
    assert summary.key_recommendations == list(FALLBACK_RECOMMENDATIONS)

    markdown = (tmp_path / REPORT_MARKDOWN).read_text(encoding="utf-8")
    for title in SECTION_TITLES:
        assert f"## {title}" in markdown
    assert "No components were audited." in markdown
    assert "No issues found." in markdown
    assert "No follow-up work required." in markdown


def test_report_scores_and_counts(tmp_path: Path) -> None:
    output = ReportSynthesizer(ArtifactStore(tmp_path)).synthesize([CARD, MODAL], _results())

    report = output.report
    by_name = {summary.name: summary for summary in report.component_analysis}
    # Card: one high issue -> 85.
    assert by_name["Card"].health_score == 85
    # Modal: one critical issue -> 75, averaged with accessibility 80 -> 77.5.
    assert by_name["Modal"].health_score == 78
    assert by_name["Modal"].findings[0] == "1 critical issue(s) require immediate attention"

    summary = report.executive_summary
    assert summary.issues_by_priority == {"critical": 1, "high": 1, "medium": 0, "low": 0}
    assert summary.overall_score == 82
    assert summary.scores_by_category["Core"] == 85
    assert summary.scores_by_category["accessibility"] == 75
    assert [issue.priority for issue in report.issues] == ["critical", "high"]
    assert summary.key_recommendations[0] == "Add keyboard support for all interactive elements"


def test_follow_up_phases_only_for_matching_issues(tmp_path: Path) -> None:
    report = ReportSynthesizer(ArtifactStore(tmp_path)).build([CARD, MODAL], _results())

    plan = report.follow_up_plan
    assert [(item.id, item.phase, item.phase_name) for item in plan] == [
        ("phase-1", 1, "Critical Fixes"),
        ("phase-2", 2, "High Priority Fixes"),
    ]
    assert plan[0].components == ["Modal"]
    assert build_follow_up_plan([]) == []


def test_written_json_round_trips(tmp_path: Path) -> None:
    output = ReportSynthesizer(ArtifactStore(tmp_path)).synthesize([CARD, MODAL], _results())

    payload = json.loads((tmp_path / REPORT_JSON).read_text(encoding="utf-8"))
    assert AuditReport.from_dict(payload) == output.report

    summary = json.loads((tmp_path / SUMMARY_JSON).read_text(encoding="utf-8"))
    assert summary["issues"]["total"] == 2
    assert summary["total_components"] == 2
    assert set(output.paths) == {"json", "markdown", "summary"}


def test_markdown_lists_components_and_issues(tmp_path: Path) -> None:
    ReportSynthesizer(ArtifactStore(tmp_path)).synthesize([CARD, MODAL], _results())

    markdown = (tmp_path / REPORT_MARKDOWN).read_text(encoding="utf-8")
    assert "| Card (`src/components/Card.tsx`) | Core | 85 |" in markdown
    assert "### Critical (1)" in markdown
    assert "### Phase 1: Critical Fixes" in markdown


def test_synthesize_from_store_requires_inventory(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path)
    with pytest.raises(MissingArtifactError):
        ReportSynthesizer(store).synthesize()

    store.save_inventory([CARD])
    store.save_results("motion-analysis.json", _results()["motion"][:1])
    output = ReportSynthesizer(store).synthesize()

    assert [issue.rule for issue in output.report.issues] == ["missing-reduced-motion"]
    assert "motion" in output.report.artifact_paths
