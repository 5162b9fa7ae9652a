"""Tests for issue extraction from analyzer results."""

from __future__ import annotations

from compaudit.analyzers.accessibility import AccessibilityResult
from compaudit.analyzers.coverage import CoverageResult
from compaudit.analyzers.libraries import LibraryResult
from compaudit.analyzers.motion import MotionResult
from compaudit.analyzers.performance import PerformanceResult
from compaudit.analyzers.principles import FAIL, PASS, PrincipleEvaluation, PrinciplesResult
from compaudit.issues import (
    DEFAULT_RECOMMENDATION,
    IssueExtractor,
    recommendation_for,
    sort_issues,
)
from compaudit.models import ComponentRecord, Violation

CARD = ComponentRecord(path="src/components/Card.tsx", name="Card")


def _performance(**overrides: object) -> PerformanceResult:
    values = {
        "path": CARD.path,
        "name": CARD.name,
        "uses_hardware_acceleration": True,
        "uses_layout_position": True,
    }
    values.update(overrides)
    return PerformanceResult(**values)  # type: ignore[arg-type]


def test_issues_follow_source_order_with_sequential_ids() -> None:
    results = {
        "performance": [_performance(uses_hardware_acceleration=False)],
        "motion": [
            MotionResult(path=CARD.path, name=CARD.name, has_motion_import=True, is_compliant=True)
        ],
    }

    issues = IssueExtractor().extract([CARD], results)

    assert [issue.id for issue in issues] == [
        "motion-missing-reduced-motion-1",
        "performance-no-hardware-acceleration-2",
    ]
    assert issues[0].priority == "high"
    assert issues[0].component_name == "Card"
    assert issues[1].category == "performance"


def test_results_for_unknown_components_are_dropped() -> None:
    orphan = MotionResult(path="src/components/Gone.tsx", name="Gone", has_motion_import=True)

    assert IssueExtractor().extract([CARD], {"motion": [orphan]}) == []


def test_interval_driven_state_is_a_medium_issue() -> None:
    violation = Violation(
        rule="missing-reactive-values",
        message="Animated values driven by setInterval and state updates",
        severity="warning",
    )

    issues = IssueExtractor().extract([CARD], {"performance": [_performance(violations=[violation])]})

    assert len(issues) == 1
    assert issues[0].rule == "missing-reactive-values"
    assert issues[0].priority == "medium"
    assert issues[0].recommendation == "Use MotionValues for continuous value updates"


def test_coverage_without_story_still_checks_variations_and_naming() -> None:
    result = CoverageResult(path=CARD.path, name=CARD.name, has_story_file=False)

    issues = IssueExtractor().extract([CARD], {"coverage": [result]})

    assert [(issue.rule, issue.priority, issue.effort) for issue in issues] == [
        ("missing-story", "medium", "medium"),
        ("missing-required-variations", "low", "small"),
        ("invalid-story-names", "low", "trivial"),
    ]
    assert issues[-1].description == "Story naming issue: missing-default"


def test_only_failing_or_partial_principles_produce_issues() -> None:
    result = PrinciplesResult(
        path=CARD.path,
        name=CARD.name,
        principles=[
            PrincipleEvaluation(principle="grayscale-foundation", status=PASS),
            PrincipleEvaluation(
                principle="strategic-color",
                status=FAIL,
                violations=[Violation(rule="loud-color", message="bg-red-500 used", severity="error")],
            ),
            PrincipleEvaluation(principle="spacing", status=FAIL),
        ],
    )

    issues = IssueExtractor().extract([CARD], {"principles": [result]})

    assert [(issue.rule, issue.priority) for issue in issues] == [
        ("strategic-color", "high"),
        ("spacing", "high"),
    ]
    assert issues[0].description == "strategic-color: bg-red-500 used"
    assert issues[1].recommendation == "Refactor to comply with spacing principle"


def test_accessibility_impacts_map_to_priorities() -> None:
    result = AccessibilityResult(
        path=CARD.path,
        name=CARD.name,
        supports_keyboard_nav=False,
        is_screen_reader_compatible=True,
        violations=[
            Violation(
                rule="icon-button-no-label",
                message="Icon button has no label",
                severity="error",
                metadata={"impact": "serious", "wcag": "4.1.2"},
            )
        ],
    )

    issues = IssueExtractor().extract([CARD], {"accessibility": [result]})

    assert [(issue.rule, issue.priority) for issue in issues] == [
        ("icon-button-no-label", "high"),
        ("no-keyboard-support", "critical"),
    ]
    assert issues[0].description.startswith("[WCAG 4.1.2] ")


def test_library_recommendation_issues() -> None:
    result = LibraryResult(path=CARD.path, name=CARD.name, recommendation="replace")

    issues = IssueExtractor().extract([CARD], {"libraries": [result]})

    assert [(issue.rule, issue.priority, issue.effort) for issue in issues] == [
        ("library-replace", "high", "large")
    ]


def test_sort_is_stable_by_priority() -> None:
    results = {
        "motion": [
            MotionResult(
                path=CARD.path, name=CARD.name, has_motion_import=True, is_compliant=False
            )
        ],
        "performance": [_performance(uses_hardware_acceleration=False)],
        "accessibility": [
            AccessibilityResult(
                path=CARD.path,
                name=CARD.name,
                supports_keyboard_nav=False,
                is_screen_reader_compatible=True,
            )
        ],
    }

    ordered = sort_issues(IssueExtractor().extract([CARD], results))

    assert [issue.rule for issue in ordered] == [
        "no-keyboard-support",
        "missing-reduced-motion",
        "non-compliant-motion",
        "no-hardware-acceleration",
    ]


def test_recommendation_is_never_empty() -> None:
    assert recommendation_for("unheard-of-rule") == DEFAULT_RECOMMENDATION
    assert recommendation_for("unheard-of-rule", "Do the thing") == "Do the thing"
