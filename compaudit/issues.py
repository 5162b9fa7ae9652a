"""Normalization of analyzer results into categorized issues.

Every analyzer domain has one mapping function turning its results into
``IssueDraft`` values. ``IssueExtractor`` runs the mappers in a fixed source
order, attaches component identity and run-wide ids, and drops drafts whose
component is no longer part of the inventory.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Sequence

from .analyzers.accessibility import AccessibilityResult
from .analyzers.coverage import CoverageResult
from .analyzers.libraries import LibraryResult
from .analyzers.material import MaterialResult
from .analyzers.motion import MotionResult
from .analyzers.performance import PerformanceResult
from .analyzers.principles import FAIL, PARTIAL, PrinciplesResult
from .logging import get_logger
from .models import PRIORITY_RANK, AnalysisResult, CategorizedIssue, ComponentRecord

SOURCE_ORDER = (
    "motion",
    "coverage",
    "principles",
    "performance",
    "accessibility",
    "material",
    "libraries",
)

SEVERITY_PRIORITY = {"error": "high", "warning": "medium", "info": "low"}
PERFORMANCE_PRIORITY = {"critical": "high", "warning": "medium", "info": "low"}
IMPACT_PRIORITY = {"critical": "critical", "serious": "high", "moderate": "medium", "minor": "low"}

DEFAULT_RECOMMENDATION = "Review and address this finding"

RECOMMENDATIONS: Dict[str, str] = {
    # motion
    "missing-reduced-motion": "Add motion reduction support using useReducedMotion hook or media query",
    "non-compliant-motion": "Review animation patterns and follow Motion best practices",
    "css-transition": "Use the Motion animate or transition prop instead of CSS transitions",
    "keyframes": "Use Motion variants or the animate prop instead of CSS keyframes",
    "other-library": "Migrate to Motion for consistency",
    # coverage
    "missing-story": "Create Storybook story with Playground and key states",
    "missing-interaction-tests": "Add play functions to test component interactions",
    "missing-required-variations": "Add stories for loading, error, and empty states",
    "invalid-story-names": "Follow story naming conventions with Default and Playground stories",
    # performance
    "no-hardware-acceleration": "Use transform and opacity instead of top/left for animations",
    "no-layout-position": 'Use layout="position" instead of full layout animations when possible',
    "layout-thrashing": "Batch DOM reads and writes to avoid layout thrashing",
    "non-hardware-accelerated": "Use transform and opacity for animations",
    "missing-reactive-values": "Use MotionValues for continuous value updates",
    "full-layout-animation": 'Consider layout="position" for simpler animations',
    "missing-while-in-view": "Use whileInView for scroll-triggered animations",
    "inline-animation-values": "Extract animation values to variants or constants",
    # accessibility
    "icon-button-no-label": "Add aria-label to icon-only button",
    "missing-semantic-element": "Replace div/span with semantic HTML element",
    "missing-keyboard-handler": "Add onKeyDown handler for keyboard interaction",
    "missing-tabindex": 'Add tabIndex="0" for custom interactive elements',
    "missing-html-for": "Add htmlFor attribute to label element",
    "no-keyboard-support": "Add keyboard support for all interactive elements",
    "not-screen-reader-compatible": "Add proper ARIA labels and semantic HTML",
    "ignores-reduced-motion": "Add prefers-reduced-motion media query or useReducedMotion hook",
    # material
    "multiple-motion-divs": "Consolidate to single motion.div with variant orchestration",
    "separate-inner-hover": "Use parent hover state with children inheriting via variants",
    "clip-path-hack": "Use overflow hidden or proper CSS masking",
    "missing-variant-orchestration": "Add Motion variants with staggerChildren and parent-child coordination",
    "no-depth-on-hover": "Add subtle shadow or scale change on hover",
    "single-motion-div": "Consolidate multiple motion elements into single unified material",
    "variant-orchestration": "Add Motion variants for coordinated animations",
    "hover-state-analysis": "Use parent hover state with children inheriting via variants",
    "depth-on-hover": "Add subtle shadow or scale change on hover",
    "clip-path-check": "Use overflow hidden or proper CSS masking",
    # libraries
    "custom-build-candidate": "Replace with internal custom component for better design system fit",
    "library-refactor": "Refactor to reduce library dependency overrides",
    "library-replace": "Replace with internal implementation",
    "library-override": "Consider using internal component to avoid overrides",
}

_MATERIAL_PRIORITY = {
    "multiple-motion-divs": "high",
    "separate-inner-hover": "high",
    "no-depth-on-hover": "medium",
    "missing-variant-orchestration": "medium",
}

_MATERIAL_DESCRIPTIONS = {
    "multiple-motion-divs": "Multiple motion.div elements instead of single unified material",
    "separate-inner-hover": "Separate inner hover states break unified material feel",
    "clip-path-hack": "Using clip-path hacks instead of proper masking",
    "missing-variant-orchestration": "Missing Motion variant orchestration",
    "no-depth-on-hover": "No subtle depth change on hover interaction",
}


def recommendation_for(rule: str, fallback: str = "") -> str:
    """Return the recommendation for ``rule``; never empty."""
    return RECOMMENDATIONS.get(rule) or fallback or DEFAULT_RECOMMENDATION


def priority_for_severity(severity: str) -> str:
    return SEVERITY_PRIORITY.get(severity, "low")


@dataclass(frozen=True)
class IssueDraft:
    """An issue before it is bound to an id and a component."""

    rule: str
    priority: str
    description: str
    recommendation: str
    effort: str = "small"


def _draft(rule: str, priority: str, description: str, effort: str = "small", fallback: str = "") -> IssueDraft:
    return IssueDraft(rule, priority, description, recommendation_for(rule, fallback), effort)


def motion_issues(result: MotionResult) -> Iterator[IssueDraft]:
    if result.has_motion_import and not result.uses_reduced_motion:
        yield _draft(
            "missing-reduced-motion", "high",
            "Component does not respect prefers-reduced-motion preference",
        )
    if not result.is_compliant:
        yield _draft(
            "non-compliant-motion", "medium",
            "Component is not compliant with motion best practices",
        )
    for violation in result.violations:
        priority = "high" if violation.rule == "other-library" else priority_for_severity(violation.severity)
        yield _draft(violation.rule, priority, violation.message, fallback=violation.suggestion)


def coverage_issues(result: CoverageResult) -> Iterator[IssueDraft]:
    if not result.has_story_file:
        yield _draft("missing-story", "medium", "Component is missing Storybook story", "medium")
    elif not result.has_interactive_stories:
        yield _draft(
            "missing-interaction-tests", "low",
            "Story is missing play functions for interaction testing",
        )
    if not result.has_required_variations:
        yield _draft(
            "missing-required-variations", "low",
            "Story is missing required variations (loading, error, empty states)",
        )
    if result.naming_status != "valid":
        yield _draft(
            "invalid-story-names", "low", f"Story naming issue: {result.naming_status}", "trivial"
        )


def principle_issues(result: PrinciplesResult) -> Iterator[IssueDraft]:
    for evaluation in result.principles:
        if evaluation.status not in (FAIL, PARTIAL):
            continue
        default = (
            evaluation.recommendations[0]
            if evaluation.recommendations
            else f"Refactor to comply with {evaluation.principle} principle"
        )
        for violation in evaluation.violations:
            yield IssueDraft(
                rule=evaluation.principle,
                priority=priority_for_severity(violation.severity),
                description=f"{evaluation.principle}: {violation.message}",
                recommendation=violation.suggestion or default,
                effort="medium" if violation.severity == "error" else "small",
            )
        if not evaluation.violations:
            yield IssueDraft(
                rule=evaluation.principle,
                priority="high" if evaluation.status == FAIL else "medium",
                description=f"{evaluation.principle} compliance issue",
                recommendation=default,
                effort="medium",
            )


def performance_issues(result: PerformanceResult) -> Iterator[IssueDraft]:
    if not result.uses_hardware_acceleration:
        yield _draft(
            "no-hardware-acceleration", "medium",
            "Component does not use hardware-accelerated properties",
        )
    if not result.uses_layout_position and not result.uses_while_in_view:
        yield _draft(
            "no-layout-position", "low",
            'Consider using layout="position" for smoother layout animations',
        )
    for violation in result.violations:
        yield _draft(
            violation.rule,
            PERFORMANCE_PRIORITY.get(violation.severity, "low"),
            violation.message,
            "medium",
        )


def accessibility_issues(result: AccessibilityResult) -> Iterator[IssueDraft]:
    for violation in result.violations:
        impact = str(violation.metadata.get("impact") or violation.severity)
        wcag = violation.metadata.get("wcag")
        prefix = f"[WCAG {wcag}] " if wcag else ""
        yield _draft(
            violation.rule,
            IMPACT_PRIORITY.get(impact, priority_for_severity(impact)),
            f"{prefix}{violation.message}",
            "medium" if impact == "critical" else "small",
        )
    if not result.supports_keyboard_nav:
        yield _draft("no-keyboard-support", "critical", "Component is not keyboard accessible", "medium")
    if not result.is_screen_reader_compatible:
        yield _draft(
            "not-screen-reader-compatible", "high",
            "Component is not screen reader compatible", "medium",
        )
    if not result.respects_reduced_motion and result.has_aria_attributes:
        yield _draft(
            "ignores-reduced-motion", "high",
            "Component does not respect reduced motion preferences",
        )


def material_issues(result: MaterialResult) -> Iterator[IssueDraft]:
    for violation in result.violations:
        yield _draft(
            violation.rule,
            _MATERIAL_PRIORITY.get(violation.rule, "low"),
            _MATERIAL_DESCRIPTIONS.get(violation.rule, f"Material violation: {violation.rule}"),
            "medium",
        )
    for check in result.failed_checks():
        if check.details:
            yield _draft(check.name, "low", f"{check.name}: {check.details}")


def library_issues(result: LibraryResult) -> Iterator[IssueDraft]:
    if result.should_be_custom_built:
        yield _draft(
            "custom-build-candidate", "medium",
            "Component should be custom-built instead of using external library", "large",
        )
    if result.recommendation == "replace":
        yield _draft("library-replace", "high", "Component should be replaced", "large")
    elif result.recommendation == "refactor":
        yield _draft("library-refactor", "medium", "Component needs refactoring", "medium")
    for override in result.overrides:
        yield _draft("library-override", "low", f"Library override detected: {override.description}")


IssueMapper = Callable[[Any], Iterable[IssueDraft]]

MAPPERS: Dict[str, IssueMapper] = {
    "motion": motion_issues,
    "coverage": coverage_issues,
    "principles": principle_issues,
    "performance": performance_issues,
    "accessibility": accessibility_issues,
    "material": material_issues,
    "libraries": library_issues,
}


class IssueExtractor:
    """Converts per-domain analyzer results into one categorized issue list."""

    def __init__(self, mappers: Mapping[str, IssueMapper] | None = None) -> None:
        self.mappers = dict(MAPPERS if mappers is None else mappers)
        self.logger = get_logger("issues")

    def extract(
        self,
        components: Sequence[ComponentRecord],
        results: Mapping[str, Sequence[AnalysisResult]],
    ) -> List[CategorizedIssue]:
        """Return issues in source order, unsorted."""
        known = {component.path: component for component in components}
        counter = itertools.count(1)
        issues: List[CategorizedIssue] = []
        dropped = 0
        for domain in self._domains():
            mapper = self.mappers[domain]
            for result in results.get(domain, ()):
                component = known.get(result.path)
                if component is None:
                    dropped += 1
                    continue
                for draft in mapper(result):
                    issues.append(
                        CategorizedIssue(
                            id=f"{domain}-{draft.rule}-{next(counter)}",
                            component_path=component.path,
                            component_name=component.name,
                            category=domain,
                            rule=draft.rule,
                            priority=draft.priority,
                            description=draft.description,
                            recommendation=draft.recommendation or DEFAULT_RECOMMENDATION,
                            effort=draft.effort,
                        )
                    )
        if dropped:
            self.logger.debug("Skipped %d result(s) for components missing from the inventory", dropped)
        return issues

    def _domains(self) -> List[str]:
        ordered = [domain for domain in SOURCE_ORDER if domain in self.mappers]
        ordered.extend(domain for domain in self.mappers if domain not in SOURCE_ORDER)
        return ordered


def sort_issues(issues: Sequence[CategorizedIssue]) -> List[CategorizedIssue]:
    """Stable sort by priority rank; ties keep source order."""
    return sorted(issues, key=lambda issue: PRIORITY_RANK[issue.priority])


__all__ = [
    "DEFAULT_RECOMMENDATION",
    "IssueDraft",
    "IssueExtractor",
    "MAPPERS",
    "RECOMMENDATIONS",
    "SEVERITY_PRIORITY",
    "SOURCE_ORDER",
    "recommendation_for",
    "sort_issues",
]
