"""Audit report synthesis.

Combines the component inventory and every analyzer artifact into one
``AuditReport``: categorized issues sorted by priority, per-component health
summaries, an executive summary and a phased follow-up plan. The structured
report, a Markdown narrative and a compact summary are written next to the
analyzer artifacts.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Type

from .. import __version__
from ..analyzers import builtin_result_types
from ..analyzers.checklist import ChecklistResult
from ..analyzers.coverage import CoverageResult
from ..analyzers.principles import PrinciplesResult
from ..issues import SOURCE_ORDER, IssueExtractor, sort_issues
from ..logging import get_logger
from ..models import (
    PRIORITIES,
    AnalysisResult,
    AuditReport,
    CategorizedIssue,
    ComponentAnalysisSummary,
    ComponentRecord,
    ExecutiveSummary,
    FollowUpItem,
    empty_priority_counts,
)
from ..scoring import health_score, issue_penalty, round_half_up
from ..stores.artifacts import ArtifactStore, utc_timestamp
from .narrative import NarrativeRenderer

REPORT_JSON = "audit-report.json"
REPORT_MARKDOWN = "AUDIT_REPORT.md"
SUMMARY_JSON = "summary.json"

POOR_HEALTH_THRESHOLD = 60
STRONG_ACCESSIBILITY_THRESHOLD = 90
MAX_RECOMMENDATIONS = 5

FALLBACK_RECOMMENDATIONS = (
    "Continue maintaining current quality standards",
    "Consider adding more automated testing",
)


@dataclass(frozen=True)
class Phase:
    """Definition of one follow-up phase and the issues it collects."""

    number: int
    name: str
    description: str
    effort: str
    priority: str
    selects: Callable[[CategorizedIssue], bool]


PHASES: Tuple[Phase, ...] = (
    Phase(1, "Critical Fixes", "Address all critical issues immediately", "large", "critical",
          lambda issue: issue.priority == "critical"),
    Phase(2, "High Priority Fixes", "Resolve high priority issues", "medium", "high",
          lambda issue: issue.priority == "high"),
    Phase(3, "Accessibility Improvements", "Enhance accessibility across components", "medium", "high",
          lambda issue: issue.category == "accessibility" and issue.priority != "critical"),
    Phase(4, "Performance Optimization", "Optimize component performance and bundle size", "medium", "medium",
          lambda issue: issue.category == "performance"),
    Phase(5, "Testing Coverage", "Improve Storybook coverage and interaction tests", "small", "medium",
          lambda issue: issue.category == "coverage"),
    Phase(6, "Polish and Refinement", "Address remaining low priority issues", "small", "low",
          lambda issue: issue.priority == "low"),
)


@dataclass
class ReportOutput:
    report: AuditReport
    paths: Dict[str, Path]


def count_by_priority(issues: Sequence[CategorizedIssue]) -> Dict[str, int]:
    counts = empty_priority_counts()
    for issue in issues:
        counts[issue.priority] += 1
    return counts


def _unique(values: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(values))


def _index_by_path(results: Sequence[AnalysisResult]) -> Dict[str, AnalysisResult]:
    return {result.path: result for result in results}


def summarize_component(
    component: ComponentRecord,
    issues: Sequence[CategorizedIssue],
    *,
    principles: Optional[PrinciplesResult] = None,
    accessibility: Optional[AnalysisResult] = None,
    coverage: Optional[CoverageResult] = None,
    checklist: Optional[ChecklistResult] = None,
) -> ComponentAnalysisSummary:
    """Roll one component's issues and sub-scores into its summary."""
    counts = count_by_priority(issues)
    findings: List[str] = []
    if not issues:
        findings.append("No issues detected")
    else:
        if counts["critical"]:
            findings.append(f"{counts['critical']} critical issue(s) require immediate attention")
        if counts["high"]:
            findings.append(f"{counts['high']} high priority issue(s) found")
    if accessibility is not None and accessibility.score >= STRONG_ACCESSIBILITY_THRESHOLD:
        findings.append("Strong accessibility compliance")
    if coverage is not None and coverage.has_story_file and coverage.has_interactive_stories:
        findings.append("Good Storybook coverage with interaction tests")
    if checklist is not None:
        for item in checklist.required_failures():
            findings.append(f"Required checklist item not met: {item.description}")

    sub_scores = (
        principles.overall_score if principles is not None else None,
        accessibility.score if accessibility is not None else None,
        coverage.score if coverage is not None else None,
    )
    return ComponentAnalysisSummary(
        path=component.path,
        name=component.name,
        category=component.category.value,
        health_score=health_score(issues, sub_scores),
        issues_by_priority=counts,
        findings=findings,
        recommendations=_unique([issue.recommendation for issue in issues])[:MAX_RECOMMENDATIONS],
    )


def summarize_run(
    components: Sequence[ComponentRecord],
    summaries: Sequence[ComponentAnalysisSummary],
    issues: Sequence[CategorizedIssue],
) -> ExecutiveSummary:
    counts = count_by_priority(issues)

    overall = 0
    if summaries:
        overall = round_half_up(sum(summary.health_score for summary in summaries) / len(summaries))

    scores: Dict[str, int] = {}
    by_category: Dict[str, List[int]] = {}
    for summary in summaries:
        by_category.setdefault(summary.category, []).append(summary.health_score)
    for category, values in by_category.items():
        scores[category] = round_half_up(sum(values) / len(values))
    for domain in _unique([issue.category for issue in issues]):
        domain_issues = [issue for issue in issues if issue.category == domain]
        scores[domain] = max(0, 100 - issue_penalty(domain_issues))

    concerns: List[str] = []
    if counts["critical"]:
        concerns.append(f"{counts['critical']} critical issues require immediate attention")
    if counts["high"]:
        concerns.append(f"{counts['high']} high priority issues need resolution")
    poor = sum(1 for summary in summaries if summary.health_score < POOR_HEALTH_THRESHOLD)
    if poor:
        concerns.append(f"{poor} component(s) have poor health scores (<{POOR_HEALTH_THRESHOLD})")

    return ExecutiveSummary(
        total_components=len(components),
        overall_score=overall,
        scores_by_category=scores,
        issues_by_priority=counts,
        top_concerns=concerns,
        key_recommendations=key_recommendations(issues),
    )


def key_recommendations(issues: Sequence[CategorizedIssue]) -> List[str]:
    """Most frequent recommendations among critical and high issues."""
    urgent = [issue.recommendation for issue in issues if issue.priority in ("critical", "high")]
    # Counter.most_common keeps first-seen order among equal counts.
    ranked = [text for text, _ in Counter(urgent).most_common(MAX_RECOMMENDATIONS)]
    return ranked or list(FALLBACK_RECOMMENDATIONS)


def build_follow_up_plan(issues: Sequence[CategorizedIssue]) -> List[FollowUpItem]:
    plan: List[FollowUpItem] = []
    for phase in PHASES:
        selected = [issue for issue in issues if phase.selects(issue)]
        if not selected:
            continue
        plan.append(
            FollowUpItem(
                id=f"phase-{len(plan) + 1}",
                phase=phase.number,
                phase_name=phase.name,
                description=phase.description,
                components=_unique([issue.component_name for issue in selected]),
                effort=phase.effort,
                priority=phase.priority,
                issue_count=len(selected),
            )
        )
    return plan


class ReportSynthesizer:
    """Builds and writes the audit report from persisted stage artifacts."""

    def __init__(
        self,
        store: ArtifactStore,
        *,
        templates_dir: Path | None = None,
        extractor: IssueExtractor | None = None,
        result_types: Mapping[str, Tuple[str, Type[AnalysisResult]]] | None = None,
    ) -> None:
        self.store = store
        self.extractor = extractor or IssueExtractor()
        self.result_types = dict(builtin_result_types() if result_types is None else result_types)
        self.renderer = NarrativeRenderer(templates_dir)
        self.logger = get_logger("report")

    def load_results(self) -> Dict[str, List[AnalysisResult]]:
        """Read every known analyzer artifact; absent ones become empty lists."""
        loaded: Dict[str, List[AnalysisResult]] = {}
        for domain, (artifact_name, result_type) in self.result_types.items():
            loaded[domain] = self.store.load_results(artifact_name, result_type, required=False)
        return loaded

    def build(
        self,
        components: Sequence[ComponentRecord],
        results: Mapping[str, Sequence[AnalysisResult]],
    ) -> AuditReport:
        issues = sort_issues(self.extractor.extract(components, results))

        principles = _index_by_path(results.get("principles", ()))
        accessibility = _index_by_path(results.get("accessibility", ()))
        coverage = _index_by_path(results.get("coverage", ()))
        checklist = _index_by_path(results.get("checklist", ()))

        issues_by_path: Dict[str, List[CategorizedIssue]] = {}
        for issue in issues:
            issues_by_path.setdefault(issue.component_path, []).append(issue)

        summaries = [
            summarize_component(
                component,
                issues_by_path.get(component.path, []),
                principles=principles.get(component.path),  # type: ignore[arg-type]
                accessibility=accessibility.get(component.path),
                coverage=coverage.get(component.path),  # type: ignore[arg-type]
                checklist=checklist.get(component.path),  # type: ignore[arg-type]
            )
            for component in components
        ]

        return AuditReport(
            metadata={
                "version": __version__,
                "generated_at": utc_timestamp(),
                "generated_by": "compaudit",
            },
            executive_summary=summarize_run(components, summaries, issues),
            component_analysis=summaries,
            issues=issues,
            follow_up_plan=build_follow_up_plan(issues),
            artifact_paths=self._artifact_paths(),
        )

    def write(self, report: AuditReport) -> Dict[str, Path]:
        paths = {
            "json": self.store.write_json(REPORT_JSON, report.to_dict()),
            "markdown": self.store.write_text(REPORT_MARKDOWN, self.renderer.render(report)),
        }
        paths["summary"] = self.store.write_json(SUMMARY_JSON, self._summary(report))
        return paths

    def synthesize(
        self,
        components: Sequence[ComponentRecord] | None = None,
        results: Mapping[str, Sequence[AnalysisResult]] | None = None,
    ) -> ReportOutput:
        """Build and write the report, loading inputs from the store when not given."""
        if components is None:
            components = self.store.load_inventory()
        if results is None:
            results = self.load_results()
        report = self.build(components, results)
        paths = self.write(report)
        self.logger.info(
            "Report generated for %d component(s): overall score %d",
            report.executive_summary.total_components,
            report.executive_summary.overall_score,
        )
        return ReportOutput(report=report, paths=paths)

    def _artifact_paths(self) -> Dict[str, str]:
        paths: Dict[str, str] = {}
        for domain in _ordered_domains(self.result_types):
            artifact_name = self.result_types[domain][0]
            if self.store.exists(artifact_name):
                paths[domain] = str(self.store.path_for(artifact_name))
        for key, name in (("json", REPORT_JSON), ("markdown", REPORT_MARKDOWN), ("summary", SUMMARY_JSON)):
            paths[key] = str(self.store.path_for(name))
        return paths

    def _summary(self, report: AuditReport) -> Dict[str, object]:
        summary = report.executive_summary
        issues = dict(summary.issues_by_priority)
        issues["total"] = sum(summary.issues_by_priority.get(priority, 0) for priority in PRIORITIES)
        return {
            "version": report.metadata.get("version", __version__),
            "generated_at": report.metadata.get("generated_at"),
            "total_components": summary.total_components,
            "overall_score": summary.overall_score,
            "issues": issues,
            "category_scores": summary.scores_by_category,
            "report_files": {
                "json": str(self.store.path_for(REPORT_JSON)),
                "markdown": str(self.store.path_for(REPORT_MARKDOWN)),
            },
        }


def _ordered_domains(result_types: Mapping[str, object]) -> List[str]:
    ordered = [domain for domain in SOURCE_ORDER if domain in result_types]
    ordered.extend(domain for domain in result_types if domain not in ordered)
    return ordered


__all__ = [
    "FALLBACK_RECOMMENDATIONS",
    "PHASES",
    "REPORT_JSON",
    "REPORT_MARKDOWN",
    "ReportOutput",
    "ReportSynthesizer",
    "SUMMARY_JSON",
    "build_follow_up_plan",
    "count_by_priority",
    "key_recommendations",
    "summarize_component",
    "summarize_run",
]
