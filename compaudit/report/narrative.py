"""Narrative Markdown rendering for audit reports."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader

from ..models import PRIORITIES, AuditReport

REPORT_TEMPLATE = "audit_report.md.j2"

SECTION_TITLES = (
    "Executive Summary",
    "Component Analysis",
    "Issues by Priority",
    "Recommendations",
    "Follow-Up Plan",
)


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Build the template environment, letting ``templates_dir`` shadow the bundled templates."""
    directories = []
    if templates_dir:
        directories.append(str(templates_dir))
    default_dir = str(Path(__file__).with_name("templates"))
    if default_dir not in directories:
        directories.append(default_dir)
    loader = FileSystemLoader(directories)
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


class NarrativeRenderer:
    """Renders ``AUDIT_REPORT.md`` from a structured report."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self._env = create_environment(templates_dir)

    def render(self, report: AuditReport) -> str:
        template = self._env.get_template(REPORT_TEMPLATE)
        return template.render(**_template_context(report)).strip() + "\n"


def _template_context(report: AuditReport) -> Dict[str, Any]:
    issues_by_priority = {
        priority: [issue for issue in report.issues if issue.priority == priority]
        for priority in PRIORITIES
    }
    return {
        "metadata": report.metadata,
        "summary": report.executive_summary,
        "components": report.component_analysis,
        "issues": report.issues,
        "issues_by_priority": issues_by_priority,
        "priorities": PRIORITIES,
        "follow_up_plan": report.follow_up_plan,
        "sections": SECTION_TITLES,
    }


__all__ = ["NarrativeRenderer", "REPORT_TEMPLATE", "SECTION_TITLES", "create_environment"]
