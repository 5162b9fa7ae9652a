"""Implementation checklist analyzer.

Consumes the coverage results for story and test file presence, so it must be
scheduled after the ``coverage`` analyzer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .base import AnalysisContext, Analyzer
from .coverage import CoverageResult
from ..models import AnalysisResult, ComponentRecord, Serializable, Violation
from ..scoring import round_half_up

CATEGORIES = (
    "typescript",
    "react-patterns",
    "testing",
    "accessibility",
    "motion",
    "storybook",
    "documentation",
)


@dataclass(frozen=True)
class ChecklistItem(Serializable):
    id: str
    category: str
    description: str
    passed: bool
    details: str = ""
    required: bool = False


@dataclass(frozen=True)
class ChecklistCategory(Serializable):
    category: str
    items: List[ChecklistItem] = field(default_factory=list)
    completion: int = 100
    passed: int = 0
    failed: int = 0
    required_passed: int = 0
    required_failed: int = 0

    _nested = {"items": ChecklistItem}


@dataclass(frozen=True)
class ChecklistResult(AnalysisResult):
    """Checklist completion for one component."""

    categories: List[ChecklistCategory] = field(default_factory=list)
    overall_completion: int = 100
    total_items: int = 0
    passed: int = 0
    failed: int = 0
    required_passed: int = 0
    required_failed: int = 0
    has_story: bool = False

    _nested = {"violations": Violation, "categories": ChecklistCategory}

    @property
    def items(self) -> List[ChecklistItem]:
        return [item for category in self.categories for item in category.items]

    def required_failures(self) -> List[ChecklistItem]:
        return [item for item in self.items if item.required and not item.passed]


def _item(
    id: str, category: str, description: str, passed: bool, yes: str, no: str, required: bool
) -> ChecklistItem:
    return ChecklistItem(id, category, description, passed, yes if passed else no, required)


def check_typescript(content: str) -> List[ChecklistItem]:
    has_props = bool(re.search(r"interface\s+\w+Props\b|type\s+\w+Props\s*=", content))
    has_return = bool(
        re.search(r"\):\s*(JSX\.Element|React\.ReactNode|ReactNode|ReactElement)", content)
        or re.search(r"forwardRef<\w+,\s*\w+>", content)
    )
    any_count = len(re.findall(r":\s*any\b", content))
    has_strict = bool(re.search(r"as const|satisfies|readonly", content))
    return [
        _item(
            "ts-props-interface", "typescript", "Component has a typed props interface",
            has_props, "Found props interface/type", "No props interface found", True,
        ),
        _item(
            "ts-return-type", "typescript", "Functions have explicit return types",
            has_return, "Explicit return types found", "Consider adding explicit return types", False,
        ),
        _item(
            "ts-no-any", "typescript", "No usage of `any` type",
            any_count == 0, "No any types found", f"Found {any_count} any type usages", True,
        ),
        _item(
            "ts-strict-patterns", "typescript",
            "Uses TypeScript strict patterns (as const, satisfies, readonly)",
            has_strict, "Uses strict TypeScript patterns", "Could benefit from stricter typing", False,
        ),
    ]


def check_react_patterns(content: str) -> List[ChecklistItem]:
    functional = bool(
        re.search(r"^export\s+(const|function)\s+\w+", content, re.MULTILINE)
        or "forwardRef" in content
    )
    has_class = bool(re.search(r"class\s+\w+\s+extends\s+(React\.)?Component", content))
    has_hooks = bool(re.search(r"use[A-Z]\w+\(", content))
    conditional_hooks = bool(re.search(r"if\s*\([^)]*\)\s*{[^}]*use[A-Z]\w+", content))
    has_forward_ref = "forwardRef" in content
    has_display_name = bool(re.search(r"\.displayName\s*=", content))
    if has_forward_ref:
        display_details = "displayName set" if has_display_name else "Missing displayName for forwardRef"
    else:
        display_details = "Not applicable"
    return [
        _item(
            "react-functional", "react-patterns", "Uses functional component pattern",
            functional, "Functional component pattern used", "Check component pattern", True,
        ),
        _item(
            "react-no-class", "react-patterns", "No class components used",
            not has_class, "No class components", "Found class component - migrate to functional", True,
        ),
        _item(
            "react-hooks-rules", "react-patterns", "Hooks follow rules (not in conditions)",
            not has_hooks or not conditional_hooks,
            "Hooks follow rules", "Hooks may be called conditionally", True,
        ),
        _item(
            "react-destructuring", "react-patterns", "Props are destructured",
            bool(re.search(r"\(\s*{\s*\w+", content)),
            "Props are destructured", "Consider destructuring props", False,
        ),
        ChecklistItem(
            "react-display-name", "react-patterns", "Has displayName (required for forwardRef)",
            not has_forward_ref or has_display_name, display_details, has_forward_ref,
        ),
    ]


def check_testing(content: str, coverage: Optional[CoverageResult]) -> List[ChecklistItem]:
    has_test = bool(coverage and coverage.has_test_file)
    test_details = f"Test file: {coverage.test_file}" if has_test and coverage else "No test file found"
    return [
        ChecklistItem(
            "test-file-exists", "testing", "Has corresponding test file", has_test, test_details, True
        ),
        _item(
            "test-data-test-ids", "testing", "Uses data-test-id attributes for test selectors",
            "data-test-id=" in content,
            "Has data-test-id attributes", "Consider adding data-test-id for testing", False,
        ),
        ChecklistItem(
            "test-coverage-requirement", "testing", "Test coverage requirement: >=85%",
            has_test, "Coverage must be verified with the project's test runner", True,
        ),
    ]


def check_accessibility(content: str) -> List[ChecklistItem]:
    return [
        _item(
            "a11y-aria-attributes", "accessibility", "Uses ARIA attributes where appropriate",
            bool(re.search(r"aria-\w+", content)),
            "ARIA attributes found", "Consider adding ARIA attributes", False,
        ),
        _item(
            "a11y-keyboard-navigation", "accessibility", "Supports keyboard navigation",
            bool(re.search(r"tabIndex|onKeyDown|onKeyUp|onKeyPress", content)),
            "Keyboard support found", "Check keyboard accessibility", False,
        ),
        _item(
            "a11y-focus-ring", "accessibility", "Has visible focus indicators",
            bool(re.search(r"focus-visible:ring|focus:ring|focus-visible:outline", content)),
            "Focus ring styling found", "Add focus ring for accessibility", True,
        ),
        _item(
            "a11y-semantic-html", "accessibility", "Uses semantic HTML elements",
            bool(re.search(r"<(button|nav|main|aside|header|footer|section|article)\b", content)),
            "Semantic HTML found", "Consider using semantic HTML", False,
        ),
        _item(
            "a11y-disabled-state", "accessibility", "Properly handles disabled state",
            "disabled" in content,
            "Disabled state handling found", "Not applicable or check disabled handling", False,
        ),
    ]


def check_motion(content: str) -> List[ChecklistItem]:
    has_import = "from 'motion/react'" in content or 'from "motion/react"' in content
    has_framer = "framer-motion" in content
    return [
        _item(
            "motion-import", "motion", "Uses motion/react for animations",
            has_import, "motion/react import found", "No Motion usage detected", False,
        ),
        _item(
            "motion-no-framer", "motion", "Does not use deprecated framer-motion import",
            not has_framer, "Correct import used", "Replace framer-motion with motion/react", True,
        ),
        _item(
            "motion-components", "motion", "Uses motion components for animations",
            bool(re.search(r"<motion\.\w+", content)),
            "Motion components found", "No motion components (may be OK)", False,
        ),
        _item(
            "motion-variants", "motion", "Uses animation variants for maintainability",
            bool(re.search(r"variants\s*[=:{]", content)),
            "Animation variants used", "Consider using variants for complex animations", False,
        ),
    ]


def check_storybook(story_content: Optional[str], coverage: Optional[CoverageResult]) -> List[ChecklistItem]:
    has_story = bool(coverage and coverage.has_story_file)
    details = f"Story file: {coverage.story_file}" if has_story and coverage else "No story file found"
    items = [
        ChecklistItem("storybook-story-file", "storybook", "Has Storybook story file", has_story, details, True)
    ]
    if has_story and story_content is not None:
        items.append(
            _item(
                "storybook-play-function", "storybook",
                "Stories have play functions for interaction testing",
                bool(re.search(r"play:\s*async", story_content)),
                "Play functions found", "Consider adding play functions", False,
            )
        )
        items.append(
            _item(
                "storybook-controls", "storybook", "Uses Storybook controls for variations",
                bool(re.search(r"argTypes|args", story_content)),
                "Controls/args defined", "Consider adding controls", False,
            )
        )
    return items


def check_documentation(content: str) -> List[ChecklistItem]:
    return [
        _item(
            "docs-jsdoc", "documentation", "Has JSDoc/TSDoc comments",
            bool(re.search(r"/\*\*[\s\S]*?\*/", content)),
            "JSDoc comments found", "Consider adding documentation comments", False,
        ),
        _item(
            "docs-copyright", "documentation", "Has copyright header",
            bool(re.search(r"Copyright|SPDX-License-Identifier", content)),
            "Copyright header found", "Add copyright header", False,
        ),
        _item(
            "docs-file-annotation", "documentation", "Has @file annotation",
            "@file" in content, "@file annotation found", "Consider adding @file annotation", False,
        ),
    ]


def summarize_category(category: str, items: List[ChecklistItem]) -> ChecklistCategory:
    members = [item for item in items if item.category == category]
    passed = sum(1 for item in members if item.passed)
    required = [item for item in members if item.required]
    return ChecklistCategory(
        category=category,
        items=members,
        completion=round_half_up(passed / len(members) * 100) if members else 100,
        passed=passed,
        failed=len(members) - passed,
        required_passed=sum(1 for item in required if item.passed),
        required_failed=sum(1 for item in required if not item.passed),
    )


class ChecklistAnalyzer(Analyzer):
    """Scores components against the implementation checklist."""

    domain = "checklist"
    artifact_name = "checklist-report.json"
    requires = ("coverage",)
    result_type = ChecklistResult

    def evaluate(
        self, component: ComponentRecord, source: str, context: AnalysisContext
    ) -> ChecklistResult:
        coverage = self._coverage_for(component.path, context)
        story_content = None
        if coverage is not None and coverage.story_file:
            story_path = context.root / coverage.story_file
            if story_path.is_file():
                story_content = story_path.read_text(encoding="utf-8")

        checks: List[Callable[[], List[ChecklistItem]]] = [
            lambda: check_typescript(source),
            lambda: check_react_patterns(source),
            lambda: check_testing(source, coverage),
            lambda: check_accessibility(source),
            lambda: check_motion(source),
            lambda: check_storybook(story_content, coverage),
            lambda: check_documentation(source),
        ]
        items = [item for check in checks for item in check()]
        categories = [summarize_category(category, items) for category in CATEGORIES]
        passed = sum(1 for item in items if item.passed)
        required = [item for item in items if item.required]
        completion = round_half_up(passed / len(items) * 100) if items else 100
        return ChecklistResult(
            path=component.path,
            name=component.name,
            score=completion,
            categories=categories,
            overall_completion=completion,
            total_items=len(items),
            passed=passed,
            failed=len(items) - passed,
            required_passed=sum(1 for item in required if item.passed),
            required_failed=sum(1 for item in required if not item.passed),
            has_story=bool(coverage and coverage.has_story_file),
        )

    @staticmethod
    def _coverage_for(path: str, context: AnalysisContext) -> Optional[CoverageResult]:
        for result in context.prerequisite("coverage"):
            if result.path == path and isinstance(result, CoverageResult):
                return result
        return None


__all__ = [
    "CATEGORIES",
    "ChecklistAnalyzer",
    "ChecklistCategory",
    "ChecklistItem",
    "ChecklistResult",
]
