"""Accessibility analyzer: ARIA, keyboard, focus and reduced-motion checks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from tree_sitter import Node

from .base import AnalysisContext, Analyzer
from .utils import clamp_score
from ..models import AnalysisResult, ComponentRecord, Violation
from ..parsing import JsxElement, ParsedSource, parse_source

SEMANTIC_ELEMENTS = frozenset(
    {
        "main", "nav", "article", "section", "aside", "header", "footer",
        "figure", "figcaption", "details", "summary", "dialog", "menu", "search",
    }
)
NATIVE_INTERACTIVE_ELEMENTS = frozenset(
    {"button", "a", "input", "textarea", "select", "summary", "details"}
)
IMPACT_PENALTIES = {"critical": 25, "serious": 15, "moderate": 10, "minor": 5}

_ICON_RES = [
    re.compile(r"Icon$"),
    re.compile(r"^Icon"),
    re.compile(
        r"^(X|Plus|Minus|Check|Close|Menu|Arrow|Chevron|Home|Settings|User|Search|Edit|Delete"
        r"|Trash|Copy|Save|Download|Upload|Play|Pause|Stop|Refresh|Info|Warning|Error|Help)$"
    ),
]
_KEYBOARD_HANDLERS = {"onKeyDown", "onKeyUp", "onKeyPress"}


def is_icon_component(name: str) -> bool:
    return any(regex.search(name) for regex in _ICON_RES)


@dataclass(frozen=True)
class AccessibilityResult(AnalysisResult):
    """Accessibility posture of one component."""

    has_aria_attributes: bool = False
    uses_semantic_html: bool = False
    supports_keyboard_nav: bool = False
    has_focus_management: bool = False
    is_screen_reader_compatible: bool = False
    respects_reduced_motion: bool = False


def _issue(rule: str, category: str, message: str, impact: str, wcag: str, line: int = 0) -> Violation:
    return Violation(
        rule=rule,
        message=message,
        severity=impact,
        line=line,
        metadata={"impact": impact, "wcag": wcag, "category": category},
    )


class AccessibilityAnalyzer(Analyzer):
    """Audits JSX for accessible markup and interaction patterns."""

    domain = "accessibility"
    artifact_name = "accessibility-report.json"
    result_type = AccessibilityResult

    def evaluate(
        self, component: ComponentRecord, source: str, context: AnalysisContext
    ) -> AccessibilityResult:
        parsed = parse_source(source, component.path)

        reduced_motion = any(
            parsed.node_text(call.child_by_field_name("function")) == "useReducedMotion"
            for call in parsed.walk({"call_expression"})
        )
        aria = semantic = keyboard = focus = screen_reader = motion = False
        input_without_label = False
        issues: List[Violation] = []
        for element in parsed.jsx_elements():
            tag = element.name.lower()
            attributes = element.attributes
            semantic = semantic or tag in SEMANTIC_ELEMENTS
            motion = motion or element.name.startswith("motion.")
            native = tag in NATIVE_INTERACTIVE_ELEMENTS
            keyboard = keyboard or native or any(name in _KEYBOARD_HANDLERS for name in attributes)

            has_label = "aria-label" in attributes or "aria-labelledby" in attributes
            if any(name.startswith("aria-") for name in attributes) or "role" in attributes:
                aria = True
            if "aria-live" in attributes or "htmlFor" in attributes:
                screen_reader = True
            if "tabIndex" in attributes:
                focus = True
            class_value = parsed.node_text(attributes.get("className"))
            if "focus-visible" in class_value or "focus:" in class_value:
                focus = True

            clickable = "onClick" in attributes
            if tag == "button" and not has_label and self._has_icon_child(parsed, element.node):
                issues.append(
                    _issue(
                        "icon-button-no-label", "aria",
                        "Button with icon-only content should have aria-label for screen readers.",
                        "serious", "1.1.1", element.line,
                    )
                )
            if clickable and not native and not ({"onKeyDown", "onKeyUp"} & attributes.keys()):
                issues.append(
                    _issue(
                        "missing-keyboard-handler", "keyboard",
                        "onClick handler on non-interactive element should have onKeyDown equivalent.",
                        "serious", "2.1.1", element.line,
                    )
                )
            if clickable and not native and "tabIndex" not in attributes:
                issues.append(
                    _issue(
                        "missing-tabindex", "focus",
                        "Interactive element should have tabIndex for keyboard accessibility.",
                        "serious", "2.1.1", element.line,
                    )
                )
            if tag == "input" and not has_label and "id" not in attributes:
                input_without_label = True

        if not semantic and "div" in source and any(hint in source for hint in ("nav", "content", "sidebar")):
            issues.append(
                _issue(
                    "missing-semantic-element", "semantic-html",
                    "Consider using semantic HTML elements (main, nav, article, section, aside) instead of divs.",
                    "moderate", "1.3.1",
                )
            )
        if input_without_label:
            issues.append(
                _issue(
                    "missing-html-for", "screen-reader",
                    "Input should have an associated label with htmlFor or aria-label.",
                    "serious", "1.3.1",
                )
            )
        if motion and not reduced_motion:
            issues.append(
                _issue(
                    "missing-reduced-motion", "reduced-motion",
                    "Motion component should respect prefers-reduced-motion using useReducedMotion().",
                    "moderate", "2.3.3",
                )
            )

        score = 100 - sum(IMPACT_PENALTIES.get(issue.severity, 0) for issue in issues)
        score += 5 * aria + 5 * semantic + 5 * keyboard + 3 * focus + 3 * screen_reader
        if motion and reduced_motion:
            score += 5
        return AccessibilityResult(
            path=component.path,
            name=component.name,
            score=clamp_score(score),
            violations=issues,
            has_aria_attributes=aria,
            uses_semantic_html=semantic,
            supports_keyboard_nav=keyboard,
            has_focus_management=focus,
            is_screen_reader_compatible=screen_reader,
            respects_reduced_motion=reduced_motion,
        )

    @staticmethod
    def _has_icon_child(parsed: ParsedSource, node: Node) -> bool:
        container = node.parent
        if node.type != "jsx_opening_element" or container is None:
            return False
        for child in container.named_children:
            if child.type == "jsx_element":
                tag = child.child_by_field_name("open_tag")
            elif child.type == "jsx_self_closing_element":
                tag = child
            else:
                continue
            name = parsed.node_text(tag.child_by_field_name("name")) if tag is not None else ""
            if name == "img" or is_icon_component(name):
                return True
        return False


__all__ = [
    "AccessibilityAnalyzer",
    "AccessibilityResult",
    "IMPACT_PENALTIES",
    "SEMANTIC_ELEMENTS",
    "is_icon_component",
]
