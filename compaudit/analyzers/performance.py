"""Animation performance analyzer built on the TSX syntax tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set

from tree_sitter import Node

from .base import AnalysisContext, Analyzer
from .utils import clamp_score
from ..models import AnalysisResult, ComponentRecord, Violation
from ..parsing import ParsedSource, line_of, object_keys, parse_source, unwrap_expression

HARDWARE_ACCELERATED_PROPS = frozenset(
    {
        "x", "y", "z",
        "rotate", "rotateX", "rotateY", "rotateZ",
        "scale", "scaleX", "scaleY", "scaleZ",
        "skew", "skewX", "skewY",
        "opacity", "transform",
        "translateX", "translateY", "translateZ",
    }
)
LAYOUT_THRASHING_PROPS = frozenset(
    {
        "width", "height", "minWidth", "minHeight", "maxWidth", "maxHeight",
        "padding", "paddingTop", "paddingRight", "paddingBottom", "paddingLeft",
        "margin", "marginTop", "marginRight", "marginBottom", "marginLeft",
        "flex", "flexBasis", "flexGrow", "flexShrink",
        "gridTemplateColumns", "gridTemplateRows", "gap",
    }
)
NON_ACCELERATED_PROPS = frozenset({"left", "right", "top", "bottom", "inset"})

SEVERITY_PENALTIES = {"critical": 25, "warning": 15, "info": 5}

_MOTION_VALUE_HOOKS = {"useMotionValue", "useSpring", "useTransform", "useMotionTemplate"}
_GESTURE_ATTRIBUTES = {"whileHover", "whileTap", "whileFocus", "whileDrag"}
_CACHE_REF_HINTS = ("dimension", "size", "bounds", "rect")


@dataclass(frozen=True)
class PerformanceResult(AnalysisResult):
    """Animation performance characteristics of one component."""

    uses_hardware_acceleration: bool = False
    uses_motion_values: bool = False
    uses_resize_observer: bool = False
    uses_layout_position: bool = False
    uses_while_in_view: bool = False
    animated_properties: List[str] = field(default_factory=list)


@dataclass
class _Scan:
    hardware: bool = False
    motion_values: bool = False
    resize_observer: bool = False
    layout_position: bool = False
    full_layout: bool = False
    while_in_view: bool = False
    inline_values: bool = False
    variants: bool = False
    state_animations: bool = False
    interval: bool = False
    intersection_observer: bool = False
    animated: List[str] = field(default_factory=list)
    thrashing: List[str] = field(default_factory=list)
    non_accelerated: List[str] = field(default_factory=list)
    first_animate_line: int = 0


class PerformanceAnalyzer(Analyzer):
    """Flags animation patterns that force layout or skip the compositor."""

    domain = "performance"
    artifact_name = "performance-analysis.json"
    result_type = PerformanceResult

    def evaluate(
        self, component: ComponentRecord, source: str, context: AnalysisContext
    ) -> PerformanceResult:
        parsed = parse_source(source, component.path)
        scan = _Scan()
        self._scan_code(parsed, scan)
        self._scan_jsx(parsed, scan)
        violations = self._issues(scan)
        return PerformanceResult(
            path=component.path,
            name=component.name,
            score=performance_score(scan.hardware, scan.motion_values, scan.variants,
                                    scan.inline_values, scan.while_in_view, violations),
            violations=violations,
            uses_hardware_acceleration=scan.hardware,
            uses_motion_values=scan.motion_values,
            uses_resize_observer=scan.resize_observer,
            uses_layout_position=scan.layout_position,
            uses_while_in_view=scan.while_in_view,
            animated_properties=scan.animated,
        )

    @staticmethod
    def _scan_code(parsed: ParsedSource, scan: _Scan) -> None:
        for node in parsed.walk({"call_expression", "new_expression", "variable_declarator"}):
            if node.type == "call_expression":
                callee = parsed.node_text(node.child_by_field_name("function"))
                if callee in _MOTION_VALUE_HOOKS:
                    scan.motion_values = True
                elif callee == "setInterval":
                    scan.interval = True
                elif callee == "useRef" and node.parent is not None and node.parent.type == "variable_declarator":
                    name = parsed.node_text(node.parent.child_by_field_name("name")).lower()
                    if any(hint in name for hint in _CACHE_REF_HINTS):
                        # Cached measurements count the same as an observer.
                        scan.resize_observer = True
            elif node.type == "new_expression":
                constructor = parsed.node_text(node.child_by_field_name("constructor"))
                if constructor == "ResizeObserver":
                    scan.resize_observer = True
                elif constructor == "IntersectionObserver":
                    scan.intersection_observer = True
            else:
                name = parsed.node_text(node.child_by_field_name("name"))
                if name == "variants" or name.endswith(("Variants", "variants")):
                    scan.variants = True

    @staticmethod
    def _scan_jsx(parsed: ParsedSource, scan: _Scan) -> None:
        for element in parsed.jsx_elements():
            for attribute, value in element.attributes.items():
                if attribute == "layout":
                    _scan_layout(parsed, value, scan)
                elif attribute == "whileInView":
                    scan.while_in_view = True
                elif attribute == "variants":
                    scan.variants = True
                elif attribute in _GESTURE_ATTRIBUTES:
                    expression = unwrap_expression(value)
                    if expression is not None and expression.type == "object":
                        scan.inline_values = True
                elif attribute == "animate":
                    _scan_animate(parsed, value, scan, element.line)

    @staticmethod
    def _issues(scan: _Scan) -> List[Violation]:
        issues: List[Violation] = []
        if scan.thrashing:
            props = ", ".join(scan.thrashing)
            issues.append(
                Violation(
                    rule="layout-thrashing",
                    severity="critical",
                    line=scan.first_animate_line,
                    code=props,
                    message=(
                        f"Animating layout properties ({props}) causes layout recalculation. "
                        "Consider using transform-based animations (x, y, scale)."
                    ),
                )
            )
        if scan.non_accelerated and not scan.hardware:
            props = ", ".join(scan.non_accelerated)
            issues.append(
                Violation(
                    rule="non-hardware-accelerated",
                    severity="warning",
                    line=scan.first_animate_line,
                    code=props,
                    message=(
                        f"Using non-hardware-accelerated properties ({props}). "
                        "Consider using x, y instead of left, top."
                    ),
                )
            )
        if scan.interval and scan.state_animations and not scan.motion_values:
            issues.append(
                Violation(
                    rule="missing-reactive-values",
                    severity="warning",
                    message=(
                        "Using state + interval for animations. Consider using MotionValues "
                        "(useMotionValue, useSpring) for smoother performance."
                    ),
                )
            )
        if scan.full_layout and not scan.layout_position:
            issues.append(
                Violation(
                    rule="full-layout-animation",
                    severity="info",
                    message=(
                        "Using full layout animation. If only position changes, consider "
                        'layout="position" for better performance.'
                    ),
                )
            )
        if scan.intersection_observer and not scan.while_in_view:
            issues.append(
                Violation(
                    rule="missing-while-in-view",
                    severity="info",
                    message=(
                        "Using IntersectionObserver manually. Consider using Motion's built-in "
                        "whileInView for simpler code and better integration."
                    ),
                )
            )
        if scan.inline_values and not scan.variants:
            issues.append(
                Violation(
                    rule="inline-animation-values",
                    severity="info",
                    message=(
                        "Using inline animation values in whileHover/whileTap. Consider extracting "
                        "to variants for reusability and cleaner code."
                    ),
                )
            )
        return issues


def _scan_layout(parsed: ParsedSource, value: Node | None, scan: _Scan) -> None:
    if value is None:
        scan.full_layout = True
        return
    expression = unwrap_expression(value) if value.type == "jsx_expression" else value
    if parsed.node_text(expression) in {'"position"', "'position'"}:
        scan.layout_position = True
    else:
        scan.full_layout = True


def _scan_animate(parsed: ParsedSource, value: Node | None, scan: _Scan, line: int) -> None:
    expression = unwrap_expression(value)
    if expression is None:
        return
    if expression.type == "identifier":
        scan.state_animations = True
        return
    if expression.type != "object":
        return
    if not scan.first_animate_line:
        scan.first_animate_line = line_of(expression) or line
    for key, prop_value in object_keys(parsed, expression):
        if prop_value is None:
            continue
        if key not in scan.animated:
            scan.animated.append(key)
        if key in HARDWARE_ACCELERATED_PROPS:
            scan.hardware = True
        if key in LAYOUT_THRASHING_PROPS and key not in scan.thrashing:
            scan.thrashing.append(key)
        if key in NON_ACCELERATED_PROPS and key not in scan.non_accelerated:
            scan.non_accelerated.append(key)
        if prop_value.type == "identifier":
            scan.state_animations = True


def performance_score(
    hardware: bool,
    motion_values: bool,
    variants: bool,
    inline_values: bool,
    while_in_view: bool,
    issues: List[Violation],
) -> int:
    score = 100 - sum(SEVERITY_PENALTIES.get(issue.severity, 0) for issue in issues)
    if hardware:
        score += 5
    if motion_values:
        score += 5
    if variants and not inline_values:
        score += 5
    if while_in_view:
        score += 3
    return clamp_score(score)


__all__ = [
    "HARDWARE_ACCELERATED_PROPS",
    "LAYOUT_THRASHING_PROPS",
    "NON_ACCELERATED_PROPS",
    "PerformanceAnalyzer",
    "PerformanceResult",
    "performance_score",
]
