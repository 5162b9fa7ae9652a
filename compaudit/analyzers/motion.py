"""Motion analyzer: animation library usage and CSS animation violations."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List

from .base import AnalysisContext, Analyzer
from .utils import clamp_score, iter_lines
from ..models import AnalysisResult, ComponentRecord, Violation
from ..parsing import import_sources, parse_source

LIBRARY_PATTERNS = {
    "motion/react": "motion",
    "framer-motion": "motion",
    "gsap": "gsap",
    "@gsap/react": "gsap",
    "@react-spring/web": "react-spring",
    "react-spring": "react-spring",
    "animejs": "animejs",
    "anime.js": "animejs",
}

MOTION_ATTRIBUTES = (
    "animate",
    "initial",
    "exit",
    "variants",
    "layout",
    "whileHover",
    "whileTap",
    "whileFocus",
    "whileInView",
    "transition",
    "drag",
)

_MOTION_MODULES = {"motion/react", "framer-motion"}
_MOTION_ELEMENT_RE = re.compile(r"motion\.\w+")
_REDUCED_MOTION_RE = re.compile(r"useReducedMotion\s*\(")
_ACCELERATION_RES = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (r"transform3d", r"translateZ", r"translate3d", r"willChange", r"will-change", r"gpu")
]
_CSS_TRANSITION_RE = re.compile(r"transition:\s*[^;]+|transition-\w+:")
_TAILWIND_TRANSITION_RE = re.compile(
    r"transition-(all|none|colors|opacity|shadow|transform|duration|ease|delay)"
    r"|className=[\"'`].*\btransition\b"
)
_KEYFRAMES_RE = re.compile(r"@keyframes\s+\w+")
_ANIMATION_PROPERTY_RE = re.compile(r"animation:\s*[^;]+|animation-name:")


@dataclass(frozen=True)
class MotionResult(AnalysisResult):
    """Animation library usage for one component."""

    has_motion_import: bool = False
    animation_library: str = "none"
    motion_attributes: List[str] = field(default_factory=list)
    uses_motion_elements: bool = False
    uses_reduced_motion: bool = False
    uses_hardware_acceleration: bool = False
    is_compliant: bool = True


class MotionAnalyzer(Analyzer):
    """Checks that animations go through the Motion library."""

    domain = "motion"
    artifact_name = "motion-analysis.json"
    result_type = MotionResult

    def evaluate(
        self, component: ComponentRecord, source: str, context: AnalysisContext
    ) -> MotionResult:
        parsed = parse_source(source, component.path)

        imports = import_sources(parsed)
        has_motion = any(module in _MOTION_MODULES for module, _ in imports)
        library = "none"
        for module, _ in imports:
            for pattern, name in LIBRARY_PATTERNS.items():
                if module == pattern or module.startswith(pattern):
                    library = name

        used: List[str] = []
        for element in parsed.jsx_elements():
            for attribute in element.attributes:
                if attribute in MOTION_ATTRIBUTES and attribute not in used:
                    used.append(attribute)
        used.sort(key=MOTION_ATTRIBUTES.index)

        violations = self._css_violations(source)
        if library not in {"motion", "none"}:
            violations.extend(self._library_violations(imports, library))

        blocking = [violation for violation in violations if violation.rule != "css-transition"]
        is_compliant = has_motion or (library == "none" and not blocking)
        uses_reduced_motion = bool(_REDUCED_MOTION_RE.search(source))

        penalty = sum(
            {"other-library": 20, "keyframes": 10}.get(violation.rule, 5) for violation in violations
        )
        if has_motion and not uses_reduced_motion:
            penalty += 15

        return MotionResult(
            path=component.path,
            name=component.name,
            score=clamp_score(100 - penalty),
            violations=violations,
            has_motion_import=has_motion,
            animation_library="motion" if has_motion else library,
            motion_attributes=used,
            uses_motion_elements=bool(_MOTION_ELEMENT_RE.search(source)),
            uses_reduced_motion=uses_reduced_motion,
            uses_hardware_acceleration=any(regex.search(source) for regex in _ACCELERATION_RES),
            is_compliant=is_compliant,
        )

    @staticmethod
    def _css_violations(source: str) -> List[Violation]:
        violations: List[Violation] = []
        for line_no, line in iter_lines(source, skip_comments=True):
            code = line.strip()
            if _CSS_TRANSITION_RE.search(line):
                violations.append(
                    Violation(
                        rule="css-transition",
                        line=line_no,
                        code=code,
                        message=f'CSS transition detected: "{code[:50]}"',
                        severity="warning",
                        suggestion="Use the Motion animate or transition prop instead",
                    )
                )
            if _TAILWIND_TRANSITION_RE.search(line):
                violations.append(
                    Violation(
                        rule="css-transition",
                        line=line_no,
                        code=code,
                        message="Tailwind transition class detected",
                        severity="warning",
                        suggestion="Use Motion for complex animations; simple transitions may be acceptable",
                    )
                )
            if _KEYFRAMES_RE.search(line):
                violations.append(
                    Violation(
                        rule="keyframes",
                        line=line_no,
                        code=code,
                        message="CSS @keyframes detected",
                        severity="warning",
                        suggestion="Use Motion variants or the animate prop instead",
                    )
                )
            elif _ANIMATION_PROPERTY_RE.search(line):
                violations.append(
                    Violation(
                        rule="keyframes",
                        line=line_no,
                        code=code,
                        message="CSS animation property detected",
                        severity="warning",
                        suggestion="Use Motion for declarative animations",
                    )
                )
        return violations

    @staticmethod
    def _library_violations(imports: List[tuple[str, int]], library: str) -> List[Violation]:
        violations: List[Violation] = []
        for module, line_no in imports:
            if module in _MOTION_MODULES or module not in LIBRARY_PATTERNS:
                continue
            violations.append(
                Violation(
                    rule="other-library",
                    line=line_no,
                    code=module,
                    message=f"{library.upper()} animation library detected",
                    severity="error",
                    suggestion="Migrate to Motion for consistency",
                )
            )
        return violations


__all__ = ["LIBRARY_PATTERNS", "MOTION_ATTRIBUTES", "MotionAnalyzer", "MotionResult"]
