"""Unified material analyzer.

A component should read as one physical surface: a single animated container,
orchestrated children, one hover state and a subtle depth change on hover.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Pattern

from .base import AnalysisContext, Analyzer
from .utils import clamp_score
from ..models import AnalysisResult, ComponentRecord, Serializable, Violation
from ..parsing import parse_source

VIOLATION_WEIGHTS: Dict[str, int] = {
    "multiple-motion-divs": 15,
    "separate-inner-hover": 20,
    "clip-path-hack": 25,
    "missing-variant-orchestration": 10,
    "no-depth-on-hover": 10,
}

_VIOLATION_DETAILS = {
    "multiple-motion-divs": ("error", "Multiple motion.div elements animate independently"),
    "separate-inner-hover": ("error", "Inner elements define their own hover states"),
    "clip-path-hack": ("info", "clip-path is used to work around animation layering"),
    "missing-variant-orchestration": ("warning", "Variants are used without orchestrating children"),
    "no-depth-on-hover": ("warning", "Interactive surface has no depth change on hover"),
}

_MOTION_IMPORT_RE = re.compile(r"from\s+['\"](motion/react|framer-motion)['\"]")
_VARIANTS_RE = re.compile(r"variants\s*[=:]")
_VARIANTS_PROP_RE = re.compile(r"variants\s*=\s*\{")
_ANIMATE_VARIANT_RE = re.compile(r"animate\s*=\s*[\"']?\w+[\"']?")
_TRANSITION_RE = re.compile(r"transition\s*[=:]")
_ORCHESTRATION_RE = re.compile(r"staggerChildren|delayChildren")
_HOVER_CLASS_RE = re.compile(r"hover:")
_GROUP_HOVER_RE = re.compile(r"group-hover:")
_GROUP_CLASS_RE = re.compile(r"className.*group[^-]|className.*\"group\"")
_ANIMATE_PROP_RE = re.compile(r"animate\s*=\s*\{?\s*[\"']?\w+")
_WHILE_HOVER_RE = re.compile(r"whileHover\s*=")
_WHILE_HOVER_BLOCK_RE = re.compile(r"whileHover\s*=\s*\{[^}]+\}", re.DOTALL)
_DEPTH_IN_HOVER_RE = re.compile(r"scale|shadow|y:\s*-?\d|boxShadow", re.IGNORECASE)
_SHADOW_HOVER_RE = re.compile(r"hover:shadow|whileHover.*shadow|hover:ring|hover:glow", re.IGNORECASE)
_CLIP_PATH_RE = re.compile(r"clip-path|clipPath", re.IGNORECASE)
_CLIP_PATH_INSET_RE = re.compile(r"clip-path:\s*inset|clipPath:\s*['\"]?inset", re.IGNORECASE)
_CLIP_PATH_ANIMATION_RE = re.compile(r"animate.*clipPath|clipPath.*animate|transition.*clip", re.IGNORECASE)


@dataclass(frozen=True)
class MaterialCheck(Serializable):
    name: str
    passed: bool
    details: str = ""
    lines: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class MaterialResult(AnalysisResult):
    """Unified material feel of one component."""

    uses_motion: bool = False
    motion_div_count: int = 0
    uses_variants: bool = False
    has_variant_orchestration: bool = False
    has_separate_inner_hover: bool = False
    content_inherits_parent_hover: bool = False
    has_depth_on_hover: bool = False
    uses_clip_path_hack: bool = False
    checks: List[MaterialCheck] = field(default_factory=list)

    _nested = {"violations": Violation, "checks": MaterialCheck}

    def failed_checks(self) -> List[MaterialCheck]:
        return [check for check in self.checks if not check.passed]


def pattern_lines(content: str, pattern: Pattern[str]) -> List[int]:
    return [index for index, line in enumerate(content.split("\n"), start=1) if pattern.search(line)]


def has_variant_orchestration(content: str) -> bool:
    if _ORCHESTRATION_RE.search(content):
        return True
    return bool(
        _TRANSITION_RE.search(content)
        and _ANIMATE_VARIANT_RE.search(content)
        and _VARIANTS_PROP_RE.search(content)
    )


def has_separate_inner_hover(content: str) -> bool:
    hovers = len(_HOVER_CLASS_RE.findall(content))
    if hovers > 3 and not _GROUP_HOVER_RE.search(content):
        return True
    return len(_WHILE_HOVER_RE.findall(content)) > 2


def inherits_parent_hover(content: str) -> bool:
    if _GROUP_CLASS_RE.search(content) and _GROUP_HOVER_RE.search(content):
        return True
    return bool(_VARIANTS_RE.search(content) and _ANIMATE_PROP_RE.search(content))


def has_depth_on_hover(content: str) -> bool:
    if _SHADOW_HOVER_RE.search(content):
        return True
    return any(
        _DEPTH_IN_HOVER_RE.search(block.group(0)) for block in _WHILE_HOVER_BLOCK_RE.finditer(content)
    )


def uses_clip_path_hack(content: str) -> bool:
    if not _CLIP_PATH_RE.search(content):
        return False
    return bool(_CLIP_PATH_INSET_RE.search(content) or _CLIP_PATH_ANIMATION_RE.search(content))


class MaterialAnalyzer(Analyzer):
    """Checks that components animate as one unified surface."""

    domain = "material"
    artifact_name = "material-analysis.json"
    result_type = MaterialResult

    def evaluate(
        self, component: ComponentRecord, source: str, context: AnalysisContext
    ) -> MaterialResult:
        parsed = parse_source(source, component.path)
        motion_div_lines = [
            element.line for element in parsed.jsx_elements() if element.name == "motion.div"
        ]
        motion_divs = len(motion_div_lines)
        uses_motion = bool(_MOTION_IMPORT_RE.search(source))
        uses_variants = bool(_VARIANTS_RE.search(source))
        orchestrated = has_variant_orchestration(source)
        separate_hover = has_separate_inner_hover(source)
        depth = has_depth_on_hover(source)
        clip_hack = uses_clip_path_hack(source)

        checks = [
            MaterialCheck(
                "single-motion-div",
                motion_divs <= 1,
                (
                    "No motion.div elements found"
                    if motion_divs == 0
                    else "Single motion.div pattern followed"
                    if motion_divs == 1
                    else f"Found {motion_divs} motion.div elements - consider consolidating"
                ),
                motion_div_lines,
            ),
            MaterialCheck(
                "variant-orchestration",
                not uses_variants or orchestrated,
                (
                    "No variants used"
                    if not uses_variants
                    else "Proper variant orchestration detected"
                    if orchestrated
                    else "Uses variants but missing orchestration (staggerChildren/delayChildren)"
                ),
            ),
            MaterialCheck(
                "hover-state-analysis",
                not separate_hover,
                (
                    "Separate inner hover states detected - consider unified hover"
                    if separate_hover
                    else "Hover states appear unified or use group pattern"
                ),
                pattern_lines(source, _HOVER_CLASS_RE) if separate_hover else [],
            ),
            MaterialCheck(
                "depth-on-hover",
                depth or not uses_motion,
                (
                    "Subtle depth on hover detected (shadow/scale/glow)"
                    if depth
                    else "Interactive component missing depth effect on hover"
                    if uses_motion
                    else "Non-motion component - depth check skipped"
                ),
            ),
            MaterialCheck(
                "clip-path-check",
                not clip_hack,
                (
                    "Clip-path hack detected - consider alternative approach"
                    if clip_hack
                    else "No clip-path hacks detected"
                ),
                pattern_lines(source, _CLIP_PATH_RE) if clip_hack else [],
            ),
        ]

        rules = []
        if motion_divs > 1:
            rules.append("multiple-motion-divs")
        if separate_hover:
            rules.append("separate-inner-hover")
        if clip_hack:
            rules.append("clip-path-hack")
        if uses_variants and not orchestrated:
            rules.append("missing-variant-orchestration")
        if uses_motion and not depth:
            rules.append("no-depth-on-hover")
        violations = [
            Violation(rule=rule, severity=_VIOLATION_DETAILS[rule][0], message=_VIOLATION_DETAILS[rule][1])
            for rule in rules
        ]

        score = 100 - sum(VIOLATION_WEIGHTS[rule] for rule in rules)
        if all(check.passed for check in checks):
            score = min(100, score + 5)
        return MaterialResult(
            path=component.path,
            name=component.name,
            score=clamp_score(score),
            violations=violations,
            uses_motion=uses_motion,
            motion_div_count=motion_divs,
            uses_variants=uses_variants,
            has_variant_orchestration=orchestrated,
            has_separate_inner_hover=separate_hover,
            content_inherits_parent_hover=inherits_parent_hover(source),
            has_depth_on_hover=depth,
            uses_clip_path_hack=clip_hack,
            checks=checks,
        )


__all__ = [
    "MaterialAnalyzer",
    "MaterialCheck",
    "MaterialResult",
    "VIOLATION_WEIGHTS",
    "has_depth_on_hover",
    "has_separate_inner_hover",
    "has_variant_orchestration",
    "uses_clip_path_hack",
]
