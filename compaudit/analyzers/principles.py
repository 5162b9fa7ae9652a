"""Design principle compliance analyzer.

Each principle is a plain function over the component source returning a
``PrincipleEvaluation``. The catalog in ``PRINCIPLES`` is ordered and can be
narrowed or extended by passing a different mapping to the analyzer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Pattern, Sequence

from .base import AnalysisContext, Analyzer
from .utils import is_comment_line
from ..models import AnalysisResult, ComponentRecord, Serializable, Violation
from ..scoring import round_half_up

PASS = "pass"
PARTIAL = "partial"
FAIL = "fail"
NOT_APPLICABLE = "not-applicable"

_HARDCODED_COLOR_RES = [
    re.compile(r"#[0-9a-fA-F]{3,8}\b"),
    re.compile(r"rgba?\s*\([^)]+\)", re.IGNORECASE),
    re.compile(r"hsla?\s*\([^)]+\)", re.IGNORECASE),
    re.compile(
        r"\b(bg|text|border|ring|fill|stroke)-(white|black|slate|gray|zinc|neutral|stone|red|orange"
        r"|amber|yellow|lime|green|emerald|teal|cyan|sky|blue|indigo|violet|purple|fuchsia|pink|rose)"
        r"-\d{2,3}\b"
    ),
    re.compile(r"\b(bg|text|border)-(white|black)\b"),
]
_SEMANTIC_TOKEN_RES = [
    re.compile(
        r"\b(bg|text|border)-(background|foreground|card|muted|primary|secondary|accent"
        r"|destructive|popover|input)\b"
    ),
    re.compile(r"\b(bg|text|border)-(bg-app|bg-surface|bg-raised|bg-elevated)\b"),
    re.compile(r"\b(text|bg)-(text-primary|text-secondary|text-muted)\b"),
    re.compile(
        r"\b(bg|text|border)-(signal-success|signal-warning|signal-error|accent-blue|accent-ai)(/\d+)?\b"
    ),
]
_GRAYSCALE_RE = re.compile(r"\b(bg|text|border)-(background|foreground|muted|card)\b")
_LOUD_COLOR_RE = re.compile(r"\b(bg|text|border)-(red|green|blue|yellow|purple|pink|orange)-\d+\b")
_SIGNAL_COLOR_RE = re.compile(
    r"\b(text|bg)-(signal-success|signal-warning|signal-error|accent-blue|accent-ai)\b"
)
_DECORATIVE_RE = re.compile(r"\b(bg|text)-(red|blue|green|purple)-\d+\b")
_SEMANTIC_WORDS = ("method", "status", "signal", "error", "warning", "success")
_VALID_SPACING_RE = re.compile(r"\b(p|m|gap|space-[xy])-([2468]|10|12|14|16)\b")
_ODD_SPACING_RE = re.compile(r"\b(p|m|gap|space-[xy])-(1|3|5|7|9|11|13|15)\b")
_GENEROUS_RES = [
    re.compile(r"\b(p|px|py|pt|pb|pl|pr)-(6|8|10|12|14|16)\b"),
    re.compile(r"\b(m|mx|my|mt|mb|ml|mr)-(6|8|10|12|14|16)\b"),
]
_ANY_PADDING_RE = re.compile(r"\bp-[0-9]+\b")
_SUBTLE_SHADOW_RES = [re.compile(r"\bshadow-(xs|sm|md)\b"), re.compile(r"\bshadow(?![-\w])")]
_HEAVY_SHADOW_RE = re.compile(r"\bshadow-(lg|xl|2xl)\b")
_LIGHT_MODE_RES = [
    re.compile(r"\bbg-white\b"),
    re.compile(r"\btext-black\b"),
    re.compile(r"\bbg-gray-50\b"),
    re.compile(r"\bbg-gray-100\b"),
]
_MOTION_IMPORT_MARKERS = ("from 'motion/react'", 'from "motion/react"')
_MOTION_COMPONENT_RE = re.compile(r"<motion\.\w+")
_ANIMATION_PROPS = ("whileHover", "whileTap", "animate", "initial", "variants", "transition")
_CSS_TRANSITION_RE = re.compile(r"transition-(colors|all|opacity|transform)")
_MUTED_RE = re.compile(r"\b(text-muted|bg-muted|opacity-\d+|/\d+)\b")
_SUBTLE_HOVER_RE = re.compile(r"hover:bg-\w+/\d+")
_SCALE_RE = re.compile(r"scale:\s*([\d.]+)")
_FLASHY_RES = [re.compile(r"animate-bounce"), re.compile(r"animate-spin"), re.compile(r"animate-pulse")]
_LEGACY_TOKENS = [
    (re.compile(r"--color-bg-app"), "Use --color-background instead"),
    (re.compile(r"--color-bg-surface"), "Use --color-surface instead"),
    (re.compile(r"--color-bg-raised"), "Use --color-panel-solid instead"),
    (re.compile(r"--color-bg-elevated"), "Use --gray-4 or --color-panel-translucent instead"),
    (re.compile(r"--color-text-primary"), "Use --gray-12 instead"),
    (re.compile(r"--color-text-secondary"), "Use --gray-11 instead"),
    (re.compile(r"--color-text-muted"), "Use --gray-9 instead"),
    (re.compile(r"--color-border-subtle"), "Use --gray-4 instead"),
    (re.compile(r"--color-border-default"), "Use --gray-6 instead"),
    (re.compile(r"--color-border-emphasis"), "Use --gray-8 instead"),
    (re.compile(r"--color-accent-blue(?!-hover)"), "Use --accent-9 instead"),
]
_RADIX_TOKEN_RES = [
    re.compile(pattern)
    for pattern in (
        r"--gray-[1-9][0-2]?",
        r"--blue-[1-9][0-2]?",
        r"--accent-[1-9][0-2]?",
        r"--focus-[1-9][0-2]?",
        r"--color-background",
        r"--color-surface",
        r"--color-panel-solid",
        r"--color-panel-translucent",
    )
]
_RAW_COLOR_KINDS = [
    (re.compile(r"#[0-9a-fA-F]{3,8}\b"), "hex color"),
    (re.compile(r"rgba?\s*\([^)]+\)", re.IGNORECASE), "rgb/rgba color"),
    (re.compile(r"hsla?\s*\([^)]+\)", re.IGNORECASE), "hsl/hsla color"),
]
_THEME_FILE_MARKERS = ("app.css", "radix-colors", "theme-tokens", "styles/")


@dataclass(frozen=True)
class PrincipleEvaluation(Serializable):
    """Outcome of one design principle for one component."""

    principle: str
    status: str = PASS
    score: int = 100
    violations: List[Violation] = field(default_factory=list)
    evidence: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    _nested = {"violations": Violation}


@dataclass(frozen=True)
class PrinciplesResult(AnalysisResult):
    """Design principle compliance for one component."""

    principles: List[PrincipleEvaluation] = field(default_factory=list)
    overall_score: int = 100
    passed: int = 0
    partial: int = 0
    failed: int = 0
    not_applicable: int = 0

    _nested = {"violations": Violation, "principles": PrincipleEvaluation}


PrincipleCheck = Callable[[str, List[str], str], PrincipleEvaluation]


def _matches(pattern: Pattern[str], text: str) -> List[str]:
    return [match.group(0) for match in pattern.finditer(text)]


def _commented_before(line: str, token: str) -> bool:
    marker = line.find("//")
    return marker != -1 and marker < line.find(token)


def _status_by_count(count: int, partial_below: int) -> str:
    if count == 0:
        return PASS
    return PARTIAL if count < partial_below else FAIL


def grayscale_foundation(content: str, lines: List[str], path: str) -> PrincipleEvaluation:
    grayscale = _matches(_GRAYSCALE_RE, content)
    loud = _matches(_LOUD_COLOR_RE, content)
    evidence: List[str] = []
    recommendations: List[str] = []
    if grayscale:
        evidence.append(f"Found {len(grayscale)} grayscale semantic tokens")
    total = len(grayscale) + len(loud)
    ratio = len(grayscale) / total if total else 1.0
    status = PASS
    if ratio < 0.5:
        status = FAIL
        recommendations.append(
            "Use more semantic grayscale tokens (bg-background, text-foreground, bg-muted)"
        )
    elif ratio < 0.8:
        status = PARTIAL
        recommendations.append("Consider using more grayscale for non-semantic elements")
    return PrincipleEvaluation(
        "grayscale-foundation", status, round_half_up(ratio * 100), [], evidence, recommendations
    )


def strategic_color(content: str, lines: List[str], path: str) -> PrincipleEvaluation:
    evidence: List[str] = []
    signals = _matches(_SIGNAL_COLOR_RE, content)
    if signals:
        evidence.append(f"Found {len(signals)} strategic signal color usages")
    violations: List[Violation] = []
    for line_no, line in enumerate(lines, start=1):
        match = _DECORATIVE_RE.search(line)
        if match and not any(word in line for word in _SEMANTIC_WORDS):
            violations.append(
                Violation(
                    rule="strategic-color",
                    line=line_no,
                    code=match.group(0),
                    message="Potential decorative color usage without semantic purpose",
                    severity="warning",
                    suggestion="Use signal colors (signal-success, signal-warning, signal-error) for semantic meaning",
                )
            )
    if not violations and not evidence:
        evidence.append("No prohibited color class patterns detected")
    return PrincipleEvaluation(
        "strategic-color",
        _status_by_count(len(violations), 3),
        max(0, 100 - len(violations) * 10),
        violations,
        evidence,
        [],
    )


def semantic_tokens(content: str, lines: List[str], path: str) -> PrincipleEvaluation:
    evidence: List[str] = []
    semantic_count = sum(len(_matches(regex, content)) for regex in _SEMANTIC_TOKEN_RES)
    if semantic_count:
        evidence.append(f"Found {semantic_count} semantic color token usages")
    violations: List[Violation] = []
    for line_no, line in enumerate(lines, start=1):
        stripped = line.strip()
        if stripped.startswith("import") or is_comment_line(stripped):
            continue
        if "--" in line or "oklch" in line:
            continue
        for regex in _HARDCODED_COLOR_RES:
            for token in _matches(regex, line):
                if _commented_before(line, token):
                    continue
                violations.append(
                    Violation(
                        rule="semantic-tokens",
                        line=line_no,
                        code=token,
                        message=f"Hardcoded color detected: {token}",
                        severity="error",
                        suggestion="Use semantic tokens like bg-background, text-foreground, or design system tokens",
                    )
                )
    recommendations = ["Replace hardcoded colors with semantic tokens"] if violations else []
    if not violations and not evidence:
        evidence.append("No hardcoded colors detected")
    return PrincipleEvaluation(
        "semantic-tokens",
        _status_by_count(len(violations), 5),
        max(0, 100 - len(violations) * 5),
        violations,
        evidence,
        recommendations,
    )


def spacing_grid(content: str, lines: List[str], path: str) -> PrincipleEvaluation:
    valid = _matches(_VALID_SPACING_RE, content)
    odd = _matches(_ODD_SPACING_RE, content)
    evidence = [f"Found {len(valid)} 8px grid-aligned spacing classes"] if valid else []
    violations = [
        Violation(
            rule="spacing-grid",
            line=line_no,
            code=token,
            message=f"Non-8px grid spacing: {token}",
            severity="info",
            suggestion="Consider using 8px grid spacing (p-2, p-4, p-6, p-8)",
        )
        for line_no, line in enumerate(lines, start=1)
        for token in _matches(_ODD_SPACING_RE, line)
    ]
    total = len(valid) + len(odd)
    score = round_half_up(len(valid) / total * 100) if total else 100
    status = PASS if score >= 90 else PARTIAL if score >= 70 else FAIL
    return PrincipleEvaluation("spacing-grid", status, score, violations, evidence, [])


def generous_whitespace(content: str, lines: List[str], path: str) -> PrincipleEvaluation:
    generous = sum(len(_matches(regex, content)) for regex in _GENEROUS_RES)
    evidence = [f"Found {generous} generous whitespace patterns (p-6+ or m-6+)"] if generous else []
    recommendations: List[str] = []
    has_padding = _ANY_PADDING_RE.search(content) is not None
    status = NOT_APPLICABLE
    score = 100
    if len(lines) < 50 and has_padding:
        status = PASS
        evidence.append("Small component with appropriate padding")
    elif generous:
        status = PASS
    elif has_padding:
        status = PARTIAL
        score = 70
        recommendations.append("Consider using more generous padding (p-6, p-8) for larger sections")
    return PrincipleEvaluation("generous-whitespace", status, score, [], evidence, recommendations)


def subtle_depth(content: str, lines: List[str], path: str) -> PrincipleEvaluation:
    subtle = sum(len(_matches(regex, content)) for regex in _SUBTLE_SHADOW_RES)
    heavy = len(_matches(_HEAVY_SHADOW_RE, content))
    evidence = [f"Found {subtle} subtle shadow usages"] if subtle else []
    violations = [
        Violation(
            rule="subtle-depth",
            line=line_no,
            code=token,
            message=f"Heavy shadow detected: {token}",
            severity="warning",
            suggestion="Use subtle shadows (shadow-xs, shadow-sm, shadow-md) for zen aesthetic",
        )
        for line_no, line in enumerate(lines, start=1)
        for token in _matches(_HEAVY_SHADOW_RE, line)
    ]
    total = subtle + heavy
    score = round_half_up(subtle / total * 100) if total else 100
    status = PASS if heavy == 0 else PARTIAL if heavy < subtle else FAIL
    if heavy == 0 and not evidence:
        evidence.append("No heavy shadows detected")
    return PrincipleEvaluation("subtle-depth", status, score, violations, evidence, [])


def typography_spacing(content: str, lines: List[str], path: str) -> PrincipleEvaluation:
    evidence: List[str] = []
    counts = (
        ("monospace font usages", r"\bfont-mono\b"),
        ("text size classes", r"\btext-(xs|sm|base|lg|xl|2xl)\b"),
        ("font weight classes", r"\bfont-(normal|medium|semibold|bold)\b"),
    )
    for label, pattern in counts:
        found = len(_matches(re.compile(pattern), content))
        if found:
            evidence.append(f"Found {found} {label}")
    status = PASS if evidence else NOT_APPLICABLE
    return PrincipleEvaluation("typography-spacing", status, 100, [], evidence, [])


def dark_mode_compatible(content: str, lines: List[str], path: str) -> PrincipleEvaluation:
    violations = [
        Violation(
            rule="dark-mode-compatible",
            line=line_no,
            code=token,
            message=f"Light-mode only color: {token}",
            severity="error",
            suggestion="Use semantic tokens that work in both light and dark modes",
        )
        for line_no, line in enumerate(lines, start=1)
        for regex in _LIGHT_MODE_RES
        for token in _matches(regex, line)
    ]
    semantic = _matches(_GRAYSCALE_RE, content)
    evidence = [f"Found {len(semantic)} dark-mode compatible semantic tokens"] if semantic else []
    if not violations and not evidence:
        evidence.append("No light-mode only color patterns detected")
    return PrincipleEvaluation(
        "dark-mode-compatible",
        _status_by_count(len(violations), 3),
        max(0, 100 - len(violations) * 20),
        violations,
        evidence,
        [],
    )


def motion_animations(content: str, lines: List[str], path: str) -> PrincipleEvaluation:
    evidence: List[str] = []
    recommendations: List[str] = []
    has_import = any(marker in content for marker in _MOTION_IMPORT_MARKERS)
    if has_import:
        evidence.append("Uses motion/react for animations")
    components = _matches(_MOTION_COMPONENT_RE, content)
    if components:
        evidence.append(f"Found {len(components)} motion component usages")
    evidence.extend(f"Uses {prop} animation prop" for prop in _ANIMATION_PROPS if prop in content)

    status = NOT_APPLICABLE
    score = 100
    if has_import or components:
        status = PASS
    elif _CSS_TRANSITION_RE.search(content):
        status = PARTIAL
        score = 70
        recommendations.append("Consider using Motion for complex animations instead of CSS transitions")
    return PrincipleEvaluation("motion-animations", status, score, [], evidence, recommendations)


def zen_aesthetic(content: str, lines: List[str], path: str) -> PrincipleEvaluation:
    evidence: List[str] = []
    muted = _matches(_MUTED_RE, content)
    if muted:
        evidence.append(f"Found {len(muted)} muted/opacity color usages")
    hovers = _matches(_SUBTLE_HOVER_RE, content)
    if hovers:
        evidence.append(f"Found {len(hovers)} subtle hover interactions")

    violations: List[Violation] = []
    for line_no, line in enumerate(lines, start=1):
        match = _SCALE_RE.search(line)
        if not match:
            continue
        try:
            value = float(match.group(1))
        except ValueError:
            continue
        if value > 1.05 or value < 0.95:
            violations.append(
                Violation(
                    rule="zen-aesthetic",
                    line=line_no,
                    code=match.group(0),
                    message=f"Large scale animation: {match.group(0)}",
                    severity="warning",
                    suggestion="Use subtle scale values (1.01-1.02 or 0.98-0.99) for zen aesthetic",
                )
            )
        else:
            evidence.append(f"Subtle scale animation at line {line_no}: {match.group(0)}")
    for line_no, line in enumerate(lines, start=1):
        for regex in _FLASHY_RES:
            for token in _matches(regex, line):
                violations.append(
                    Violation(
                        rule="zen-aesthetic",
                        line=line_no,
                        code=token,
                        message=f"Flashy animation: {token}",
                        severity="warning",
                        suggestion="Use subtle, intentional animations instead of flashy ones",
                    )
                )

    if violations:
        score = max(0, 100 - len(violations) * 15)
    else:
        score = 100 if (muted or hovers) else 80
    if not violations and not evidence:
        evidence.append("No flashy or distracting patterns detected")
    return PrincipleEvaluation(
        "zen-aesthetic", _status_by_count(len(violations), 2), score, violations, evidence, []
    )


def radix_compliance(content: str, lines: List[str], path: str) -> PrincipleEvaluation:
    if any(marker in path for marker in _THEME_FILE_MARKERS):
        return PrincipleEvaluation(
            "radix-compliance",
            NOT_APPLICABLE,
            100,
            [],
            ["Theme file - token definitions, not usage"],
            [],
        )
    evidence: List[str] = []
    radix_count = sum(len(_matches(regex, content)) for regex in _RADIX_TOKEN_RES)
    if radix_count:
        evidence.append(f"Found {radix_count} Radix-idiomatic token usages")

    violations: List[Violation] = []
    for line_no, line in enumerate(lines, start=1):
        stripped = line.strip()
        if stripped.startswith("import") or is_comment_line(stripped):
            continue
        for regex, suggestion in _LEGACY_TOKENS:
            for token in _matches(regex, line):
                if _commented_before(line, token):
                    continue
                violations.append(
                    Violation(
                        rule="radix-compliance",
                        line=line_no,
                        code=token,
                        message=f"Legacy token detected: {token}",
                        severity="warning",
                        suggestion=suggestion,
                    )
                )
        if ("--" in line and ":" in line) or "oklch" in line:
            continue
        if "color-gamut" in line or "display-p3" in line:
            continue
        for regex, kind in _RAW_COLOR_KINDS:
            for token in _matches(regex, line):
                if _commented_before(line, token):
                    continue
                violations.append(
                    Violation(
                        rule="radix-compliance",
                        line=line_no,
                        code=token,
                        message=f"Hardcoded {kind} detected: {token}",
                        severity="error",
                        suggestion="Use Radix color tokens (--gray-*, --accent-*) or semantic tokens",
                    )
                )

    recommendations: List[str] = []
    if violations:
        recommendations.append("Migrate legacy tokens to Radix-idiomatic names")
        recommendations.append("Replace hardcoded colors with semantic tokens")
    elif not evidence:
        evidence.append("No legacy tokens or hardcoded colors detected")
    return PrincipleEvaluation(
        "radix-compliance",
        _status_by_count(len(violations), 5),
        max(0, 100 - len(violations) * 5),
        violations,
        evidence,
        recommendations,
    )


PRINCIPLES: Dict[str, PrincipleCheck] = {
    "grayscale-foundation": grayscale_foundation,
    "strategic-color": strategic_color,
    "semantic-tokens": semantic_tokens,
    "spacing-grid": spacing_grid,
    "generous-whitespace": generous_whitespace,
    "subtle-depth": subtle_depth,
    "typography-spacing": typography_spacing,
    "dark-mode-compatible": dark_mode_compatible,
    "motion-animations": motion_animations,
    "zen-aesthetic": zen_aesthetic,
    "radix-compliance": radix_compliance,
}


def overall_score(evaluations: Sequence[PrincipleEvaluation]) -> int:
    applicable = [evaluation for evaluation in evaluations if evaluation.status != NOT_APPLICABLE]
    if not applicable:
        return 100
    return round_half_up(sum(evaluation.score for evaluation in applicable) / len(applicable))


class PrinciplesAnalyzer(Analyzer):
    """Evaluates each component against the design principle catalog."""

    domain = "principles"
    artifact_name = "principle-compliance.json"
    result_type = PrinciplesResult

    def __init__(self, principles: Mapping[str, PrincipleCheck] | None = None) -> None:
        super().__init__()
        self.principles = dict(PRINCIPLES if principles is None else principles)

    def evaluate(
        self, component: ComponentRecord, source: str, context: AnalysisContext
    ) -> PrinciplesResult:
        lines = source.split("\n")
        evaluations = [check(source, lines, component.path) for check in self.principles.values()]
        score = overall_score(evaluations)
        statuses = [evaluation.status for evaluation in evaluations]
        return PrinciplesResult(
            path=component.path,
            name=component.name,
            score=score,
            principles=evaluations,
            overall_score=score,
            passed=statuses.count(PASS),
            partial=statuses.count(PARTIAL),
            failed=statuses.count(FAIL),
            not_applicable=statuses.count(NOT_APPLICABLE),
        )


__all__ = [
    "PRINCIPLES",
    "PrincipleEvaluation",
    "PrinciplesAnalyzer",
    "PrinciplesResult",
    "overall_score",
]
