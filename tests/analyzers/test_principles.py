"""Tests for the design principle analyzer."""

from __future__ import annotations

from compaudit.analyzers.principles import (
    FAIL,
    NOT_APPLICABLE,
    PARTIAL,
    PASS,
    PRINCIPLES,
    PrincipleEvaluation,
    PrinciplesAnalyzer,
    dark_mode_compatible,
    overall_score,
    radix_compliance,
    semantic_tokens,
    subtle_depth,
    zen_aesthetic,
)


def _run(check, content: str, path: str = "src/components/Core/Card.tsx") -> PrincipleEvaluation:
    return check(content, content.split("\n"), path)


def test_catalog_has_eleven_principles() -> None:
    assert len(PRINCIPLES) == 11
    assert list(PRINCIPLES)[0] == "grayscale-foundation"
    assert list(PRINCIPLES)[-1] == "radix-compliance"


def test_hardcoded_colors_violate_semantic_tokens() -> None:
    evaluation = _run(semantic_tokens, "const accent = '#ff0000';\n// '#00ff00'\n")

    assert evaluation.status == PARTIAL
    assert evaluation.score == 95
    [violation] = evaluation.violations
    assert violation.line == 1
    assert violation.code == "#ff0000"
    assert violation.severity == "error"


def test_light_mode_only_colors() -> None:
    evaluation = _run(dark_mode_compatible, '<div className="bg-white text-black" />')

    assert evaluation.status == PARTIAL
    assert evaluation.score == 60
    assert [violation.code for violation in evaluation.violations] == ["bg-white", "text-black"]


def test_subtle_depth_counts_bare_shadow_once() -> None:
    subtle = _run(subtle_depth, '<div className="shadow-sm shadow" />')
    heavy = _run(subtle_depth, '<div className="shadow-xl" />')

    assert subtle.status == PASS
    assert subtle.score == 100
    assert subtle.evidence == ["Found 2 subtle shadow usages"]
    assert heavy.status == FAIL
    assert heavy.score == 0


def test_large_scale_breaks_zen_aesthetic() -> None:
    evaluation = _run(zen_aesthetic, "const hover = { scale: 1.2 };\n")

    assert evaluation.status == PARTIAL
    assert evaluation.score == 85
    assert evaluation.violations[0].code == "scale: 1.2"


def test_theme_files_skip_radix_compliance() -> None:
    evaluation = _run(radix_compliance, "const bg = '#fff';\n", path="src/styles/theme.tsx")

    assert evaluation.status == NOT_APPLICABLE


def test_overall_score_ignores_not_applicable() -> None:
    evaluations = [
        PrincipleEvaluation("a", PASS, 100),
        PrincipleEvaluation("b", FAIL, 50),
        PrincipleEvaluation("c", NOT_APPLICABLE, 0),
    ]

    assert overall_score(evaluations) == 75
    assert overall_score([PrincipleEvaluation("c", NOT_APPLICABLE, 0)]) == 100


def test_analyzer_accepts_a_custom_catalog(component_builder) -> None:
    path = component_builder.component(
        "Core/Swatch.tsx",
        """
        export const Swatch = () => <div style={{ color: '#fff' }} />;
        """,
    )

    analyzer = PrinciplesAnalyzer({"semantic-tokens": semantic_tokens})
    result = analyzer.analyze_one(path, context=component_builder.context())

    assert [evaluation.principle for evaluation in result.principles] == ["semantic-tokens"]
    assert result.partial == 1
    assert result.overall_score == 95
    assert result.score == result.overall_score


def test_full_catalog_counts_every_status(component_builder) -> None:
    path = component_builder.component(
        "Core/Panel.tsx",
        """
        export const Panel = () => (
          <section className="bg-background text-foreground p-6 shadow-sm">Panel</section>
        );
        """,
    )

    result = PrinciplesAnalyzer().analyze_one(path, context=component_builder.context())

    assert len(result.principles) == 11
    assert result.passed + result.partial + result.failed + result.not_applicable == 11
    assert 0 <= result.overall_score <= 100


def test_overall_score_rounds_halves_up() -> None:
    evaluations = [
        PrincipleEvaluation(principle="grayscale-foundation", status=PASS, score=100),
        PrincipleEvaluation(principle="subtle-depth", status=PARTIAL, score=65),
    ]

    assert overall_score(evaluations) == 83
