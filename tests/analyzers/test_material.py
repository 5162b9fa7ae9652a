"""Tests for the unified material analyzer."""

from __future__ import annotations

from compaudit.analyzers.material import (
    MaterialAnalyzer,
    has_separate_inner_hover,
    uses_clip_path_hack,
)


def test_single_orchestrated_surface_passes(component_builder) -> None:
    path = component_builder.component(
        "Core/Tile.tsx",
        """
        import { motion } from 'motion/react';

        const container = { hidden: { opacity: 0 }, show: { opacity: 1, transition: { staggerChildren: 0.05 } } };

        export const Tile = () => (
          <motion.div variants={container} initial="hidden" animate="show" whileHover={{ scale: 1.02 }}>
            <span>Label</span>
          </motion.div>
        );
        """,
    )

    result = MaterialAnalyzer().analyze_one(path, context=component_builder.context())

    assert result.motion_div_count == 1
    assert result.uses_variants is True
    assert result.has_variant_orchestration is True
    assert result.has_depth_on_hover is True
    assert result.failed_checks() == []
    assert result.violations == []
    assert result.score == 100


def test_multiple_motion_divs_counted_once_each(component_builder) -> None:
    path = component_builder.component(
        "Core/Stack.tsx",
        """
        import { motion } from 'motion/react';

        export const Stack = () => (
          <motion.div animate={{ opacity: 1 }}>
            <motion.div animate={{ y: 0 }} />
            <motion.div animate={{ x: 0 }} />
          </motion.div>
        );
        """,
    )

    result = MaterialAnalyzer().analyze_one(path, context=component_builder.context())

    assert result.motion_div_count == 3
    assert [violation.rule for violation in result.violations] == [
        "multiple-motion-divs",
        "no-depth-on-hover",
    ]
    assert result.violations[0].severity == "error"
    single = next(check for check in result.checks if check.name == "single-motion-div")
    assert single.passed is False
    assert single.lines == [4, 5, 6]
    assert result.score == 75


def test_hover_and_clip_path_heuristics() -> None:
    assert has_separate_inner_hover('className="hover:a hover:b hover:c hover:d"') is True
    assert has_separate_inner_hover('className="group-hover:a hover:b hover:c hover:d"') is False
    assert uses_clip_path_hack("style={{ clipPath: 'inset(0 0 0 0)' }}") is True
    assert uses_clip_path_hack("style={{ clipPath: 'circle(50%)' }}") is False
