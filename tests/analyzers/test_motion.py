"""Tests for the motion analyzer."""

from __future__ import annotations

from compaudit.analyzers.motion import MotionAnalyzer


def test_motion_component_with_reduced_motion_is_compliant(component_builder) -> None:
    path = component_builder.component(
        "Core/Card.tsx",
        """
        import { motion, useReducedMotion } from 'motion/react';

        export function Card() {
          const reduce = useReducedMotion();
          return (
            <motion.div
              whileHover={{ scale: 1.02 }}
              animate={{ opacity: 1 }}
              initial={false}
            />
          );
        }
        """,
    )
    context = component_builder.context()

    result = MotionAnalyzer().analyze_one(path, context=context)

    assert result.has_motion_import is True
    assert result.animation_library == "motion"
    assert result.motion_attributes == ["animate", "initial", "whileHover"]
    assert result.uses_motion_elements is True
    assert result.uses_reduced_motion is True
    assert result.is_compliant is True
    assert result.violations == []
    assert result.score == 100


def test_motion_without_reduced_motion_loses_points(component_builder) -> None:
    path = component_builder.component(
        "Core/Fade.tsx",
        """
        import { motion } from 'motion/react';

        export const Fade = () => <motion.span animate={{ opacity: 1 }} />;
        """,
    )

    result = MotionAnalyzer().analyze_one(path, context=component_builder.context())

    assert result.uses_reduced_motion is False
    assert result.score == 85


def test_other_animation_library_is_flagged(component_builder) -> None:
    path = component_builder.component(
        "Core/Spinner.tsx",
        """
        import gsap from 'gsap';

        export const Spinner = () => <div className="spinner" />;
        """,
    )

    result = MotionAnalyzer().analyze_one(path, context=component_builder.context())

    assert result.animation_library == "gsap"
    assert result.is_compliant is False
    [violation] = result.violations
    assert violation.rule == "other-library"
    assert violation.severity == "error"
    assert violation.line == 1
    assert result.score == 80


def test_css_keyframes_break_compliance(component_builder) -> None:
    path = component_builder.component(
        "Core/Pulse.tsx",
        """
        const styles = `
          @keyframes pulse { from { opacity: 0; } }
        `;

        export const Pulse = () => <div className="pulse" />;
        """,
    )

    result = MotionAnalyzer().analyze_one(path, context=component_builder.context())

    assert [violation.rule for violation in result.violations] == ["keyframes"]
    assert result.violations[0].line == 2
    assert result.is_compliant is False
    assert result.animation_library == "none"
