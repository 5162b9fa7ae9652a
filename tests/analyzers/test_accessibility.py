"""Tests for the accessibility analyzer."""

from __future__ import annotations

from compaudit.analyzers.accessibility import AccessibilityAnalyzer, is_icon_component


def _analyze(builder, name: str, source: str):
    path = builder.component(f"Core/{name}.tsx", source)
    return AccessibilityAnalyzer().analyze_one(path, context=builder.context())


def test_icon_only_button_needs_label(component_builder) -> None:
    result = _analyze(
        component_builder,
        "Dismiss",
        """
        import { CloseIcon } from './CloseIcon';

        export function Dismiss({ onClose }: { onClose: () => void }) {
          return (
            <button type="button" onClick={onClose}>
              <CloseIcon />
            </button>
          );
        }
        """,
    )

    [violation] = result.violations
    assert violation.rule == "icon-button-no-label"
    assert violation.severity == "serious"
    assert violation.metadata == {"impact": "serious", "wcag": "1.1.1", "category": "aria"}
    assert violation.line == 5
    assert result.supports_keyboard_nav is True
    assert result.score == 90


def test_clickable_div_needs_keyboard_support(component_builder) -> None:
    result = _analyze(
        component_builder,
        "Toggle",
        """
        export const Toggle = ({ onToggle }: { onToggle: () => void }) => (
          <div onClick={onToggle}>Toggle</div>
        );
        """,
    )

    assert [violation.rule for violation in result.violations] == [
        "missing-keyboard-handler",
        "missing-tabindex",
    ]
    assert all(violation.metadata["wcag"] == "2.1.1" for violation in result.violations)
    assert result.supports_keyboard_nav is False
    assert result.score == 70


def test_labelled_button_with_focus_ring_scores_full(component_builder) -> None:
    result = _analyze(
        component_builder,
        "Close",
        """
        import { CloseIcon } from './CloseIcon';

        export const Close = ({ onClose }: { onClose: () => void }) => (
          <button aria-label="Close" className="focus-visible:ring-2" onClick={onClose}>
            <CloseIcon />
          </button>
        );
        """,
    )

    assert result.violations == []
    assert result.has_aria_attributes is True
    assert result.has_focus_management is True
    assert result.score == 100


def test_motion_elements_need_reduced_motion(component_builder) -> None:
    result = _analyze(
        component_builder,
        "Float",
        """
        import { motion } from 'motion/react';

        export const Float = () => <motion.section animate={{ y: -2 }}>Hi</motion.section>;
        """,
    )

    assert [violation.rule for violation in result.violations] == ["missing-reduced-motion"]
    assert result.violations[0].metadata["impact"] == "moderate"
    assert result.respects_reduced_motion is False


def test_unlabelled_input_is_reported(component_builder) -> None:
    result = _analyze(
        component_builder,
        "Search",
        """
        export const Search = () => (
          <form>
            <input type="search" />
          </form>
        );
        """,
    )

    assert [violation.rule for violation in result.violations] == ["missing-html-for"]
    assert result.is_screen_reader_compatible is False


def test_icon_names() -> None:
    assert is_icon_component("ChevronIcon")
    assert is_icon_component("Close")
    assert not is_icon_component("Button")
