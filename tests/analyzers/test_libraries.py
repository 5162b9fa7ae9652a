"""Tests for the third-party UI library analyzer."""

from __future__ import annotations

from compaudit.analyzers.libraries import (
    LibraryAnalyzer,
    library_for,
    recommend,
    should_be_custom_built,
)


def test_library_imports_and_overrides(component_builder) -> None:
    path = component_builder.component(
        "Request/Form.tsx",
        """
        import { Button, TextField } from '@mui/material';
        import Box from '@mui/material/Box';

        export const Form = () => (
          <Box sx={{ p: 2 }}>
            <TextField classes={{ root: 'field' }} />
            <Button>Go</Button>
          </Box>
        );
        """,
    )

    result = LibraryAnalyzer().analyze_one(path, context=component_builder.context())

    assert result.uses_external_library is True
    assert [usage.library for usage in result.libraries] == ["material-ui", "material-ui"]
    assert result.libraries[0].imports == ["Button", "TextField"]
    assert result.libraries[1].imports == ["Box"]
    assert [override.type for override in result.overrides] == ["style", "class"]
    assert result.override_count == 2
    assert result.fits_design_system is True
    assert result.should_be_custom_built is False
    assert result.recommendation == "refactor"
    assert result.score == 70


def test_internal_component_is_kept(component_builder) -> None:
    path = component_builder.component(
        "Core/Plain.tsx",
        """
        import { Card } from './Card';

        export const Plain = () => <Card sx={{ p: 2 }} />;
        """,
    )

    result = LibraryAnalyzer().analyze_one(path, context=component_builder.context())

    assert result.uses_external_library is False
    assert result.overrides == []
    assert result.recommendation == "keep"
    assert result.score == 100


def test_library_prefix_matching() -> None:
    assert library_for("@radix-ui/react-dialog") == "radix-ui"
    assert library_for("antd") == "ant-design"
    assert library_for("antd-mobile") is None
    assert library_for("react") is None


def test_recommendation_thresholds() -> None:
    assert recommend(False, 10, True) == "keep"
    assert recommend(True, 1, True) == "keep"
    assert recommend(True, 3, False) == "refactor"
    assert recommend(True, 5, False) == "replace"
    assert should_be_custom_built(True, 4, []) is True
    assert should_be_custom_built(False, 9, []) is False
