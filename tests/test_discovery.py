"""Tests for component discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from compaudit.discovery import (
    ComponentDiscovery,
    build_dependency_graph,
    categorize,
    discover,
    link_parents,
    matches_pattern,
    source_anchor,
)
from compaudit.models import ComponentCategory, ComponentRecord, ExportShape


def _seed(builder) -> None:
    builder.component(
        "Layout/Header.tsx",
        """
        import React from 'react';
        import { Logo } from './Logo';

        export interface HeaderProps {
          title: string;
        }

        export default function Header({ title }: HeaderProps) {
          return (
            <header>
              <Logo />
              <h1>{title}</h1>
            </header>
          );
        }
        """,
    )
    builder.component(
        "Layout/Logo.tsx",
        """
        export const Logo = () => <span>logo</span>;
        """,
    )
    builder.component(
        "Layout/Header.stories.tsx",
        """
        export default { title: 'Header' };
        """,
    )
    builder.component(
        "Layout/Header.test.tsx",
        """
        test('renders', () => {});
        """,
    )
    builder.write(
        {
            "src/components/node_modules/pkg/Thing.tsx": "export const Thing = () => null;\n",
        }
    )


def test_discovery_lists_components_in_path_order(component_builder) -> None:
    _seed(component_builder)

    records = component_builder.discover()

    assert [record.path for record in records] == [
        "src/components/Layout/Header.tsx",
        "src/components/Layout/Logo.tsx",
    ]
    header, logo = records
    assert header.name == "Header"
    assert header.export_shape is ExportShape.DEFAULT
    assert header.props_type == "HeaderProps"
    assert header.dependencies == ["Logo"]
    assert header.has_children is True
    assert header.category is ComponentCategory.LAYOUT
    assert header.line_count > 1
    assert header.size > 0
    assert logo.name == "Logo"
    assert logo.export_shape is ExportShape.NAMED


def test_discovery_paths_are_unique_and_parents_resolve(component_builder) -> None:
    _seed(component_builder)
    component_builder.component(
        "Layout/Sidebar/SidebarItem.tsx",
        """
        import Header from '../Header';

        export function SidebarItem() {
          return <Header title="x" />;
        }
        """,
    )

    records = component_builder.discover()
    paths = [record.path for record in records]

    assert len(paths) == len(set(paths))
    for record in records:
        assert record.parent is None or record.parent in paths
    item = next(record for record in records if record.name == "SidebarItem")
    assert item.parent == "src/components/Layout/Header.tsx"


def test_discovery_detects_both_export_shape_and_prop_alias(component_builder) -> None:
    component_builder.component(
        "Core/Badge.tsx",
        """
        import Card, { CardHeader as Head, useThing } from '@/components/Card';
        import { Box } from '@mui/material';

        type BadgeProp = { label: string };

        export const Badge = ({ label }: BadgeProp) => <Box>{label}</Box>;
        export default Badge;
        """,
    )

    [record] = component_builder.discover()

    assert record.name == "Badge"
    assert record.export_shape is ExportShape.BOTH
    assert record.props_type == "BadgeProp"
    assert record.dependencies == ["Card", "Head"]
    assert record.category is ComponentCategory.CORE


def test_discovery_falls_back_to_file_stem_without_exports(component_builder) -> None:
    component_builder.component("Misc/helper.tsx", "const value = 1;\n")

    [record] = component_builder.discover()

    assert record.name == "helper"
    assert record.export_shape is ExportShape.NONE
    assert record.category is ComponentCategory.UNKNOWN


def test_discovery_skips_unparseable_modules(component_builder) -> None:
    component_builder.component("Core/Good.tsx", "export const Good = () => <div />;\n")
    component_builder.component("Core/Broken.tsx", "export const Broken = () => <div>;\n")

    records = component_builder.discover()

    assert [record.name for record in records] == ["Good"]


def test_discovery_category_overrides(component_builder) -> None:
    component_builder.component("Widgets/Chart.tsx", "export const Chart = () => null;\n")

    records = ComponentDiscovery({"Widgets": ComponentCategory.CORE}).discover(
        "src/components", project_root=component_builder.path()
    )

    assert records[0].category is ComponentCategory.CORE


def test_discovery_missing_root_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        discover("does/not/exist", project_root=tmp_path)


def test_discovery_root_must_be_directory(tmp_path: Path) -> None:
    target = tmp_path / "file.tsx"
    target.write_text("export const A = 1;\n", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        discover(target)


def test_source_anchor_is_project_root_unless_outside(tmp_path: Path) -> None:
    project = tmp_path / "project"
    outside = tmp_path / "lib"

    assert source_anchor("src/components", project) == project.resolve()
    assert source_anchor(str(outside), project) == outside.resolve()


def test_categorize_uses_deepest_matching_segment() -> None:
    assert categorize("src/components/Layout/ui/Dialog.tsx") is ComponentCategory.OVERLAYS
    assert categorize("src/components/History/List.tsx") is ComponentCategory.INTELLIGENCE
    assert categorize("src/components/DataGrid/Cell.tsx") is ComponentCategory.CORE
    assert categorize("src/components/Other/Thing.tsx") is ComponentCategory.UNKNOWN


@pytest.mark.parametrize(
    ("path", "pattern", "expected"),
    [
        ("Button/Button.test.tsx", "**/*.test.tsx", True),
        ("Button/Button.tsx", "**/*.test.tsx", False),
        ("Layout/__fixtures__/Sample.tsx", "**/__fixtures__/**", True),
        ("Layout/Header.tsx", "**/*.tsx", True),
        ("Layout/Header.jsx", "**/*.tsx", False),
    ],
)
def test_matches_pattern(path: str, pattern: str, expected: bool) -> None:
    assert matches_pattern(path, pattern) is expected


def test_link_parents_prefers_nearest_ancestor() -> None:
    records = [
        ComponentRecord(path="a/Shell.tsx", name="Shell"),
        ComponentRecord(path="a/b/Panel.tsx", name="Panel"),
        ComponentRecord(path="a/b/c/Item.tsx", name="Item", dependencies=["Shell", "Panel"]),
        ComponentRecord(path="x/Other.tsx", name="Other", dependencies=["Item"]),
    ]

    linked = {record.name: record for record in link_parents(records)}

    assert linked["Item"].parent == "a/b/Panel.tsx"
    assert linked["Other"].parent is None
    assert linked["Shell"].parent is None


def test_dependency_graph_keeps_cycles_as_data() -> None:
    records = [
        ComponentRecord(path="A.tsx", name="A", dependencies=["B", "Missing"]),
        ComponentRecord(path="B.tsx", name="B", dependencies=["A", "A"]),
    ]

    graph = build_dependency_graph(records)

    assert graph == {"A.tsx": ["B.tsx"], "B.tsx": ["A.tsx"]}
