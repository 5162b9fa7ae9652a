"""Tests for the file-based artifact store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from compaudit.analyzers.motion import MotionResult
from compaudit.models import ComponentCategory, ComponentRecord, ExportShape, Violation
from compaudit.stores.artifacts import (
    INVENTORY_ARTIFACT,
    ArtifactError,
    ArtifactStore,
    MissingArtifactError,
)


def test_inventory_round_trip(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path / "out")
    records = [
        ComponentRecord(
            path="src/components/Layout/Header.tsx",
            name="Header",
            category=ComponentCategory.LAYOUT,
            export_shape=ExportShape.DEFAULT,
            props_type="HeaderProps",
            dependencies=["Logo"],
            parent="src/components/Layout/Logo.tsx",
        )
    ]

    path = store.save_inventory(records)

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["version"] == 1
    assert payload["generated_at"].endswith("Z")
    assert payload["components"][0]["category"] == "Layout"
    assert payload["components"][0]["export_shape"] == "default"
    assert store.load_inventory() == records


def test_results_round_trip_keeps_nested_violations(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path)
    result = MotionResult(
        path="A.tsx",
        name="A",
        score=80,
        violations=[Violation(rule="keyframes", message="Uses keyframes", line=3)],
        animation_library="none",
    )

    store.save_results("motion-analysis.json", [result])

    loaded = store.load_results("motion-analysis.json", MotionResult)
    assert loaded == [result]
    assert isinstance(loaded[0].violations[0], Violation)


def test_missing_required_artifact_raises(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path)

    with pytest.raises(MissingArtifactError) as excinfo:
        store.load_results("fixture-coverage.json", MotionResult)

    assert "missing prerequisite artifact" in str(excinfo.value).lower()
    assert isinstance(excinfo.value, RuntimeError)


def test_missing_optional_artifact_is_empty(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path)

    assert store.load_results("motion-analysis.json", MotionResult, required=False) == []


def test_inventory_missing_raises(tmp_path: Path) -> None:
    with pytest.raises(MissingArtifactError):
        ArtifactStore(tmp_path).load_inventory()


def test_unsupported_format_is_rejected(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path)
    store.write_json(INVENTORY_ARTIFACT, {"version": 99, "components": []})

    with pytest.raises(ArtifactError):
        store.load_inventory()
    assert store.load_results(INVENTORY_ARTIFACT, MotionResult, required=False) == []


def test_inventory_records_source_root(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path)
    source_root = tmp_path / "lib" / "components"

    store.save_inventory([ComponentRecord(path="Badge.tsx", name="Badge")], source_root)

    assert store.load_inventory_root() == source_root
    assert [record.path for record in store.load_inventory()] == ["Badge.tsx"]


def test_inventory_without_source_root(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path)
    store.save_inventory([])

    assert store.load_inventory_root() is None
