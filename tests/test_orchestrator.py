"""Tests for compaudit.orchestrator."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from compaudit.analyzers import BUILTIN_DOMAINS, builtin_result_types
from compaudit.orchestrator import Orchestrator
from compaudit.report import REPORT_JSON, REPORT_MARKDOWN, SUMMARY_JSON
from compaudit.scheduler import SchedulerError
from compaudit.stores.artifacts import INVENTORY_ARTIFACT, MissingArtifactError
from tests._fixtures.component_builder import ComponentBuilder

BADGE = """
    export const Badge = ({ label }: { label: string }) => (
      <span className="text-sm text-muted-foreground">{label}</span>
    );
    """


def _project(component_builder: ComponentBuilder) -> Path:
    component_builder.component("Badge.tsx", BADGE)
    component_builder.component("overlays/Tooltip.tsx", """
        import { motion } from 'motion/react';

        export default function Tooltip() {
          return <motion.div animate={{ opacity: 1 }}>Tip</motion.div>;
        }
        """)
    return component_builder.path()


def test_run_audit_writes_every_artifact(component_builder: ComponentBuilder) -> None:
    root = _project(component_builder)

    outcome = Orchestrator().run_audit(root)

    output_dir = root / ".compaudit"
    assert outcome.schedule.failed == []
    assert sorted(component.name for component in outcome.components) == ["Badge", "Tooltip"]
    assert (output_dir / INVENTORY_ARTIFACT).exists()
    for artifact_name, _ in builtin_result_types().values():
        assert (output_dir / artifact_name).exists()
    for name in (REPORT_JSON, REPORT_MARKDOWN, SUMMARY_JSON):
        assert (output_dir / name).exists()

    summary = json.loads((output_dir / SUMMARY_JSON).read_text(encoding="utf-8"))
    assert summary["total_components"] == 2
    assert summary["overall_score"] == outcome.overall_score
    assert set(BUILTIN_DOMAINS) <= set(outcome.artifacts)


def test_run_audit_respects_output_and_analyzer_selection(
    component_builder: ComponentBuilder, tmp_path: Path
) -> None:
    root = _project(component_builder)
    output_dir = tmp_path / "audit-out"

    outcome = Orchestrator().run_audit(root, output_dir=output_dir, analyzers=["motion"])

    assert list(outcome.schedule.outcomes) == ["motion"]
    assert (output_dir / "motion-analysis.json").exists()
    assert not (output_dir / "accessibility-report.json").exists()
    assert (output_dir / REPORT_MARKDOWN).exists()


def test_run_audit_rejects_selection_missing_a_prerequisite(
    component_builder: ComponentBuilder,
) -> None:
    root = _project(component_builder)

    with pytest.raises(SchedulerError):
        Orchestrator().run_audit(root, analyzers=["checklist"])


def test_missing_project_path_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        Orchestrator().run_audit(tmp_path / "nope")


def test_staged_runs_share_artifacts(component_builder: ComponentBuilder) -> None:
    root = _project(component_builder)
    orchestrator = Orchestrator()

    with pytest.raises(MissingArtifactError):
        orchestrator.run_analyzer("motion", root)

    discovered = orchestrator.run_discovery(root)
    assert discovered.artifact == root / ".compaudit" / INVENTORY_ARTIFACT

    with pytest.raises(MissingArtifactError):
        orchestrator.run_analyzer("checklist", root)

    coverage = orchestrator.run_analyzer("coverage", root)
    assert coverage.result_count == 2
    checklist = orchestrator.run_analyzer("checklist", root)
    assert checklist.artifact == root / ".compaudit" / "checklist-report.json"

    report = orchestrator.run_report(root)
    assert report.report.executive_summary.total_components == 2
    assert "coverage" in report.report.artifact_paths
    assert "motion" not in report.report.artifact_paths


def test_config_file_drives_discovery(component_builder: ComponentBuilder) -> None:
    root = _project(component_builder)
    component_builder.write({".compaudit.yml": """
        discovery:
          exclude:
            - "**/overlays/**"
        analyzers:
          enabled: [motion]
        """})

    outcome = Orchestrator().run_audit(root)

    assert [component.name for component in outcome.components] == ["Badge"]
    assert list(outcome.schedule.outcomes) == ["motion"]


def test_component_root_outside_project_is_analyzed(
    component_builder: ComponentBuilder, tmp_path: Path
) -> None:
    project = component_builder.path()
    library = tmp_path / "lib" / "components"
    library.mkdir(parents=True)
    (library / "Badge.tsx").write_text(BADGE.strip() + "\n", encoding="utf-8")

    outcome = Orchestrator().run_audit(project, root_dir=str(library))

    assert [component.path for component in outcome.components] == ["Badge.tsx"]
    assert outcome.schedule.failed == []
    for domain, analyzer_outcome in outcome.schedule.outcomes.items():
        assert analyzer_outcome.result_count == 1, domain


def test_standalone_analyzer_reads_sources_from_recorded_root(
    component_builder: ComponentBuilder, tmp_path: Path
) -> None:
    project = component_builder.path()
    library = tmp_path / "lib" / "components"
    library.mkdir(parents=True)
    (library / "Badge.tsx").write_text(BADGE.strip() + "\n", encoding="utf-8")
    orchestrator = Orchestrator()

    discovered = orchestrator.run_discovery(project, root_dir=str(library))
    motion = orchestrator.run_analyzer("motion", project)
    coverage = orchestrator.run_analyzer("coverage", project)
    checklist = orchestrator.run_analyzer("checklist", project)

    assert [component.path for component in discovered.components] == ["Badge.tsx"]
    assert motion.result_count == 1
    assert coverage.result_count == 1
    assert checklist.result_count == 1


def test_standalone_analyzer_root_override(
    component_builder: ComponentBuilder, tmp_path: Path
) -> None:
    project = component_builder.path()
    library = tmp_path / "lib" / "components"
    library.mkdir(parents=True)
    (library / "Badge.tsx").write_text(BADGE.strip() + "\n", encoding="utf-8")
    orchestrator = Orchestrator()
    orchestrator.run_discovery(project, root_dir=str(library))
    inventory = project / ".compaudit" / INVENTORY_ARTIFACT
    payload = json.loads(inventory.read_text(encoding="utf-8"))
    del payload["source_root"]
    inventory.write_text(json.dumps(payload), encoding="utf-8")

    outcome = orchestrator.run_analyzer("motion", project, root_dir=str(library))

    assert outcome.result_count == 1
