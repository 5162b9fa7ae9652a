"""Pipeline orchestration for audit, discovery, analyzer and report runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from .analyzers import Analyzer, AnalysisContext, analyzer_for, discover_analyzers
from .config import AuditConfig, load_config
from .discovery import ComponentDiscovery, source_anchor
from .logging import get_logger
from .models import AnalysisResult, ComponentCategory, ComponentRecord
from .report import ReportOutput, ReportSynthesizer
from .scheduler import AnalyzerOutcome, ScheduleReport, Scheduler
from .stores.artifacts import INVENTORY_ARTIFACT, ArtifactStore


@dataclass
class DiscoveryOutcome:
    """Components found by a discovery run and where the inventory was written."""

    components: List[ComponentRecord]
    artifact: Path


@dataclass
class AuditOutcome:
    """Everything produced by a full audit run."""

    components: List[ComponentRecord]
    schedule: ScheduleReport
    report: ReportOutput
    artifacts: Dict[str, Path] = field(default_factory=dict)

    @property
    def overall_score(self) -> int:
        return self.report.report.executive_summary.overall_score


class AnalyzerRunError(RuntimeError):
    """Raised when a standalone analyzer run does not produce its artifact."""


class Orchestrator:
    """Threads stage outputs through discovery, analysis and reporting."""

    def __init__(
        self,
        discovery: ComponentDiscovery | None = None,
        analyzers: Optional[Iterable[Analyzer]] = None,
        store_factory: Callable[[Path], ArtifactStore] | None = None,
    ) -> None:
        self._discovery = discovery
        self._analyzer_overrides = list(analyzers) if analyzers is not None else None
        self._store_factory = store_factory or ArtifactStore
        self.logger = get_logger("orchestrator")

    def run_audit(
        self,
        path: str | Path,
        *,
        output_dir: str | Path | None = None,
        root_dir: str | None = None,
        analyzers: Sequence[str] | None = None,
    ) -> AuditOutcome:
        """Run discovery, every selected analyzer and report synthesis."""
        config = self.load_settings(path, output_dir=output_dir, root_dir=root_dir)
        self.logger.info("Starting audit of %s", config.components_dir)
        store = self._store_factory(config.output_dir)

        components = self._discover(config)
        anchor = self._anchor(config)
        inventory_path = store.save_inventory(components, anchor)
        self.logger.info("Discovered %d component(s)", len(components))

        selected = self._select_analyzers(config, analyzers)
        context = AnalysisContext(root=anchor, components=components)
        scheduler = Scheduler(selected, store, max_workers=config.scheduler.max_workers)
        schedule = scheduler.run(context)
        if schedule.failed:
            self.logger.warning("Analyzers failed: %s", ", ".join(schedule.failed))

        synthesizer = ReportSynthesizer(store, templates_dir=config.output.templates_dir)
        results: Mapping[str, Sequence[AnalysisResult]] = dict(context.prerequisites)
        try:
            report = synthesizer.synthesize(components, results)
        except Exception as exc:
            self._log_exception("Report synthesis failed", exc)
            raise

        artifacts: Dict[str, Path] = {"inventory": inventory_path}
        artifacts.update(schedule.artifacts)
        artifacts.update(report.paths)
        return AuditOutcome(
            components=components, schedule=schedule, report=report, artifacts=artifacts
        )

    def run_discovery(
        self,
        path: str | Path,
        *,
        output_dir: str | Path | None = None,
        root_dir: str | None = None,
    ) -> DiscoveryOutcome:
        """Discover components and write the inventory artifact."""
        config = self.load_settings(path, output_dir=output_dir, root_dir=root_dir)
        store = self._store_factory(config.output_dir)
        components = self._discover(config)
        artifact = store.save_inventory(components, self._anchor(config))
        self.logger.info("Wrote %d component(s) to %s", len(components), artifact)
        return DiscoveryOutcome(components=components, artifact=artifact)

    def run_analyzer(
        self,
        domain: str,
        path: str | Path,
        *,
        output_dir: str | Path | None = None,
        root_dir: str | None = None,
    ) -> AnalyzerOutcome:
        """Run one analyzer against an existing inventory.

        Component sources are read relative to the root recorded with the
        inventory unless ``root_dir`` is given. Results of the analyzers it
        depends on are read from their artifacts; a missing inventory or
        prerequisite raises ``MissingArtifactError``.
        """
        config = self.load_settings(path, output_dir=output_dir, root_dir=root_dir)
        store = self._store_factory(config.output_dir)
        analyzer = self._analyzer_by_domain(domain)

        components = store.load_inventory()
        recorded = None if root_dir else store.load_inventory_root()
        context = AnalysisContext(root=recorded or self._anchor(config), components=components)
        self.logger.debug("Reading component sources from %s", context.root)
        for required in analyzer.requires:
            prerequisite = self._analyzer_by_domain(required)
            context.prerequisites[required] = store.load_results(
                prerequisite.artifact_name, prerequisite.result_type
            )
            self.logger.debug(
                "Loaded %d %s result(s) from %s",
                len(context.prerequisites[required]),
                required,
                prerequisite.artifact_name,
            )

        scheduler = Scheduler(
            [analyzer],
            store,
            max_workers=config.scheduler.max_workers,
            available=analyzer.requires,
        )
        outcome = scheduler.run(context).outcomes[analyzer.domain]
        if not outcome.succeeded:
            raise AnalyzerRunError(f"Analyzer {analyzer.domain} failed: {outcome.error}")
        return outcome

    def run_report(
        self,
        path: str | Path,
        *,
        output_dir: str | Path | None = None,
    ) -> ReportOutput:
        """Synthesize the report from artifacts already in the output directory."""
        config = self.load_settings(path, output_dir=output_dir)
        store = self._store_factory(config.output_dir)
        self.logger.debug("Reading %s and analyzer artifacts from %s", INVENTORY_ARTIFACT, store.output_dir)
        synthesizer = ReportSynthesizer(store, templates_dir=config.output.templates_dir)
        return synthesizer.synthesize()

    @staticmethod
    def load_settings(
        path: str | Path,
        *,
        output_dir: str | Path | None = None,
        root_dir: str | None = None,
    ) -> AuditConfig:
        """Load ``.compaudit.yml`` for ``path`` and apply command-line overrides."""
        project = Path(path).expanduser().resolve()
        if not project.exists():
            raise FileNotFoundError(f"Project path not found: {project}")
        config = load_config(project)
        if output_dir is not None:
            config.output.dir = str(Path(output_dir).expanduser().resolve())
        if root_dir:
            config.discovery.root_dir = root_dir
        return config

    def _discover(self, config: AuditConfig) -> List[ComponentRecord]:
        discovery = self._discovery or ComponentDiscovery(
            {segment: ComponentCategory(value) for segment, value in config.discovery.categories.items()}
        )
        return discovery.discover(
            config.discovery.root_dir,
            config.discovery.include,
            config.discovery.exclude,
            project_root=config.root,
        )

    @staticmethod
    def _anchor(config: AuditConfig) -> Path:
        return source_anchor(config.discovery.root_dir, config.root)

    def _select_analyzers(
        self, config: AuditConfig, names: Sequence[str] | None
    ) -> List[Analyzer]:
        if self._analyzer_overrides is not None:
            if not names:
                return list(self._analyzer_overrides)
            wanted = {name.strip().lower() for name in names}
            return [analyzer for analyzer in self._analyzer_overrides if analyzer.domain in wanted]
        enabled = list(names or []) or config.analyzers.enabled or None
        return discover_analyzers(enabled)

    def _analyzer_by_domain(self, domain: str) -> Analyzer:
        if self._analyzer_overrides is not None:
            for analyzer in self._analyzer_overrides:
                if analyzer.domain == domain:
                    return analyzer
        return analyzer_for(domain)

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)


__all__ = ["AnalyzerRunError", "AuditOutcome", "DiscoveryOutcome", "Orchestrator"]
