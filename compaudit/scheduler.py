"""Dependency-aware execution of analyzers in tiers."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .analyzers.base import AnalysisContext, Analyzer
from .logging import get_logger
from .models import AnalysisResult
from .stores.artifacts import ArtifactStore, MissingArtifactError


class SchedulerError(RuntimeError):
    """Raised when analyzer dependency declarations cannot be satisfied."""


@dataclass
class AnalyzerOutcome:
    """What happened to one analyzer during a scheduled run."""

    domain: str
    artifact: Optional[Path] = None
    result_count: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class ScheduleReport:
    outcomes: Dict[str, AnalyzerOutcome] = field(default_factory=dict)

    @property
    def failed(self) -> List[str]:
        return [domain for domain, outcome in self.outcomes.items() if not outcome.succeeded]

    @property
    def artifacts(self) -> Dict[str, Path]:
        return {
            domain: outcome.artifact
            for domain, outcome in self.outcomes.items()
            if outcome.artifact is not None
        }


def build_plan(
    analyzers: Sequence[Analyzer], *, available: Iterable[str] = ()
) -> List[List[Analyzer]]:
    """Group analyzers into tiers so every analyzer runs after its prerequisites.

    ``available`` names domains whose results are already loaded and therefore
    satisfy a declaration without being scheduled.
    """
    by_domain: Dict[str, Analyzer] = {}
    for analyzer in analyzers:
        if analyzer.domain in by_domain:
            raise SchedulerError(f"Analyzer domain '{analyzer.domain}' is registered twice")
        by_domain[analyzer.domain] = analyzer

    satisfied = set(available)
    pending: Dict[str, set[str]] = {}
    for domain, analyzer in by_domain.items():
        unknown = [name for name in analyzer.requires if name not in by_domain and name not in satisfied]
        if unknown:
            raise SchedulerError(
                f"Analyzer '{domain}' requires unknown analyzer(s): {', '.join(sorted(unknown))}"
            )
        pending[domain] = {name for name in analyzer.requires if name in by_domain}

    tiers: List[List[Analyzer]] = []
    while pending:
        ready = [domain for domain, needs in pending.items() if not needs]
        if not ready:
            raise SchedulerError(
                f"Analyzer dependency cycle detected among: {', '.join(sorted(pending))}"
            )
        # Keep registration order inside a tier.
        tiers.append([by_domain[domain] for domain in ready])
        for domain in ready:
            del pending[domain]
        for needs in pending.values():
            needs.difference_update(ready)
    return tiers


class Scheduler:
    """Runs analyzers tier by tier, persisting each artifact as it completes."""

    def __init__(
        self,
        analyzers: Sequence[Analyzer],
        store: ArtifactStore,
        *,
        max_workers: int = 4,
        available: Iterable[str] = (),
    ) -> None:
        self.plan = build_plan(analyzers, available=available)
        self.store = store
        self.max_workers = max(1, max_workers)
        self.logger = get_logger("scheduler")

    def run(self, context: AnalysisContext) -> ScheduleReport:
        report = ScheduleReport()
        for index, tier in enumerate(self.plan, start=1):
            self.logger.debug(
                "Running tier %d: %s", index, ", ".join(analyzer.domain for analyzer in tier)
            )
            with ThreadPoolExecutor(
                max_workers=min(self.max_workers, len(tier)), thread_name_prefix="compaudit"
            ) as pool:
                futures: List[tuple[Analyzer, Future[List[AnalysisResult]]]] = [
                    (analyzer, pool.submit(analyzer.analyze_all, context)) for analyzer in tier
                ]
                for analyzer, future in futures:
                    report.outcomes[analyzer.domain] = self._collect(analyzer, future, context)
        return report

    def _collect(
        self,
        analyzer: Analyzer,
        future: Future[List[AnalysisResult]],
        context: AnalysisContext,
    ) -> AnalyzerOutcome:
        try:
            results = future.result()
        except MissingArtifactError as exc:
            self.logger.error("Analyzer %s could not run: %s", analyzer.domain, exc)
            return AnalyzerOutcome(analyzer.domain, error=str(exc))
        except Exception as exc:
            self.logger.error("Analyzer %s failed: %s", analyzer.domain, exc)
            return AnalyzerOutcome(analyzer.domain, error=str(exc))

        path = self.store.save_results(analyzer.artifact_name, results)
        context.prerequisites[analyzer.domain] = results
        self.logger.info("%s: %d result(s) -> %s", analyzer.domain, len(results), path.name)
        return AnalyzerOutcome(analyzer.domain, artifact=path, result_count=len(results))


__all__ = ["AnalyzerOutcome", "ScheduleReport", "Scheduler", "SchedulerError", "build_plan"]
