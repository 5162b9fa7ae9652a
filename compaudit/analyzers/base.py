"""Base classes for analyzer plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Dict, List, Optional, Sequence, Tuple, Type

from ..logging import get_logger
from ..models import AnalysisResult, ComponentRecord
from ..stores.artifacts import MissingArtifactError


@dataclass
class AnalysisContext:
    """Inputs shared by every analyzer during one run."""

    root: Path
    components: List[ComponentRecord] = field(default_factory=list)
    prerequisites: Dict[str, Sequence[AnalysisResult]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._by_path = {component.path: component for component in self.components}

    def component(self, path: str) -> Optional[ComponentRecord]:
        return self._by_path.get(path)

    def prerequisite(self, domain: str) -> Sequence[AnalysisResult]:
        """Return results of an analyzer this one depends on."""
        try:
            return self.prerequisites[domain]
        except KeyError:
            raise MissingArtifactError(domain, "run that analyzer first") from None

    def read_source(self, path: str) -> str:
        return (self.root / path).read_text(encoding="utf-8")


class Analyzer(ABC):
    """Contract for analyzers that inspect one component at a time.

    ``requires`` names the domains whose results must exist before this
    analyzer can run; the scheduler validates these declarations up front.
    """

    domain: ClassVar[str]
    artifact_name: ClassVar[str]
    requires: ClassVar[Tuple[str, ...]] = ()
    result_type: ClassVar[Type[AnalysisResult]] = AnalysisResult

    def __init__(self) -> None:
        self.logger = get_logger(f"analyzers.{self.domain}")

    @abstractmethod
    def evaluate(
        self, component: ComponentRecord, source: str, context: AnalysisContext
    ) -> AnalysisResult:
        """Produce this analyzer's result for a single component."""

    def check_prerequisites(self, context: AnalysisContext) -> None:
        for domain in self.requires:
            context.prerequisite(domain)

    def analyze_one(
        self, path: str, source: str | None = None, *, context: AnalysisContext
    ) -> AnalysisResult:
        self.check_prerequisites(context)
        component = context.component(path) or ComponentRecord(path=path, name=Path(path).stem)
        if source is None:
            source = context.read_source(path)
        return self.evaluate(component, source, context)

    def analyze_all(self, context: AnalysisContext) -> List[AnalysisResult]:
        """Analyze every discovered component, skipping ones that fail."""
        self.check_prerequisites(context)
        results: List[AnalysisResult] = []
        for component in context.components:
            try:
                results.append(self.analyze_one(component.path, context=context))
            except MissingArtifactError:
                raise
            except Exception as exc:
                self.logger.warning(
                    "%s analysis failed for %s: %s",
                    self.domain,
                    component.path,
                    exc,
                    extra={"component": component.path},
                )
        self.logger.debug("Analyzed %d/%d components", len(results), len(context.components))
        return results


__all__ = ["AnalysisContext", "Analyzer"]
