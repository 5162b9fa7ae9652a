"""Analyzer plugins and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable, List, Sequence, Set, Tuple, Type

from .accessibility import AccessibilityAnalyzer
from .base import AnalysisContext, Analyzer
from .checklist import ChecklistAnalyzer
from .coverage import CoverageAnalyzer
from .libraries import LibraryAnalyzer
from .material import MaterialAnalyzer
from .motion import MotionAnalyzer
from .performance import PerformanceAnalyzer
from .principles import PrinciplesAnalyzer
from ..models import AnalysisResult

_ENTRY_POINT_GROUP = "compaudit.analyzers"

_BUILTIN_FACTORIES: Dict[str, Callable[[], Analyzer]] = {
    "motion": MotionAnalyzer,
    "coverage": CoverageAnalyzer,
    "principles": PrinciplesAnalyzer,
    "checklist": ChecklistAnalyzer,
    "performance": PerformanceAnalyzer,
    "accessibility": AccessibilityAnalyzer,
    "material": MaterialAnalyzer,
    "libraries": LibraryAnalyzer,
}

BUILTIN_DOMAINS = tuple(_BUILTIN_FACTORIES)


def discover_analyzers(enabled: Sequence[str] | None = None) -> List[Analyzer]:
    """Instantiate built-in and entry-point analyzers, optionally filtered by name.

    Built-ins come first in their fixed order; plugins registered under the
    ``compaudit.analyzers`` entry-point group follow. Requesting a name that no
    analyzer provides raises ``ValueError``.
    """

    wanted: Set[str] | None = None
    if enabled:
        wanted = {name.strip().lower() for name in enabled if name.strip()}

    analyzers: List[Analyzer] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], Analyzer]) -> None:
        key = name.lower()
        if key in seen or (wanted is not None and key not in wanted):
            return
        instance = factory()
        if not isinstance(instance, Analyzer):
            raise TypeError(f"Analyzer factory for '{name}' did not return an Analyzer instance")
        analyzers.append(instance)
        seen.add(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load analyzer entry point '{entry.name}': {exc}") from exc
        _add(entry.name, lambda obj=loaded: _coerce_analyzer(obj))

    if wanted is not None:
        missing = wanted - seen
        if missing:
            raise ValueError(f"Unknown analyzers requested: {', '.join(sorted(missing))}")

    return analyzers


def analyzer_for(domain: str) -> Analyzer:
    """Return a single analyzer instance for ``domain``."""
    return discover_analyzers([domain])[0]


def builtin_result_types() -> Dict[str, Tuple[str, Type[AnalysisResult]]]:
    """Map each built-in domain to its artifact name and result type."""
    return {
        domain: (factory.artifact_name, factory.result_type)  # type: ignore[attr-defined]
        for domain, factory in _BUILTIN_FACTORIES.items()
    }


def _coerce_analyzer(obj: object) -> Analyzer:
    if isinstance(obj, Analyzer):
        return obj
    if isinstance(obj, type) and issubclass(obj, Analyzer):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Analyzer):
            return instance
    raise TypeError("Analyzer entry point must be an Analyzer subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "AnalysisContext",
    "Analyzer",
    "BUILTIN_DOMAINS",
    "analyzer_for",
    "builtin_result_types",
    "discover_analyzers",
]
