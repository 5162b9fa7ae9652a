"""Core data models shared across compaudit components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

PRIORITIES = ("critical", "high", "medium", "low")
PRIORITY_RANK = {name: index for index, name in enumerate(PRIORITIES)}
PRIORITY_WEIGHTS = {"critical": 25, "high": 15, "medium": 8, "low": 3}
EFFORTS = ("trivial", "small", "medium", "large")

_T = TypeVar("_T", bound="Serializable")


class ComponentCategory(str, Enum):
    """UI taxonomy inferred from a component's directory."""

    LAYOUT = "Layout"
    REQUEST = "Request"
    RESPONSE = "Response"
    INTELLIGENCE = "Intelligence"
    OVERLAYS = "Overlays"
    CORE = "Core"
    UNKNOWN = "Unknown"


class ExportShape(str, Enum):
    """How a component module exposes its main identifier."""

    DEFAULT = "default"
    NAMED = "named"
    BOTH = "both"
    NONE = "none"


class Serializable:
    """Mixin providing JSON-friendly conversion for dataclass models.

    Subclasses list nested dataclass fields in ``_nested`` and enum fields in
    ``_enums`` so :meth:`from_dict` can rebuild the full object graph.
    """

    _nested: Dict[str, Type["Serializable"]] = {}
    _enums: Dict[str, Type[Enum]] = {}

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)  # type: ignore[call-overload]
        for key, enum_type in self._enums.items():
            value = data.get(key)
            if isinstance(value, enum_type):
                data[key] = value.value
        return data

    @classmethod
    def from_dict(cls: Type[_T], payload: Mapping[str, Any]) -> _T:
        if not isinstance(payload, Mapping):
            raise ValueError(f"{cls.__name__} payload must be a mapping")
        known = {item.name for item in fields(cls)}  # type: ignore[arg-type]
        kwargs: Dict[str, Any] = {}
        for key, value in payload.items():
            if key not in known:
                continue
            nested = cls._nested.get(key)
            if nested is not None:
                if isinstance(value, list):
                    value = [nested.from_dict(item) for item in value]
                elif isinstance(value, Mapping):
                    value = nested.from_dict(value)
            enum_type = cls._enums.get(key)
            if enum_type is not None and value is not None:
                value = enum_type(value)
            kwargs[key] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class ComponentRecord(Serializable):
    """Structural facts about one discovered component module."""

    path: str
    name: str
    category: ComponentCategory = ComponentCategory.UNKNOWN
    export_shape: ExportShape = ExportShape.NONE
    props_type: Optional[str] = None
    size: int = 0
    line_count: int = 0
    has_children: bool = False
    dependencies: List[str] = field(default_factory=list)
    parent: Optional[str] = None

    _enums = {"category": ComponentCategory, "export_shape": ExportShape}

    @property
    def directory(self) -> str:
        head, _, _ = self.path.rpartition("/")
        return head


@dataclass(frozen=True)
class Violation(Serializable):
    """A single located defect reported by an analyzer."""

    rule: str
    message: str
    severity: str = "warning"
    line: int = 0
    code: str = ""
    suggestion: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AnalysisResult(Serializable):
    """Base shape shared by every analyzer's per-component output."""

    path: str
    name: str
    score: int = 100
    violations: List[Violation] = field(default_factory=list)

    _nested = {"violations": Violation}


@dataclass(frozen=True)
class CategorizedIssue(Serializable):
    """Normalized cross-domain finding attached to one component."""

    id: str
    component_path: str
    component_name: str
    category: str
    rule: str
    priority: str
    description: str
    recommendation: str
    effort: str = "small"


@dataclass(frozen=True)
class ComponentAnalysisSummary(Serializable):
    """Per-component rollup of health score and findings."""

    path: str
    name: str
    category: str
    health_score: int
    issues_by_priority: Dict[str, int] = field(default_factory=dict)
    findings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ExecutiveSummary(Serializable):
    """Run-level rollup across all components."""

    total_components: int
    overall_score: int
    scores_by_category: Dict[str, int] = field(default_factory=dict)
    issues_by_priority: Dict[str, int] = field(default_factory=dict)
    top_concerns: List[str] = field(default_factory=list)
    key_recommendations: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FollowUpItem(Serializable):
    """One remediation phase of the follow-up plan."""

    id: str
    phase: int
    phase_name: str
    description: str
    components: List[str] = field(default_factory=list)
    effort: str = "medium"
    priority: str = "medium"
    issue_count: int = 0


@dataclass(frozen=True)
class AuditReport(Serializable):
    """Complete structured output of one audit run."""

    metadata: Dict[str, str]
    executive_summary: ExecutiveSummary
    component_analysis: List[ComponentAnalysisSummary] = field(default_factory=list)
    issues: List[CategorizedIssue] = field(default_factory=list)
    follow_up_plan: List[FollowUpItem] = field(default_factory=list)
    artifact_paths: Dict[str, str] = field(default_factory=dict)

    _nested = {
        "executive_summary": ExecutiveSummary,
        "component_analysis": ComponentAnalysisSummary,
        "issues": CategorizedIssue,
        "follow_up_plan": FollowUpItem,
    }


def empty_priority_counts() -> Dict[str, int]:
    return {priority: 0 for priority in PRIORITIES}


__all__ = [
    "AnalysisResult",
    "AuditReport",
    "CategorizedIssue",
    "ComponentAnalysisSummary",
    "ComponentCategory",
    "ComponentRecord",
    "EFFORTS",
    "ExecutiveSummary",
    "ExportShape",
    "FollowUpItem",
    "PRIORITIES",
    "PRIORITY_RANK",
    "PRIORITY_WEIGHTS",
    "Serializable",
    "Violation",
    "empty_priority_counts",
]
