"""Third-party UI library detector.

Finds imports from component libraries, counts the places where their styling
is overridden and recommends whether to keep, refactor or replace the usage.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from .base import AnalysisContext, Analyzer
from ..models import AnalysisResult, ComponentRecord, Serializable, Violation
from ..parsing import ParsedSource, line_of, parse_source, string_value

UI_LIBRARIES: Dict[str, Tuple[str, ...]] = {
    "material-ui": ("@mui/", "@material-ui/", "material-ui"),
    "ant-design": ("antd", "antd/", "@ant-design/"),
    "chakra-ui": ("@chakra-ui/",),
    "radix-ui": ("@radix-ui/",),
    "headless-ui": ("@headlessui/",),
    "react-bootstrap": ("react-bootstrap", "react-bootstrap/"),
    "semantic-ui": ("semantic-ui-react", "semantic-ui-react/"),
    "blueprint": ("@blueprintjs/",),
    "mantine": ("@mantine/",),
}

OVERRIDE_PATTERNS: Dict[str, List[re.Pattern[str]]] = {
    "style": [
        re.compile(r"style\s*=\s*\{[^}]*override", re.IGNORECASE),
        re.compile(r"sx\s*=\s*\{"),
        re.compile(r"css\s*=\s*\{"),
        re.compile(r"\.override[A-Z]"),
    ],
    "class": [
        re.compile(r"classes\s*=\s*\{"),
        re.compile(r"!important"),
    ],
    "wrapper": [
        re.compile(r"styled\([A-Z]\w+\)"),
        re.compile(r"styled\.\w+"),
        re.compile(r"forwardRef.*\([A-Z]\w+"),
    ],
    "prop": [
        re.compile(r"theme\s*=\s*\{"),
        re.compile(r"overrides\s*=\s*\{"),
        re.compile(r"components\s*=\s*\{"),
        re.compile(r"slotProps\s*=\s*\{"),
    ],
}

RECOMMENDATION_SCORES = {"keep": 100, "refactor": 70, "replace": 40}


@dataclass(frozen=True)
class LibraryUsage(Serializable):
    library: str
    import_path: str
    imports: List[str] = field(default_factory=list)
    line: int = 0


@dataclass(frozen=True)
class LibraryOverride(Serializable):
    type: str
    description: str
    line: int = 0


@dataclass(frozen=True)
class LibraryResult(AnalysisResult):
    """Third-party UI library usage of one component."""

    libraries: List[LibraryUsage] = field(default_factory=list)
    uses_external_library: bool = False
    override_count: int = 0
    overrides: List[LibraryOverride] = field(default_factory=list)
    fits_design_system: bool = True
    should_be_custom_built: bool = False
    recommendation: str = "keep"

    _nested = {
        "violations": Violation,
        "libraries": LibraryUsage,
        "overrides": LibraryOverride,
    }


def library_for(module: str) -> str | None:
    for library, prefixes in UI_LIBRARIES.items():
        for prefix in prefixes:
            if prefix.endswith("/") and module.startswith(prefix):
                return library
            if module == prefix:
                return library
    return None


def imported_names(parsed: ParsedSource, statement) -> List[str]:
    names: List[str] = []
    for clause in statement.named_children:
        if clause.type != "import_clause":
            continue
        for child in clause.named_children:
            if child.type == "identifier":
                names.append(parsed.node_text(child))
            elif child.type == "named_imports":
                for specifier in child.named_children:
                    if specifier.type == "import_specifier":
                        names.append(parsed.node_text(specifier.child_by_field_name("name")))
            elif child.type == "namespace_import":
                names.extend(
                    parsed.node_text(part) for part in child.named_children if part.type == "identifier"
                )
    return [name for name in names if name]


def detect_libraries(parsed: ParsedSource) -> List[LibraryUsage]:
    usages: List[LibraryUsage] = []
    for statement in parsed.walk({"import_statement"}):
        module = string_value(parsed, statement.child_by_field_name("source"))
        library = library_for(module)
        if library is None:
            continue
        usages.append(
            LibraryUsage(
                library=library,
                import_path=module,
                imports=imported_names(parsed, statement),
                line=line_of(statement),
            )
        )
    return usages


def detect_overrides(source: str) -> List[LibraryOverride]:
    overrides: List[LibraryOverride] = []
    lines = source.split("\n")
    for kind, patterns in OVERRIDE_PATTERNS.items():
        for pattern in patterns:
            for index, line in enumerate(lines, start=1):
                match = pattern.search(line)
                if match:
                    overrides.append(
                        LibraryOverride(
                            type=kind,
                            description=f"{kind.capitalize()} override: {match.group(0)[:50]}",
                            line=index,
                        )
                    )
    return overrides


def fits_design_system(uses_external: bool, override_count: int) -> bool:
    return not uses_external or override_count <= 2


def should_be_custom_built(
    uses_external: bool, override_count: int, libraries: Sequence[LibraryUsage]
) -> bool:
    if not uses_external:
        return False
    if override_count > 3:
        return True
    total_imports = sum(len(usage.imports) for usage in libraries)
    return total_imports > 5 and override_count > 1


def recommend(uses_external: bool, override_count: int, fits: bool) -> str:
    if not uses_external or (fits and override_count <= 1):
        return "keep"
    if fits or override_count <= 3:
        return "refactor"
    return "replace"


class LibraryAnalyzer(Analyzer):
    """Detects component library imports and how heavily they are overridden."""

    domain = "libraries"
    artifact_name = "library-usage.json"
    result_type = LibraryResult

    def evaluate(
        self, component: ComponentRecord, source: str, context: AnalysisContext
    ) -> LibraryResult:
        parsed = parse_source(source, component.path)
        libraries = detect_libraries(parsed)
        uses_external = bool(libraries)
        # Override heuristics only mean something against an external library.
        overrides = detect_overrides(source) if uses_external else []
        fits = fits_design_system(uses_external, len(overrides))
        recommendation = recommend(uses_external, len(overrides), fits)
        return LibraryResult(
            path=component.path,
            name=component.name,
            score=RECOMMENDATION_SCORES[recommendation],
            libraries=libraries,
            uses_external_library=uses_external,
            override_count=len(overrides),
            overrides=overrides,
            fits_design_system=fits,
            should_be_custom_built=should_be_custom_built(uses_external, len(overrides), libraries),
            recommendation=recommendation,
        )


__all__ = [
    "LibraryAnalyzer",
    "LibraryOverride",
    "LibraryResult",
    "LibraryUsage",
    "OVERRIDE_PATTERNS",
    "UI_LIBRARIES",
    "detect_overrides",
    "library_for",
    "recommend",
]
