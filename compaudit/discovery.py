"""Component discovery: walk the component tree and catalog every module."""

from __future__ import annotations

import os
from dataclasses import replace
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

from .config import DEFAULT_EXCLUDE, DEFAULT_INCLUDE
from .logging import get_logger
from .models import ComponentCategory, ComponentRecord, ExportShape
from .parsing import ParsedSource, SourceParseError, parse_source, string_value

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "dist",
    "build",
    "coverage",
    ".compaudit",
    "storybook-static",
}

DEFAULT_CATEGORY_SEGMENTS: Dict[str, ComponentCategory] = {
    "Layout": ComponentCategory.LAYOUT,
    "Request": ComponentCategory.REQUEST,
    "Response": ComponentCategory.RESPONSE,
    "Intelligence": ComponentCategory.INTELLIGENCE,
    "History": ComponentCategory.INTELLIGENCE,
    "ui": ComponentCategory.OVERLAYS,
    "Overlays": ComponentCategory.OVERLAYS,
    "Core": ComponentCategory.CORE,
    "DataGrid": ComponentCategory.CORE,
    "ActionBar": ComponentCategory.CORE,
}

_DECLARATION_NODES = {
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "abstract_class_declaration",
    "lexical_declaration",
    "variable_declaration",
}

_PROPS_SUFFIXES = ("Props", "Prop")
_LOCAL_IMPORT_PREFIXES = (".", "/", "@/")


def matches_pattern(path: str, pattern: str) -> bool:
    """Return True when ``path`` (posix, relative) matches a glob-style pattern."""
    normalized = path.replace("\\", "/")
    if pattern.endswith("/**"):
        prefix = pattern[:-3]
        if prefix.startswith("**/"):
            return f"/{prefix[3:]}/" in f"/{normalized}"
        return normalized == prefix or normalized.startswith(f"{prefix}/")
    if pattern.endswith("/"):
        return normalized.startswith(pattern)
    if pattern.startswith("**/"):
        suffix = pattern[3:]
        return fnmatchcase(normalized, suffix) or normalized.endswith(f"/{suffix}")
    if "/" in pattern or any(ch in pattern for ch in "*?["):
        return fnmatchcase(normalized, pattern)
    if normalized == pattern:
        return True
    return normalized.endswith(f"/{pattern}")


def categorize(path: str, segments: Mapping[str, ComponentCategory] | None = None) -> ComponentCategory:
    """Infer a category from the deepest directory segment found in ``segments``."""
    table = DEFAULT_CATEGORY_SEGMENTS if segments is None else segments
    directories = path.replace("\\", "/").split("/")[:-1]
    for segment in reversed(directories):
        category = table.get(segment)
        if category is not None:
            return category
    return ComponentCategory.UNKNOWN


def resolve_root(root_dir: str | Path, project_root: str | Path | None = None) -> Path:
    """Resolve ``root_dir`` against ``project_root`` (or the working directory)."""
    base = Path(project_root).expanduser().resolve() if project_root else Path.cwd()
    root_path = Path(root_dir).expanduser()
    if not root_path.is_absolute():
        root_path = base / root_path
    return root_path.resolve()


def source_anchor(root_dir: str | Path, project_root: str | Path | None = None) -> Path:
    """Directory that component paths are recorded relative to.

    Components inside the project are keyed relative to the project root; a
    component root outside the project becomes its own anchor.
    """
    base = Path(project_root).expanduser().resolve() if project_root else Path.cwd()
    root_path = resolve_root(root_dir, base)
    return base if root_path.is_relative_to(base) else root_path


def _is_ancestor_dir(ancestor: str, directory: str) -> bool:
    if not ancestor:
        return True
    return directory == ancestor or directory.startswith(f"{ancestor}/")


def _is_component_name(name: str) -> bool:
    return bool(name) and name[0].isupper()


class ComponentDiscovery:
    """Walks a component directory and produces ``ComponentRecord`` entries."""

    def __init__(self, categories: Mapping[str, ComponentCategory] | None = None) -> None:
        self.categories = dict(DEFAULT_CATEGORY_SEGMENTS)
        if categories:
            self.categories.update(categories)
        self.logger = get_logger("discovery")

    def discover(
        self,
        root_dir: str | Path,
        include_patterns: Sequence[str] | None = None,
        exclude_patterns: Sequence[str] | None = None,
        *,
        project_root: str | Path | None = None,
    ) -> List[ComponentRecord]:
        """Return components under ``root_dir`` ordered by path."""
        root_path = resolve_root(root_dir, project_root)
        if not root_path.exists():
            raise FileNotFoundError(f"Component root not found: {root_path}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Component root is not a directory: {root_path}")

        includes = list(DEFAULT_INCLUDE if include_patterns is None else include_patterns)
        excludes = list(DEFAULT_EXCLUDE if exclude_patterns is None else exclude_patterns)
        anchor = source_anchor(root_path, project_root)

        records: List[ComponentRecord] = []
        for path in self._iter_candidates(root_path, includes, excludes):
            rel_path = path.relative_to(anchor).as_posix()
            record = self._build_record(path, rel_path)
            if record is not None:
                records.append(record)

        self.logger.debug("Discovered %d components under %s", len(records), root_path)
        return link_parents(records)

    def _iter_candidates(
        self, root: Path, includes: Sequence[str], excludes: Sequence[str]
    ) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
            current_dir = Path(dirpath)
            for filename in sorted(filenames):
                path = current_dir / filename
                rel_path = path.relative_to(root).as_posix()
                if not any(matches_pattern(rel_path, pattern) for pattern in includes):
                    continue
                if any(matches_pattern(rel_path, pattern) for pattern in excludes):
                    continue
                yield path

    def _build_record(self, path: Path, rel_path: str) -> Optional[ComponentRecord]:
        try:
            text = path.read_text(encoding="utf-8")
            size = path.stat().st_size
            parsed = parse_source(text, rel_path)
        except (OSError, UnicodeDecodeError, SourceParseError) as exc:
            self.logger.warning(
                "Failed to parse %s: %s", rel_path, exc, extra={"component": rel_path}
            )
            return None

        default_name, first_named, shape = _collect_exports(parsed)
        name = default_name or first_named or path.stem
        return ComponentRecord(
            path=rel_path,
            name=name,
            category=categorize(rel_path, self.categories),
            export_shape=shape,
            props_type=_find_props_type(parsed),
            size=size,
            line_count=text.count("\n") + 1,
            has_children=_has_children(parsed),
            dependencies=_collect_dependencies(parsed),
        )


def discover(
    root_dir: str | Path,
    include_patterns: Sequence[str] | None = None,
    exclude_patterns: Sequence[str] | None = None,
    *,
    project_root: str | Path | None = None,
    categories: Mapping[str, ComponentCategory] | None = None,
) -> List[ComponentRecord]:
    """Convenience wrapper around :class:`ComponentDiscovery`."""
    return ComponentDiscovery(categories).discover(
        root_dir, include_patterns, exclude_patterns, project_root=project_root
    )


def link_parents(records: Sequence[ComponentRecord]) -> List[ComponentRecord]:
    """Attach ``parent`` paths for dependencies living in an ancestor directory."""
    by_name: Dict[str, ComponentRecord] = {}
    for record in records:
        by_name.setdefault(record.name, record)

    linked: List[ComponentRecord] = []
    for record in records:
        parent: ComponentRecord | None = None
        for dependency in record.dependencies:
            candidate = by_name.get(dependency)
            if candidate is None or candidate.path == record.path:
                continue
            if not _is_ancestor_dir(candidate.directory, record.directory):
                continue
            if parent is None or len(candidate.directory) > len(parent.directory):
                parent = candidate
        linked.append(replace(record, parent=parent.path if parent else None))
    return linked


def build_dependency_graph(records: Sequence[ComponentRecord]) -> Dict[str, List[str]]:
    """Return an adjacency list ``path -> [dependency paths]``."""
    by_name: Dict[str, str] = {}
    for record in records:
        by_name.setdefault(record.name, record.path)

    graph: Dict[str, List[str]] = {}
    for record in records:
        edges: List[str] = []
        for dependency in record.dependencies:
            target = by_name.get(dependency)
            if target is None or target == record.path or target in edges:
                continue
            edges.append(target)
        graph[record.path] = edges
    return graph


def _collect_exports(parsed: ParsedSource) -> tuple[Optional[str], Optional[str], ExportShape]:
    default_name: Optional[str] = None
    first_named: Optional[str] = None
    has_default = False
    has_named = False

    for node in parsed.root.named_children:
        if node.type != "export_statement":
            continue
        is_default = any(child.type == "default" for child in node.children)
        declaration = node.child_by_field_name("declaration")
        value = node.child_by_field_name("value")

        if is_default:
            has_default = True
            if default_name is None:
                default_name = _declared_name(parsed, declaration) or _expression_name(parsed, value)
            continue

        if declaration is not None and declaration.type in _DECLARATION_NODES:
            has_named = True
            if first_named is None:
                first_named = _declared_name(parsed, declaration)
            continue

        clause = next((child for child in node.named_children if child.type == "export_clause"), None)
        if clause is not None:
            for specifier in clause.named_children:
                if specifier.type != "export_specifier":
                    continue
                local = parsed.node_text(specifier.child_by_field_name("name"))
                alias = parsed.node_text(specifier.child_by_field_name("alias"))
                if alias == "default":
                    has_default = True
                    default_name = default_name or local
                else:
                    has_named = True
                    first_named = first_named or alias or local
        elif any(child.type == "*" for child in node.children):
            has_named = True

    if has_default and has_named:
        shape = ExportShape.BOTH
    elif has_default:
        shape = ExportShape.DEFAULT
    elif has_named:
        shape = ExportShape.NAMED
    else:
        shape = ExportShape.NONE
    return default_name, first_named, shape


def _declared_name(parsed: ParsedSource, declaration) -> Optional[str]:  # type: ignore[no-untyped-def]
    if declaration is None:
        return None
    name_node = declaration.child_by_field_name("name")
    if name_node is not None:
        return parsed.node_text(name_node)
    for child in declaration.named_children:
        if child.type == "variable_declarator":
            target = child.child_by_field_name("name")
            if target is not None and target.type == "identifier":
                return parsed.node_text(target)
    return None


def _expression_name(parsed: ParsedSource, value) -> Optional[str]:  # type: ignore[no-untyped-def]
    if value is None:
        return None
    if value.type == "identifier":
        return parsed.node_text(value)
    if value.type in {"function_expression", "function", "class"}:
        return _declared_name(parsed, value)
    if value.type == "call_expression":
        # memo(Component) / forwardRef(Component)
        arguments = value.child_by_field_name("arguments")
        if arguments is not None:
            for argument in arguments.named_children:
                name = _expression_name(parsed, argument)
                if name:
                    return name
    return None


def _find_props_type(parsed: ParsedSource) -> Optional[str]:
    for node in parsed.walk({"interface_declaration", "type_alias_declaration"}):
        name = parsed.node_text(node.child_by_field_name("name"))
        if name.endswith(_PROPS_SUFFIXES):
            return name
    return None


def _collect_dependencies(parsed: ParsedSource) -> List[str]:
    dependencies: List[str] = []
    for node in parsed.walk({"import_statement"}):
        source = string_value(parsed, node.child_by_field_name("source"))
        if not source.startswith(_LOCAL_IMPORT_PREFIXES):
            continue
        clause = next((child for child in node.named_children if child.type == "import_clause"), None)
        if clause is None:
            continue
        for child in clause.named_children:
            names: List[str] = []
            if child.type == "identifier":
                names.append(parsed.node_text(child))
            elif child.type == "named_imports":
                for specifier in child.named_children:
                    if specifier.type != "import_specifier":
                        continue
                    alias = specifier.child_by_field_name("alias")
                    target = alias if alias is not None else specifier.child_by_field_name("name")
                    names.append(parsed.node_text(target))
            for name in names:
                if _is_component_name(name) and name not in dependencies:
                    dependencies.append(name)
    return dependencies


def _has_children(parsed: ParsedSource) -> bool:
    if any(element.has_children for element in parsed.jsx_elements()):
        return True
    for node in parsed.walk({"member_expression"}):
        if parsed.node_text(node.child_by_field_name("property")) == "children":
            return True
    return False


__all__ = [
    "ComponentDiscovery",
    "DEFAULT_CATEGORY_SEGMENTS",
    "build_dependency_graph",
    "categorize",
    "discover",
    "link_parents",
    "matches_pattern",
    "resolve_root",
    "source_anchor",
]
