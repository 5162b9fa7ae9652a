"""Fixture coverage analyzer: Storybook stories and test files per component."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .base import AnalysisContext, Analyzer
from ..models import AnalysisResult, ComponentRecord, Serializable, Violation
from ..parsing import ParsedSource, SourceParseError, parse_source

STORY_EXTENSIONS = (".tsx", ".ts", ".jsx", ".js")
REQUIRED_VARIATIONS = ("Loading", "Error", "Empty")
EXEMPT_COMPONENTS = ("Button", "Label", "Switch", "Checkbox", "Input", "Select")

_STORY_TYPE_RE = re.compile(r"^:\s*(Story|StoryObj)\b")
_STORY_FALLBACK_RE = re.compile(r"export\s+const\s+(\w+)\s*:\s*Story(?:Obj)?[^=]*=\s*\{")
_PLAY_RE = re.compile(r"play\s*:\s*async")
_TRAILING_JSDOC_RE = re.compile(r"/\*\*[\s\S]*?\*/\s*$")
_PASCAL_CASE_RE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
_IGNORED_STORY_NAMES = {"default", "meta"}


@dataclass(frozen=True)
class StoryVariation(Serializable):
    """One exported story inside a story file."""

    name: str
    has_play_function: bool = False
    has_doc_comment: bool = False


@dataclass(frozen=True)
class CoverageResult(AnalysisResult):
    """Story and test fixture coverage for one component."""

    story_file: Optional[str] = None
    has_story_file: bool = False
    test_file: Optional[str] = None
    has_test_file: bool = False
    variations: List[StoryVariation] = field(default_factory=list)
    naming_status: str = "missing-default"
    has_required_variations: bool = False
    has_interactive_stories: bool = False
    has_valid_exports: bool = False

    _nested = {"violations": Violation, "variations": StoryVariation}


class CoverageAnalyzer(Analyzer):
    """Measures how well each component is covered by stories and tests."""

    domain = "coverage"
    artifact_name = "fixture-coverage.json"
    result_type = CoverageResult

    def evaluate(
        self, component: ComponentRecord, source: str, context: AnalysisContext
    ) -> CoverageResult:
        component_file = context.root / component.path
        stem = Path(component.path).stem
        story_path = find_story_file(component_file, stem)
        test_path = find_test_file(component_file, stem)

        variations: List[StoryVariation] = []
        naming_status = "missing-default"
        has_interactive = False
        has_valid_exports = False
        has_required = False
        if story_path is not None:
            content = story_path.read_text(encoding="utf-8")
            variations, has_valid_exports = _inspect_story_file(content, str(story_path))
            naming_status = naming_status_for(variations)
            has_interactive = any(variation.has_play_function for variation in variations)
            has_required = has_required_variations(variations, stem)

        return CoverageResult(
            path=component.path,
            name=component.name,
            score=coverage_score(
                story_path is not None, variations, has_interactive, has_valid_exports, has_required
            ),
            story_file=_relative(story_path, context.root),
            has_story_file=story_path is not None,
            test_file=_relative(test_path, context.root),
            has_test_file=test_path is not None,
            variations=variations,
            naming_status=naming_status,
            has_required_variations=has_required,
            has_interactive_stories=has_interactive,
            has_valid_exports=has_valid_exports,
        )


def find_story_file(component_file: Path, stem: str) -> Optional[Path]:
    directory = component_file.parent
    for extension in STORY_EXTENSIONS:
        candidate = directory / f"{stem}.stories{extension}"
        if candidate.is_file():
            return candidate
    markers = (f"from './{stem}'", f'from "./{stem}"', f"/{stem}'", f'/{stem}"')
    for extension in STORY_EXTENSIONS:
        for candidate in sorted(directory.rglob(f"*.stories{extension}")):
            try:
                content = candidate.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            if any(marker in content for marker in markers):
                return candidate
    return None


def find_test_file(component_file: Path, stem: str) -> Optional[Path]:
    directory = component_file.parent
    for base in (directory, directory / "__tests__"):
        for kind in ("test", "spec"):
            for extension in STORY_EXTENSIONS:
                candidate = base / f"{stem}.{kind}{extension}"
                if candidate.is_file():
                    return candidate
    return None


def naming_status_for(variations: List[StoryVariation]) -> str:
    if not variations:
        return "missing-default"
    names = {variation.name for variation in variations}
    if "Playground" not in names and "Default" not in names:
        if not all(_PASCAL_CASE_RE.match(variation.name) for variation in variations):
            return "invalid-names"
    return "valid"


def has_required_variations(variations: List[StoryVariation], component_name: str) -> bool:
    if any(exempt in component_name for exempt in EXEMPT_COMPONENTS):
        return True
    for variation in variations:
        if any(required in variation.name for required in REQUIRED_VARIATIONS):
            return True
        if "State" in variation.name or "Variation" in variation.name:
            return True
    return len(variations) >= 2


def coverage_score(
    has_story: bool,
    variations: List[StoryVariation],
    has_interactive: bool,
    has_valid_exports: bool,
    has_required: bool,
) -> int:
    if not has_story:
        return 0
    score = 20
    if has_valid_exports:
        score += 10
    score += min(len(variations) * 10, 30)
    if has_interactive:
        score += 20
    if has_required:
        score += 10
    documented = sum(1 for variation in variations if variation.has_doc_comment)
    score += min(documented * 5, 10)
    return min(score, 100)


def _relative(path: Optional[Path], root: Path) -> Optional[str]:
    if path is None:
        return None
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def _inspect_story_file(content: str, label: str) -> tuple[List[StoryVariation], bool]:
    try:
        parsed = parse_source(content, label)
    except SourceParseError:
        return _variations_from_text(content), _exports_from_text(content)
    variations = _variations_from_tree(parsed)
    if not variations:
        variations = _variations_from_text(content)
    return variations, _has_valid_exports(parsed)


def _variations_from_tree(parsed: ParsedSource) -> List[StoryVariation]:
    lines = parsed.text.split("\n")
    variations: List[StoryVariation] = []
    for statement in parsed.root.named_children:
        if statement.type != "export_statement":
            continue
        declaration = statement.child_by_field_name("declaration")
        if declaration is None or declaration.type != "lexical_declaration":
            continue
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            name = parsed.node_text(declarator.child_by_field_name("name"))
            if not name or name in _IGNORED_STORY_NAMES:
                continue
            annotation = parsed.node_text(declarator.child_by_field_name("type"))
            if not _STORY_TYPE_RE.match(annotation):
                continue
            value = declarator.child_by_field_name("value")
            has_play = False
            if value is not None and value.type == "object":
                for member in value.named_children:
                    if member.type in {"pair", "method_definition"}:
                        key = member.child_by_field_name("key") or member.child_by_field_name("name")
                        if parsed.node_text(key) == "play":
                            has_play = True
            variations.append(
                StoryVariation(
                    name=name,
                    has_play_function=has_play,
                    has_doc_comment=_preceded_by_doc_comment(lines, statement.start_point[0]),
                )
            )
    return variations


def _preceded_by_doc_comment(lines: List[str], start_line: int) -> bool:
    for index in range(start_line - 1, max(-1, start_line - 11), -1):
        line = lines[index].strip()
        if line.startswith(("/**", "*", "*/")):
            return True
        if line and not line.startswith("//"):
            return False
    return False


def _variations_from_text(content: str) -> List[StoryVariation]:
    variations: List[StoryVariation] = []
    for match in _STORY_FALLBACK_RE.finditer(content):
        name = match.group(1)
        if name in _IGNORED_STORY_NAMES:
            continue
        start = match.start()
        section = content[start : start + 2000]
        before = content[max(0, start - 500) : start]
        variations.append(
            StoryVariation(
                name=name,
                has_play_function=bool(_PLAY_RE.search(section)),
                has_doc_comment=bool(_TRAILING_JSDOC_RE.search(before)),
            )
        )
    return variations


def _has_valid_exports(parsed: ParsedSource) -> bool:
    for statement in parsed.root.named_children:
        if statement.type == "export_statement" and any(
            child.type == "default" for child in statement.children
        ):
            return True
    for declarator in parsed.walk({"variable_declarator"}):
        if parsed.node_text(declarator.child_by_field_name("name")) == "meta":
            return True
    return False


def _exports_from_text(content: str) -> bool:
    return bool(re.search(r"export\s+default\b|\bconst\s+meta\b", content))


__all__ = [
    "CoverageAnalyzer",
    "CoverageResult",
    "StoryVariation",
    "coverage_score",
    "find_story_file",
    "find_test_file",
    "has_required_variations",
    "naming_status_for",
]
