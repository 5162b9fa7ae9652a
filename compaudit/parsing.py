"""Tree-sitter helpers for parsing TSX/JSX component modules."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser

TSX_LANGUAGE = Language(tstypescript.language_tsx())

_JSX_TAG_NODES = {"jsx_opening_element", "jsx_self_closing_element"}

_local = threading.local()


class SourceParseError(ValueError):
    """Raised when a module cannot be parsed into a clean syntax tree."""


def _parser() -> Parser:
    # Parsers keep internal state, so each worker thread gets its own.
    parser = getattr(_local, "parser", None)
    if parser is None:
        parser = Parser(TSX_LANGUAGE)
        _local.parser = parser
    return parser


@dataclass
class JsxElement:
    """Flattened view of a JSX opening or self-closing tag."""

    name: str
    node: Node
    attributes: Dict[str, Optional[Node]]
    line: int
    has_children: bool


class ParsedSource:
    """Parsed module with convenience accessors over the syntax tree."""

    def __init__(self, path: str, text: str, source_bytes: bytes, root: Node) -> None:
        self.path = path
        self.text = text
        self.source_bytes = source_bytes
        self.root = root
        self._jsx: List[JsxElement] | None = None

    def node_text(self, node: Node | None) -> str:
        if node is None:
            return ""
        return self.source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")

    def walk(self, types: Iterable[str] | None = None) -> Iterator[Node]:
        """Yield nodes in source order, optionally restricted to ``types``."""
        wanted = set(types) if types is not None else None
        stack = [self.root]
        while stack:
            node = stack.pop()
            if wanted is None or node.type in wanted:
                yield node
            stack.extend(reversed(node.children))

    def jsx_elements(self) -> List[JsxElement]:
        if self._jsx is None:
            self._jsx = [self._build_element(node) for node in self.walk(_JSX_TAG_NODES)]
        return self._jsx

    def attribute_text(self, value: Node | None) -> str:
        """Return an attribute value without its quotes or expression braces."""
        if value is None:
            return ""
        text = self.node_text(value)
        if value.type == "string" and len(text) >= 2:
            return text[1:-1]
        if value.type == "jsx_expression" and text.startswith("{") and text.endswith("}"):
            return text[1:-1].strip()
        return text

    def _build_element(self, node: Node) -> JsxElement:
        name = self.node_text(node.child_by_field_name("name"))
        if not name:
            for child in node.named_children:
                if child.type in {"identifier", "member_expression", "nested_identifier"}:
                    name = self.node_text(child)
                    break
        attributes: Dict[str, Optional[Node]] = {}
        for child in node.named_children:
            if child.type != "jsx_attribute":
                continue
            named = child.named_children
            if not named:
                continue
            key = self.node_text(named[0])
            attributes[key] = named[1] if len(named) > 1 else None
        has_children = False
        if node.type == "jsx_opening_element" and node.parent is not None:
            has_children = any(
                sibling.type not in {"jsx_opening_element", "jsx_closing_element"}
                for sibling in node.parent.named_children
            )
        return JsxElement(
            name=name,
            node=node,
            attributes=attributes,
            line=line_of(node),
            has_children=has_children,
        )


def parse_source(text: str, path: str = "<memory>") -> ParsedSource:
    """Parse ``text`` with the TSX grammar, raising on syntax errors."""
    source_bytes = text.encode("utf-8")
    tree = _parser().parse(source_bytes)
    root = tree.root_node
    if root.has_error:
        raise SourceParseError(f"Syntax errors while parsing {path}")
    return ParsedSource(path, text, source_bytes, root)


def line_of(node: Node) -> int:
    return node.start_point[0] + 1


def string_value(parsed: ParsedSource, node: Node | None) -> str:
    text = parsed.node_text(node)
    if len(text) >= 2 and text[0] in {"'", '"', "`"} and text[-1] == text[0]:
        return text[1:-1]
    return text


def import_sources(parsed: ParsedSource) -> List[tuple[str, int]]:
    """Return ``(module specifier, line)`` for every import statement."""
    imports: List[tuple[str, int]] = []
    for node in parsed.walk({"import_statement"}):
        source = node.child_by_field_name("source")
        if source is not None:
            imports.append((string_value(parsed, source), line_of(node)))
    return imports


def object_keys(parsed: ParsedSource, node: Node) -> Iterator[tuple[str, Optional[Node]]]:
    """Yield ``(key, value)`` pairs of an object literal node."""
    for child in node.named_children:
        if child.type == "pair":
            key = string_value(parsed, child.child_by_field_name("key"))
            yield key, child.child_by_field_name("value")
        elif child.type == "shorthand_property_identifier":
            yield parsed.node_text(child), None


def unwrap_expression(node: Node | None) -> Node | None:
    """Strip ``{...}`` and parentheses around a JSX attribute expression."""
    while node is not None and node.type in {"jsx_expression", "parenthesized_expression"}:
        named = node.named_children
        node = named[0] if named else None
    return node


__all__ = [
    "JsxElement",
    "ParsedSource",
    "SourceParseError",
    "TSX_LANGUAGE",
    "import_sources",
    "line_of",
    "object_keys",
    "parse_source",
    "string_value",
    "unwrap_expression",
]
