"""Tree-sitter adapter for Rust source.

Turns source text into a tree-sitter tree and answers the handful of
questions the extractor asks about a declaration node: where it starts and
ends, what it is called, how visible it is and which outer attributes are
attached to it.

Outer attributes (``#[...]``) and doc comments are *siblings* of the item
in a tree-sitter tree, not children, so they are collected by walking
backwards over the preceding siblings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterator, List, Optional

import tree_sitter
import tree_sitter_rust

from diffweight.analysis.units import BENCH_ATTRIBUTE, TEST_MARKER, LineSpan, Visibility
from diffweight.errors import SourceParseError

_WS_RE = re.compile(r"\s+")
_COMMENT_TYPES = frozenset({"line_comment", "block_comment"})
_CFG_PATHS = frozenset({"cfg", "cfg_attr"})


@lru_cache(maxsize=1)
def _rust_language() -> Any:
    return tree_sitter.Language(tree_sitter_rust.language())


def parse_source(content: str, path: str) -> Any:
    """Parse Rust *content* and return the tree-sitter tree.

    Raises :class:`SourceParseError` when the grammar reports any syntax
    error; a partially-recovered tree would yield misleading spans.
    """
    parser = tree_sitter.Parser()
    parser.language = _rust_language()
    tree = parser.parse(content.encode("utf-8"))

    root = tree.root_node
    if root.has_error:
        bad = _first_error(root)
        line = bad.start_point[0] + 1 if bad is not None else 1
        raise SourceParseError(path, f"syntax error near line {line}")
    return tree


def _first_error(node: Any) -> Optional[Any]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def node_text(node: Optional[Any]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def start_line(node: Any) -> int:
    return node.start_point[0] + 1


def end_line(node: Any) -> int:
    row, column = node.end_point[0], node.end_point[1]
    # A node that swallowed its trailing newline ends at column 0 of the next row
    if column == 0 and row > node.start_point[0]:
        return row
    return row + 1


# ---- attributes ----


@dataclass(frozen=True)
class Attribute:
    """One outer attribute (or doc comment) attached to an item."""

    path: str
    arguments: Optional[str]
    line: int

    @property
    def display(self) -> str:
        """Name recorded on the unit; ``cfg`` keeps its condition."""
        if self.path in _CFG_PATHS and self.arguments:
            return f"{self.path}{self.arguments}"
        return self.path

    @property
    def last_segment(self) -> str:
        return self.path.rsplit("::", 1)[-1]

    @property
    def is_test_cfg(self) -> bool:
        return self.path == "cfg" and self.arguments is not None and "test" in self.arguments

    @property
    def is_test_attribute(self) -> bool:
        """``#[test]``, ``#[bench]``, ``#[tokio::test]`` or ``#[cfg(test)]``."""
        if self.path in (TEST_MARKER, BENCH_ATTRIBUTE):
            return True
        if "::" in self.path and self.last_segment == TEST_MARKER:
            return True
        return self.is_test_cfg


def _is_doc_comment(node: Any) -> bool:
    text = node_text(node)
    if node.type == "line_comment":
        return text.startswith("///") and not text.startswith("////")
    return text.startswith("/**") and not text.startswith("/***") and text != "/**/"


def _parse_attribute_item(node: Any) -> Optional[Attribute]:
    attr = next((c for c in node.named_children if c.type == "attribute"), None)
    if attr is None or not attr.named_children:
        return None
    path = _WS_RE.sub("", node_text(attr.named_children[0]))
    args_node = attr.child_by_field_name("arguments")
    arguments = _WS_RE.sub(" ", node_text(args_node)) if args_node is not None else None
    return Attribute(path=path, arguments=arguments, line=start_line(node))


def outer_attributes(node: Any) -> List[Attribute]:
    """Attributes and doc comments directly preceding *node*, in source order."""
    found: List[Attribute] = []
    sibling = node.prev_sibling
    while sibling is not None:
        if sibling.type == "attribute_item":
            parsed = _parse_attribute_item(sibling)
            if parsed is not None:
                found.append(parsed)
        elif sibling.type in _COMMENT_TYPES:
            if _is_doc_comment(sibling):
                found.append(Attribute(path="doc", arguments=None, line=start_line(sibling)))
        else:
            break
        sibling = sibling.prev_sibling
    found.reverse()
    return found


def item_span(node: Any, attributes: List[Attribute]) -> LineSpan:
    """Span of an item including its attached attributes."""
    start = start_line(node)
    if attributes:
        start = min(start, attributes[0].line)
    return LineSpan(start, end_line(node))


# ---- names and visibility ----


def item_name(node: Any) -> Optional[str]:
    name = node.child_by_field_name("name")
    return node_text(name) if name is not None else None


def visibility(node: Any) -> Visibility:
    modifier = next((c for c in node.named_children if c.type == "visibility_modifier"), None)
    if modifier is None:
        return Visibility.PRIVATE
    text = _WS_RE.sub("", node_text(modifier))
    if text == "pub":
        return Visibility.PUBLIC
    if text in ("pub(crate)", "crate"):
        return Visibility.CRATE
    return Visibility.RESTRICTED


def type_name(node: Optional[Any]) -> str:
    """Last path segment of a type, without generic arguments."""
    if node is None:
        return "Unknown"
    if node.type == "type_identifier":
        return node_text(node)
    if node.type == "scoped_type_identifier":
        return type_name(node.child_by_field_name("name"))
    if node.type == "generic_type":
        return type_name(node.child_by_field_name("type"))
    return "Unknown"


def impl_display_name(node: Any) -> str:
    """``Type`` for inherent impls, ``Trait for Type`` for trait impls."""
    self_type = type_name(node.child_by_field_name("type"))
    trait = node.child_by_field_name("trait")
    if trait is None:
        return self_type
    return f"{type_name(trait)} for {self_type}"


def body(node: Any) -> Optional[Any]:
    return node.child_by_field_name("body")


def iter_named_children(node: Optional[Any]) -> Iterator[Any]:
    if node is None:
        return iter(())
    return iter(node.named_children)
