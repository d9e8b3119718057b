"""Semantic unit extraction — flattens a Rust syntax tree into units.

The walk is depth-first and carries a single piece of state, whether the
current node sits inside a test-only module. It is threaded through the
recursive calls as an argument so one extraction never leaks into another.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from diffweight.analysis import syntax
from diffweight.analysis.units import (
    CFG_TEST_MARKER,
    TEST_MARKER,
    SemanticUnit,
    UnitKind,
    Visibility,
)

logger = logging.getLogger(__name__)

TESTS_MODULE_NAME = "tests"

# Items that become exactly one unit and hold no nested declarations.
_SIMPLE_ITEMS: Dict[str, UnitKind] = {
    "struct_item": UnitKind.STRUCT,
    "enum_item": UnitKind.ENUM,
    "const_item": UnitKind.CONST,
    "static_item": UnitKind.STATIC,
    "type_item": UnitKind.TYPE_ALIAS,
}

_FUNCTION_ITEMS = frozenset({"function_item", "function_signature_item"})

# Members of impl / trait bodies that get their own unit.
_MEMBER_ITEMS: Dict[str, UnitKind] = {
    "function_item": UnitKind.FUNCTION,
    "function_signature_item": UnitKind.FUNCTION,
    "const_item": UnitKind.CONST,
    "type_item": UnitKind.TYPE_ALIAS,
    "associated_type": UnitKind.TYPE_ALIAS,
}

_DECLARATIONS = frozenset(
    {*_SIMPLE_ITEMS, *_FUNCTION_ITEMS, "trait_item", "impl_item", "mod_item", "macro_definition"}
)


class _UnitCollector:
    """Accumulates units for one tree."""

    def __init__(self) -> None:
        self.units: List[SemanticUnit] = []

    # ---- unit construction ----

    def _add(
        self,
        node: Any,
        kind: UnitKind,
        name: str,
        visibility: Visibility,
        in_test_scope: bool,
        impl_name: Optional[str] = None,
    ) -> None:
        attrs = syntax.outer_attributes(node)
        names = list(dict.fromkeys(a.display for a in attrs))

        if in_test_scope and CFG_TEST_MARKER not in names:
            names.append(CFG_TEST_MARKER)
        if any(a.is_test_attribute for a in attrs) and TEST_MARKER not in names:
            names.append(TEST_MARKER)

        self.units.append(
            SemanticUnit(
                kind=kind,
                name=name,
                visibility=visibility,
                span=syntax.item_span(node, attrs),
                attributes=tuple(names),
                impl_name=impl_name,
            )
        )

    # ---- traversal ----

    def visit_items(self, parent: Any, in_test_scope: bool) -> None:
        for child in syntax.iter_named_children(parent):
            self.visit(child, in_test_scope)

    def visit(self, node: Any, in_test_scope: bool) -> None:
        node_type = node.type

        if node_type == "mod_item":
            self._visit_module(node, in_test_scope)
        elif node_type == "impl_item":
            self._visit_impl(node, in_test_scope)
        elif node_type == "trait_item":
            self._visit_trait(node, in_test_scope)
        elif node_type in _FUNCTION_ITEMS:
            self._add(
                node,
                UnitKind.FUNCTION,
                syntax.item_name(node) or "",
                syntax.visibility(node),
                in_test_scope,
            )
            self._visit_nested(syntax.body(node), in_test_scope)
        elif node_type in _SIMPLE_ITEMS:
            self._add(
                node,
                _SIMPLE_ITEMS[node_type],
                syntax.item_name(node) or "",
                syntax.visibility(node),
                in_test_scope,
            )
        elif node_type == "macro_definition":
            name = syntax.item_name(node)
            if name:
                self._add(node, UnitKind.MACRO, name, Visibility.PRIVATE, in_test_scope)

    def _visit_nested(self, block: Optional[Any], in_test_scope: bool) -> None:
        """Find declarations nested anywhere inside a function body."""
        for child in syntax.iter_named_children(block):
            if child.type in _DECLARATIONS:
                self.visit(child, in_test_scope)
            else:
                self._visit_nested(child, in_test_scope)

    def _visit_module(self, node: Any, in_test_scope: bool) -> None:
        name = syntax.item_name(node) or ""
        attrs = syntax.outer_attributes(node)
        is_test_module = name == TESTS_MODULE_NAME or any(a.is_test_cfg for a in attrs)

        self._add(node, UnitKind.MODULE, name, syntax.visibility(node), in_test_scope)
        self.visit_items(syntax.body(node), in_test_scope or is_test_module)

    def _visit_impl(self, node: Any, in_test_scope: bool) -> None:
        impl_name = syntax.impl_display_name(node)
        self._add(node, UnitKind.IMPL, impl_name, Visibility.PRIVATE, in_test_scope)

        for member in syntax.iter_named_children(syntax.body(node)):
            kind = _MEMBER_ITEMS.get(member.type)
            if kind is None:
                continue
            self._add(
                member,
                kind,
                syntax.item_name(member) or "",
                syntax.visibility(member),
                in_test_scope,
                impl_name=impl_name,
            )
            if member.type == "function_item":
                self._visit_nested(syntax.body(member), in_test_scope)

    def _visit_trait(self, node: Any, in_test_scope: bool) -> None:
        trait_name = syntax.item_name(node) or ""
        self._add(node, UnitKind.TRAIT, trait_name, syntax.visibility(node), in_test_scope)

        # Trait members have no visibility syntax of their own
        for member in syntax.iter_named_children(syntax.body(node)):
            kind = _MEMBER_ITEMS.get(member.type)
            if kind is None:
                continue
            self._add(
                member,
                kind,
                syntax.item_name(member) or "",
                Visibility.PUBLIC,
                in_test_scope,
                impl_name=trait_name,
            )
            if member.type == "function_item":
                self._visit_nested(syntax.body(member), in_test_scope)


def extract(tree: Any) -> List[SemanticUnit]:
    """Return the semantic units of a parsed tree in visitation order."""
    collector = _UnitCollector()
    collector.visit_items(tree.root_node, in_test_scope=False)
    return collector.units


def extract_from_source(content: str, path: str) -> List[SemanticUnit]:
    """Parse *content* and extract its units.

    Raises :class:`~diffweight.errors.SourceParseError` on invalid Rust.
    """
    units = extract(syntax.parse_source(content, path))
    logger.debug("extracted %d unit(s) from %s", len(units), path)
    return units
