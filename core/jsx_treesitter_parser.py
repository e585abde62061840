"""
TSX parsing with tree-sitter.
Turns class attribute expressions into reference shapes.
"""

import logging
from typing import Iterable, Iterator, Set

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from .errors import ParseError
from .reference_shapes import (
    MAX_EXPRESSION_DEPTH,
    DirectAccess,
    LogicalShortCircuit,
    ReferenceExpressionShape,
    TemplateInterpolation,
    TemplateLiteral,
    Ternary,
    Unrecognized,
)

logger = logging.getLogger(__name__)

# The TSX grammar also accepts plain JSX
TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())

LOGICAL_OPERATORS = {'&&', '||', '??'}
# Wrappers that do not change which value an expression yields
TRANSPARENT_NODES = {'parenthesized_expression', 'non_null_expression', 'as_expression', 'satisfies_expression'}


def _text(node: Node) -> str:
    return node.text.decode('utf-8')


def _expression_children(node: Node):
    return [child for child in node.named_children if child.type != 'comment']


def _string_value(node: Node) -> str:
    """Value of a quoted string literal node."""
    return _text(node)[1:-1]


def _first_error(node: Node):
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == 'ERROR' or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return node


def parse_tsx(source_text: str) -> Tree:
    """Parse TSX/JSX source, raising ParseError when the tree has syntax errors."""
    parser = Parser(TSX_LANGUAGE)
    tree = parser.parse(bytes(source_text, 'utf-8'))
    if tree.root_node.has_error:
        bad = _first_error(tree.root_node)
        row, column = bad.start_point
        what = f"missing '{bad.type}'" if bad.is_missing else 'syntax error'
        raise ParseError(f'Invalid TSX source: {what}', line=row + 1, column=column + 1)
    return tree


def iter_nodes(root: Node, node_type: str) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == node_type:
            yield node
        stack.extend(reversed(node.children))


def find_style_imports(root: Node, style_suffixes: Iterable[str]) -> Set[str]:
    """
    Local names bound to imported style modules, e.g. ``s`` for
    ``import s from './Card.module.scss'`` or ``import * as s from ...``.
    """
    suffixes = tuple(style_suffixes)
    names = set()
    for statement in iter_nodes(root, 'import_statement'):
        source = statement.child_by_field_name('source')
        if source is None or not _string_value(source).endswith(suffixes):
            continue
        for clause in statement.named_children:
            if clause.type != 'import_clause':
                continue
            for binding in clause.named_children:
                if binding.type == 'identifier':
                    names.add(_text(binding))
                elif binding.type == 'namespace_import':
                    names.update(_text(c) for c in binding.named_children if c.type == 'identifier')
    return names


def iter_class_attribute_expressions(root: Node, attribute_names: Iterable[str]) -> Iterator[Node]:
    """Yield the embedded expression of every class attribute written as ``attr={...}``."""
    wanted = set(attribute_names)
    for attribute in iter_nodes(root, 'jsx_attribute'):
        children = attribute.named_children
        if not children or children[0].type != 'property_identifier' or _text(children[0]) not in wanted:
            continue
        value = children[-1]
        if value.type != 'jsx_expression':
            continue
        expressions = _expression_children(value)
        if expressions:
            yield expressions[0]


def _template_shape(node: Node, depth: int) -> TemplateInterpolation:
    raw = node.text
    base = node.start_byte
    cursor = base + 1
    parts = []
    for child in node.children:
        if child.type != 'template_substitution':
            continue
        literal = raw[cursor - base:child.start_byte - base].decode('utf-8')
        if literal:
            parts.append(TemplateLiteral(literal))
        inner = _expression_children(child)
        if inner:
            parts.append(normalize_expression(inner[0], depth + 1))
        cursor = child.end_byte
    literal = raw[cursor - base:len(raw) - 1].decode('utf-8')
    if literal:
        parts.append(TemplateLiteral(literal))
    return TemplateInterpolation(tuple(parts))


def normalize_expression(node: Node, depth: int = 0) -> ReferenceExpressionShape:
    """Map a tree-sitter expression node onto the reference shape it represents."""
    if depth > MAX_EXPRESSION_DEPTH:
        logger.debug(f'Expression nested deeper than {MAX_EXPRESSION_DEPTH} levels, not followed')
        return Unrecognized(node.type)

    while node.type in TRANSPARENT_NODES:
        inner = _expression_children(node)
        if not inner:
            return Unrecognized(node.type)
        node = inner[0]

    if node.type == 'member_expression':
        obj = node.child_by_field_name('object')
        prop = node.child_by_field_name('property')
        if obj is not None and prop is not None and obj.type == 'identifier' \
                and prop.type == 'property_identifier':
            return DirectAccess(_text(obj), _text(prop))
        return Unrecognized(node.type)

    if node.type == 'subscript_expression':
        obj = node.child_by_field_name('object')
        index = node.child_by_field_name('index')
        if obj is not None and index is not None and obj.type == 'identifier' and index.type == 'string' \
                and not any(c.type == 'escape_sequence' for c in index.named_children):
            return DirectAccess(_text(obj), _string_value(index))
        return Unrecognized(node.type)

    if node.type == 'ternary_expression':
        return Ternary(
            normalize_expression(node.child_by_field_name('consequence'), depth + 1),
            normalize_expression(node.child_by_field_name('alternative'), depth + 1),
        )

    if node.type == 'binary_expression':
        operator = node.child_by_field_name('operator')
        if operator is not None and operator.type in LOGICAL_OPERATORS:
            return LogicalShortCircuit(
                operator.type,
                normalize_expression(node.child_by_field_name('left'), depth + 1),
                normalize_expression(node.child_by_field_name('right'), depth + 1),
            )
        return Unrecognized(node.type)

    if node.type == 'template_string':
        return _template_shape(node, depth)

    return Unrecognized(node.type)
