"""
Class Reference Extractor Module
Finds the CSS module classes a component references through its class attributes.
"""

import logging
from typing import Iterable, Optional, Set

from .config import DEFAULT_CONFIG, DetectorConfig
from .jsx_treesitter_parser import (
    find_style_imports,
    iter_class_attribute_expressions,
    normalize_expression,
    parse_tsx,
)
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


def referenced_names(shape: ReferenceExpressionShape, namespaces: Set[str], depth: int = 0) -> Set[str]:
    """
    Class names a shape references through one of ``namespaces``.

    Only ``DirectAccess`` rooted at a namespace identifier contributes a
    name; the composite shapes contribute whatever their operands do.
    Unrecognized shapes contribute nothing, so the result never claims a
    class is used when it cannot be shown statically.
    """
    if depth > MAX_EXPRESSION_DEPTH:
        return set()
    if isinstance(shape, DirectAccess):
        return {shape.name} if shape.namespace in namespaces else set()
    if isinstance(shape, Ternary):
        return (referenced_names(shape.consequence, namespaces, depth + 1)
                | referenced_names(shape.alternative, namespaces, depth + 1))
    if isinstance(shape, LogicalShortCircuit):
        return (referenced_names(shape.left, namespaces, depth + 1)
                | referenced_names(shape.right, namespaces, depth + 1))
    if isinstance(shape, TemplateInterpolation):
        names = set()
        for part in shape.parts:
            if not isinstance(part, TemplateLiteral):
                names |= referenced_names(part, namespaces, depth + 1)
        return names
    if isinstance(shape, Unrecognized):
        logger.debug(f'Class expression of type {shape.node_type} not resolved')
        return set()
    raise TypeError(f'Not a reference expression shape: {shape!r}')


class ClassReferenceExtractor:
    def __init__(self, config: DetectorConfig = DEFAULT_CONFIG):
        self.config = config

    def namespaces_for(self, root, extra: Optional[Iterable[str]] = None) -> Set[str]:
        namespaces = set(self.config.namespace_identifiers)
        if extra:
            namespaces.update(extra)
        if self.config.resolve_style_imports:
            namespaces |= find_style_imports(root, self.config.style_suffixes)
        return namespaces

    def extract_classes(self, source_text: str, namespaces: Optional[Iterable[str]] = None) -> Set[str]:
        tree = parse_tsx(source_text)
        root = tree.root_node
        allowed = self.namespaces_for(root, namespaces)
        classes = set()
        for expression in iter_class_attribute_expressions(root, self.config.class_attributes):
            classes |= referenced_names(normalize_expression(expression), allowed)
        return classes


def extract_referenced_classes(source_text: str, namespaces: Optional[Iterable[str]] = None,
                               config: DetectorConfig = DEFAULT_CONFIG) -> Set[str]:
    """Return the class names referenced by ``className``/``class`` attributes of a TSX source."""
    return ClassReferenceExtractor(config).extract_classes(source_text, namespaces)
