"""
Reference Expression Shapes
The expression forms a class attribute value can take, independent of the parser.
"""

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class DirectAccess:
    """``styles.name``, ``styles?.name`` or ``styles['name']``."""
    namespace: str
    name: str


@dataclass(frozen=True)
class Ternary:
    consequence: 'ReferenceExpressionShape'
    alternative: 'ReferenceExpressionShape'


@dataclass(frozen=True)
class LogicalShortCircuit:
    operator: str
    left: 'ReferenceExpressionShape'
    right: 'ReferenceExpressionShape'


@dataclass(frozen=True)
class TemplateLiteral:
    """A literal segment of a template string."""
    text: str


@dataclass(frozen=True)
class TemplateInterpolation:
    parts: Tuple[Union['ReferenceExpressionShape', TemplateLiteral], ...]


@dataclass(frozen=True)
class Unrecognized:
    """Anything the detector does not resolve statically (calls, identifiers, ...)."""
    node_type: str


ReferenceExpressionShape = Union[DirectAccess, Ternary, LogicalShortCircuit, TemplateInterpolation, Unrecognized]

# Nesting beyond this is not followed when normalizing or evaluating
MAX_EXPRESSION_DEPTH = 64
