"""
SCSS Class Extractor Module
Collects the class selectors declared by a CSS/SCSS module.

Selectors are tokenized on whitespace and also on selector-list commas and
the ``>``, ``+``, ``~`` combinators, and each class token is cut at its first
pseudo (``:``) or attribute (``[``) marker. This deliberately widens plain
whitespace splitting so that ``.a, .b`` and ``.btn:hover`` register ``a``,
``b`` and ``btn``. Compound selectors such as ``.a.b`` still stay one token.
"""

import re
import logging
from typing import Iterable, List, Set

import tinycss2

from .errors import ParseError

logger = logging.getLogger(__name__)

# Splits a selector prelude into compound selectors
SELECTOR_SPLIT_RE = re.compile(r'[\s,>+~]+')
# Pseudo-classes, pseudo-elements and attribute selectors trailing a class name
CLASS_SUFFIX_RE = re.compile(r'[:\[]')
UNQUOTED_URL_RE = re.compile(r'url\(\s*(?![\s"\'])', re.IGNORECASE)

# At-rules whose block holds keyframe steps rather than selectors
NON_SELECTOR_AT_RULES = {'keyframes', '-webkit-keyframes', '-moz-keyframes', 'font-face', 'page'}

CLOSERS = {'}': '{', ')': '(', ']': '['}

# Deeper bracket nesting is rejected before tinycss2 recurses into it
MAX_NESTING_DEPTH = 128


def _position(text: str, offset: int):
    line = text.count('\n', 0, offset) + 1
    column = offset - (text.rfind('\n', 0, offset) + 1) + 1
    return line, column


class SCSSClassExtractor:
    def clean_source(self, source_text: str) -> str:
        """
        Blank out ``/* */`` and ``//`` comments and check that strings and
        brackets are balanced. Offsets and line breaks are preserved so
        tinycss2 positions still line up with the original text.
        """
        out = list(source_text)
        stack = []
        i = 0
        n = len(source_text)
        while i < n:
            c = source_text[i]
            if c == '/' and source_text.startswith('/*', i):
                end = source_text.find('*/', i + 2)
                if end == -1:
                    line, column = _position(source_text, i)
                    raise ParseError('Unterminated comment', line=line, column=column)
                for j in range(i, end + 2):
                    if out[j] != '\n':
                        out[j] = ' '
                i = end + 2
                continue
            if c == '/' and source_text.startswith('//', i):
                end = source_text.find('\n', i)
                if end == -1:
                    end = n
                for j in range(i, end):
                    out[j] = ' '
                i = end
                continue
            if c in '"\'':
                j = i + 1
                while j < n and source_text[j] != c:
                    if source_text[j] == '\\':
                        j += 1
                    elif source_text[j] == '\n':
                        break
                    j += 1
                if j >= n or source_text[j] != c:
                    line, column = _position(source_text, i)
                    raise ParseError('Unterminated string', line=line, column=column)
                i = j + 1
                continue
            url_match = UNQUOTED_URL_RE.match(source_text, i)
            if url_match:
                end = source_text.find(')', url_match.end())
                if end == -1:
                    line, column = _position(source_text, i)
                    raise ParseError('Unterminated url()', line=line, column=column)
                i = end + 1
                continue
            if c in '{([':
                stack.append((c, i))
                if len(stack) > MAX_NESTING_DEPTH:
                    line, column = _position(source_text, i)
                    raise ParseError(f'Blocks nested deeper than {MAX_NESTING_DEPTH} levels',
                                     line=line, column=column)
            elif c in CLOSERS:
                if not stack or stack[-1][0] != CLOSERS[c]:
                    line, column = _position(source_text, i)
                    raise ParseError(f"Unexpected '{c}'", line=line, column=column)
                stack.pop()
            i += 1
        if stack:
            opener, offset = stack[-1]
            line, column = _position(source_text, offset)
            raise ParseError(f"Unclosed '{opener}'", line=line, column=column)
        return ''.join(out)

    def parse_scss(self, source_text: str) -> List:
        """Parse SCSS into tinycss2 nodes, accepting nested rules."""
        cleaned = self.clean_source(source_text)
        return tinycss2.parse_blocks_contents(cleaned, skip_comments=True, skip_whitespace=True)

    def iter_selectors(self, nodes: Iterable) -> Iterable[str]:
        """Yield the serialized prelude of every style rule, nested ones included."""
        for node in nodes:
            if node.type == 'qualified-rule':
                yield tinycss2.serialize(node.prelude).strip()
                if node.content:
                    yield from self.iter_selectors(
                        tinycss2.parse_blocks_contents(node.content, skip_comments=True, skip_whitespace=True))
            elif node.type == 'at-rule':
                if node.content is None or node.lower_at_keyword in NON_SELECTOR_AT_RULES:
                    continue
                yield from self.iter_selectors(
                    tinycss2.parse_blocks_contents(node.content, skip_comments=True, skip_whitespace=True))
            elif node.type == 'error':
                # SCSS statements such as `$var: 1;` at the top level
                logger.debug(f"Skipping non-CSS statement at {node.source_line}:{node.source_column}: {node.message}")

    def classes_from_selector(self, selector: str) -> Set[str]:
        classes = set()
        for token in SELECTOR_SPLIT_RE.split(selector):
            if not token.startswith('.'):
                continue
            name = CLASS_SUFFIX_RE.split(token[1:], maxsplit=1)[0]
            if name:
                classes.add(name)
        return classes

    def extract_classes(self, source_text: str) -> Set[str]:
        classes = set()
        try:
            for selector in self.iter_selectors(self.parse_scss(source_text)):
                classes |= self.classes_from_selector(selector)
        except RecursionError as e:
            raise ParseError('Style sheet nested too deeply to analyze') from e
        return classes


def extract_declared_classes(source_text: str) -> Set[str]:
    """Return the class names declared by the rules of a CSS/SCSS source."""
    return SCSSClassExtractor().extract_classes(source_text)
