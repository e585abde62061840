"""
Error types raised and recorded while looking for unused classes.
"""

from typing import Optional, Sequence


class ParseError(Exception):
    """Raised when a style sheet or component source cannot be parsed."""

    def __init__(self, message: str, path: Optional[str] = None,
                 line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.path = path
        self.line = line
        self.column = column
        super().__init__(message)

    def with_path(self, path: str) -> 'ParseError':
        """Return a copy of this error bound to the file it came from."""
        return ParseError(self.message, path=path, line=self.line, column=self.column)

    def __str__(self):
        location = self.path or '<source>'
        if self.line is not None:
            location += f':{self.line}'
            if self.column is not None:
                location += f':{self.column}'
        return f'{location}: {self.message}'


class UnpairedFileWarning(UserWarning):
    """A style-sheet module with no component file next to it."""

    def __init__(self, style_path: str, candidates: Sequence[str] = ()):
        self.style_path = style_path
        self.candidates = list(candidates)
        super().__init__(f'No corresponding component file found for style sheet: {style_path}')


class ConfigError(ValueError):
    """Raised when a configuration file is malformed."""
