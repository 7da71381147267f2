"""
errors.py
Error types raised by the ModWrangler generators. All of them surface straight to the caller.
"""
from typing import Optional


class ModWranglerError(Exception):
    pass


class StructuralError(ModWranglerError):
    """A dotted name, names file or feature table could not be parsed."""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)
        self.line = line
        self.column = column


class TemplateIOError(ModWranglerError):
    pass


class InvalidPathError(ModWranglerError):
    pass


class MissingPlaceholderError(ModWranglerError):
    pass
