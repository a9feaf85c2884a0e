"""
Exceptions and error handling for the HLSL source generator.

This module defines the exceptions raised while shader methods are parsed,
rewritten and emitted.
"""

import os
from typing import Any


class GenerationError(Exception):
    """Exception raised for errors during shader source generation.

    This is the main exception class used throughout the generator to report
    authoring errors in a user-friendly way. When the offending syntax node or
    source file is known, the message is suffixed with its location.

    Examples:
        >>> raise GenerationError("Unmapped type: Foo")
        GenerationError: Unmapped type: Foo
    """

    def __init__(self, message: str, node: Any | None = None, path: str | None = None):
        """Initialize the exception with a message and optional location.

        Args:
            message: The error message
            node: Optional syntax node where the error occurred
            path: Optional path of the source file being processed
        """
        self.message = message
        self.node = node
        self.path = path
        self.lineno: int | None = getattr(node, "lineno", None)

        super().__init__(f"{message}{self._location_info()}")

    def _location_info(self) -> str:
        location_info = ""
        if self.path:
            location_info = f" in {os.path.basename(self.path)}"
        if self.lineno:
            location_info += f" at line {self.lineno}"
        return location_info

    def with_path(self, path: str | None) -> "GenerationError":
        """Create a copy of this error attached to a source file.

        Args:
            path: Path of the source file

        Returns:
            A new error of the same type with the path set
        """
        return type(self)(self.message, self.node, path)


class UnmappedTypeError(GenerationError):
    """A host type has no HLSL equivalent, or could not be resolved at all."""


class TypeInferenceError(GenerationError):
    """A type required by a rewrite rule could not be inferred from context."""
