"""Selection of the shader types and methods to translate.

A class takes part in translation only when it names the shader marker among
its declared bases. The comparison is by name, so a class with the right
methods but without the declared base is left alone.
"""

from collections.abc import Iterable, Iterator
from typing import NamedTuple

from loguru import logger

from py2hlsl.generator.ast_parser import ParsedUnit
from py2hlsl.generator.config import DEFAULT_MARKER_NAME
from py2hlsl.generator.syntax import (
    MethodDeclaration,
    TypeDeclaration,
    iter_type_declarations,
)


class Candidate(NamedTuple):
    """A shader type with the methods declared directly in its body."""

    unit: ParsedUnit
    type_declaration: TypeDeclaration
    methods: tuple[MethodDeclaration, ...]


def is_shader_type(
    unit: ParsedUnit,
    type_declaration: TypeDeclaration,
    marker_name: str = DEFAULT_MARKER_NAME,
) -> bool:
    """Check whether a class declares the shader marker as a base."""
    symbol = unit.semantic_model.get_declared_symbol(type_declaration)
    return any(interface.name == marker_name for interface in symbol.interfaces)


def _collect_methods(
    type_declaration: TypeDeclaration,
) -> tuple[MethodDeclaration, ...]:
    methods: dict[str, MethodDeclaration] = {}
    for method in type_declaration.methods:
        if method.name in methods:
            logger.warning(
                f"Method '{method.name}' of {type_declaration.full_name} is "
                f"redefined at line {method.lineno}; the last definition is used"
            )
        methods[method.name] = method
    return tuple(methods.values())


def select_candidates(
    units: Iterable[ParsedUnit], marker_name: str = DEFAULT_MARKER_NAME
) -> Iterator[Candidate]:
    """Find the shader types of the given units.

    Classes are searched at any nesting depth. Every method of a shader type
    is collected, private and special methods included.

    Args:
        units: Parsed compilation units with their semantic models
        marker_name: Name of the base class marking a shader type

    Yields:
        One candidate per shader type, in source order
    """
    for unit in units:
        for type_declaration in iter_type_declarations(unit.tree):
            if not is_shader_type(unit, type_declaration, marker_name):
                continue
            methods = _collect_methods(type_declaration)
            logger.debug(
                f"Selected shader {type_declaration.full_name} with "
                f"{len(methods)} methods"
            )
            yield Candidate(unit, type_declaration, methods)
