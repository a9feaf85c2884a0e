"""
AST parsing utilities for the HLSL source generator.

This module parses Python source into an AST, resolves names through the
module's imports and hands the tree to the syntax builder, producing the
(syntax tree, semantic model) pairs the generator consumes.
"""

import ast
import builtins
import os
from pathlib import Path
from typing import NamedTuple

from loguru import logger

from py2hlsl.generator.errors import GenerationError
from py2hlsl.generator.semantic import SemanticModel
from py2hlsl.generator.syntax import CompilationUnit


class ParsedUnit(NamedTuple):
    """A compilation unit with its semantic model."""

    tree: CompilationUnit
    semantic_model: SemanticModel


class ImportTable:
    """Resolves names used in a module to fully qualified names.

    Resolution follows the module's ``import`` and ``from ... import``
    statements, the classes declared in the module and Python's builtins.
    Names bound any other way are not resolved.
    """

    def __init__(self, module_name: str):
        self.module_name = module_name
        self.aliases: dict[str, str] = {}

    @classmethod
    def from_module(cls, tree: ast.Module, module_name: str) -> "ImportTable":
        """Collect the module-level bindings of a parsed module.

        Args:
            tree: Parsed module
            module_name: Fully qualified name of the module

        Returns:
            The populated import table
        """
        table = cls(module_name)
        for node in tree.body:
            if isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.asname:
                        table.aliases[alias.asname] = alias.name
                    else:
                        top = alias.name.partition(".")[0]
                        table.aliases[top] = top
            elif isinstance(node, ast.ImportFrom):
                source = table._absolute_module(node.module, node.level)
                for alias in node.names:
                    if alias.name == "*":
                        logger.debug(f"Ignoring star import from {source}")
                        continue
                    table.aliases[alias.asname or alias.name] = f"{source}.{alias.name}"
            elif isinstance(node, ast.ClassDef):
                table.aliases[node.name] = f"{module_name}.{node.name}"
        return table

    def _absolute_module(self, module: str | None, level: int) -> str:
        if level == 0:
            return module or ""
        package_parts = self.module_name.split(".")[:-level]
        if module:
            package_parts.append(module)
        return ".".join(package_parts)

    def resolve(self, node: ast.expr | None) -> str | None:
        """Resolve a name, dotted attribute chain or string annotation.

        Args:
            node: AST expression naming a type, function or module

        Returns:
            The fully qualified name, or None if it cannot be resolved
        """
        if node is None:
            return None
        if isinstance(node, ast.Name):
            if node.id in self.aliases:
                return self.aliases[node.id]
            if hasattr(builtins, node.id):
                return f"builtins.{node.id}"
            return None
        if isinstance(node, ast.Attribute):
            base = self.resolve(node.value)
            return f"{base}.{node.attr}" if base else None
        if isinstance(node, ast.Constant):
            if node.value is None:
                return "builtins.NoneType"
            if isinstance(node.value, str):
                try:
                    expr = ast.parse(node.value, mode="eval").body
                except SyntaxError:
                    return None
                return self.resolve(expr)
        return None


def module_name_for(
    path: str | os.PathLike[str], root: str | os.PathLike[str] | None = None
) -> str:
    """Derive a module name from a file path.

    Args:
        path: Path of a Python source file
        root: Directory the module path is relative to (defaults to the
            file's own directory)

    Returns:
        Dotted module name, e.g. ``shaders.blur`` for ``shaders/blur.py``
    """
    file_path = Path(path).resolve()
    base = Path(root).resolve() if root is not None else file_path.parent
    try:
        relative = file_path.relative_to(base)
    except ValueError:
        relative = Path(file_path.name)
    parts = list(relative.with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts) or file_path.stem


def parse_source(source: str, module_name: str, path: str | None = None) -> ParsedUnit:
    """Parse Python source code into a syntax tree and semantic model.

    Args:
        source: Python source code
        module_name: Fully qualified name of the module
        path: Optional path of the file, used in error messages

    Returns:
        The parsed unit

    Raises:
        GenerationError: If the source is not valid Python
    """
    from py2hlsl.generator.syntax_builder import SyntaxBuilder

    logger.debug(f"Parsing module {module_name}")
    try:
        tree = ast.parse(source, filename=path or "<string>")
    except SyntaxError as e:
        raise GenerationError(
            f"Invalid Python source at line {e.lineno}: {e.msg}", path=path
        ) from e

    imports = ImportTable.from_module(tree, module_name)
    model = SemanticModel(module_name)
    unit = SyntaxBuilder(imports, model, path).build_unit(tree)
    logger.debug(f"Parsed module {module_name}: {len(unit.types)} top-level classes")
    return ParsedUnit(unit, model)


def parse_file(
    path: str | os.PathLike[str], root: str | os.PathLike[str] | None = None
) -> ParsedUnit:
    """Parse a Python source file.

    Args:
        path: Path of the file
        root: Directory module names are computed from

    Returns:
        The parsed unit

    Raises:
        GenerationError: If the file cannot be read or parsed
    """
    try:
        source = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise GenerationError(f"Failed to read source: {e}", path=str(path)) from e
    return parse_source(source, module_name_for(path, root), str(path))
