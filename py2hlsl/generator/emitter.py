"""Emission of generated source modules.

Each translated method becomes one small Python module. Importing it
registers a ``ComputeShaderSource`` record holding the owning type's full
name, the method name and the HLSL text, which the runtime later looks up by
the first two. The module starts with a header that keeps formatters, linters
and type checkers away from it.
"""

import ast
import hashlib
from typing import NamedTuple

from py2hlsl.generator.config import DEFAULT_NAME_PREFIX

GENERATED_HEADER = (
    "# <auto-generated/>\n"
    "# fmt: off\n"
    "# ruff: noqa\n"
    "# mypy: ignore-errors\n"
    "# pylint: skip-file\n"
)

SOURCES_MODULE = "py2hlsl.sources"
RECORD_CLASS = "ComputeShaderSource"
REGISTER_FUNCTION = "register_shader_source"


class RewrittenMethod(NamedTuple):
    """A translated method with its lookup keys."""

    type_name: str
    method_name: str
    source: str


class GeneratedSource(NamedTuple):
    """A generated module ready to be persisted."""

    name: str
    content: bytes


def generated_source_name(
    type_name: str, method_name: str, prefix: str = DEFAULT_NAME_PREFIX
) -> str:
    """Derive the module name for a translated method.

    Dots in the type name become underscores. Once a part of the pair holds
    an underscore of its own that flattening is ambiguous (``A.b_c`` and
    ``A_b.c``), so the name gets a short digest of the exact pair. Plain
    names never contain a double underscore after the prefix and cannot
    meet a digested one.

    Examples:
        >>> generated_source_name("shaders.blur.Blur", "execute")
        '__ShaderSource_shaders_blur_Blur_execute'
    """
    name = f"{prefix}_{type_name.replace('.', '_')}_{method_name}"
    if "_" not in type_name and "_" not in method_name:
        return name
    digest = hashlib.sha256(f"{type_name}:{method_name}".encode("utf-8"))
    return f"{name}__{digest.hexdigest()[:8]}"


def _build_module(record: RewrittenMethod) -> ast.Module:
    record_call = ast.Call(
        func=ast.Name(id=RECORD_CLASS, ctx=ast.Load()),
        args=[
            ast.Constant(value=record.type_name),
            ast.Constant(value=record.method_name),
            ast.Constant(value=record.source),
        ],
        keywords=[],
    )
    register_call = ast.Call(
        func=ast.Name(id=REGISTER_FUNCTION, ctx=ast.Load()),
        args=[record_call],
        keywords=[],
    )
    module = ast.Module(
        body=[
            ast.ImportFrom(
                module=SOURCES_MODULE,
                names=[ast.alias(name=RECORD_CLASS), ast.alias(name=REGISTER_FUNCTION)],
                level=0,
            ),
            ast.Expr(value=register_call),
        ],
        type_ignores=[],
    )
    return ast.fix_missing_locations(module)


def emit_source(
    record: RewrittenMethod, prefix: str = DEFAULT_NAME_PREFIX
) -> GeneratedSource:
    """Serialize a translated method as a generated module.

    The output depends on the record alone, so unchanged input always yields
    byte-identical content.

    Args:
        record: Translated method
        prefix: Prefix of the generated module name

    Returns:
        The module name and its UTF-8 encoded source
    """
    text = f"{GENERATED_HEADER}\n{ast.unparse(_build_module(record))}\n"
    return GeneratedSource(
        generated_source_name(record.type_name, record.method_name, prefix),
        text.encode("utf-8"),
    )
