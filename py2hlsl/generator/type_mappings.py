"""HLSL type mappings.

``HLSL_TYPE_NAMES`` is the one place where the host-to-HLSL type vocabulary is
defined. Every type a shader method may mention must have an entry here;
anything else is an authoring error reported by ``hlsl_type_name``.
"""

import re
from collections.abc import Collection

from py2hlsl.generator.errors import UnmappedTypeError
from py2hlsl.generator.semantic import TypeSymbol
from py2hlsl.generator.syntax import SyntaxNode

# Modules that export the host shader types
HOST_TYPE_MODULES: tuple[str, ...] = ("py2hlsl.types", "py2hlsl")
HOST_SHADER_MODULES: tuple[str, ...] = ("py2hlsl.shader", "py2hlsl")

# HLSL scalar spelling for each host vector family
VECTOR_FAMILIES: dict[str, str] = {
    "Bool": "bool",
    "Int": "int",
    "UInt": "uint",
    "Float": "float",
    "Double": "double",
}

MATRIX_FAMILIES: dict[str, str] = {
    "Float": "float",
    "Double": "double",
}

# Host scalar aliases defined in py2hlsl.types
SCALAR_ALIASES: dict[str, str] = {
    "Bool": "bool",
    "Int": "int",
    "UInt": "uint",
    "Float": "float",
    "Double": "double",
}

# System.Numerics style aliases
NUMERICS_ALIASES: dict[str, str] = {
    "Vector2": "float2",
    "Vector3": "float3",
    "Vector4": "float4",
    "Matrix3x3": "float3x3",
    "Matrix4x4": "float4x4",
}

PYTHON_TYPES: dict[str, str] = {
    "builtins.bool": "bool",
    "builtins.int": "int",
    "builtins.float": "float",
    "builtins.NoneType": "void",
}

NUMPY_TYPES: dict[str, str] = {
    "numpy.bool_": "bool",
    "numpy.int32": "int",
    "numpy.uint32": "uint",
    "numpy.float32": "float",
    "numpy.float64": "double",
}


def _build_host_types() -> dict[str, str]:
    names: dict[str, str] = {}
    for family, scalar in VECTOR_FAMILIES.items():
        for size in range(2, 5):
            names[f"{family}{size}"] = f"{scalar}{size}"
    for family, scalar in MATRIX_FAMILIES.items():
        for rows in range(2, 5):
            for cols in range(2, 5):
                names[f"{family}{rows}x{cols}"] = f"{scalar}{rows}x{cols}"
    names.update(SCALAR_ALIASES)
    names.update(NUMERICS_ALIASES)

    table: dict[str, str] = {}
    for module in HOST_TYPE_MODULES:
        for name, hlsl_name in names.items():
            table[f"{module}.{name}"] = hlsl_name
    for module in HOST_SHADER_MODULES:
        table[f"{module}.ThreadIds"] = "int3"
    return table


HLSL_TYPE_NAMES: dict[str, str] = {
    **PYTHON_TYPES,
    **NUMPY_TYPES,
    **_build_host_types(),
}

# Canonical host symbol for each HLSL spelling, used by type inference
HOST_SYMBOLS: dict[str, TypeSymbol] = {
    "bool": TypeSymbol("builtins.bool"),
    "int": TypeSymbol("builtins.int"),
    "float": TypeSymbol("builtins.float"),
    "void": TypeSymbol("builtins.NoneType"),
    "uint": TypeSymbol("py2hlsl.types.UInt"),
    "double": TypeSymbol("py2hlsl.types.Double"),
}
for _full_name, _hlsl_name in _build_host_types().items():
    if _full_name.startswith("py2hlsl.types."):
        HOST_SYMBOLS.setdefault(_hlsl_name, TypeSymbol(_full_name))

_SHAPE_PATTERN = re.compile(r"^([a-z]+)(\d)?(?:x(\d))?$")


def is_known_type(full_name: str) -> bool:
    """Check whether a fully qualified name is part of the type vocabulary."""
    return full_name in HLSL_TYPE_NAMES


def hlsl_type_name(
    symbol: TypeSymbol | None,
    node: SyntaxNode | None = None,
    aggregates: Collection[str] = (),
) -> str:
    """Map a resolved host type to its HLSL spelling.

    Classes declared next to the shader (listed in ``aggregates``) are
    emitted as structs and keep their simple name.

    Args:
        symbol: Resolved host type, or None if resolution failed
        node: Syntax node the type belongs to, for error reporting
        aggregates: Full names of the declared aggregate types

    Returns:
        The HLSL type name

    Raises:
        UnmappedTypeError: If the type is unresolved or has no HLSL equivalent
    """
    if symbol is None:
        raise UnmappedTypeError("Unresolved type", node)
    if symbol.full_name in aggregates:
        return symbol.name
    hlsl_name = HLSL_TYPE_NAMES.get(symbol.full_name)
    if hlsl_name is None:
        raise UnmappedTypeError(f"Type '{symbol}' has no HLSL equivalent", node)
    return hlsl_name


def _shape(symbol: TypeSymbol | None) -> tuple[str, int | None, int | None] | None:
    if symbol is None or symbol.full_name not in HLSL_TYPE_NAMES:
        return None
    match = _SHAPE_PATTERN.match(HLSL_TYPE_NAMES[symbol.full_name])
    if not match:
        return None
    scalar, rows, cols = match.groups()
    return (
        scalar,
        int(rows) if rows else None,
        int(cols) if cols else None,
    )


def is_scalar(symbol: TypeSymbol | None) -> bool:
    """Check whether a symbol is a mapped scalar type."""
    shape = _shape(symbol)
    return shape is not None and shape[1] is None


def is_vector(symbol: TypeSymbol | None) -> bool:
    shape = _shape(symbol)
    return shape is not None and shape[1] is not None and shape[2] is None


def element_type(symbol: TypeSymbol | None) -> TypeSymbol | None:
    """Get the scalar element type of a mapped scalar, vector or matrix type."""
    shape = _shape(symbol)
    if shape is None:
        return None
    return HOST_SYMBOLS.get(shape[0])


def vector_type(element: TypeSymbol | None, size: int) -> TypeSymbol | None:
    """Get the vector type with ``size`` components of a scalar element type."""
    if size == 1:
        return element
    shape = _shape(element)
    if shape is None:
        return None
    return HOST_SYMBOLS.get(f"{shape[0]}{size}")
