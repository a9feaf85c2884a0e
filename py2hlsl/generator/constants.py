"""
Constants and predefined values for the HLSL source generator.

This module contains the operator tables used to lower Python expressions,
the precedence table used when rendering HLSL, and the result-type rules of
the HLSL intrinsics exposed by ``py2hlsl.intrinsics``.
"""

import ast

# Operator precedence for generating correct expressions
OPERATOR_PRECEDENCE: dict[str, int] = {
    # Assignment has lowest precedence
    "=": 1,
    # Ternary operator
    "?": 2,
    # Logical operators
    "||": 3,
    "&&": 4,
    # Bitwise operators
    "|": 5,
    "^": 6,
    "&": 7,
    # Equality operators
    "==": 8,
    "!=": 8,
    # Relational operators
    "<": 9,
    ">": 9,
    "<=": 9,
    ">=": 9,
    # Shift operators
    "<<": 10,
    ">>": 10,
    # Additive operators
    "+": 11,
    "-": 11,
    # Multiplicative operators
    "*": 12,
    "/": 12,
    "%": 12,
    # Unary operators and casts
    "unary": 13,
    # Function calls, member and element access
    "call": 14,
    "member": 14,
}

BINARY_OPERATORS: dict[type[ast.operator], str] = {
    ast.Add: "+",
    ast.Sub: "-",
    ast.Mult: "*",
    ast.Div: "/",
    ast.Mod: "%",
    ast.BitAnd: "&",
    ast.BitOr: "|",
    ast.BitXor: "^",
    ast.LShift: "<<",
    ast.RShift: ">>",
}

COMPARISON_OPERATORS: dict[type[ast.cmpop], str] = {
    ast.Lt: "<",
    ast.Gt: ">",
    ast.LtE: "<=",
    ast.GtE: ">=",
    ast.Eq: "==",
    ast.NotEq: "!=",
}

BOOLEAN_OPERATORS: dict[type[ast.boolop], str] = {
    ast.And: "&&",
    ast.Or: "||",
}

UNARY_OPERATORS: dict[type[ast.unaryop], str] = {
    ast.USub: "-",
    ast.UAdd: "+",
    ast.Not: "!",
    ast.Invert: "~",
}

# Operators whose result is always bool
BOOLEAN_RESULT_OPERATORS: frozenset[str] = frozenset(
    {*COMPARISON_OPERATORS.values(), *BOOLEAN_OPERATORS.values(), "!"}
)

# Intrinsics returning the scalar element type of their first argument
SCALAR_RESULT_INTRINSICS: frozenset[str] = frozenset(
    {"dot", "length", "distance", "determinant"}
)

# Intrinsics returning the type of their first argument
PRESERVING_INTRINSICS: frozenset[str] = frozenset(
    {
        "abs",
        "sign",
        "sin",
        "cos",
        "tan",
        "asin",
        "acos",
        "atan",
        "atan2",
        "sqrt",
        "rsqrt",
        "exp",
        "exp2",
        "log",
        "log2",
        "pow",
        "floor",
        "ceil",
        "round",
        "frac",
        "fmod",
        "saturate",
        "clamp",
        "lerp",
        "min",
        "max",
        "step",
        "smoothstep",
        "normalize",
        "reflect",
        "cross",
    }
)

# Intrinsics returning bool
BOOLEAN_INTRINSICS: frozenset[str] = frozenset({"all", "any", "isnan", "isinf"})

INTRINSIC_NAMES: frozenset[str] = (
    SCALAR_RESULT_INTRINSICS
    | PRESERVING_INTRINSICS
    | BOOLEAN_INTRINSICS
    | frozenset({"mul", "transpose"})
)

INTRINSICS_MODULES: tuple[str, ...] = ("py2hlsl.intrinsics",)

# Fully qualified names of the host helpers with special lowering
CAST_FUNCTIONS: frozenset[str] = frozenset({"typing.cast"})
DEFAULT_FUNCTIONS: frozenset[str] = frozenset(
    {"py2hlsl.types.default", "py2hlsl.default"}
)

SWIZZLE_SETS: tuple[str, ...] = ("xyzw", "rgba")
