"""Syntax tree for shader source translation.

The tree is a closed set of frozen dataclasses. Nodes own their children and
are never mutated: a rewrite builds replacement nodes with
``dataclasses.replace`` and leaves the original tree intact for any other
consumer. Equality is structural; the source line is carried for error
reporting only and does not take part in comparisons.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SyntaxNode:
    """Base for all syntax nodes."""

    lineno: int | None = field(default=None, compare=False, kw_only=True)


# Types


@dataclass(frozen=True)
class TypeSyntax(SyntaxNode):
    """A type reference as spelled in source, e.g. ``Float3`` or ``float3``."""

    name: str


# Expressions


@dataclass(frozen=True)
class Expression(SyntaxNode):
    """Base for all expressions."""


@dataclass(frozen=True)
class Identifier(Expression):
    name: str


@dataclass(frozen=True)
class Literal(Expression):
    """Numeric, boolean or string literal."""

    value: bool | int | float | str


@dataclass(frozen=True)
class DefaultLiteral(Expression):
    """A ``default`` value whose type is inferred from context."""


@dataclass(frozen=True)
class DefaultExpression(Expression):
    """A ``default(T)`` value with an explicit type."""

    type: TypeSyntax


@dataclass(frozen=True)
class CastExpression(Expression):
    type: TypeSyntax
    operand: Expression


@dataclass(frozen=True)
class ObjectCreation(Expression):
    """Construction of a value of a known type, ``T(args)``."""

    type: TypeSyntax
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class Invocation(Expression):
    target: Expression
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class MemberAccess(Expression):
    target: Expression
    name: str


@dataclass(frozen=True)
class ElementAccess(Expression):
    target: Expression
    indices: tuple[Expression, ...]


@dataclass(frozen=True)
class UnaryExpression(Expression):
    op: str
    operand: Expression


@dataclass(frozen=True)
class BinaryExpression(Expression):
    op: str
    left: Expression
    right: Expression


@dataclass(frozen=True)
class ConditionalExpression(Expression):
    condition: Expression
    when_true: Expression
    when_false: Expression


@dataclass(frozen=True)
class AssignmentExpression(Expression):
    op: str
    target: Expression
    value: Expression


@dataclass(frozen=True)
class OpaqueExpression(Expression):
    """Host expression with no C-like counterpart, kept as verbatim text."""

    text: str


# Statements


@dataclass(frozen=True)
class Statement(SyntaxNode):
    """Base for all statements."""


@dataclass(frozen=True)
class Block(Statement):
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression


@dataclass(frozen=True)
class LocalDeclaration(Statement):
    """Local variable declaration.

    ``type`` is None when the host source gives no annotation and the
    declared type is inferred from the initializer.
    """

    type: TypeSyntax | None
    name: str
    initializer: Expression | None = None


@dataclass(frozen=True)
class ReturnStatement(Statement):
    value: Expression | None = None


@dataclass(frozen=True)
class IfStatement(Statement):
    condition: Expression
    then: Block
    orelse: "Block | IfStatement | None" = None


@dataclass(frozen=True)
class WhileStatement(Statement):
    condition: Expression
    body: Block


@dataclass(frozen=True)
class ForStatement(Statement):
    declaration: LocalDeclaration
    condition: Expression
    increment: Expression
    body: Block


@dataclass(frozen=True)
class BreakStatement(Statement):
    pass


@dataclass(frozen=True)
class ContinueStatement(Statement):
    pass


@dataclass(frozen=True)
class EmptyStatement(Statement):
    pass


@dataclass(frozen=True)
class OpaqueStatement(Statement):
    """Host statement with no C-like counterpart, kept as verbatim text."""

    text: str


# Declarations


@dataclass(frozen=True)
class Parameter(SyntaxNode):
    """Method parameter.

    ``decorations`` holds host-only metadata attached to the parameter
    (``Annotated`` extras), which has no meaning in HLSL.
    """

    name: str
    type: TypeSyntax | None
    decorations: tuple[str, ...] = ()
    default: Expression | None = None


@dataclass(frozen=True)
class MethodDeclaration(SyntaxNode):
    """A method of a type declaration.

    Exactly one of ``body`` and ``expression_body`` is set for a method read
    from source; both are None for a signature-only declaration.
    """

    name: str
    return_type: TypeSyntax | None
    parameters: tuple[Parameter, ...] = ()
    body: Block | None = None
    expression_body: Expression | None = None
    is_static: bool = False


@dataclass(frozen=True)
class FieldDeclaration(SyntaxNode):
    name: str
    type: TypeSyntax


@dataclass(frozen=True)
class TypeDeclaration(SyntaxNode):
    """A class declaration.

    Attributes:
        name: Simple class name
        full_name: Module-qualified name, e.g. ``shaders.blur.Blur``
        bases: Declared base classes, i.e. the conformance set
        fields: Annotated class-level fields
        methods: Methods declared directly in the class body
        types: Nested class declarations
    """

    name: str
    full_name: str
    bases: tuple[TypeSyntax, ...] = ()
    fields: tuple[FieldDeclaration, ...] = ()
    methods: tuple[MethodDeclaration, ...] = ()
    types: tuple["TypeDeclaration", ...] = ()


@dataclass(frozen=True)
class CompilationUnit(SyntaxNode):
    module: str
    path: str | None = None
    types: tuple[TypeDeclaration, ...] = ()


def iter_type_declarations(
    node: CompilationUnit | TypeDeclaration,
) -> Iterator[TypeDeclaration]:
    """Yield every type declaration below ``node`` in source order."""
    for type_declaration in node.types:
        yield type_declaration
        yield from iter_type_declarations(type_declaration)
