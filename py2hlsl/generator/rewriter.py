"""Rewriting of shader method trees into HLSL form.

The rewrite is post-order: every child is rewritten first, then the node
itself is matched against the rules below, the first match winning.

* ``Parameter``: decorations are dropped and the type is respelled.
* ``CastExpression``: the target type is respelled.
* ``LocalDeclaration``: the declared (or inferred) type is respelled.
* ``ObjectCreation``: ``T()`` becomes ``(T)0``, ``T(args)`` becomes a call of
  the HLSL type name.
* ``DefaultExpression`` and ``DefaultLiteral``: become ``(T)0``.
* ``MethodDeclaration``: the return type is respelled, ``void`` if absent.

Anything else keeps its kind and gets its rewritten children. Type lookups
always go to the semantic model with the *original* node, since rewritten
nodes are new objects the model has never seen.
"""

from dataclasses import fields, replace

from loguru import logger

from py2hlsl.generator.errors import TypeInferenceError, UnmappedTypeError
from py2hlsl.generator.formatter import format_node
from py2hlsl.generator.semantic import SemanticModel, TypeSymbol
from py2hlsl.generator.syntax import (
    CastExpression,
    DefaultExpression,
    DefaultLiteral,
    Identifier,
    Invocation,
    Literal,
    LocalDeclaration,
    MethodDeclaration,
    ObjectCreation,
    OpaqueExpression,
    OpaqueStatement,
    Parameter,
    SyntaxNode,
    TypeSyntax,
)
from py2hlsl.generator.type_mappings import hlsl_type_name


class ShaderSourceRewriter:
    """Rewrites one method tree against its semantic model.

    The rewriter holds no state besides the model and its settings, so one
    instance may be reused for any number of nodes of the same unit.
    """

    def __init__(self, semantic_model: SemanticModel, warn_on_opaque: bool = True):
        self.semantic_model = semantic_model
        self.warn_on_opaque = warn_on_opaque
        self._aggregates = semantic_model.declared_type_names()

    def visit(self, node: SyntaxNode) -> SyntaxNode:
        """Rewrite a node and its subtree.

        Args:
            node: Original node

        Returns:
            The rewritten node; ``node`` itself when nothing changed

        Raises:
            UnmappedTypeError: If a type has no HLSL equivalent
            TypeInferenceError: If a ``default`` literal has no inferable type
        """
        return self._rewrite_node(node, self._rewrite_children(node))

    def _rewrite_children(self, node: SyntaxNode) -> SyntaxNode:
        changes = {}
        for node_field in fields(node):
            value = getattr(node, node_field.name)
            if isinstance(value, SyntaxNode):
                rewritten = self.visit(value)
                if rewritten is not value:
                    changes[node_field.name] = rewritten
            elif isinstance(value, tuple) and any(
                isinstance(item, SyntaxNode) for item in value
            ):
                items = tuple(self.visit(item) for item in value)
                if any(new is not old for new, old in zip(items, value)):
                    changes[node_field.name] = items
        return replace(node, **changes) if changes else node

    def _spell(self, symbol: TypeSymbol | None, node: SyntaxNode) -> TypeSyntax:
        name = hlsl_type_name(symbol, node, self._aggregates)
        return TypeSyntax(name, lineno=node.lineno)

    def _spell_type(self, type_syntax: TypeSyntax) -> TypeSyntax:
        return self._spell(self.semantic_model.get_type_info(type_syntax), type_syntax)

    def _zero_cast(self, type_syntax: TypeSyntax, node: SyntaxNode) -> CastExpression:
        return CastExpression(type_syntax, Literal(0), lineno=node.lineno)

    def _rewrite_node(self, original: SyntaxNode, node: SyntaxNode) -> SyntaxNode:
        """Apply the first matching rule to a node with rewritten children."""
        model = self.semantic_model

        match original:
            case Parameter(type=None, name=name):
                raise UnmappedTypeError(
                    f"Parameter '{name}' has no type annotation", original
                )

            case Parameter():
                return replace(
                    node,
                    type=self._spell(model.get_type_info(original), original),
                    decorations=(),
                )

            case CastExpression(type=type_syntax):
                return replace(node, type=self._spell_type(type_syntax))

            case LocalDeclaration():
                return replace(
                    node, type=self._spell(model.get_type_info(original), original)
                )

            case ObjectCreation(type=type_syntax, arguments=()):
                return self._zero_cast(self._spell_type(type_syntax), original)

            case ObjectCreation(type=type_syntax):
                spelled = self._spell_type(type_syntax)
                return Invocation(
                    Identifier(spelled.name, lineno=original.lineno),
                    node.arguments,
                    lineno=original.lineno,
                )

            case DefaultExpression(type=type_syntax):
                return self._zero_cast(self._spell_type(type_syntax), original)

            case DefaultLiteral():
                symbol = model.get_type_info(original)
                if symbol is None:
                    raise TypeInferenceError(
                        "Cannot infer the type of 'default' from its context; "
                        "use default(T) or annotate the target",
                        original,
                    )
                return self._zero_cast(self._spell(symbol, original), original)

            case MethodDeclaration(return_type=None):
                return replace(node, return_type=TypeSyntax("void"))

            case MethodDeclaration(return_type=return_type):
                return replace(node, return_type=self._spell_type(return_type))

            case OpaqueExpression(text=text) | OpaqueStatement(text=text):
                if self.warn_on_opaque:
                    logger.warning(
                        f"Passing unsupported construct through unchanged at line "
                        f"{original.lineno}: {text.splitlines()[0] if text else ''}"
                    )

        return node


def rewrite_method(
    method: MethodDeclaration,
    semantic_model: SemanticModel,
    warn_on_opaque: bool = True,
) -> str:
    """Rewrite a method and render it as HLSL text.

    Args:
        method: Method declaration with a block body
        semantic_model: Semantic model of the unit the method belongs to
        warn_on_opaque: Log a warning for constructs passed through verbatim

    Returns:
        The HLSL source of the method
    """
    rewritten = ShaderSourceRewriter(semantic_model, warn_on_opaque).visit(method)
    return format_node(rewritten)
