"""Semantic information attached to a syntax tree.

The syntax builder resolves every type-bearing node while it lowers the
Python AST and records the result in a ``SemanticModel``. Later stages only
read from the model: the rewriter receives it as an explicit context and
queries it with the *original* nodes of the tree.
"""

from dataclasses import dataclass

from py2hlsl.generator.syntax import SyntaxNode, TypeDeclaration


@dataclass(frozen=True)
class TypeSymbol:
    """A resolved host type.

    Attributes:
        full_name: Fully qualified name, e.g. ``py2hlsl.types.Float3``
        type_arguments: Resolved subscript arguments, e.g. the element type
            of ``ReadWriteBuffer[float]``
    """

    full_name: str
    type_arguments: tuple["TypeSymbol", ...] = ()

    @property
    def name(self) -> str:
        return self.full_name.rpartition(".")[2]

    def __str__(self) -> str:
        if self.type_arguments:
            args = ", ".join(str(arg) for arg in self.type_arguments)
            return f"{self.full_name}[{args}]"
        return self.full_name


@dataclass(frozen=True)
class NamedTypeSymbol(TypeSymbol):
    """A class declared in the scanned sources, with its declared bases."""

    interfaces: tuple[TypeSymbol, ...] = ()


class SemanticModel:
    """Read-only lookup of resolved types for one compilation unit.

    Lookups are keyed by node identity, so two structurally equal nodes at
    different places in the tree keep their own information. The model keeps
    a reference to every node it knows about.
    """

    def __init__(self, module: str):
        self.module = module
        self._types: dict[int, TypeSymbol] = {}
        self._declared: dict[int, NamedTypeSymbol] = {}
        self._anchors: list[SyntaxNode] = []

    def bind_type(self, node: SyntaxNode, symbol: TypeSymbol | None) -> None:
        """Record the resolved type of ``node``. Used by the syntax builder."""
        if symbol is None:
            return
        self._types[id(node)] = symbol
        self._anchors.append(node)

    def bind_declaration(
        self, node: TypeDeclaration, symbol: NamedTypeSymbol
    ) -> None:
        """Record the declared symbol of a class. Used by the syntax builder."""
        self._declared[id(node)] = symbol
        self._anchors.append(node)

    def get_type_info(self, node: SyntaxNode) -> TypeSymbol | None:
        """Get the resolved type of a node.

        For a ``TypeSyntax`` this is the type it names; for a
        ``LocalDeclaration`` or ``Parameter`` the declared (or inferred)
        type; for an expression the type it evaluates to, including the
        type a ``default`` literal takes from its context.

        Returns:
            The resolved symbol, or None when the type is unknown
        """
        return self._types.get(id(node))

    def get_declared_symbol(self, node: TypeDeclaration) -> NamedTypeSymbol:
        """Get the symbol of a class declared in this unit.

        Raises:
            KeyError: If the declaration does not belong to this model
        """
        return self._declared[id(node)]

    def declared_type_names(self) -> frozenset[str]:
        """Full names of every class declared in this unit."""
        return frozenset(symbol.full_name for symbol in self._declared.values())
