"""Build the shader syntax tree from a Python AST.

The builder lowers the annotated Python subset used in shader methods to the
C-like syntax tree of ``py2hlsl.generator.syntax`` and records the resolved
type of every type-bearing node in a ``SemanticModel``. Python constructs
with no C-like counterpart become opaque nodes carrying their source text.
"""

import ast

from loguru import logger

from py2hlsl.generator.ast_parser import ImportTable
from py2hlsl.generator.constants import (
    BINARY_OPERATORS,
    BOOLEAN_INTRINSICS,
    BOOLEAN_OPERATORS,
    BOOLEAN_RESULT_OPERATORS,
    CAST_FUNCTIONS,
    COMPARISON_OPERATORS,
    DEFAULT_FUNCTIONS,
    INTRINSIC_NAMES,
    INTRINSICS_MODULES,
    PRESERVING_INTRINSICS,
    SCALAR_RESULT_INTRINSICS,
    SWIZZLE_SETS,
    UNARY_OPERATORS,
)
from py2hlsl.generator.semantic import NamedTypeSymbol, SemanticModel, TypeSymbol
from py2hlsl.generator.syntax import (
    AssignmentExpression,
    BinaryExpression,
    Block,
    BreakStatement,
    CastExpression,
    CompilationUnit,
    ConditionalExpression,
    ContinueStatement,
    DefaultExpression,
    DefaultLiteral,
    ElementAccess,
    EmptyStatement,
    Expression,
    ExpressionStatement,
    FieldDeclaration,
    ForStatement,
    Identifier,
    IfStatement,
    Invocation,
    Literal,
    LocalDeclaration,
    MemberAccess,
    MethodDeclaration,
    ObjectCreation,
    OpaqueExpression,
    OpaqueStatement,
    Parameter,
    ReturnStatement,
    Statement,
    SyntaxNode,
    TypeDeclaration,
    TypeSyntax,
    UnaryExpression,
    WhileStatement,
)
from py2hlsl.generator.type_mappings import (
    HLSL_TYPE_NAMES,
    element_type,
    is_known_type,
    is_scalar,
    is_vector,
    vector_type,
)

BOOL = TypeSymbol("builtins.bool")
INT = TypeSymbol("builtins.int")
FLOAT = TypeSymbol("builtins.float")

ANNOTATED_NAMES = frozenset({"typing.Annotated", "typing_extensions.Annotated"})
CALLABLE_NAMES = frozenset({"typing.Callable", "collections.abc.Callable"})
STATIC_DECORATORS = frozenset({"builtins.staticmethod"})


def _is_docstring(node: ast.stmt) -> bool:
    return (
        isinstance(node, ast.Expr)
        and isinstance(node.value, ast.Constant)
        and isinstance(node.value.value, str)
    )


def _is_signature_only(body: list[ast.stmt]) -> bool:
    """Check if a function body holds nothing but a docstring and ``...``."""
    return all(
        _is_docstring(stmt)
        or (
            isinstance(stmt, ast.Expr)
            and isinstance(stmt.value, ast.Constant)
            and stmt.value.value is Ellipsis
        )
        for stmt in body
    )


def _aligned_defaults(
    args: list[ast.arg], defaults: list[ast.expr]
) -> list[ast.expr | None]:
    """Pair positional parameters with their defaults, which align to the end."""
    padding: list[ast.expr | None] = [None] * (len(args) - len(defaults))
    return padding + list(defaults)


_SCALAR_RANKS = {"bool": 0, "int": 1, "uint": 2, "float": 3, "double": 4}


def _scalar_rank(symbol: TypeSymbol) -> int:
    return _SCALAR_RANKS.get(HLSL_TYPE_NAMES.get(symbol.full_name, ""), 0)


def _binary_result_type(
    op: str, left: TypeSymbol | None, right: TypeSymbol | None
) -> TypeSymbol | None:
    """Infer the result type of a binary operation."""
    if op in BOOLEAN_RESULT_OPERATORS:
        return BOOL
    if left is None or right is None:
        return None
    if left == right:
        return left
    if is_scalar(left) and is_scalar(right):
        return max(left, right, key=_scalar_rank)
    return right if is_scalar(left) else left


def _is_integral(symbol: TypeSymbol | None) -> bool:
    """Check whether a scalar, vector or matrix type has integer components."""
    element = element_type(symbol)
    if element is None:
        return False
    return HLSL_TYPE_NAMES.get(element.full_name) in {"int", "uint"}


class SyntaxBuilder:
    """Builds a CompilationUnit from a Python module AST."""

    def __init__(
        self, imports: ImportTable, model: SemanticModel, path: str | None = None
    ):
        self.imports = imports
        self.model = model
        self.path = path
        self.symbols: dict[str, TypeSymbol | None] = {}
        self._fields: dict[str, TypeSymbol | None] = {}
        self._methods: dict[str, TypeSymbol | None] = {}
        self._self_name: str | None = None
        self._return_type: TypeSymbol | None = None
        self._hoisted: list[LocalDeclaration] = []
        self._depth = 0

    def build_unit(self, tree: ast.Module) -> CompilationUnit:
        """Build the compilation unit for a whole module."""
        types = tuple(
            self._build_class(node, self.imports.module_name)
            for node in tree.body
            if isinstance(node, ast.ClassDef)
        )
        return CompilationUnit(
            module=self.imports.module_name, path=self.path, types=types
        )

    # Types

    def _resolve(self, node: ast.expr | None) -> str | None:
        return self.imports.resolve(node)

    def _type_of(self, node: SyntaxNode | None) -> TypeSymbol | None:
        return self.model.get_type_info(node) if node is not None else None

    def _unwrap_annotated(self, node: ast.expr) -> tuple[ast.expr, list[ast.expr]]:
        """Split ``Annotated[T, meta...]`` into ``T`` and its metadata."""
        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            try:
                node = ast.parse(node.value, mode="eval").body
            except SyntaxError:
                return node, []
        if (
            isinstance(node, ast.Subscript)
            and self._resolve(node.value) in ANNOTATED_NAMES
            and isinstance(node.slice, ast.Tuple)
            and node.slice.elts
        ):
            return node.slice.elts[0], list(node.slice.elts[1:])
        return node, []

    def _resolve_type(self, node: ast.expr) -> TypeSymbol | None:
        """Resolve a type annotation to a symbol."""
        node, _ = self._unwrap_annotated(node)
        if isinstance(node, ast.Subscript):
            base = self._resolve(node.value)
            if base is None:
                return None
            if isinstance(node.slice, ast.Tuple):
                elts = node.slice.elts
            else:
                elts = [node.slice]
            arguments = [self._resolve_type(elt) for elt in elts]
            return TypeSymbol(
                base, tuple(arg for arg in arguments if arg is not None)
            )
        full_name = self._resolve(node)
        return TypeSymbol(full_name) if full_name else None

    def _type_syntax(self, node: ast.expr) -> TypeSyntax:
        """Build a bound type reference for an annotation or type expression."""
        inner, _ = self._unwrap_annotated(node)
        type_syntax = TypeSyntax(
            ast.unparse(inner), lineno=getattr(node, "lineno", None)
        )
        self.model.bind_type(type_syntax, self._resolve_type(inner))
        return type_syntax

    def _is_type_name(self, full_name: str | None) -> bool:
        if full_name is None:
            return False
        return is_known_type(full_name) or full_name.startswith(
            f"{self.imports.module_name}."
        )

    # Declarations

    def _build_class(self, node: ast.ClassDef, scope: str) -> TypeDeclaration:
        full_name = f"{scope}.{node.name}"
        bases = tuple(self._type_syntax(base) for base in node.bases)
        interfaces = tuple(
            self._type_of(base) or TypeSymbol(base.name) for base in bases
        )

        fields: list[FieldDeclaration] = []
        self._fields = {}
        for stmt in node.body:
            match stmt:
                case ast.AnnAssign(target=ast.Name(id=name), value=value) if (
                    not isinstance(value, ast.Lambda)
                ):
                    type_syntax = self._type_syntax(stmt.annotation)
                    fields.append(
                        FieldDeclaration(name, type_syntax, lineno=stmt.lineno)
                    )
                    self._fields[name] = self._type_of(type_syntax)
        self._methods = self._collect_return_types(node)

        methods: list[MethodDeclaration] = []
        types: list[TypeDeclaration] = []
        for stmt in node.body:
            match stmt:
                case ast.FunctionDef():
                    methods.append(self._build_method(stmt))
                case ast.Assign(targets=[ast.Name(id=name)], value=ast.Lambda() as fn):
                    methods.append(
                        self._build_lambda_method(name, fn, None, stmt.lineno)
                    )
                case ast.AnnAssign(
                    target=ast.Name(id=name), value=ast.Lambda() as fn
                ):
                    methods.append(
                        self._build_lambda_method(
                            name, fn, stmt.annotation, stmt.lineno
                        )
                    )
                case ast.AsyncFunctionDef():
                    logger.debug(f"Skipping async method {full_name}.{stmt.name}")
                case ast.ClassDef():
                    outer = self._fields, self._methods
                    types.append(self._build_class(stmt, full_name))
                    self._fields, self._methods = outer

        declaration = TypeDeclaration(
            name=node.name,
            full_name=full_name,
            bases=bases,
            fields=tuple(fields),
            methods=tuple(methods),
            types=tuple(types),
            lineno=node.lineno,
        )
        self.model.bind_declaration(
            declaration, NamedTypeSymbol(full_name, interfaces=interfaces)
        )
        logger.debug(
            f"Collected class: {full_name}, bases: {[b.name for b in bases]}, "
            f"methods: {[m.name for m in methods]}"
        )
        return declaration

    def _split_callable(
        self, annotation: ast.expr | None
    ) -> tuple[list[ast.expr], ast.expr | None]:
        """Split ``Callable[[A, ...], R]`` into its parameter and return types."""
        if (
            isinstance(annotation, ast.Subscript)
            and self._resolve(annotation.value) in CALLABLE_NAMES
            and isinstance(annotation.slice, ast.Tuple)
            and len(annotation.slice.elts) == 2
        ):
            arg_list, returns = annotation.slice.elts
            if isinstance(arg_list, ast.List):
                return list(arg_list.elts), returns
            return [], returns
        return [], None

    def _collect_return_types(
        self, node: ast.ClassDef
    ) -> dict[str, TypeSymbol | None]:
        """Resolve the declared return type of every method in a class body.

        Collected before any body is built, so a method may call one that is
        defined after it.
        """
        returns: dict[str, TypeSymbol | None] = {}
        for stmt in node.body:
            match stmt:
                case ast.FunctionDef(name=name, returns=annotation):
                    returns[name] = (
                        self._resolve_type(annotation) if annotation else None
                    )
                case ast.AnnAssign(
                    target=ast.Name(id=name), annotation=annotation, value=ast.Lambda()
                ):
                    _, return_node = self._split_callable(annotation)
                    returns[name] = (
                        self._resolve_type(return_node) if return_node else None
                    )
        return returns

    def _enter_method(
        self, return_type: TypeSymbol | None, self_name: str | None
    ) -> None:
        self.symbols = {}
        self._return_type = return_type
        self._self_name = self_name
        self._hoisted = []
        self._depth = 0

    def _build_method(self, node: ast.FunctionDef) -> MethodDeclaration:
        is_static = any(
            self._resolve(decorator) in STATIC_DECORATORS
            for decorator in node.decorator_list
        )
        args = [*node.args.posonlyargs, *node.args.args]
        defaults = _aligned_defaults(args, node.args.defaults)
        if node.args.vararg or node.args.kwarg or node.args.kwonlyargs:
            logger.warning(
                f"Method '{node.name}' uses *args, **kwargs or keyword-only "
                "parameters; only positional parameters are translated"
            )

        self_name = None
        if not is_static and args:
            self_name = args[0].arg
            args, defaults = args[1:], defaults[1:]

        return_syntax = self._type_syntax(node.returns) if node.returns else None
        self._enter_method(self._type_of(return_syntax), self_name)

        parameters = tuple(
            self._build_parameter(arg, default)
            for arg, default in zip(args, defaults)
        )

        body = None
        if not _is_signature_only(node.body):
            statements = node.body[1:] if _is_docstring(node.body[0]) else node.body
            body = self._build_block(statements, node.lineno)
            if self._hoisted:
                body = Block(
                    tuple(self._hoisted) + body.statements, lineno=body.lineno
                )

        return MethodDeclaration(
            name=node.name,
            return_type=return_syntax,
            parameters=parameters,
            body=body,
            is_static=is_static,
            lineno=node.lineno,
        )

    def _build_lambda_method(
        self,
        name: str,
        node: ast.Lambda,
        annotation: ast.expr | None,
        lineno: int,
    ) -> MethodDeclaration:
        """Build an expression-bodied method from ``name = lambda self, ...: expr``.

        Parameter and return types come from a ``Callable[[...], R]``
        annotation on the class attribute, when present.
        """
        parameter_nodes, returns = self._split_callable(annotation)
        parameter_types: list[ast.expr | None] = list(parameter_nodes)
        return_syntax = self._type_syntax(returns) if returns is not None else None

        args = [*node.args.posonlyargs, *node.args.args]
        defaults = _aligned_defaults(args, node.args.defaults)
        self_name = args[0].arg if args else None
        args, defaults = args[1:], defaults[1:]
        parameter_types += [None] * (len(args) - len(parameter_types))

        self._enter_method(self._type_of(return_syntax), self_name)

        parameters = []
        for arg, type_node, default in zip(args, parameter_types, defaults):
            type_syntax = None
            if type_node is not None:
                type_syntax = self._type_syntax(type_node)
            parameters.append(
                self._make_parameter(arg.arg, type_syntax, (), default, lineno)
            )

        return MethodDeclaration(
            name=name,
            return_type=return_syntax,
            parameters=tuple(parameters),
            expression_body=self._build_expr(node.body, self._return_type),
            lineno=lineno,
        )

    def _build_parameter(self, arg: ast.arg, default: ast.expr | None) -> Parameter:
        type_syntax = None
        decorations: tuple[str, ...] = ()
        if arg.annotation is not None:
            _, metadata = self._unwrap_annotated(arg.annotation)
            decorations = tuple(ast.unparse(meta) for meta in metadata)
            type_syntax = self._type_syntax(arg.annotation)
        return self._make_parameter(
            arg.arg, type_syntax, decorations, default, arg.lineno
        )

    def _make_parameter(
        self,
        name: str,
        type_syntax: TypeSyntax | None,
        decorations: tuple[str, ...],
        default: ast.expr | None,
        lineno: int | None,
    ) -> Parameter:
        symbol = self._type_of(type_syntax)
        default_expr = None
        if default is not None:
            default_expr = self._build_expr(default, symbol)
        parameter = Parameter(
            name=name,
            type=type_syntax,
            decorations=decorations,
            default=default_expr,
            lineno=lineno,
        )
        self.model.bind_type(parameter, symbol)
        self.symbols[name] = symbol
        return parameter

    # Statements

    def _build_block(
        self, statements: list[ast.stmt], lineno: int | None = None
    ) -> Block:
        return Block(
            tuple(self._build_stmt(stmt) for stmt in statements),
            lineno=statements[0].lineno if statements else lineno,
        )

    def _build_nested_block(
        self, statements: list[ast.stmt], lineno: int | None = None
    ) -> Block:
        """Build the body of a branch or loop."""
        self._depth += 1
        try:
            return self._build_block(statements, lineno)
        finally:
            self._depth -= 1

    def _opaque_stmt(self, node: ast.stmt) -> OpaqueStatement:
        logger.debug(f"Keeping unsupported statement verbatim: {type(node).__name__}")
        return OpaqueStatement(ast.unparse(node), lineno=node.lineno)

    def _declare(
        self,
        name: str,
        type_syntax: TypeSyntax | None,
        initializer: Expression | None,
        symbol: TypeSymbol | None,
        lineno: int | None,
    ) -> LocalDeclaration:
        declaration = LocalDeclaration(type_syntax, name, initializer, lineno=lineno)
        self.model.bind_type(declaration, symbol)
        self.symbols[name] = symbol
        return declaration

    def _declare_local(
        self,
        name: str,
        type_syntax: TypeSyntax | None,
        initializer: Expression | None,
        symbol: TypeSymbol | None,
        lineno: int,
    ) -> Statement:
        """Declare a local at its first assignment.

        Python locals live until the end of the method, so a local first
        assigned inside a branch or loop is declared at the top of the method
        body and assigned where it appears. A name already in scope is only
        assigned.
        """
        if name not in self.symbols:
            if not self._depth:
                return self._declare(name, type_syntax, initializer, symbol, lineno)
            self._hoisted.append(self._declare(name, type_syntax, None, symbol, lineno))
        if initializer is None:
            return EmptyStatement(lineno=lineno)
        target = self._typed(Identifier(name, lineno=lineno), self.symbols[name])
        return ExpressionStatement(
            AssignmentExpression("=", target, initializer, lineno=lineno),
            lineno=lineno,
        )

    def _assign(
        self, op: str, target: ast.expr, value: ast.expr, lineno: int
    ) -> ExpressionStatement:
        target_expr = self._build_expr(target)
        value_expr = self._build_expr(value, self._type_of(target_expr))
        return ExpressionStatement(
            AssignmentExpression(op, target_expr, value_expr, lineno=lineno),
            lineno=lineno,
        )

    def _build_stmt(self, node: ast.stmt) -> Statement:
        """Build a statement from an AST statement."""
        lineno = node.lineno
        match node:
            case ast.AnnAssign(target=ast.Name(id=name), annotation=annotation):
                type_syntax = self._type_syntax(annotation)
                symbol = self._type_of(type_syntax)
                initializer = None
                if node.value is not None:
                    initializer = self._build_expr(node.value, symbol)
                return self._declare_local(
                    name, type_syntax, initializer, symbol, lineno
                )

            case ast.AnnAssign(target=target, value=value) if value is not None:
                return self._assign("=", target, value, lineno)

            case ast.Assign(targets=[ast.Name(id=name)], value=value) if (
                name not in self.symbols
            ):
                initializer = self._build_expr(value)
                return self._declare_local(
                    name, None, initializer, self._type_of(initializer), lineno
                )

            case ast.Assign(
                targets=[ast.Name() | ast.Attribute() | ast.Subscript() as target],
                value=value,
            ):
                return self._assign("=", target, value, lineno)

            case ast.AugAssign(target=target, op=ast.FloorDiv(), value=value):
                target_expr = self._build_expr(target)
                target_type = self._type_of(target_expr)
                value_expr = self._build_expr(value, target_type)
                if _is_integral(target_type) and _is_integral(
                    self._type_of(value_expr)
                ):
                    assignment = AssignmentExpression(
                        "/=", target_expr, value_expr, lineno=lineno
                    )
                else:
                    quotient = self._floor_divide(
                        self._build_expr(target), value_expr, lineno
                    )
                    assignment = AssignmentExpression(
                        "=", target_expr, quotient, lineno=lineno
                    )
                return ExpressionStatement(assignment, lineno=lineno)

            case ast.AugAssign(target=target, op=op, value=value) if (
                type(op) in BINARY_OPERATORS
            ):
                op_str = f"{BINARY_OPERATORS[type(op)]}="
                return self._assign(op_str, target, value, lineno)

            case ast.Expr(value=value):
                return ExpressionStatement(self._build_expr(value), lineno=lineno)

            case ast.Return(value=value):
                return_value = None
                if value is not None:
                    return_value = self._build_expr(value, self._return_type)
                return ReturnStatement(return_value, lineno=lineno)

            case ast.If(test=test, body=body, orelse=orelse):
                return self._build_if(test, body, orelse, lineno)

            case ast.While(test=test, body=body, orelse=[]):
                return WhileStatement(
                    self._build_expr(test),
                    self._build_nested_block(body, lineno),
                    lineno=lineno,
                )

            case ast.For(
                target=ast.Name(id=name), iter=ast.Call() as call, body=body, orelse=[]
            ) if (
                self._resolve(call.func) == "builtins.range"
                and 1 <= len(call.args) <= 3
                and not call.keywords
            ):
                return self._build_range_loop(name, call, body, lineno)

            case ast.Break():
                return BreakStatement(lineno=lineno)

            case ast.Continue():
                return ContinueStatement(lineno=lineno)

            case ast.Pass():
                return EmptyStatement(lineno=lineno)

        return self._opaque_stmt(node)

    def _build_if(
        self,
        test: ast.expr,
        body: list[ast.stmt],
        orelse: list[ast.stmt],
        lineno: int,
    ) -> IfStatement:
        condition = self._build_expr(test)
        then = self._build_nested_block(body, lineno)
        otherwise: Block | IfStatement | None = None
        if len(orelse) == 1 and isinstance(orelse[0], ast.If):
            elif_node = orelse[0]
            otherwise = self._build_if(
                elif_node.test, elif_node.body, elif_node.orelse, elif_node.lineno
            )
        elif orelse:
            otherwise = self._build_nested_block(orelse)
        return IfStatement(condition, then, otherwise, lineno=lineno)

    def _build_range_loop(
        self, name: str, call: ast.Call, body: list[ast.stmt], lineno: int
    ) -> ForStatement:
        """Lower ``for name in range(...)`` to a C-style counting loop."""
        args = [self._build_expr(arg, INT) for arg in call.args]
        start: Expression = Literal(0, lineno=lineno)
        step: Expression = Literal(1, lineno=lineno)
        if len(args) == 1:
            (stop,) = args
        elif len(args) == 2:
            start, stop = args
        else:
            start, stop, step = args

        descending = (isinstance(step, UnaryExpression) and step.op == "-") or (
            isinstance(step, Literal)
            and isinstance(step.value, int)
            and step.value < 0
        )
        declared_before = name in self.symbols
        declaration = self._declare(name, None, start, INT, lineno)
        condition = BinaryExpression(
            ">" if descending else "<",
            Identifier(name, lineno=lineno),
            stop,
            lineno=lineno,
        )
        increment = AssignmentExpression(
            "+=", Identifier(name, lineno=lineno), step, lineno=lineno
        )
        loop_body = self._build_nested_block(body, lineno)
        if not declared_before:
            # The counter is scoped to the loop
            del self.symbols[name]
        return ForStatement(
            declaration, condition, increment, loop_body, lineno=lineno
        )

    # Expressions

    def _typed(self, expr: Expression, symbol: TypeSymbol | None) -> Expression:
        self.model.bind_type(expr, symbol)
        return expr

    def _opaque_expr(self, node: ast.expr) -> OpaqueExpression:
        logger.debug(f"Keeping unsupported expression verbatim: {type(node).__name__}")
        return OpaqueExpression(ast.unparse(node), lineno=getattr(node, "lineno", None))

    def _is_local(self, node: ast.expr) -> bool:
        return isinstance(node, ast.Name) and (
            node.id in self.symbols or node.id == self._self_name
        )

    def _intrinsic_name(self, func: ast.expr) -> str | None:
        """Get the HLSL intrinsic a callee refers to, if any."""
        if self._is_local(func):
            return None
        full_name = self._resolve(func)
        if full_name is None:
            return None
        module, _, name = full_name.rpartition(".")
        if name in INTRINSIC_NAMES and (
            module in INTRINSICS_MODULES or module == "builtins"
        ):
            return name
        return None

    def _build_expr(
        self, node: ast.expr, expected: TypeSymbol | None = None
    ) -> Expression:
        """Build an expression from an AST expression.

        Args:
            node: AST expression
            expected: Type the context expects, used to type ``default``

        Returns:
            The built expression, bound to its inferred type when known
        """
        lineno = getattr(node, "lineno", None)
        match node:
            case ast.Constant(value=bool() as value):
                return self._typed(Literal(value, lineno=lineno), BOOL)

            case ast.Constant(value=int() as value):
                return self._typed(Literal(value, lineno=lineno), INT)

            case ast.Constant(value=float() as value):
                return self._typed(Literal(value, lineno=lineno), FLOAT)

            case ast.Constant(value=str() as value):
                return Literal(value, lineno=lineno)

            case ast.Name(id=name) if name in self.symbols:
                return self._typed(Identifier(name, lineno=lineno), self.symbols[name])

            case ast.Name() if self._resolve(node) in DEFAULT_FUNCTIONS:
                return self._typed(DefaultLiteral(lineno=lineno), expected)

            case ast.Name(id=name) if name != self._self_name:
                return Identifier(name, lineno=lineno)

            case ast.Attribute(value=ast.Name(id=owner), attr=attr) if (
                owner == self._self_name
            ):
                return self._typed(
                    Identifier(attr, lineno=lineno), self._fields.get(attr)
                )

            case ast.Attribute(value=value, attr=attr):
                target = self._build_expr(value)
                return self._typed(
                    MemberAccess(target, attr, lineno=lineno),
                    self._member_type(self._type_of(target), attr),
                )

            case ast.Call(func=func, args=args, keywords=[]) if not any(
                isinstance(arg, ast.Starred) for arg in args
            ):
                return self._build_call(func, args, expected, lineno)

            case ast.BinOp(left=left, op=ast.Pow(), right=right):
                return self._build_intrinsic_call("pow", [left, right], lineno)

            case ast.BinOp(left=left, op=ast.MatMult(), right=right):
                return self._build_intrinsic_call("mul", [left, right], lineno)

            case ast.BinOp(left=left, op=ast.FloorDiv(), right=right):
                left_expr = self._build_expr(left)
                right_expr = self._build_expr(right, self._type_of(left_expr))
                return self._floor_divide(left_expr, right_expr, lineno)

            case ast.BinOp(left=left, op=op, right=right) if (
                type(op) in BINARY_OPERATORS
            ):
                return self._build_binary(
                    BINARY_OPERATORS[type(op)], left, right, lineno
                )

            case ast.Compare(left=left, ops=[op], comparators=[right]) if (
                type(op) in COMPARISON_OPERATORS
            ):
                return self._build_binary(
                    COMPARISON_OPERATORS[type(op)], left, right, lineno
                )

            case ast.BoolOp(op=op, values=[first, *rest]):
                result = self._build_expr(first)
                for value in rest:
                    result = BinaryExpression(
                        BOOLEAN_OPERATORS[type(op)],
                        result,
                        self._build_expr(value),
                        lineno=lineno,
                    )
                return self._typed(result, BOOL)

            case ast.UnaryOp(op=op, operand=operand):
                operand_expr = self._build_expr(operand, expected)
                symbol = self._type_of(operand_expr)
                if isinstance(op, ast.Not):
                    symbol = BOOL
                unary = UnaryExpression(
                    UNARY_OPERATORS[type(op)], operand_expr, lineno=lineno
                )
                return self._typed(unary, symbol)

            case ast.IfExp(test=test, body=body, orelse=orelse):
                when_true = self._build_expr(body, expected)
                when_false = self._build_expr(orelse, expected)
                return self._typed(
                    ConditionalExpression(
                        self._build_expr(test), when_true, when_false, lineno=lineno
                    ),
                    self._type_of(when_true) or self._type_of(when_false),
                )

            case ast.Subscript(value=value, slice=index) if not isinstance(
                index, ast.Slice
            ):
                target = self._build_expr(value)
                elts = index.elts if isinstance(index, ast.Tuple) else [index]
                return self._typed(
                    ElementAccess(
                        target,
                        tuple(self._build_expr(elt) for elt in elts),
                        lineno=lineno,
                    ),
                    self._element_type(self._type_of(target)),
                )

        return self._opaque_expr(node)

    def _build_binary(
        self, op: str, left: ast.expr, right: ast.expr, lineno: int | None
    ) -> Expression:
        left_expr = self._build_expr(left)
        right_expr = self._build_expr(right, self._type_of(left_expr))
        return self._typed(
            BinaryExpression(op, left_expr, right_expr, lineno=lineno),
            _binary_result_type(
                op, self._type_of(left_expr), self._type_of(right_expr)
            ),
        )

    def _floor_divide(
        self, left: Expression, right: Expression, lineno: int | None
    ) -> Expression:
        """Lower ``a // b``.

        Integer operands use integer division; anything else becomes
        ``floor(a / b)``.
        """
        left_type, right_type = self._type_of(left), self._type_of(right)
        result_type = _binary_result_type("/", left_type, right_type)
        quotient = self._typed(
            BinaryExpression("/", left, right, lineno=lineno), result_type
        )
        if _is_integral(left_type) and _is_integral(right_type):
            return quotient
        return self._typed(
            Invocation(Identifier("floor", lineno=lineno), (quotient,), lineno=lineno),
            result_type,
        )

    def _build_intrinsic_call(
        self, name: str, args: list[ast.expr], lineno: int | None
    ) -> Expression:
        arguments = tuple(self._build_expr(arg) for arg in args)
        return self._typed(
            Invocation(Identifier(name, lineno=lineno), arguments, lineno=lineno),
            self._intrinsic_type(name, arguments),
        )

    def _build_call(
        self,
        func: ast.expr,
        args: list[ast.expr],
        expected: TypeSymbol | None,
        lineno: int | None,
    ) -> Expression:
        full_name = None if self._is_local(func) else self._resolve(func)

        if full_name in CAST_FUNCTIONS and len(args) == 2:
            type_syntax = self._type_syntax(args[0])
            symbol = self._type_of(type_syntax)
            operand = self._build_expr(args[1], symbol)
            return self._typed(
                CastExpression(type_syntax, operand, lineno=lineno), symbol
            )

        if full_name in DEFAULT_FUNCTIONS and len(args) == 1:
            type_syntax = self._type_syntax(args[0])
            return self._typed(
                DefaultExpression(type_syntax, lineno=lineno),
                self._type_of(type_syntax),
            )

        if full_name in DEFAULT_FUNCTIONS and not args:
            return self._typed(DefaultLiteral(lineno=lineno), expected)

        if self._is_type_name(full_name):
            type_syntax = self._type_syntax(func)
            arguments = tuple(self._build_expr(arg) for arg in args)
            return self._typed(
                ObjectCreation(type_syntax, arguments, lineno=lineno),
                self._type_of(type_syntax),
            )

        intrinsic = self._intrinsic_name(func)
        if intrinsic is not None:
            return self._build_intrinsic_call(intrinsic, args, lineno)

        arguments = tuple(self._build_expr(arg) for arg in args)
        return self._typed(
            Invocation(self._build_expr(func), arguments, lineno=lineno),
            self._method_return_type(func),
        )

    # Inference

    def _method_return_type(self, func: ast.expr) -> TypeSymbol | None:
        """Get the declared return type of ``self.method`` in the current class."""
        match func:
            case ast.Attribute(value=ast.Name(id=owner), attr=attr) if (
                owner == self._self_name
            ):
                return self._methods.get(attr)
        return None

    def _intrinsic_type(
        self, name: str, arguments: tuple[Expression, ...]
    ) -> TypeSymbol | None:
        if name in BOOLEAN_INTRINSICS:
            return BOOL
        first = self._type_of(arguments[0]) if arguments else None
        if name in SCALAR_RESULT_INTRINSICS:
            return element_type(first)
        if name in PRESERVING_INTRINSICS:
            return first
        if name == "mul" and len(arguments) == 2:
            second = self._type_of(arguments[1])
            return second if is_vector(second) else first
        return None

    def _member_type(self, owner: TypeSymbol | None, attr: str) -> TypeSymbol | None:
        """Infer the type of a swizzle such as ``v.xy`` on a vector."""
        if not is_vector(owner) or not 1 <= len(attr) <= 4:
            return None
        if not any(all(c in chars for c in attr) for chars in SWIZZLE_SETS):
            return None
        return vector_type(element_type(owner), len(attr))

    def _element_type(self, owner: TypeSymbol | None) -> TypeSymbol | None:
        """Infer the type of ``owner[i]``.

        Generic containers yield their first type argument, vectors their
        component type and matrices a row vector.
        """
        if owner is None:
            return None
        if owner.type_arguments:
            return owner.type_arguments[0]
        if is_vector(owner):
            return element_type(owner)
        element = element_type(owner)
        if element is not None and "x" in owner.name:
            return vector_type(element, int(owner.name[-1]))
        return None
