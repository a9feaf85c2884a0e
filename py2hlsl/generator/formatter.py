"""HLSL text rendering of the syntax tree.

The output is normalized: four-space indentation, one statement per line,
opening braces on the header line, and parentheses only where operator
precedence requires them. Rendering the same tree always yields the same text.
"""

from py2hlsl.generator.constants import OPERATOR_PRECEDENCE
from py2hlsl.generator.normalizer import normalize_body
from py2hlsl.generator.syntax import (
    AssignmentExpression,
    BinaryExpression,
    Block,
    BreakStatement,
    CastExpression,
    ConditionalExpression,
    ContinueStatement,
    DefaultExpression,
    DefaultLiteral,
    ElementAccess,
    EmptyStatement,
    Expression,
    ExpressionStatement,
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
    TypeSyntax,
    UnaryExpression,
    WhileStatement,
)

INDENT = "    "

_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _get_precedence(expr: Expression) -> int:
    """Get the precedence of an expression for parenthesization."""
    match expr:
        case BinaryExpression(op=op):
            return OPERATOR_PRECEDENCE.get(op, 0)
        case UnaryExpression() | CastExpression():
            return OPERATOR_PRECEDENCE["unary"]
        case ConditionalExpression():
            return OPERATOR_PRECEDENCE["?"]
        case AssignmentExpression():
            return OPERATOR_PRECEDENCE["="]
        case Invocation() | ObjectCreation() | DefaultExpression():
            return OPERATOR_PRECEDENCE["call"]
        case MemberAccess() | ElementAccess():
            return OPERATOR_PRECEDENCE["member"]
        case Literal(value=int() | float() as value) if value < 0:
            return OPERATOR_PRECEDENCE["unary"]
        case OpaqueExpression():
            # Host text may hold any operator
            return 0
        case _:
            return 100


def format_literal(value: bool | int | float | str) -> str:
    """Render a literal value in HLSL syntax."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        escaped = "".join(_STRING_ESCAPES.get(char, char) for char in value)
        return f'"{escaped}"'
    return repr(value)


class Formatter:
    """Renders syntax nodes as HLSL source text."""

    def format(self, node: SyntaxNode) -> str:
        match node:
            case MethodDeclaration():
                return "\n".join(self._emit_method(node))
            case Statement():
                return "\n".join(self._emit_stmt(node, 0))
            case Expression():
                return self._emit_expr(node)
            case Parameter():
                return self._emit_param(node)
            case TypeSyntax(name=name):
                return name
        raise TypeError(f"Cannot format {type(node).__name__}")

    def _emit_method(self, method: MethodDeclaration) -> list[str]:
        return_type = method.return_type.name if method.return_type else "void"
        params = ", ".join(self._emit_param(p) for p in method.parameters)
        body = normalize_body(method).body or Block()
        lines = [f"{return_type} {method.name}({params}) {{"]
        lines.extend(self._emit_body(body, 1))
        lines.append("}")
        return lines

    def _emit_param(self, param: Parameter) -> str:
        text = f"{param.type.name} {param.name}" if param.type else param.name
        if param.default is not None:
            text += f" = {self._emit_expr(param.default)}"
        return text

    def _emit_body(self, block: Block, indent: int) -> list[str]:
        lines: list[str] = []
        for stmt in block.statements:
            lines.extend(self._emit_stmt(stmt, indent))
        return lines

    def _emit_declaration(self, decl: LocalDeclaration) -> str:
        text = f"{decl.type.name} {decl.name}" if decl.type else decl.name
        if decl.initializer is not None:
            text += f" = {self._emit_expr(decl.initializer)}"
        return text

    def _emit_stmt(self, stmt: Statement, indent: int) -> list[str]:
        prefix = INDENT * indent

        match stmt:
            case Block():
                return [
                    f"{prefix}{{",
                    *self._emit_body(stmt, indent + 1),
                    f"{prefix}}}",
                ]

            case ExpressionStatement(expression=expr):
                return [f"{prefix}{self._emit_expr(expr)};"]

            case LocalDeclaration():
                return [f"{prefix}{self._emit_declaration(stmt)};"]

            case ReturnStatement(value=None):
                return [f"{prefix}return;"]

            case ReturnStatement(value=value):
                return [f"{prefix}return {self._emit_expr(value)};"]

            case IfStatement():
                return self._emit_if(stmt, indent)

            case WhileStatement(condition=condition, body=body):
                return [
                    f"{prefix}while ({self._emit_expr(condition)}) {{",
                    *self._emit_body(body, indent + 1),
                    f"{prefix}}}",
                ]

            case ForStatement(
                declaration=decl, condition=condition, increment=increment, body=body
            ):
                header = (
                    f"{self._emit_declaration(decl)}; "
                    f"{self._emit_expr(condition)}; "
                    f"{self._emit_expr(increment)}"
                )
                return [
                    f"{prefix}for ({header}) {{",
                    *self._emit_body(body, indent + 1),
                    f"{prefix}}}",
                ]

            case BreakStatement():
                return [f"{prefix}break;"]

            case ContinueStatement():
                return [f"{prefix}continue;"]

            case EmptyStatement():
                return [f"{prefix};"]

            case OpaqueStatement(text=text):
                return [f"{prefix}{line}" for line in text.splitlines()]

        raise TypeError(f"Cannot format statement {type(stmt).__name__}")

    def _emit_if(self, stmt: IfStatement, indent: int) -> list[str]:
        prefix = INDENT * indent
        lines = [f"{prefix}if ({self._emit_expr(stmt.condition)}) {{"]
        lines.extend(self._emit_body(stmt.then, indent + 1))
        orelse = stmt.orelse
        while isinstance(orelse, IfStatement):
            condition = self._emit_expr(orelse.condition)
            lines.append(f"{prefix}}} else if ({condition}) {{")
            lines.extend(self._emit_body(orelse.then, indent + 1))
            orelse = orelse.orelse
        if orelse is not None:
            lines.append(f"{prefix}}} else {{")
            lines.extend(self._emit_body(orelse, indent + 1))
        lines.append(f"{prefix}}}")
        return lines

    def _emit_expr(self, expr: Expression, parent_precedence: int = 0) -> str:
        """Emit an expression, adding parentheses only when necessary.

        Args:
            expr: The expression to emit
            parent_precedence: Precedence of parent operator (0 = top-level/statement)
        """
        result = self._emit_expr_inner(expr)
        if parent_precedence > 0 and _get_precedence(expr) < parent_precedence:
            return f"({result})"
        return result

    def _emit_args(self, args: tuple[Expression, ...]) -> str:
        return ", ".join(self._emit_expr(arg) for arg in args)

    def _emit_expr_inner(self, expr: Expression) -> str:
        """Emit expression without outer parentheses."""
        member_precedence = OPERATOR_PRECEDENCE["member"]
        unary_precedence = OPERATOR_PRECEDENCE["unary"]

        match expr:
            case Literal(value=value):
                return format_literal(value)

            case Identifier(name=name):
                return name

            case DefaultLiteral():
                return "default"

            case DefaultExpression(type=type_syntax):
                return f"default({type_syntax.name})"

            case CastExpression(type=type_syntax, operand=operand):
                operand_str = self._emit_expr(operand, unary_precedence)
                return f"({type_syntax.name}){operand_str}"

            case ObjectCreation(type=type_syntax, arguments=args):
                return f"{type_syntax.name}({self._emit_args(args)})"

            case Invocation(target=target, arguments=args):
                target_str = self._emit_expr(target, OPERATOR_PRECEDENCE["call"])
                return f"{target_str}({self._emit_args(args)})"

            case MemberAccess(target=target, name=name):
                return f"{self._emit_expr(target, member_precedence)}.{name}"

            case ElementAccess(target=target, indices=indices):
                target_str = self._emit_expr(target, member_precedence)
                return target_str + "".join(
                    f"[{self._emit_expr(index)}]" for index in indices
                )

            case UnaryExpression(op=op, operand=operand):
                operand_str = self._emit_expr(operand, unary_precedence)
                if isinstance(operand, UnaryExpression) or operand_str.startswith(op):
                    # Keep "- -x" from becoming the decrement operator
                    operand_str = f"({operand_str})"
                return f"{op}{operand_str}"

            case BinaryExpression(op=op, left=left, right=right):
                my_prec = OPERATOR_PRECEDENCE.get(op, 0)
                left_str = self._emit_expr(left, my_prec)
                # Left-associative: a right child of equal precedence needs parens
                right_str = self._emit_expr(right, my_prec + 1)
                return f"{left_str} {op} {right_str}"

            case ConditionalExpression(
                condition=condition, when_true=when_true, when_false=when_false
            ):
                cond_str = self._emit_expr(condition, OPERATOR_PRECEDENCE["?"] + 1)
                true_str = self._emit_expr(when_true)
                false_str = self._emit_expr(when_false)
                return f"{cond_str} ? {true_str} : {false_str}"

            case AssignmentExpression(op=op, target=target, value=value):
                return f"{self._emit_expr(target)} {op} {self._emit_expr(value)}"

            case OpaqueExpression(text=text):
                return text

        raise TypeError(f"Cannot format expression {type(expr).__name__}")


def format_node(node: SyntaxNode) -> str:
    """Render a syntax node as normalized HLSL text.

    Args:
        node: Method declaration, statement, expression, parameter or type

    Returns:
        The HLSL source text, without a trailing newline
    """
    return Formatter().format(node)
