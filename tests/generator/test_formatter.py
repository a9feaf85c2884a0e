"""Tests for HLSL text rendering."""

import pytest

from py2hlsl.generator.formatter import format_literal, format_node
from py2hlsl.generator.syntax import (
    AssignmentExpression,
    BinaryExpression,
    Block,
    CastExpression,
    ConditionalExpression,
    ElementAccess,
    ExpressionStatement,
    Identifier,
    IfStatement,
    Invocation,
    Literal,
    LocalDeclaration,
    MemberAccess,
    MethodDeclaration,
    OpaqueStatement,
    Parameter,
    ReturnStatement,
    TypeSyntax,
    UnaryExpression,
    WhileStatement,
)

a, b, c = Identifier("a"), Identifier("b"), Identifier("c")


class TestLiterals:
    """Test literal rendering."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (True, "true"),
            (False, "false"),
            (3, "3"),
            (1.0, "1.0"),
            (0.25, "0.25"),
            ("a\"b\n", '"a\\"b\\n"'),
        ],
    )
    def test_literal(self, value, expected):
        assert format_literal(value) == expected


class TestPrecedence:
    """Test that parentheses appear only where needed."""

    def test_higher_precedence_child_needs_no_parens(self):
        expr = BinaryExpression("+", BinaryExpression("*", a, b), c)
        assert format_node(expr) == "a * b + c"

    def test_lower_precedence_child_is_parenthesized(self):
        expr = BinaryExpression("*", BinaryExpression("+", a, b), c)
        assert format_node(expr) == "(a + b) * c"

    def test_left_associativity(self):
        """Test that an equal-precedence right child keeps its grouping."""
        left = BinaryExpression("-", BinaryExpression("-", a, b), c)
        right = BinaryExpression("-", a, BinaryExpression("-", b, c))
        assert format_node(left) == "a - b - c"
        assert format_node(right) == "a - (b - c)"

    def test_cast_operand(self):
        float3 = TypeSyntax("float3")
        assert format_node(CastExpression(float3, Literal(0))) == "(float3)0"
        assert format_node(CastExpression(float3, MemberAccess(a, "xyz"))) == (
            "(float3)a.xyz"
        )
        assert format_node(CastExpression(float3, BinaryExpression("+", a, b))) == (
            "(float3)(a + b)"
        )

    def test_unary_operand(self):
        assert format_node(UnaryExpression("-", BinaryExpression("+", a, b))) == (
            "-(a + b)"
        )
        assert format_node(UnaryExpression("-", UnaryExpression("-", a))) == "-(-a)"
        assert format_node(UnaryExpression("!", a)) == "!a"

    def test_member_and_element_access(self):
        target = BinaryExpression("+", a, b)
        assert format_node(MemberAccess(target, "x")) == "(a + b).x"
        assert format_node(ElementAccess(a, (Literal(1), Literal(2)))) == "a[1][2]"

    def test_invocation(self):
        call = Invocation(Identifier("lerp"), (a, b, Literal(0.5)))
        assert format_node(call) == "lerp(a, b, 0.5)"

    def test_conditional(self):
        expr = ConditionalExpression(BinaryExpression(">", a, b), a, b)
        assert format_node(expr) == "a > b ? a : b"

    def test_assignment(self):
        expr = AssignmentExpression("+=", a, BinaryExpression("*", b, c))
        assert format_node(expr) == "a += b * c"


class TestStatements:
    """Test statement and method layout."""

    def test_method_layout(self):
        method = MethodDeclaration(
            "clampit",
            TypeSyntax("float"),
            (
                Parameter("x", TypeSyntax("float")),
                Parameter("hi", TypeSyntax("float"), default=Literal(1.0)),
            ),
            Block(
                (
                    IfStatement(
                        BinaryExpression(">", Identifier("x"), Identifier("hi")),
                        Block((ReturnStatement(Identifier("hi")),)),
                    ),
                    ReturnStatement(Identifier("x")),
                )
            ),
        )
        expected = """\
float clampit(float x, float hi = 1.0) {
    if (x > hi) {
        return hi;
    }
    return x;
}"""
        assert format_node(method) == expected

    def test_empty_method(self):
        method = MethodDeclaration("noop", TypeSyntax("void"), body=Block())
        assert format_node(method) == "void noop() {\n}"

    def test_missing_return_type_renders_void(self):
        method = MethodDeclaration("noop", None, body=Block())
        assert format_node(method) == "void noop() {\n}"

    def test_if_else_chain(self):
        stmt = IfStatement(
            a,
            Block((ExpressionStatement(Invocation(Identifier("f"))),)),
            IfStatement(b, Block(), Block((ReturnStatement(),))),
        )
        expected = """\
if (a) {
    f();
} else if (b) {
} else {
    return;
}"""
        assert format_node(stmt) == expected

    def test_while(self):
        stmt = WhileStatement(
            a, Block((ExpressionStatement(AssignmentExpression("-=", b, c)),))
        )
        assert format_node(stmt) == "while (a) {\n    b -= c;\n}"

    def test_local_declaration(self):
        stmt = LocalDeclaration(TypeSyntax("int"), "n", Literal(3))
        assert format_node(stmt) == "int n = 3;"
        assert format_node(LocalDeclaration(TypeSyntax("int"), "m")) == "int m;"

    def test_nested_block(self):
        stmt = Block((Block((ExpressionStatement(a),)),))
        assert format_node(stmt) == "{\n    {\n        a;\n    }\n}"

    def test_opaque_statement_keeps_its_lines(self):
        block = Block((OpaqueStatement("with lock:\n    x = 1"),))
        assert format_node(block) == "{\n    with lock:\n        x = 1\n}"

    def test_unknown_node_raises(self):
        with pytest.raises(TypeError):
            format_node(object())  # type: ignore[arg-type]
