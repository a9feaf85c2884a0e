"""Tests for the body normalizer."""

from py2hlsl.generator import normalize_body
from py2hlsl.generator.syntax import (
    BinaryExpression,
    Block,
    ExpressionStatement,
    Identifier,
    Literal,
    MethodDeclaration,
    ReturnStatement,
    TypeSyntax,
)


def test_block_body_is_unchanged():
    """Test that a block-bodied method is returned as is."""
    body = Block((ReturnStatement(Identifier("x")),))
    method = MethodDeclaration("f", TypeSyntax("float"), body=body)

    normalized = normalize_body(method)

    assert normalized is method
    assert normalized.body == Block((ReturnStatement(Identifier("x")),))


def test_normalization_is_idempotent():
    method = MethodDeclaration(
        "f", None, expression_body=BinaryExpression("*", Identifier("x"), Literal(2))
    )
    once = normalize_body(method)
    assert normalize_body(once) is once


def test_expression_body_is_wrapped():
    """Test that an expression body becomes a one-statement block."""
    expression = BinaryExpression("*", Identifier("x"), Literal(2))
    method = MethodDeclaration("f", TypeSyntax("float"), expression_body=expression)

    normalized = normalize_body(method)

    assert normalized.expression_body is None
    assert normalized.body == Block((ExpressionStatement(expression),))
    assert normalized.body.statements[0].expression is expression
    assert method.expression_body is expression


def test_missing_body_becomes_empty_block():
    """Test that a signature-only method gets an empty block."""
    method = MethodDeclaration("f", TypeSyntax("float"))

    normalized = normalize_body(method)

    assert normalized.body == Block(())
    assert normalized.name == "f"
    assert normalized.return_type == TypeSyntax("float")
