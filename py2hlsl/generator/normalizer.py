"""Normalization of method bodies to the block form."""

from dataclasses import replace

from py2hlsl.generator.syntax import Block, ExpressionStatement, MethodDeclaration


def normalize_body(method: MethodDeclaration) -> MethodDeclaration:
    """Give a method a block body.

    A method that already has a block body is returned as is. An expression
    body becomes a block holding that expression as its only statement, and a
    signature-only method gets an empty block.

    Args:
        method: Method declaration to normalize

    Returns:
        A method declaration whose ``body`` is set and ``expression_body`` is None
    """
    if method.body is not None and method.expression_body is None:
        return method
    if method.expression_body is not None:
        statement = ExpressionStatement(
            method.expression_body, lineno=method.expression_body.lineno
        )
        body = Block((statement,), lineno=method.lineno)
    else:
        body = Block((), lineno=method.lineno)
    return replace(method, body=body, expression_body=None)
