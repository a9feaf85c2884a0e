"""Tests for lowering Python classes to the shader syntax tree."""

from py2hlsl.generator.syntax import (
    AssignmentExpression,
    BinaryExpression,
    Block,
    ExpressionStatement,
    ForStatement,
    Identifier,
    Invocation,
    Literal,
    LocalDeclaration,
    OpaqueStatement,
    ReturnStatement,
)
from py2hlsl.generator.type_mappings import hlsl_type_name


def _method(unit, name, type_index=0):
    declaration = unit.tree.types[type_index]
    return next(m for m in declaration.methods if m.name == name)


class TestDeclarations:
    """Test classes, fields and method signatures."""

    def test_class_members(self, parse):
        unit = parse(
            """
            class Blur(ComputeShader):
                radius: int
                weights: ReadWriteBuffer[float]

                def execute(self, ids: ThreadIds) -> None:
                    pass

                class Params:
                    scale: float
            """
        )
        blur = unit.tree.types[0]
        model = unit.semantic_model

        assert blur.full_name == "shaders.test.Blur"
        assert [f.name for f in blur.fields] == ["radius", "weights"]
        assert [m.name for m in blur.methods] == ["execute"]
        assert blur.types[0].full_name == "shaders.test.Blur.Params"

        buffer_type = model.get_type_info(blur.fields[1].type)
        assert buffer_type.full_name == "py2hlsl.ReadWriteBuffer"
        assert [str(a) for a in buffer_type.type_arguments] == ["builtins.float"]

        symbol = model.get_declared_symbol(blur)
        assert [i.full_name for i in symbol.interfaces] == ["py2hlsl.ComputeShader"]

    def test_self_is_dropped_and_parameters_typed(self, parse):
        """Test that the receiver is not a parameter and the rest are resolved."""
        unit = parse(
            """
            class Shader(ComputeShader):
                def helper(self, x: float, n: Annotated[int, "in"] = 2) -> float:
                    return x
            """
        )
        method = _method(unit, "helper")
        model = unit.semantic_model

        assert [p.name for p in method.parameters] == ["x", "n"]
        assert method.parameters[1].decorations == ("'in'",)
        assert method.parameters[1].default == Literal(2)
        assert hlsl_type_name(model.get_type_info(method.parameters[1])) == "int"
        assert hlsl_type_name(model.get_type_info(method.return_type)) == "float"

    def test_static_method_keeps_first_parameter(self, parse):
        unit = parse(
            """
            class Shader(ComputeShader):
                @staticmethod
                def twice(x: float) -> float:
                    return x * 2.0
            """
        )
        method = _method(unit, "twice")
        assert method.is_static
        assert [p.name for p in method.parameters] == ["x"]

    def test_signature_only_method_has_no_body(self, parse):
        unit = parse(
            '''
            class Shader(ComputeShader):
                def hook(self) -> None:
                    """Implemented by subclasses."""
                    ...
            '''
        )
        method = _method(unit, "hook")
        assert method.body is None
        assert method.expression_body is None

    def test_docstring_is_not_a_statement(self, parse):
        unit = parse(
            '''
            class Shader(ComputeShader):
                def execute(self, ids: ThreadIds) -> None:
                    """Docs."""
                    return
            '''
        )
        assert _method(unit, "execute").body == Block((ReturnStatement(),))

    def test_lambda_method(self, parse):
        """Test that a typed lambda attribute becomes an expression-bodied method."""
        unit = parse(
            """
            class Shader(ComputeShader):
                scale: Callable[[float], float] = lambda self, x: x * 2.0
            """
        )
        shader = unit.tree.types[0]
        method = shader.methods[0]

        assert shader.fields == ()
        assert method.name == "scale"
        assert [p.name for p in method.parameters] == ["x"]
        assert method.expression_body == BinaryExpression(
            "*", Identifier("x"), Literal(2.0)
        )

    def test_async_methods_are_skipped(self, parse):
        unit = parse(
            """
            class Shader(ComputeShader):
                async def load(self) -> None:
                    pass
            """
        )
        assert unit.tree.types[0].methods == ()


class TestStatements:
    """Test statement lowering and local type inference."""

    def test_first_assignment_declares_a_local(self, parse):
        unit = parse(
            """
            class Shader(ComputeShader):
                def execute(self, ids: ThreadIds) -> None:
                    total = 1.0
                    total = total + ids.x
            """
        )
        first, second = _method(unit, "execute").body.statements
        model = unit.semantic_model

        assert isinstance(first, LocalDeclaration)
        assert first.type is None
        assert hlsl_type_name(model.get_type_info(first)) == "float"
        assert isinstance(second, ExpressionStatement)
        assert isinstance(second.expression, AssignmentExpression)

    def test_inferred_vector_types(self, parse):
        unit = parse(
            """
            class Shader(ComputeShader):
                def execute(self, ids: ThreadIds) -> None:
                    v = Float3(1.0, 2.0, 3.0)
                    xy = v.xy
                    scaled = v * 2.0
                    d = dot(v, v)
                    n = ids.x * 0.5
            """
        )
        statements = _method(unit, "execute").body.statements
        model = unit.semantic_model
        types = [hlsl_type_name(model.get_type_info(s)) for s in statements]
        assert types == ["float3", "float2", "float3", "float", "float"]

    def test_range_loop(self, parse):
        unit = parse(
            """
            class Shader(ComputeShader):
                def execute(self, ids: ThreadIds) -> None:
                    for i in range(10, 0, -2):
                        pass
            """
        )
        (loop,) = _method(unit, "execute").body.statements
        assert isinstance(loop, ForStatement)
        assert loop.declaration.initializer == Literal(10)
        assert loop.condition.op == ">"
        assert loop.increment.op == "+="

    def test_branch_local_is_hoisted(self, parse):
        """Test that a branch assignment declares its local at the method top."""
        unit = parse(
            """
            class Shader(ComputeShader):
                def execute(self, ids: ThreadIds) -> None:
                    if ids.x > 0:
                        x = 1.0
                    else:
                        x = 2.0
            """
        )
        declaration, branch = _method(unit, "execute").body.statements
        model = unit.semantic_model

        assert isinstance(declaration, LocalDeclaration)
        assert declaration.name == "x"
        assert declaration.initializer is None
        assert hlsl_type_name(model.get_type_info(declaration)) == "float"
        (then,) = branch.then.statements
        (otherwise,) = branch.orelse.statements
        assert then.expression.value == Literal(1.0)
        assert otherwise.expression.value == Literal(2.0)

    def test_sibling_call_has_return_type(self, parse):
        unit = parse(
            """
            class Shader(ComputeShader):
                def execute(self, ids: ThreadIds) -> None:
                    y = self.later(ids.x)

                def later(self, i: int) -> Float2:
                    return Float2(i, i)
            """
        )
        (declaration,) = _method(unit, "execute").body.statements
        model = unit.semantic_model
        assert isinstance(declaration.initializer, Invocation)
        assert hlsl_type_name(model.get_type_info(declaration)) == "float2"

    def test_power_becomes_intrinsic(self, parse):
        unit = parse(
            """
            class Shader(ComputeShader):
                def f(self, x: float) -> float:
                    return x ** 2.0
            """
        )
        (ret,) = _method(unit, "f").body.statements
        assert ret.value == Invocation(
            Identifier("pow"), (Identifier("x"), Literal(2.0))
        )

    def test_unsupported_statement_is_opaque(self, parse):
        unit = parse(
            """
            class Shader(ComputeShader):
                def execute(self, ids: ThreadIds) -> None:
                    del ids
            """
        )
        (stmt,) = _method(unit, "execute").body.statements
        assert stmt == OpaqueStatement("del ids")
        assert stmt.lineno is not None
