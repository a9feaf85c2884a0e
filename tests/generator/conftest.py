"""
Pytest configuration and shared fixtures for generator tests.

Shader sources in these tests are parsed under the module name
``shaders.test`` unless a test asks for another one.
"""

import textwrap

import pytest

from py2hlsl.generator import (
    normalize_body,
    parse_source,
    rewrite_method,
    select_candidates,
)

MODULE_NAME = "shaders.test"

SHADER_IMPORTS = """\
from typing import Annotated, Callable, cast

from py2hlsl import (
    ComputeShader,
    Float2,
    Float3,
    Float4,
    Float4x4,
    Int2,
    ReadWriteBuffer,
    ThreadIds,
    Vector3,
    default,
)
from py2hlsl.intrinsics import dot, length, normalize, saturate
"""


@pytest.fixture
def parse():
    """Fixture parsing dedented shader source with the common imports."""

    def _parse(source: str, module_name: str = MODULE_NAME, imports: bool = True):
        text = textwrap.dedent(source)
        if imports:
            text = SHADER_IMPORTS + "\n" + text
        return parse_source(text, module_name, f"{module_name.replace('.', '/')}.py")

    return _parse


@pytest.fixture
def translate(parse):
    """Fixture translating one method of the first shader type in a source."""

    def _translate(source: str, method: str = "execute") -> str:
        unit = parse(source)
        candidate = next(select_candidates([unit]))
        declaration = next(m for m in candidate.methods if m.name == method)
        return rewrite_method(normalize_body(declaration), unit.semantic_model)

    return _translate


@pytest.fixture
def translate_body(translate):
    """Fixture translating a statement body of ``execute(self, ids: ThreadIds)``.

    Returns the body lines without the method header and closing brace,
    dedented by one level.
    """

    def _translate_body(body: str, fields: str = "") -> str:
        source = (
            "class Shader(ComputeShader):\n"
            + textwrap.indent(textwrap.dedent(fields), "    ")
            + "\n    def execute(self, ids: ThreadIds) -> None:\n"
            + textwrap.indent(textwrap.dedent(body), "        ")
        )
        lines = translate(source).splitlines()
        assert lines[0] == "void execute(int3 ids) {"
        assert lines[-1] == "}"
        return "\n".join(line[4:] for line in lines[1:-1])

    return _translate_body
