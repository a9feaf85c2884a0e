"""Tests for the generated source emitter."""

import itertools

from py2hlsl.generator import RewrittenMethod, emit_source, generated_source_name
from py2hlsl.generator.emitter import GENERATED_HEADER
from py2hlsl.sources import get_shader_source, registered_sources

RECORD = RewrittenMethod(
    "shaders.blur.Blur",
    "execute",
    "void execute(int3 ids) {\n    buffer[ids.x] = \"it's\";\n}",
)


class TestGeneratedNames:
    """Test derivation of generated module names."""

    def test_name_format(self):
        name = generated_source_name("shaders.blur.Blur", "execute")
        assert name == "__ShaderSource_shaders_blur_Blur_execute"

    def test_custom_prefix(self):
        name = generated_source_name("Blur", "execute", prefix="Gen")
        assert name == "Gen_Blur_execute"

    def test_distinct_pairs_get_distinct_names(self):
        """Test that every type/method pair of a run has its own name."""
        types = ["shaders.Blur", "shaders.Sharpen", "effects.Blur", "m.A", "m.A_b"]
        methods = ["execute", "helper", "_sample", "b_c", "c"]
        pairs = list(itertools.product(types, methods))
        names = {generated_source_name(t, m) for t, m in pairs}
        assert len(names) == len(pairs)

    def test_underscores_do_not_merge_pairs(self):
        """Test that pairs flattening to the same text keep apart."""
        first = generated_source_name("shaders.A", "b_c")
        second = generated_source_name("shaders.A_b", "c")

        assert first != second
        assert first.startswith("__ShaderSource_shaders_A_b_c__")
        assert second.startswith("__ShaderSource_shaders_A_b_c__")

    def test_digest_is_stable(self):
        first = generated_source_name("my_shaders.Blur", "execute")
        assert first == generated_source_name("my_shaders.Blur", "execute")
        assert len(first.rsplit("__", 1)[1]) == 8


class TestEmitSource:
    """Test the content of generated modules."""

    def test_output_is_deterministic(self):
        """Test that the same record always gives byte-identical content."""
        first = emit_source(RECORD)
        second = emit_source(RewrittenMethod(*RECORD))
        assert first == second
        assert isinstance(first.content, bytes)

    def test_name_matches_record(self):
        source = emit_source(RECORD)
        assert source.name == "__ShaderSource_shaders_blur_Blur_execute"

    def test_header_suppresses_tooling(self):
        content = emit_source(RECORD).content.decode("utf-8")
        assert content.startswith(GENERATED_HEADER)
        assert "# ruff: noqa" in content
        assert "# mypy: ignore-errors" in content

    def test_module_registers_record(self):
        """Test that executing the module registers the exact record."""
        content = emit_source(RECORD).content.decode("utf-8")

        exec(compile(content, "<generated>", "exec"), {})

        assert get_shader_source("shaders.blur.Blur", "execute") == RECORD.source
        assert [tuple(r) for r in registered_sources()] == [tuple(RECORD)]

    def test_non_ascii_source_is_utf8(self):
        record = RewrittenMethod("Shader", "execute", "// größe\n")
        content = emit_source(record).content
        assert "größe" in content.decode("utf-8")
