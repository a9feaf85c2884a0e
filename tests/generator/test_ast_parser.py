"""Tests for parsing and name resolution."""

import ast

import pytest

from py2hlsl.generator import GenerationError, parse_file, parse_source
from py2hlsl.generator.ast_parser import ImportTable, module_name_for


def _table(source: str, module_name: str = "pkg.shaders.blur") -> ImportTable:
    return ImportTable.from_module(ast.parse(source), module_name)


def _resolve(table: ImportTable, expression: str) -> str | None:
    return table.resolve(ast.parse(expression, mode="eval").body)


class TestImportTable:
    """Test resolution of names through a module's imports."""

    def test_from_import(self):
        table = _table("from py2hlsl import Float3, ThreadIds as Ids")
        assert _resolve(table, "Float3") == "py2hlsl.Float3"
        assert _resolve(table, "Ids") == "py2hlsl.ThreadIds"

    def test_module_import_and_attribute_chain(self):
        table = _table("import py2hlsl.types\nimport numpy as np")
        assert _resolve(table, "py2hlsl.types.Float3") == "py2hlsl.types.Float3"
        assert _resolve(table, "np.float32") == "numpy.float32"

    def test_relative_imports(self):
        """Test that relative imports resolve against the module's package."""
        table = _table("from . import common\nfrom ..util import Helper")
        assert _resolve(table, "common") == "pkg.shaders.common"
        assert _resolve(table, "Helper") == "pkg.util.Helper"

    def test_local_classes_and_builtins(self):
        table = _table("class Particle:\n    pass\n")
        assert _resolve(table, "Particle") == "pkg.shaders.blur.Particle"
        assert _resolve(table, "float") == "builtins.float"
        assert _resolve(table, "None") == "builtins.NoneType"

    def test_string_annotation(self):
        table = _table("from py2hlsl import Float3")
        assert _resolve(table, "'Float3'") == "py2hlsl.Float3"

    def test_unknown_names(self):
        table = _table("from py2hlsl import *")
        assert _resolve(table, "Mystery") is None
        assert _resolve(table, "Mystery.attr") is None
        assert table.resolve(None) is None


class TestModuleNames:
    """Test module name derivation from file paths."""

    def test_relative_to_root(self, tmp_path):
        path = tmp_path / "shaders" / "blur.py"
        assert module_name_for(path, tmp_path) == "shaders.blur"

    def test_defaults_to_file_stem(self, tmp_path):
        assert module_name_for(tmp_path / "blur.py") == "blur"

    def test_package_init(self, tmp_path):
        path = tmp_path / "shaders" / "__init__.py"
        assert module_name_for(path, tmp_path) == "shaders"

    def test_path_outside_root(self, tmp_path):
        other = tmp_path / "a"
        assert module_name_for(tmp_path / "b" / "blur.py", other) == "blur"


class TestParsing:
    """Test parsing of whole modules."""

    def test_parsed_unit(self):
        unit = parse_source("class A:\n    pass\n", "pkg.mod", "pkg/mod.py")
        assert unit.tree.module == "pkg.mod"
        assert unit.tree.path == "pkg/mod.py"
        assert [t.full_name for t in unit.tree.types] == ["pkg.mod.A"]
        assert unit.semantic_model.declared_type_names() == {"pkg.mod.A"}

    def test_syntax_error_reports_line(self):
        with pytest.raises(GenerationError) as exc_info:
            parse_source("class A:\n    def f(:\n", "mod", "mod.py")
        assert "line 2" in str(exc_info.value)
        assert exc_info.value.path == "mod.py"

    def test_parse_file(self, tmp_path):
        path = tmp_path / "shaders" / "blur.py"
        path.parent.mkdir()
        path.write_text("class Blur:\n    pass\n", encoding="utf-8")

        unit = parse_file(path, tmp_path)

        assert unit.tree.types[0].full_name == "shaders.blur.Blur"

    def test_missing_file(self, tmp_path):
        with pytest.raises(GenerationError, match="Failed to read source"):
            parse_file(tmp_path / "missing.py")
