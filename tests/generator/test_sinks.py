"""Tests for generated source sinks."""

from py2hlsl.generator import DirectorySink, MemorySink


def test_memory_sink_keeps_sources():
    sink = MemorySink()
    sink.add_source("a", b"one")
    sink.add_source("b", b"two")
    assert sink.sources == {"a": b"one", "b": b"two"}


def test_directory_sink_writes_python_modules(tmp_path):
    """Test that each source lands in <name>.py, creating the directory."""
    out = tmp_path / "generated"
    sink = DirectorySink(out)

    sink.add_source("__ShaderSource_A_execute", b"x = 1\n")

    path = out / "__ShaderSource_A_execute.py"
    assert path.read_bytes() == b"x = 1\n"
    assert sink.written == [path]
    assert sink.unchanged == []


def test_directory_sink_skips_unchanged_files(tmp_path):
    """Test that rewriting identical content leaves the file alone."""
    DirectorySink(tmp_path).add_source("mod", b"x = 1\n")
    path = tmp_path / "mod.py"
    mtime = path.stat().st_mtime_ns

    sink = DirectorySink(tmp_path)
    sink.add_source("mod", b"x = 1\n")

    assert sink.written == []
    assert sink.unchanged == [path]
    assert path.stat().st_mtime_ns == mtime


def test_directory_sink_overwrites_changed_files(tmp_path):
    DirectorySink(tmp_path).add_source("mod", b"x = 1\n")

    sink = DirectorySink(tmp_path)
    sink.add_source("mod", b"x = 2\n")

    assert (tmp_path / "mod.py").read_bytes() == b"x = 2\n"
    assert sink.written == [tmp_path / "mod.py"]
