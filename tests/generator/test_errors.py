"""Tests for generator errors."""

from py2hlsl.generator import GenerationError, TypeInferenceError, UnmappedTypeError
from py2hlsl.generator.syntax import Identifier


def test_message_without_location():
    error = GenerationError("Something failed")
    assert str(error) == "Something failed"
    assert error.lineno is None


def test_location_from_node_and_path():
    """Test that the file name and node line are appended to the message."""
    error = GenerationError("Bad", Identifier("x", lineno=12), "/src/shaders/blur.py")
    assert str(error) == "Bad in blur.py at line 12"
    assert error.lineno == 12


def test_with_path_keeps_type_and_node():
    node = Identifier("x", lineno=3)
    error = TypeInferenceError("Cannot infer", node)

    located = error.with_path("blur.py")

    assert isinstance(located, TypeInferenceError)
    assert located.node is node
    assert str(located) == "Cannot infer in blur.py at line 3"


def test_error_hierarchy():
    assert issubclass(UnmappedTypeError, GenerationError)
    assert issubclass(TypeInferenceError, GenerationError)
