"""Registry of generated shader sources.

Generated modules call ``register_shader_source`` when imported. A runtime
then asks for the HLSL text of a method by its owning type's full name and
the method name.
"""

import importlib.util
import os
import sys
import threading
from pathlib import Path
from typing import Any, NamedTuple

from loguru import logger


class ComputeShaderSource(NamedTuple):
    """HLSL source of one shader method."""

    type_name: str
    method_name: str
    source: str


class ShaderSourceNotFoundError(LookupError):
    """No generated source is registered for a type and method."""

    def __init__(self, type_name: str, method_name: str):
        self.type_name = type_name
        self.method_name = method_name
        super().__init__(
            f"No shader source registered for {type_name}.{method_name}; "
            "run 'py2hlsl generate' and load the generated sources"
        )


_registry: dict[tuple[str, str], ComputeShaderSource] = {}
_lock = threading.Lock()


def register_shader_source(record: ComputeShaderSource) -> None:
    """Register a generated source. A later record for the same key wins."""
    with _lock:
        _registry[(record.type_name, record.method_name)] = record


def get_shader_source(type_name: str, method_name: str) -> str:
    """Get the HLSL source of a method.

    Args:
        type_name: Full name of the shader type, e.g. ``shaders.blur.Blur``
        method_name: Name of the method

    Returns:
        The HLSL source text

    Raises:
        ShaderSourceNotFoundError: If no source is registered for the pair
    """
    with _lock:
        record = _registry.get((type_name, method_name))
    if record is None:
        raise ShaderSourceNotFoundError(type_name, method_name)
    return record.source


def shader_source_for(shader_type: type[Any], method_name: str = "execute") -> str:
    """Get the HLSL source of a method of a shader class."""
    type_name = f"{shader_type.__module__}.{shader_type.__qualname__}"
    return get_shader_source(type_name, method_name)


def registered_sources() -> list[ComputeShaderSource]:
    """Get every registered source, sorted by type and method name."""
    with _lock:
        return [_registry[key] for key in sorted(_registry)]


def clear_shader_sources() -> None:
    with _lock:
        _registry.clear()


def _load_generated_module(file_path: Path) -> Any:
    """Import a generated module from a file path."""
    module_name = file_path.stem
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Could not load generated module from {file_path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def load_generated_sources(
    directory: str | os.PathLike[str], prefix: str = "__ShaderSource"
) -> int:
    """Import every generated module in a directory.

    Args:
        directory: Output directory of ``py2hlsl generate``
        prefix: Name prefix of the generated modules

    Returns:
        Number of modules loaded
    """
    paths = sorted(Path(directory).glob(f"{prefix}_*.py"))
    for path in paths:
        logger.debug(f"Loading generated source {path.name}")
        _load_generated_module(path)
    logger.info(f"Loaded {len(paths)} generated shader sources from {directory}")
    return len(paths)
