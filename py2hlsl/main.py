"""Command line interface for py2hlsl.

This module provides a command-line interface for generating HLSL sources from
Python compute shader classes and for inspecting the translation.
"""

import sys
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any, TypeVar, cast

import typer
from loguru import logger

from py2hlsl.generator import (
    DirectorySink,
    GenerationError,
    GeneratorConfig,
    generate_sources,
    parse_file,
    select_candidates,
    translate_method,
)

# Define type variables for TypedCallable
F = TypeVar("F", bound=Callable[..., Any])


# TypedCommand decorator helper
def typed_command(app_command: Any) -> Callable[[F], F]:
    """Wrap typer command with proper typing for mypy."""

    def decorator(func: F) -> F:
        return cast(F, app_command(func))

    return decorator


app = typer.Typer(
    name="py2hlsl",
    help=(
        "Translate Python compute shader classes into HLSL sources. "
        "Commands: generate, show."
    ),
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def _collect_files(paths: list[Path], prefix: str) -> list[Path]:
    """Expand directories into the Python files below them.

    Args:
        paths: Files and directories given on the command line
        prefix: Name prefix of generated modules, which are never scanned

    Returns:
        Sorted, de-duplicated list of Python files
    """
    files: set[Path] = set()
    for path in paths:
        if path.is_dir():
            files.update(
                p for p in path.rglob("*.py") if not p.name.startswith(prefix)
            )
        else:
            files.add(path)
    return sorted(files)


def _build_config(marker: str | None, workers: int | None) -> GeneratorConfig:
    config = GeneratorConfig.from_env()
    if marker:
        config = replace(config, marker_name=marker)
    if workers is not None:
        config = replace(config, max_workers=max(1, workers))
    return config


@typed_command(app.command("generate"))
def generate(
    paths: list[Path] = typer.Argument(
        ..., help="Python files or directories containing shader classes"
    ),
    output: Path = typer.Option(
        ..., "--output", "-o", help="Directory for the generated modules"
    ),
    root: Path | None = typer.Option(
        None, "--root", "-r", help="Directory module names are computed from"
    ),
    workers: int | None = typer.Option(
        None, "--workers", "-j", help="Worker threads (1 runs sequentially)"
    ),
    marker: str | None = typer.Option(
        None, "--marker", help="Name of the shader base class"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Generate one shader source module per shader method.

    Example: py2hlsl generate shaders/ -o build/shader_sources
    """
    _configure_logging(verbose)
    config = _build_config(marker, workers)
    files = _collect_files(paths, config.name_prefix)
    if not files:
        logger.warning("No Python files to scan")

    sink = DirectorySink(output)
    try:
        generate_sources(files, sink, config, root)
    except GenerationError as e:
        logger.error(f"Generation failed: {e}")
        raise typer.Exit(1) from e

    logger.info(
        f"{len(sink.written)} written, {len(sink.unchanged)} unchanged in {output}"
    )


@typed_command(app.command("show"))
def show(
    shader_file: Path = typer.Argument(..., help="Python file with shader classes"),
    root: Path | None = typer.Option(
        None, "--root", "-r", help="Directory module names are computed from"
    ),
    marker: str | None = typer.Option(
        None, "--marker", help="Name of the shader base class"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Print the HLSL translation of every shader method in a file.

    Example: py2hlsl show shaders/blur.py
    """
    _configure_logging(verbose)
    config = _build_config(marker, None)
    try:
        unit = parse_file(shader_file, root)
        for candidate in select_candidates([unit], config.marker_name):
            for method in candidate.methods:
                record = translate_method(candidate, method, config)
                typer.echo(f"// {record.type_name}.{record.method_name}")
                typer.echo(record.source)
                typer.echo("")
    except GenerationError as e:
        logger.error(f"Translation failed: {e}")
        raise typer.Exit(1) from e


if __name__ == "__main__":
    app()
