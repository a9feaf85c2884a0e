"""
HLSL source generation for compute shaders.

This module provides the top-level interface of the generator: parse Python
sources, select shader types, translate every method to HLSL and hand one
generated module per method to a sink.
"""

import os
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from loguru import logger

from py2hlsl.generator.ast_parser import ParsedUnit, parse_file, parse_source
from py2hlsl.generator.config import GeneratorConfig
from py2hlsl.generator.emitter import (
    GeneratedSource,
    RewrittenMethod,
    emit_source,
    generated_source_name,
)
from py2hlsl.generator.errors import (
    GenerationError,
    TypeInferenceError,
    UnmappedTypeError,
)
from py2hlsl.generator.normalizer import normalize_body
from py2hlsl.generator.rewriter import ShaderSourceRewriter, rewrite_method
from py2hlsl.generator.selector import Candidate, select_candidates
from py2hlsl.generator.sinks import DirectorySink, MemorySink, SourceSink
from py2hlsl.generator.syntax import MethodDeclaration

__all__ = [
    "Candidate",
    "DirectorySink",
    "GeneratedSource",
    "GenerationError",
    "GeneratorConfig",
    "MemorySink",
    "ParsedUnit",
    "RewrittenMethod",
    "ShaderSourceRewriter",
    "SourceSink",
    "TypeInferenceError",
    "UnmappedTypeError",
    "emit_source",
    "generate_sources",
    "generated_source_name",
    "normalize_body",
    "parse_file",
    "parse_source",
    "rewrite_method",
    "select_candidates",
    "translate_candidates",
    "translate_method",
]


def translate_method(
    candidate: Candidate,
    method: MethodDeclaration,
    config: GeneratorConfig | None = None,
) -> RewrittenMethod:
    """Translate one method of a shader type.

    Args:
        candidate: Shader type the method belongs to
        method: Method declaration
        config: Generator configuration

    Returns:
        The translated method with its lookup keys

    Raises:
        GenerationError: If the method cannot be translated
    """
    config = config or GeneratorConfig()
    type_name = candidate.type_declaration.full_name
    logger.debug(f"Translating {type_name}.{method.name}")
    try:
        source = rewrite_method(
            normalize_body(method),
            candidate.unit.semantic_model,
            config.warn_on_opaque,
        )
    except GenerationError as e:
        if e.path is None:
            raise e.with_path(candidate.unit.tree.path) from e
        raise
    return RewrittenMethod(type_name, method.name, source)


def _translate_job(
    job: tuple[Candidate, MethodDeclaration], config: GeneratorConfig
) -> GeneratedSource | GenerationError:
    candidate, method = job
    try:
        record = translate_method(candidate, method, config)
    except GenerationError as e:
        return e
    return emit_source(record, config.name_prefix)


def translate_candidates(
    units: Iterable[ParsedUnit], config: GeneratorConfig | None = None
) -> list[GeneratedSource]:
    """Translate every method of every shader type in the given units.

    Methods are independent of each other and are translated in a thread
    pool unless ``config.max_workers`` is 1. The run is all or nothing: every
    failure is logged, then the first one is raised.

    Args:
        units: Parsed compilation units
        config: Generator configuration

    Returns:
        Generated sources sorted by name

    Raises:
        GenerationError: If any method fails to translate, or two methods map
            to the same generated name
    """
    config = config or GeneratorConfig()
    jobs = [
        (candidate, method)
        for candidate in select_candidates(units, config.marker_name)
        for method in candidate.methods
    ]
    logger.info(f"Translating {len(jobs)} shader methods")

    if config.max_workers == 1 or len(jobs) <= 1:
        results = [_translate_job(job, config) for job in jobs]
    else:
        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            results = list(executor.map(lambda job: _translate_job(job, config), jobs))

    errors: list[GenerationError] = []
    sources: dict[str, GeneratedSource] = {}
    for (candidate, method), result in zip(jobs, results):
        if isinstance(result, GenerationError):
            logger.error(
                f"Failed to translate {candidate.type_declaration.full_name}."
                f"{method.name}: {result}"
            )
            errors.append(result)
        elif result.name in sources:
            raise GenerationError(
                f"Generated name '{result.name}' of "
                f"{candidate.type_declaration.full_name}.{method.name} "
                "collides with another shader method",
                method,
                candidate.unit.tree.path,
            )
        else:
            sources[result.name] = result
    if errors:
        raise errors[0]
    return [sources[name] for name in sorted(sources)]


def generate_sources(
    paths: Sequence[str | os.PathLike[str]],
    sink: SourceSink,
    config: GeneratorConfig | None = None,
    root: str | os.PathLike[str] | None = None,
) -> list[GeneratedSource]:
    """Generate shader source modules for a set of Python files.

    Nothing reaches the sink unless every method translates successfully.

    Args:
        paths: Python source files to scan
        sink: Destination of the generated modules
        config: Generator configuration
        root: Directory module names are computed from

    Returns:
        The generated sources, sorted by name

    Raises:
        GenerationError: If a file cannot be parsed or a method cannot be
            translated
    """
    units = [parse_file(path, root) for path in paths]
    sources = translate_candidates(units, config)
    for source in sources:
        sink.add_source(source.name, source.content)
    logger.info(f"Generated {len(sources)} shader sources from {len(units)} files")
    return sources
