"""Generator configuration."""

import os
from dataclasses import dataclass

from loguru import logger

DEFAULT_MARKER_NAME = "ComputeShader"
DEFAULT_NAME_PREFIX = "__ShaderSource"


def _env_flag(value: str) -> bool:
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings shared by every stage of the generator.

    Attributes:
        marker_name: Name of the base class that opts a type into translation
        name_prefix: Prefix of every generated module name
        max_workers: Worker threads for translation (None lets the pool decide,
            1 runs sequentially)
        warn_on_opaque: Log a warning for host constructs passed through verbatim
    """

    marker_name: str = DEFAULT_MARKER_NAME
    name_prefix: str = DEFAULT_NAME_PREFIX
    max_workers: int | None = None
    warn_on_opaque: bool = True

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a configuration from ``PY2HLSL_*`` environment variables."""
        max_workers: int | None = None
        raw_workers = os.environ.get("PY2HLSL_MAX_WORKERS")
        if raw_workers:
            try:
                max_workers = max(1, int(raw_workers))
            except ValueError:
                logger.warning(f"Ignoring invalid PY2HLSL_MAX_WORKERS: {raw_workers!r}")

        return cls(
            marker_name=os.environ.get("PY2HLSL_MARKER", DEFAULT_MARKER_NAME),
            max_workers=max_workers,
            warn_on_opaque=_env_flag(os.environ.get("PY2HLSL_WARN_OPAQUE", "1")),
        )
