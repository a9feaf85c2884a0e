"""Destinations for generated sources."""

import os
from pathlib import Path
from typing import Protocol

from loguru import logger


class SourceSink(Protocol):
    """Accepts generated modules by name."""

    def add_source(self, name: str, content: bytes) -> None: ...


class MemorySink:
    """Keeps generated sources in a dictionary."""

    def __init__(self) -> None:
        self.sources: dict[str, bytes] = {}

    def add_source(self, name: str, content: bytes) -> None:
        self.sources[name] = content


class DirectorySink:
    """Writes each generated source to ``<directory>/<name>.py``.

    A file whose content is already up to date is left untouched, so its
    modification time only changes when the translation does.
    """

    def __init__(self, directory: str | os.PathLike[str]):
        self.directory = Path(directory)
        self.written: list[Path] = []
        self.unchanged: list[Path] = []

    def add_source(self, name: str, content: bytes) -> None:
        path = self.directory / f"{name}.py"
        if path.is_file() and path.read_bytes() == content:
            logger.debug(f"Up to date: {path}")
            self.unchanged.append(path)
            return

        self.directory.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        logger.info(f"Wrote {path}")
        self.written.append(path)
