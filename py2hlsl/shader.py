"""Base class and resources of compute shaders."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

import numpy as np

from py2hlsl.types import Int3

T = TypeVar("T")


class ThreadIds(Int3):
    """Dispatch thread id of the current invocation, ``int3`` in HLSL."""


class ComputeShader(ABC):
    """Marker base of compute shaders.

    Subclasses are picked up by the generator, which translates every method
    declared in the class body. ``execute`` is the entry point, called once
    per thread with the thread's id.

    Examples:
        >>> class Fill(ComputeShader):
        ...     buffer: ReadWriteBuffer[float]
        ...
        ...     def execute(self, ids: ThreadIds) -> None:
        ...         self.buffer[ids.x] = 1.0
    """

    @abstractmethod
    def execute(self, ids: ThreadIds) -> None: ...


class ReadWriteBuffer(Generic[T]):
    """Host view of a structured buffer.

    Only used to annotate shader fields; the element type given as the
    subscript is what ``buffer[i]`` evaluates to in shader code.
    """

    def __init__(self, data: Any):
        self.data = np.asarray(data)

    def __len__(self) -> int:
        return len(self.data)

    def __getitem__(self, index: int) -> T:
        return self.data[index]

    def __setitem__(self, index: int, value: T) -> None:
        self.data[index] = value
