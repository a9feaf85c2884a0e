"""Host-side HLSL value types.

These numpy-backed classes let shader classes be ordinary, importable Python.
The generator never imports them; it maps their names to HLSL spellings
(``Float3`` to ``float3``, ``Double4x4`` to ``double4x4`` and so on).
"""

from __future__ import annotations

from typing import Any, TypeVar

import numpy as np

T = TypeVar("T", bound="_Vector")

# Scalar aliases, spelled like their HLSL counterparts
Bool = bool
Int = int
UInt = np.uint32
Float = float
Double = np.float64

_SWIZZLE_SETS = ("xyzw", "rgba")


def _components(args: tuple[Any, ...]) -> list[Any]:
    values: list[Any] = []
    for arg in args:
        if isinstance(arg, (_Vector, _Matrix)):
            values.extend(arg.data.reshape(-1))
        elif isinstance(arg, (list, tuple, np.ndarray)):
            values.extend(np.asarray(arg).reshape(-1))
        else:
            values.append(arg)
    return values


class _Vector:
    """Base class for HLSL vector types"""

    _size: int
    _dtype: Any

    def __init__(self, *args: Any):
        if not args:
            values: Any = np.zeros(self._size)
        elif len(args) == 1 and np.isscalar(args[0]):
            values = [args[0]] * self._size
        else:
            values = _components(args)

        data = np.array(values, dtype=self._dtype).reshape(-1)
        if len(data) != self._size:
            raise ValueError(
                f"Invalid input size for {self.__class__.__name__}. "
                f"Expected {self._size}, got {len(data)}"
            )
        object.__setattr__(self, "data", data)

    def __repr__(self) -> str:
        vals = ", ".join(str(x) for x in self.data.tolist())
        return f"{self.__class__.__name__}({vals})"

    def __len__(self) -> int:
        return self._size

    def __iter__(self):
        return iter(self.data.tolist())

    def __getitem__(self, index: int) -> Any:
        return self.data[index].item()

    def __setitem__(self, index: int, value: Any) -> None:
        self.data[index] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Vector):
            return False
        return self._size == other._size and np.array_equal(self.data, other.data)

    __hash__ = None  # type: ignore[assignment]

    # Operator overloading
    def __add__(self: T, other: Any) -> T:
        return self._apply_op(other, lambda a, b: a + b)

    def __radd__(self: T, other: Any) -> T:
        return self._apply_op(other, lambda a, b: b + a)

    def __sub__(self: T, other: Any) -> T:
        return self._apply_op(other, lambda a, b: a - b)

    def __rsub__(self: T, other: Any) -> T:
        return self._apply_op(other, lambda a, b: b - a)

    def __mul__(self: T, other: Any) -> T:
        return self._apply_op(other, lambda a, b: a * b)

    def __rmul__(self: T, other: Any) -> T:
        return self._apply_op(other, lambda a, b: b * a)

    def __truediv__(self: T, other: Any) -> T:
        return self._apply_op(other, lambda a, b: a / b)

    def __rtruediv__(self: T, other: Any) -> T:
        return self._apply_op(other, lambda a, b: b / a)

    def __mod__(self: T, other: Any) -> T:
        return self._apply_op(other, lambda a, b: np.fmod(a, b))

    def __neg__(self: T) -> T:
        return self.__class__(-self.data)

    def __pos__(self: T) -> T:
        return self.__class__(self.data)

    def _apply_op(self: T, other: Any, op) -> T:
        """Apply operation with scalar/vector broadcasting"""
        if isinstance(other, _Vector):
            if self._size != other._size:
                raise ValueError("Vector size mismatch")
            return self.__class__(op(self.data, other.data))
        if np.isscalar(other):
            return self.__class__(op(self.data, other))
        return NotImplemented

    # Swizzle operations
    def _swizzle_indices(self, name: str) -> list[int] | None:
        if not 1 <= len(name) <= 4:
            return None
        for chars in _SWIZZLE_SETS:
            if all(c in chars for c in name):
                indices = [chars.index(c) for c in name]
                if max(indices) >= self._size:
                    raise AttributeError(
                        f"Component {name} not available for "
                        f"{self.__class__.__name__}"
                    )
                return indices
        return None

    def __getattr__(self, name: str) -> Any:
        """Handle swizzle patterns only"""
        indices = self._swizzle_indices(name) if not name.startswith("_") else None
        if indices is None:
            raise AttributeError(
                f"'{self.__class__.__name__}' object has no attribute '{name}'"
            )
        if len(indices) == 1:
            return self.data[indices[0]].item()
        return vector_class(self._dtype, len(indices))(self.data[indices])

    def __setattr__(self, name: str, value: Any) -> None:
        indices = self._swizzle_indices(name)
        if indices is None:
            raise AttributeError(f"Cannot set '{name}' on {self.__class__.__name__}")
        if len(set(indices)) != len(indices):
            raise AttributeError(f"Swizzle '{name}' repeats a component")
        self.data[indices] = value.data if isinstance(value, _Vector) else value

    def to_array(self) -> np.ndarray:
        return self.data.copy()


class _Matrix:
    """Base class for HLSL matrix types, stored row-major"""

    _rows: int
    _cols: int
    _dtype: Any

    def __init__(self, *args: Any):
        shape = (self._rows, self._cols)
        if not args:
            data = np.zeros(shape, dtype=self._dtype)
        elif len(args) == 1 and np.isscalar(args[0]):
            data = np.full(shape, args[0], dtype=self._dtype)
        else:
            values = _components(args)
            if len(values) != self._rows * self._cols:
                raise ValueError(
                    f"Invalid input size for {self.__class__.__name__}. "
                    f"Expected {self._rows * self._cols}, got {len(values)}"
                )
            data = np.array(values, dtype=self._dtype).reshape(shape)
        self.data: np.ndarray = data

    def __repr__(self) -> str:
        rows = ", ".join(str(row) for row in self.data.tolist())
        return f"{self.__class__.__name__}({rows})"

    def __getitem__(self, row: int) -> _Vector:
        return vector_class(self._dtype, self._cols)(self.data[row])

    def __setitem__(self, row: int, value: Any) -> None:
        self.data[row] = value.data if isinstance(value, _Vector) else value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Matrix):
            return False
        return np.array_equal(self.data, other.data)

    __hash__ = None  # type: ignore[assignment]

    def __add__(self, other: Any) -> _Matrix:
        return self.__class__(self.data + _matrix_operand(other))

    def __sub__(self, other: Any) -> _Matrix:
        return self.__class__(self.data - _matrix_operand(other))

    def __mul__(self, other: Any) -> _Matrix:
        return self.__class__(self.data * _matrix_operand(other))

    def __rmul__(self, other: Any) -> _Matrix:
        return self.__mul__(other)

    def __matmul__(self, other: Any) -> Any:
        if isinstance(other, _Matrix):
            result = self.data @ other.data
            return matrix_class(self._dtype, *result.shape)(result)
        if isinstance(other, _Vector):
            return vector_class(self._dtype, self._rows)(self.data @ other.data)
        return NotImplemented

    def transpose(self) -> _Matrix:
        return matrix_class(self._dtype, self._cols, self._rows)(self.data.T)

    def to_array(self) -> np.ndarray:
        return self.data.copy()


def _matrix_operand(value: Any) -> Any:
    return value.data if isinstance(value, _Matrix) else value


_VECTOR_CLASSES: dict[tuple[str, int], type[_Vector]] = {}
_MATRIX_CLASSES: dict[tuple[str, int, int], type[_Matrix]] = {}


def _vector_type(name: str, dtype: Any, size: int) -> type[_Vector]:
    cls = type(name, (_Vector,), {"_size": size, "_dtype": dtype})
    cls.__module__ = __name__
    _VECTOR_CLASSES[(np.dtype(dtype).name, size)] = cls
    return cls


def _matrix_type(name: str, dtype: Any, rows: int, cols: int) -> type[_Matrix]:
    cls = type(name, (_Matrix,), {"_rows": rows, "_cols": cols, "_dtype": dtype})
    cls.__module__ = __name__
    _MATRIX_CLASSES[(np.dtype(dtype).name, rows, cols)] = cls
    return cls


def vector_class(dtype: Any, size: int) -> type[_Vector]:
    """Get the vector class with ``size`` components of ``dtype``."""
    return _VECTOR_CLASSES[(np.dtype(dtype).name, size)]


def matrix_class(dtype: Any, rows: int, cols: int) -> type[_Matrix]:
    return _MATRIX_CLASSES[(np.dtype(dtype).name, rows, cols)]


Bool2 = _vector_type("Bool2", np.bool_, 2)
Bool3 = _vector_type("Bool3", np.bool_, 3)
Bool4 = _vector_type("Bool4", np.bool_, 4)
Int2 = _vector_type("Int2", np.int32, 2)
Int3 = _vector_type("Int3", np.int32, 3)
Int4 = _vector_type("Int4", np.int32, 4)
UInt2 = _vector_type("UInt2", np.uint32, 2)
UInt3 = _vector_type("UInt3", np.uint32, 3)
UInt4 = _vector_type("UInt4", np.uint32, 4)
Float2 = _vector_type("Float2", np.float32, 2)
Float3 = _vector_type("Float3", np.float32, 3)
Float4 = _vector_type("Float4", np.float32, 4)
Double2 = _vector_type("Double2", np.float64, 2)
Double3 = _vector_type("Double3", np.float64, 3)
Double4 = _vector_type("Double4", np.float64, 4)

Float2x2 = _matrix_type("Float2x2", np.float32, 2, 2)
Float2x3 = _matrix_type("Float2x3", np.float32, 2, 3)
Float2x4 = _matrix_type("Float2x4", np.float32, 2, 4)
Float3x2 = _matrix_type("Float3x2", np.float32, 3, 2)
Float3x3 = _matrix_type("Float3x3", np.float32, 3, 3)
Float3x4 = _matrix_type("Float3x4", np.float32, 3, 4)
Float4x2 = _matrix_type("Float4x2", np.float32, 4, 2)
Float4x3 = _matrix_type("Float4x3", np.float32, 4, 3)
Float4x4 = _matrix_type("Float4x4", np.float32, 4, 4)
Double2x2 = _matrix_type("Double2x2", np.float64, 2, 2)
Double2x3 = _matrix_type("Double2x3", np.float64, 2, 3)
Double2x4 = _matrix_type("Double2x4", np.float64, 2, 4)
Double3x2 = _matrix_type("Double3x2", np.float64, 3, 2)
Double3x3 = _matrix_type("Double3x3", np.float64, 3, 3)
Double3x4 = _matrix_type("Double3x4", np.float64, 3, 4)
Double4x2 = _matrix_type("Double4x2", np.float64, 4, 2)
Double4x3 = _matrix_type("Double4x3", np.float64, 4, 3)
Double4x4 = _matrix_type("Double4x4", np.float64, 4, 4)

# System.Numerics style aliases
Vector2 = Float2
Vector3 = Float3
Vector4 = Float4
Matrix3x3 = Float3x3
Matrix4x4 = Float4x4


def default(type_: Any = None) -> Any:
    """Zero value of a type, like HLSL's ``(T)0``.

    In shader methods, bare ``default`` takes its type from the context it is
    used in; the generator resolves it. Called without a type at host level
    it returns ``0``.
    """
    if type_ is None:
        return 0
    return type_()
