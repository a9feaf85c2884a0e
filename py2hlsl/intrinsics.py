"""HLSL intrinsic functions for host-side shader code.

Calls to these functions in shader methods are emitted as the bare HLSL
intrinsic of the same name. The numpy implementations give the same results
on the host for scalars and the vector types of ``py2hlsl.types``.
"""

import builtins
from typing import Any

import numpy as np

from py2hlsl.types import _Matrix, _Vector, vector_class


def _unwrap(value: Any) -> Any:
    if isinstance(value, (_Vector, _Matrix)):
        return value.data
    return value


def _wrap(result: Any, *like: Any) -> Any:
    """Give a numpy result the vector type of the first vector argument."""
    for arg in like:
        if isinstance(arg, _Vector):
            return arg.__class__(result)
    return np.asarray(result).item() if np.ndim(result) == 0 else result


def _elementwise(func):
    def apply(*args: Any) -> Any:
        return _wrap(func(*(_unwrap(arg) for arg in args)), *args)

    apply.__name__ = func.__name__
    apply.__doc__ = f"Component-wise ``{func.__name__}``."
    return apply


abs = _elementwise(np.abs)
sign = _elementwise(np.sign)
sin = _elementwise(np.sin)
cos = _elementwise(np.cos)
tan = _elementwise(np.tan)
asin = _elementwise(np.arcsin)
acos = _elementwise(np.arccos)
atan = _elementwise(np.arctan)
atan2 = _elementwise(np.arctan2)
sqrt = _elementwise(np.sqrt)
exp = _elementwise(np.exp)
exp2 = _elementwise(np.exp2)
log = _elementwise(np.log)
log2 = _elementwise(np.log2)
pow = _elementwise(np.power)
floor = _elementwise(np.floor)
ceil = _elementwise(np.ceil)
round = _elementwise(np.round)
fmod = _elementwise(np.fmod)
min = _elementwise(np.minimum)
max = _elementwise(np.maximum)


@_elementwise
def rsqrt(x: Any) -> Any:
    return 1.0 / np.sqrt(x)


@_elementwise
def frac(x: Any) -> Any:
    return x - np.floor(x)


@_elementwise
def saturate(x: Any) -> Any:
    return np.clip(x, 0.0, 1.0)


@_elementwise
def clamp(x: Any, lo: Any, hi: Any) -> Any:
    return np.minimum(np.maximum(x, lo), hi)


@_elementwise
def lerp(a: Any, b: Any, t: Any) -> Any:
    return a + (b - a) * t


@_elementwise
def step(edge: Any, x: Any) -> Any:
    return np.where(x >= edge, 1.0, 0.0)


@_elementwise
def smoothstep(edge0: Any, edge1: Any, x: Any) -> Any:
    t = np.clip((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


@_elementwise
def normalize(v: Any) -> Any:
    return v / np.linalg.norm(v)


@_elementwise
def reflect(i: Any, n: Any) -> Any:
    return i - 2.0 * np.dot(n, i) * n


@_elementwise
def cross(a: Any, b: Any) -> Any:
    return np.cross(a, b)


def dot(a: Any, b: Any) -> Any:
    return np.dot(_unwrap(a), _unwrap(b)).item()


def length(v: Any) -> Any:
    return float(np.linalg.norm(_unwrap(v)))


def distance(a: Any, b: Any) -> Any:
    return float(np.linalg.norm(_unwrap(a) - _unwrap(b)))


def determinant(m: _Matrix) -> Any:
    return float(np.linalg.det(m.data))


def all(x: Any) -> bool:
    return bool(np.all(_unwrap(x)))


def any(x: Any) -> bool:
    return bool(np.any(_unwrap(x)))


def isnan(x: Any) -> Any:
    if isinstance(x, _Vector):
        return vector_class(np.bool_, len(x))(np.isnan(x.data))
    return bool(np.isnan(x))


def isinf(x: Any) -> Any:
    if isinstance(x, _Vector):
        return vector_class(np.bool_, len(x))(np.isinf(x.data))
    return bool(np.isinf(x))


def mul(a: Any, b: Any) -> Any:
    """Matrix product, ``a @ b``."""
    if builtins.all(np.isscalar(arg) for arg in (a, b)):
        return a * b
    return a @ b


def transpose(m: _Matrix) -> _Matrix:
    return m.transpose()
