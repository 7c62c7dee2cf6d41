"""2-D vector primitives.

``Vector`` is an immutable value type and the default currency of the package.
The free functions never mutate their inputs; the ones producing a vector accept
an optional ``target`` (a :class:`MutableVector`) that receives the result in
place.  :class:`MutableVector` offers the same operations as chained in-place
methods.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union, overload

import numpy as np

_DEGREES = 180.0 / math.pi


def float_divide(a: float, b: float) -> float:
    # IEEE-754 semantics: x/0 -> +-inf, 0/0 -> nan, never ZeroDivisionError
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.true_divide(np.float64(a), np.float64(b)))


def cos_sin(radian: float) -> Tuple[float, float]:
    # non-finite angles give nan instead of ValueError
    with np.errstate(invalid="ignore"):
        return float(np.cos(radian)), float(np.sin(radian))


@dataclass(frozen=True)
class Vector:
    """Immutable 2-D point / vector."""

    x: float
    y: float

    def __add__(self, other: "VectorLike") -> "Vector":
        return add(self, other)

    def __sub__(self, other: "VectorLike") -> "Vector":
        return subtract(self, other)

    def __mul__(self, scalar: float) -> "Vector":
        return multiply_scalar(self, scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector":
        return Vector(-self.x, -self.y)

    def dot(self, other: "VectorLike") -> float:
        return dot(self, other)

    def cross(self, other: "VectorLike") -> float:
        return cross(self, other)

    def length(self) -> float:
        return length(self)

    def length_squared(self) -> float:
        return length_squared(self)

    def distance(self, other: "VectorLike") -> float:
        return distance(self, other)

    def distance_squared(self, other: "VectorLike") -> float:
        return distance_squared(self, other)

    def normalize(self) -> "Vector":
        return normalize(self)

    def rotate(self, radian: float) -> "Vector":
        return rotate(self, radian)

    def angle(self) -> float:
        return angle(self)

    def angle_degree(self) -> float:
        return angle_degree(self)

    def is_equal_to(self, other: "VectorLike") -> bool:
        return self.x == other.x and self.y == other.y

    def is_finite(self) -> bool:
        return bool(np.isfinite(self.x) and np.isfinite(self.y))

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    def mutable(self) -> "MutableVector":
        return MutableVector(self.x, self.y)


@dataclass
class MutableVector:
    """Mutable counterpart of :class:`Vector` with chained in-place operations."""

    x: float
    y: float

    def add(self, v: "VectorLike") -> "MutableVector":
        return add(self, v, self)

    def subtract(self, v: "VectorLike") -> "MutableVector":
        return subtract(self, v, self)

    def multiply(self, v: "VectorLike") -> "MutableVector":
        return multiply(self, v, self)

    def multiply_scalar(self, scalar: float) -> "MutableVector":
        return multiply_scalar(self, scalar, self)

    def divide(self, v: "VectorLike") -> "MutableVector":
        return divide(self, v, self)

    def normalize(self) -> "MutableVector":
        return normalize(self, self)

    def rotate(self, radian: float) -> "MutableVector":
        return rotate(self, radian, self)

    def dot(self, v: "VectorLike") -> float:
        return dot(self, v)

    def cross(self, v: "VectorLike") -> float:
        return cross(self, v)

    def length(self) -> float:
        return length(self)

    def length_squared(self) -> float:
        return length_squared(self)

    def distance(self, v: "VectorLike") -> float:
        return distance(self, v)

    def angle(self) -> float:
        return angle(self)

    def angle_degree(self) -> float:
        return angle_degree(self)

    def clone(self) -> "MutableVector":
        return MutableVector(self.x, self.y)

    def freeze(self) -> Vector:
        return Vector(self.x, self.y)


VectorLike = Union[Vector, MutableVector]


def as_vector(value: Any) -> Vector:
    """Coerce ``value`` (vector, ``(x, y)`` sequence, ``{"x", "y"}`` mapping) into a :class:`Vector`."""

    if isinstance(value, Vector):
        return value
    if isinstance(value, MutableVector):
        return value.freeze()
    if isinstance(value, Mapping):
        return Vector(float(value["x"]), float(value["y"]))
    if isinstance(value, (list, tuple)) or isinstance(value, np.ndarray):
        if len(value) != 2:
            raise ValueError("coordinate must be length-2")
        return Vector(float(value[0]), float(value[1]))
    if hasattr(value, "x") and hasattr(value, "y"):
        return Vector(float(value.x), float(value.y))
    raise TypeError(f"cannot interpret {value!r} as a 2-D vector")


def _store(x: float, y: float, target: Optional[MutableVector]) -> VectorLike:
    if target is None:
        return Vector(x, y)
    target.x = x
    target.y = y
    return target


@overload
def add(v1: VectorLike, v2: VectorLike) -> Vector: ...
@overload
def add(v1: VectorLike, v2: VectorLike, target: MutableVector) -> MutableVector: ...
def add(v1, v2, target=None):
    return _store(v1.x + v2.x, v1.y + v2.y, target)


@overload
def subtract(v1: VectorLike, v2: VectorLike) -> Vector: ...
@overload
def subtract(v1: VectorLike, v2: VectorLike, target: MutableVector) -> MutableVector: ...
def subtract(v1, v2, target=None):
    return _store(v1.x - v2.x, v1.y - v2.y, target)


@overload
def multiply(v1: VectorLike, v2: VectorLike) -> Vector: ...
@overload
def multiply(v1: VectorLike, v2: VectorLike, target: MutableVector) -> MutableVector: ...
def multiply(v1, v2, target=None):
    return _store(v1.x * v2.x, v1.y * v2.y, target)


@overload
def multiply_scalar(v: VectorLike, scalar: float) -> Vector: ...
@overload
def multiply_scalar(v: VectorLike, scalar: float, target: MutableVector) -> MutableVector: ...
def multiply_scalar(v, scalar, target=None):
    return _store(v.x * scalar, v.y * scalar, target)


@overload
def divide(v1: VectorLike, v2: VectorLike) -> Vector: ...
@overload
def divide(v1: VectorLike, v2: VectorLike, target: MutableVector) -> MutableVector: ...
def divide(v1, v2, target=None):
    return _store(float_divide(v1.x, v2.x), float_divide(v1.y, v2.y), target)


def dot(v1: VectorLike, v2: VectorLike) -> float:
    return v1.x * v2.x + v1.y * v2.y


def cross(v1: VectorLike, v2: VectorLike) -> float:
    return v1.x * v2.y - v1.y * v2.x


def length_squared(v: VectorLike) -> float:
    return v.x * v.x + v.y * v.y


def length(v: VectorLike) -> float:
    return math.sqrt(length_squared(v))


def distance_squared(v1: VectorLike, v2: VectorLike) -> float:
    dx = v1.x - v2.x
    dy = v1.y - v2.y
    return dx * dx + dy * dy


def distance(v1: VectorLike, v2: VectorLike) -> float:
    return math.sqrt(distance_squared(v1, v2))


@overload
def normalize(v: VectorLike) -> Vector: ...
@overload
def normalize(v: VectorLike, target: MutableVector) -> MutableVector: ...
def normalize(v, target=None):
    """Return the unit vector of ``v``; the zero vector maps to ``(1, 0)``."""

    size = length(v)
    if size == 0:
        return _store(1.0, 0.0, target)
    return _store(float_divide(v.x, size), float_divide(v.y, size), target)


@overload
def rotate(v: VectorLike, radian: float) -> Vector: ...
@overload
def rotate(v: VectorLike, radian: float, target: MutableVector) -> MutableVector: ...
def rotate(v, radian, target=None):
    """Rotate counter-clockwise (from +X towards +Y) by ``radian``."""

    cos_r, sin_r = cos_sin(radian)
    x = v.x * cos_r - v.y * sin_r
    y = v.x * sin_r + v.y * cos_r
    return _store(x, y, target)


def angle(v: VectorLike) -> float:
    return math.atan2(v.y, v.x)


def angle_degree(v: VectorLike) -> float:
    return angle(v) * _DEGREES


def is_finite(v: VectorLike) -> bool:
    return bool(np.isfinite(v.x) and np.isfinite(v.y))


ZERO = Vector(0.0, 0.0)


__all__ = [
    "MutableVector",
    "Vector",
    "VectorLike",
    "ZERO",
    "add",
    "angle",
    "angle_degree",
    "as_vector",
    "cos_sin",
    "cross",
    "distance",
    "distance_squared",
    "divide",
    "dot",
    "float_divide",
    "is_finite",
    "length",
    "length_squared",
    "multiply",
    "multiply_scalar",
    "normalize",
    "rotate",
    "subtract",
]
