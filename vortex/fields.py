"""
Analytic vorticity distributions that can be added, negated and scaled, then
sampled on a grid.
"""
from __future__ import annotations
from dataclasses import dataclass
from math import pi
from typing import Any, Dict, Iterable, Tuple

import numpy as np

from vortex.grid import PhysicalGrid


class Field:
    def __call__(self, x, y):
        raise NotImplementedError

    def __add__(self, other: "Field") -> "FieldSum":
        if not isinstance(other, Field):
            return NotImplemented
        return FieldSum(_terms(self) + _terms(other))

    def __neg__(self) -> "ScaledField":
        return ScaledField(-1.0, self)

    def __sub__(self, other: "Field") -> "FieldSum":
        if not isinstance(other, Field):
            return NotImplemented
        return self + (-other)

    def __mul__(self, c: float) -> "ScaledField":
        if isinstance(c, Field):
            return NotImplemented
        return ScaledField(float(c), self)

    __rmul__ = __mul__


def _terms(f: Field) -> Tuple[Field, ...]:
    return f.terms if isinstance(f, FieldSum) else (f,)


@dataclass(frozen=True)
class SpatialGaussian(Field):
    """
    w = A / (pi sx sy) * exp(-(x-x0)^2/sx^2 - (y-y0)^2/sy^2)

    Integrates to ``amplitude`` over the plane, so with sx = sy = sigma and
    amplitude = Gamma this is an Oseen vortex of circulation Gamma.
    """
    sigma_x: float
    sigma_y: float
    x0: float
    y0: float
    amplitude: float = 1.0

    def __post_init__(self):
        if self.sigma_x <= 0 or self.sigma_y <= 0:
            raise ValueError(f"Gaussian radii must be > 0, got {(self.sigma_x, self.sigma_y)}")

    def __call__(self, x, y):
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        arg = ((x - self.x0) / self.sigma_x) ** 2 + ((y - self.y0) / self.sigma_y) ** 2
        return self.amplitude / (pi * self.sigma_x * self.sigma_y) * np.exp(-arg)


@dataclass(frozen=True)
class FieldSum(Field):
    terms: Tuple[Field, ...]

    def __call__(self, x, y):
        out = 0.0
        for t in self.terms:
            out = out + t(x, y)
        return out


@dataclass(frozen=True)
class ScaledField(Field):
    factor: float
    field: Field

    def __call__(self, x, y):
        return self.factor * self.field(x, y)


def evaluate_field(field: Field, grid: PhysicalGrid) -> np.ndarray:
    X, Y = grid.meshgrid()
    return np.broadcast_to(field(X, Y), grid.shape).astype(float)


def evaluate_field_into(out: np.ndarray, field: Field, grid: PhysicalGrid) -> np.ndarray:
    """In-place variant: overwrite ``out`` with the sampled field."""
    if out.shape != grid.shape:
        raise ValueError(f"array shape {out.shape} does not match grid {grid.shape}")
    out[...] = evaluate_field(field, grid)
    return out


def oseen_vortex(x0: float, y0: float, circulation: float, sigma: float) -> SpatialGaussian:
    return SpatialGaussian(sigma, sigma, x0, y0, circulation)


def vortex_set(specs: Iterable[Dict[str, Any]]) -> Field:
    """
    Sum of Gaussian vortices. Each spec has ``x0``, ``y0``, ``circulation``
    and either ``sigma`` or both ``sigma_x`` and ``sigma_y``.
    """
    terms = []
    for k, s in enumerate(specs):
        for key in ("x0", "y0", "circulation"):
            if key not in s:
                raise KeyError(f"vortex {k}: '{key}' is required")
        sx = s.get("sigma_x", s.get("sigma"))
        sy = s.get("sigma_y", s.get("sigma"))
        if sx is None or sy is None:
            raise KeyError(f"vortex {k}: 'sigma' (or 'sigma_x' and 'sigma_y') is required")
        terms.append(SpatialGaussian(float(sx), float(sy), float(s["x0"]), float(s["y0"]), float(s["circulation"])))
    if not terms:
        raise ValueError("vortex set is empty")
    return terms[0] if len(terms) == 1 else FieldSum(tuple(terms))


def total_circulation(omega: np.ndarray, grid: PhysicalGrid) -> float:
    return float(np.sum(omega) * grid.cell_area)
