from __future__ import annotations
from math import hypot, pi
from typing import Callable, Optional, Sequence, Tuple
import logging

import numpy as np
from scipy.interpolate import RegularGridInterpolator
from scipy.optimize import root

from common.logging_utils import context
from common.results import StagnationPoint
from vortex.grid import PhysicalGrid
from vortex.operators import VelocityField

log = logging.getLogger(__name__)


def interpolatable_field(field: np.ndarray, grid: PhysicalGrid, method: str = "linear") -> Callable:
    """Grid data -> f(x, y) usable anywhere in (and just outside) the grid."""
    x, y = grid.coordinates()
    interp = RegularGridInterpolator((x, y), np.asarray(field, dtype=float),
                                     method=method, bounds_error=False, fill_value=None)

    def f(xq, yq):
        xq, yq = np.broadcast_arrays(np.asarray(xq, dtype=float), np.asarray(yq, dtype=float))
        out = interp(np.stack([xq.ravel(), yq.ravel()], axis=-1)).reshape(xq.shape)
        return float(out) if out.ndim == 0 else out

    return f


def velocity_slice(field: np.ndarray, grid: PhysicalGrid, y: float = 0.0,
                   x: Optional[float] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Values of ``field`` along the horizontal line through ``y``, or along the
    vertical line through ``x`` when that is given. Returns (positions, values).
    """
    xs, ys = grid.coordinates()
    f = interpolatable_field(field, grid)
    if x is not None:
        return ys, f(np.full_like(ys, x), ys)
    return xs, f(xs, np.full_like(xs, y))


def find_stagnation_point(vel: VelocityField, grid: PhysicalGrid, guess: Sequence[float],
                          method: str = "hybr", tol: float = 1e-10,
                          speed_tol: float = 1e-8) -> StagnationPoint:
    """
    Solve u(x, y) = v(x, y) = 0 starting from ``guess``.

    The interpolated velocity is only piecewise linear, so MINPACK can stop
    with "not making good progress" right on the root. A point whose
    residual speed is at most ``speed_tol`` counts as converged either way;
    ``message`` keeps the solver's own status.
    """
    fu = interpolatable_field(vel.u, grid)
    fv = interpolatable_field(vel.v, grid)

    def _uv(p):
        return [fu(p[0], p[1]), fv(p[0], p[1])]

    sol = root(_uv, np.asarray(guess, dtype=float), method=method, tol=tol)
    x, y = float(sol.x[0]), float(sol.x[1])
    u, v = _uv(sol.x)
    speed = hypot(u, v)
    converged = bool(sol.success) or speed <= speed_tol
    pt = StagnationPoint(x=x, y=y, speed=speed, converged=converged, message=str(sol.message))
    ctx = context(step="stagnation")
    if pt.converged:
        log.info(f"stagnation point at ({x:.4f}, {y:.4f}), |u|={pt.speed:.2e}", extra=ctx)
    else:
        log.warning(f"stagnation search from {tuple(guess)} did not converge: {sol.message}", extra=ctx)
    return pt


def oseen_velocity(r, circulation: float, sigma: float):
    """Azimuthal speed of an Oseen vortex, Gamma/(2 pi r) (1 - exp(-r^2/sigma^2))."""
    r = np.asarray(r, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        out = circulation / (2 * pi * r) * (1.0 - np.exp(-(r / sigma) ** 2))
    return np.where(r > 0, out, 0.0)
