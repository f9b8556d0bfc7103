"""
Discrete operators on PhysicalGrid data.

The streamfunction of a vorticity field solves  lap(psi) = -omega  and the
velocity is  u = curl(psi k), i.e.  u = d(psi)/dy,  v = -d(psi)/dx.
"""
from __future__ import annotations
from dataclasses import dataclass
from math import log, pi

import numpy as np
from scipy.fft import dstn, idstn
from scipy.signal import fftconvolve

from common.logging_utils import trace_calls
from vortex.grid import PhysicalGrid


# mean of ln(r) over the square [-1, 1]^2
_LOG_SELF = 0.5 * (log(2.0) - 3.0 + pi / 2.0)


@dataclass(frozen=True)
class VelocityField:
    u: np.ndarray
    v: np.ndarray


def _check(f: np.ndarray, grid: PhysicalGrid) -> np.ndarray:
    f = np.asarray(f, dtype=float)
    if f.shape != grid.shape:
        raise ValueError(f"array shape {f.shape} does not match grid {grid.shape}")
    return f


def laplacian(f: np.ndarray, grid: PhysicalGrid) -> np.ndarray:
    """Five-point Laplacian; edge nodes are left at zero."""
    f = _check(f, grid)
    out = np.zeros_like(f)
    out[1:-1, 1:-1] = (
        f[2:, 1:-1] + f[:-2, 1:-1] + f[1:-1, 2:] + f[1:-1, :-2] - 4.0 * f[1:-1, 1:-1]
    ) / grid.dx**2
    return out


def _free_space_kernel(grid: PhysicalGrid) -> np.ndarray:
    """ln(r)/(2 pi) on all node offsets, cell-averaged at r = 0."""
    h = grid.dx
    i = np.arange(-(grid.nx - 1), grid.nx)
    j = np.arange(-(grid.ny - 1), grid.ny)
    I, J = np.meshgrid(i, j, indexing="ij")
    r = h * np.hypot(I, J)
    r[grid.nx - 1, grid.ny - 1] = 1.0
    G = np.log(r)
    G[grid.nx - 1, grid.ny - 1] = log(h / 2.0) + _LOG_SELF
    return G / (2.0 * pi)


def _solve_unbounded(rhs: np.ndarray, grid: PhysicalGrid) -> np.ndarray:
    return fftconvolve(rhs, _free_space_kernel(grid), mode="same") * grid.cell_area


def _solve_dirichlet(rhs: np.ndarray, grid: PhysicalGrid) -> np.ndarray:
    """Exact inverse of the five-point operator with zero edge values."""
    nx, ny = grid.nx - 2, grid.ny - 2
    h2 = grid.dx**2
    lam_x = (2.0 * np.cos(pi * np.arange(1, nx + 1) / (nx + 1)) - 2.0) / h2
    lam_y = (2.0 * np.cos(pi * np.arange(1, ny + 1) / (ny + 1)) - 2.0) / h2
    coef = dstn(rhs[1:-1, 1:-1], type=1)
    coef /= lam_x[:, None] + lam_y[None, :]
    out = np.zeros_like(rhs)
    out[1:-1, 1:-1] = idstn(coef, type=1)
    return out


@trace_calls()
def inverse_laplacian(rhs: np.ndarray, grid: PhysicalGrid, boundary: str = "unbounded") -> np.ndarray:
    """
    Solve lap(psi) = rhs.

    ``"unbounded"`` treats the grid as a window on the infinite plane (free-space
    Green's function), ``"dirichlet"`` holds psi = 0 on the edge of the grid.
    """
    rhs = _check(rhs, grid)
    if boundary == "unbounded":
        return _solve_unbounded(rhs, grid)
    if boundary == "dirichlet":
        return _solve_dirichlet(rhs, grid)
    raise ValueError(f"unknown boundary '{boundary}', expected 'unbounded' or 'dirichlet'")


def streamfunction(omega: np.ndarray, grid: PhysicalGrid, boundary: str = "unbounded") -> np.ndarray:
    return inverse_laplacian(-_check(omega, grid), grid, boundary)


def curl(psi: np.ndarray, grid: PhysicalGrid) -> VelocityField:
    """Velocity from the streamfunction, central differences inside."""
    psi = _check(psi, grid)
    u = np.gradient(psi, grid.dx, axis=1)
    v = -np.gradient(psi, grid.dx, axis=0)
    return VelocityField(u=u, v=v)


def vorticity(vel: VelocityField, grid: PhysicalGrid) -> np.ndarray:
    return np.gradient(vel.v, grid.dx, axis=0) - np.gradient(vel.u, grid.dx, axis=1)


def magsq(vel: VelocityField) -> np.ndarray:
    return vel.u**2 + vel.v**2


def mag(vel: VelocityField) -> np.ndarray:
    return np.sqrt(magsq(vel))
