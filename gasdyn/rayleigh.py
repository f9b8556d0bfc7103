"""
Rayleigh flow: frictionless constant-area flow with heat addition.
"""
from __future__ import annotations

from scipy.optimize import root_scalar

from common.quantities import as_quantity, MachNumber


def _args(M, gamma) -> tuple[float, float]:
    m = as_quantity(M, "").magnitude
    k = as_quantity(gamma, "").magnitude
    if m < 0:
        raise ValueError(f"Mach number must be >= 0, got {m}")
    return m, k


def p_pstar(M, gamma=1.4) -> float:
    m, k = _args(M, gamma)
    return (1.0 + k) / (1.0 + k * m * m)


def T_Tstar(M, gamma=1.4) -> float:
    m, k = _args(M, gamma)
    return (m * p_pstar(m, k)) ** 2


def rho_rhostar(M, gamma=1.4) -> float:
    m, k = _args(M, gamma)
    if m == 0:
        raise ValueError("rho/rho* is unbounded at M = 0")
    return 1.0 / (m * m * p_pstar(m, k))


def V_Vstar(M, gamma=1.4) -> float:
    m, k = _args(M, gamma)
    return m * m * p_pstar(m, k)


def T0_T0star(M, gamma=1.4) -> float:
    m, k = _args(M, gamma)
    return (k + 1.0) * m * m * (2.0 + (k - 1.0) * m * m) / (1.0 + k * m * m) ** 2


def p0_p0star(M, gamma=1.4) -> float:
    m, k = _args(M, gamma)
    e = k / (k - 1.0)
    return p_pstar(m, k) * ((2.0 + (k - 1.0) * m * m) / (k + 1.0)) ** e


def mach_from_T0_T0star(value, gamma=1.4, supersonic: bool = False) -> MachNumber:
    k = as_quantity(gamma, "").magnitude
    v = as_quantity(value, "").magnitude
    if not 0.0 <= v <= 1.0:
        raise ValueError(f"T0/T0* must be in [0, 1], got {v}")
    if v == 1.0:
        return MachNumber(1.0)
    if supersonic:
        # T0/T0* falls to (k^2-1)/k^2 as M -> infinity
        limit = (k * k - 1.0) / (k * k)
        if v <= limit:
            raise ValueError(f"T0/T0*={v} is below the supersonic limit {limit:.4f}")
        bracket = (1.0, 1e4)
    else:
        bracket = (0.0, 1.0)
    sol = root_scalar(lambda m: T0_T0star(m, k) - v, bracket=bracket, method="brentq")
    return MachNumber(sol.root)
