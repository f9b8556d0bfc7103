"""
Fanno flow: adiabatic flow in a constant-area duct with wall friction.
Ratios are taken to the sonic (*) reference state. The friction parameter
uses the Darcy factor, fL*/D.
"""
from __future__ import annotations
from math import log, sqrt

from scipy.optimize import root_scalar

from common.quantities import as_quantity, MachNumber


def _args(M, gamma) -> tuple[float, float]:
    m = as_quantity(M, "").magnitude
    k = as_quantity(gamma, "").magnitude
    if m <= 0:
        raise ValueError(f"Mach number must be > 0, got {m}")
    return m, k


def T_Tstar(M, gamma=1.4) -> float:
    m, k = _args(M, gamma)
    return (k + 1.0) / (2.0 + (k - 1.0) * m * m)


def p_pstar(M, gamma=1.4) -> float:
    m, k = _args(M, gamma)
    return sqrt(T_Tstar(m, k)) / m


def rho_rhostar(M, gamma=1.4) -> float:
    m, k = _args(M, gamma)
    return 1.0 / (m * sqrt(T_Tstar(m, k)))


def V_Vstar(M, gamma=1.4) -> float:
    return 1.0 / rho_rhostar(M, gamma)


def p0_p0star(M, gamma=1.4) -> float:
    m, k = _args(M, gamma)
    e = (k + 1.0) / (2.0 * (k - 1.0))
    return (1.0 / m) * ((2.0 + (k - 1.0) * m * m) / (k + 1.0)) ** e


def fLstar_D(M, gamma=1.4) -> float:
    m, k = _args(M, gamma)
    m2 = m * m
    return (1.0 - m2) / (k * m2) + (k + 1.0) / (2.0 * k) * log((k + 1.0) * m2 / (2.0 + (k - 1.0) * m2))


def mach_from_fLstar_D(value, gamma=1.4, supersonic: bool = False) -> MachNumber:
    k = as_quantity(gamma, "").magnitude
    v = as_quantity(value, "").magnitude
    if v < 0:
        raise ValueError(f"fL*/D must be >= 0, got {v}")
    if v == 0:
        return MachNumber(1.0)
    if supersonic:
        # the supersonic branch saturates as M -> infinity
        limit = (k + 1.0) / (2.0 * k) * log((k + 1.0) / (k - 1.0)) - 1.0 / k
        if v >= limit:
            raise ValueError(f"fL*/D={v} exceeds the supersonic limit {limit:.4f}")
        bracket = (1.0, 1e4)
    else:
        bracket = (1e-6, 1.0)
    sol = root_scalar(lambda m: fLstar_D(m, k) - v, bracket=bracket, method="brentq")
    return MachNumber(sol.root)
