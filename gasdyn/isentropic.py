"""
Isentropic flow of a perfect gas: stagnation-to-static ratios and the
area-Mach relation, with their inverses.
"""
from __future__ import annotations
from math import sqrt

from scipy.optimize import root_scalar

from common.models import Gas
from common.quantities import as_quantity, MassFlowRate, MachNumber


def _k(gamma) -> float:
    return as_quantity(gamma, "").magnitude


def _M(M) -> float:
    m = as_quantity(M, "").magnitude
    if m < 0:
        raise ValueError(f"Mach number must be >= 0, got {m}")
    return m


def T0_T(M, gamma=1.4) -> float:
    k, m = _k(gamma), _M(M)
    return 1.0 + 0.5 * (k - 1.0) * m * m


def p0_p(M, gamma=1.4) -> float:
    k = _k(gamma)
    return T0_T(M, k) ** (k / (k - 1.0))


def rho0_rho(M, gamma=1.4) -> float:
    k = _k(gamma)
    return T0_T(M, k) ** (1.0 / (k - 1.0))


def A_Astar(M, gamma=1.4) -> float:
    k, m = _k(gamma), _M(M)
    if m == 0:
        raise ValueError("A/A* is unbounded at M = 0")
    e = (k + 1.0) / (2.0 * (k - 1.0))
    return (1.0 / m) * ((2.0 / (k + 1.0)) * T0_T(m, k)) ** e


def mach_from_area_ratio(ratio, gamma=1.4, supersonic: bool = False) -> MachNumber:
    """Invert A/A* on the subsonic (default) or supersonic branch."""
    k = _k(gamma)
    r = as_quantity(ratio, "").magnitude
    if r < 1.0:
        raise ValueError(f"A/A* must be >= 1, got {r}")
    if r == 1.0:
        return MachNumber(1.0)
    bracket = (1.0, 100.0) if supersonic else (1e-9, 1.0)
    sol = root_scalar(lambda m: A_Astar(m, k) - r, bracket=bracket, method="brentq")
    return MachNumber(sol.root)


def mach_from_pressure_ratio(ratio, gamma=1.4) -> MachNumber:
    """M from p0/p."""
    k = _k(gamma)
    r = as_quantity(ratio, "").magnitude
    if r < 1.0:
        raise ValueError(f"p0/p must be >= 1, got {r}")
    return MachNumber(sqrt(2.0 / (k - 1.0) * (r ** ((k - 1.0) / k) - 1.0)))


def mach_from_temperature_ratio(ratio, gamma=1.4) -> MachNumber:
    """M from T0/T."""
    k = _k(gamma)
    r = as_quantity(ratio, "").magnitude
    if r < 1.0:
        raise ValueError(f"T0/T must be >= 1, got {r}")
    return MachNumber(sqrt(2.0 / (k - 1.0) * (r - 1.0)))


def critical_ratios(gamma=1.4) -> dict:
    """T*/T0, p*/p0, rho*/rho0 at the sonic throat."""
    return {
        "T*/T0": 1.0 / T0_T(1.0, gamma),
        "p*/p0": 1.0 / p0_p(1.0, gamma),
        "rho*/rho0": 1.0 / rho0_rho(1.0, gamma),
    }


def choked_mass_flow(p0, T0, A_throat, gas: Gas) -> MassFlowRate:
    """mdot = A* p0 / sqrt(R T0) * sqrt(k) * (2/(k+1))^((k+1)/(2(k-1)))."""
    k = _k(gas.gamma)
    p0 = as_quantity(p0, "Pa")
    T0 = as_quantity(T0, "K")
    A = as_quantity(A_throat, "m^2")
    factor = sqrt(k) * (2.0 / (k + 1.0)) ** ((k + 1.0) / (2.0 * (k - 1.0)))
    return MassFlowRate(factor * A * p0 / (gas.R * T0) ** 0.5)
