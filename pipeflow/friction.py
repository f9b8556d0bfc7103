from __future__ import annotations
from math import log10, sqrt
import logging

from common.quantities import as_quantity, ReynoldsNumber
from common.results import FrictionResult
from common.logging_utils import trace_calls

log = logging.getLogger(__name__)

RE_LAMINAR = 2300.0
RE_TURBULENT = 4000.0


def reynolds_number(V, D, nu) -> ReynoldsNumber:
    """Re = V D / nu."""
    return ReynoldsNumber(as_quantity(V, "m/s") * as_quantity(D, "m") / as_quantity(nu, "m^2/s"))


def reynolds_number_from(rho, V, D, mu) -> ReynoldsNumber:
    """Re = rho V D / mu."""
    return ReynoldsNumber(
        as_quantity(rho, "kg/m^3") * as_quantity(V, "m/s") * as_quantity(D, "m") / as_quantity(mu, "Pa*s")
    )


def _Re(Re) -> float:
    r = as_quantity(Re, "").magnitude
    if r <= 0:
        raise ValueError(f"Reynolds number must be > 0, got {r}")
    return r


def laminar_friction_factor(Re) -> float:
    return 64.0 / _Re(Re)


def haaland(Re, eps_D: float) -> float:
    """Explicit, within about 2% of Colebrook."""
    r = _Re(Re)
    return (-1.8 * log10((eps_D / 3.7) ** 1.11 + 6.9 / r)) ** -2


def swamee_jain(Re, eps_D: float) -> float:
    r = _Re(Re)
    return 0.25 / (log10(eps_D / 3.7 + 5.74 / r**0.9) ** 2)


def colebrook_residual(f: float, Re, eps_D: float) -> float:
    """1/sqrt(f) + 2 log10(eps/3.7D + 2.51/(Re sqrt(f))); zero at the solution."""
    r = _Re(Re)
    return 1.0 / sqrt(f) + 2.0 * log10(eps_D / 3.7 + 2.51 / (r * sqrt(f)))


def colebrook(Re, eps_D: float, f0: float | None = None,
              tol: float = 1e-8, max_iter: int = 50) -> FrictionResult:
    """Colebrook-White via fixed-point on 1/sqrt(f). Seed with Swamee-Jain."""
    r = _Re(Re)
    if eps_D < 0:
        raise ValueError(f"relative roughness must be >= 0, got {eps_D}")

    f = swamee_jain(r, eps_D) if f0 is None else float(f0)
    history = [f]
    for it in range(1, max_iter + 1):
        f_new = (-2.0 * log10(eps_D / 3.7 + 2.51 / (r * sqrt(f)))) ** -2
        history.append(f_new)
        if abs(f_new - f) < tol:
            return FrictionResult(f=f_new, Re=r, iterations=it, converged=True, history=tuple(history))
        f = f_new

    log.warning(f"Colebrook did not converge in {max_iter} iterations (Re={r:.4g}, eps/D={eps_D:.3g})")
    return FrictionResult(f=f, Re=r, iterations=max_iter, converged=False, history=tuple(history))


@trace_calls()
def friction_factor(Re, eps_D: float) -> float:
    """Darcy friction factor over the full Re range."""
    r = _Re(Re)
    if r < RE_LAMINAR:
        return 64.0 / r
    if r >= RE_TURBULENT:
        return colebrook(r, eps_D).f
    # linear blend across the transition
    f_lam = 64.0 / r
    f_turb = colebrook(RE_TURBULENT, eps_D).f
    w = (r - RE_LAMINAR) / (RE_TURBULENT - RE_LAMINAR)
    return (1 - w) * f_lam + w * f_turb
