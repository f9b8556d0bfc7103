"""
Steady energy equation for incompressible flow through pipes in series.

    p1/rho g + a1 V1^2/2g + z1 + h_pump = p2/rho g + a2 V2^2/2g + z2 + h_turbine + h_L

``a`` is 1 at a station inside a pipe and 0 at a free surface. With
V_i = Q / A_i in every pipe, all velocity terms collapse to

    H_avail = Q^2 / 2g * C(f),   C = sum((f L/D + K) / A^2) + a2/A_out^2 - a1/A_in^2

which fixes Q once the friction factors are known.
"""
from __future__ import annotations
from dataclasses import replace
from math import sqrt
from typing import List, Sequence
import logging

from scipy.optimize import root_scalar

from common.constants import g0
from common.units import Q_
from common.models import PipeSystem, Pipe
from common.quantities import as_quantity, Head, Power, Pressure, Length
from common.results import PipeFlowResult, IterationRecord
from common.logging_utils import trace_calls, context
from pipeflow.friction import friction_factor

log = logging.getLogger(__name__)


def velocity_head(V, g=g0) -> Head:
    V = as_quantity(V, "m/s")
    return Head(V**2 / (2 * as_quantity(g, "m/s^2")))


def head_loss(f: float, L, D, V, g=g0) -> Head:
    """Darcy-Weisbach, h_f = f (L/D) V^2/2g."""
    ratio = (as_quantity(L, "m") / as_quantity(D, "m")).to("").magnitude
    return Head(f * ratio * velocity_head(V, g).q)


def minor_head_loss(K: float, V, g=g0) -> Head:
    return Head(as_quantity(K, "").magnitude * velocity_head(V, g).q)


def pressure_drop(f: float, L, D, rho, V) -> Pressure:
    ratio = (as_quantity(L, "m") / as_quantity(D, "m")).to("").magnitude
    V = as_quantity(V, "m/s")
    return Pressure(f * ratio * as_quantity(rho, "kg/m^3") * V**2 / 2)


def available_head(system: PipeSystem, fluid, g=g0) -> Head:
    """(p1-p2)/rho g + (z1-z2) + h_pump - h_turbine."""
    g = as_quantity(g, "m/s^2")
    rho = as_quantity(fluid.rho, "kg/m^3")
    inl, out = system.inlet, system.outlet
    H = (inl.p - out.p) / (rho * g) + (inl.z - out.z) + system.pump_head - system.turbine_head
    return Head(H)


def _coefficient(system: PipeSystem, f: Sequence[float]) -> float:
    """C in H = Q^2 C / 2g, SI magnitudes."""
    C = 0.0
    for fi, p in zip(f, system.pipes):
        A = p.area.to("m^2").magnitude
        LD = (p.length / p.diameter).to("").magnitude
        C += (fi * LD + p.K_sum) / A**2
    if system.outlet.in_pipe:
        C += 1.0 / system.pipes[-1].area.to("m^2").magnitude ** 2
    if system.inlet.in_pipe:
        C -= 1.0 / system.pipes[0].area.to("m^2").magnitude ** 2
    return C


def _flow_state(system: PipeSystem, fluid, Q: float):
    nu = (as_quantity(fluid.mu, "Pa*s") / as_quantity(fluid.rho, "kg/m^3")).to("m^2/s").magnitude
    V = [Q / p.area.to("m^2").magnitude for p in system.pipes]
    Re = [v * p.diameter.to("m").magnitude / nu for v, p in zip(V, system.pipes)]
    return V, Re


def _losses(system: PipeSystem, V: Sequence[float], f: Sequence[float], g: float):
    major, minor = [], []
    for vi, fi, p in zip(V, f, system.pipes):
        vh = vi * vi / (2 * g)
        major.append(Q_(fi * (p.length / p.diameter).to("").magnitude * vh, "m"))
        minor.append(Q_(p.K_sum * vh, "m"))
    return major, minor


@trace_calls()
def solve_flow(system: PipeSystem, fluid, g=g0, f_guess: float = 0.02,
               tol: float = 1e-6, max_iter: int = 100) -> PipeFlowResult:
    """
    Flow rate driven by the available head.

    Fixed point on the friction factors: guess f, get Q from the energy
    equation, then V and Re in every pipe, then f again from Colebrook;
    stop when no f moves by more than ``tol``.
    """
    if not system.pipes:
        raise ValueError(f"{system.name}: no pipes")
    ctx = context(system.name, "solve_flow")
    g_si = as_quantity(g, "m/s^2").magnitude
    H = available_head(system, fluid, g).value
    if H <= 0:
        raise ValueError(f"{system.name}: available head {H:.4g} m <= 0, no forward flow")

    f = [float(f_guess)] * len(system.pipes)
    history: List[IterationRecord] = []
    converged = False
    it = 0
    for it in range(1, max_iter + 1):
        C = _coefficient(system, f)
        if C <= 0:
            raise ValueError(f"{system.name}: loss coefficient {C:.4g} <= 0")
        Q = sqrt(2 * g_si * H / C)
        V, Re = _flow_state(system, fluid, Q)
        f_new = [friction_factor(r, p.relative_roughness) for r, p in zip(Re, system.pipes)]
        max_df = max(abs(a - b) for a, b in zip(f_new, f))
        history.append(IterationRecord(iteration=it, Q=Q_(Q, "m^3/s"),
                                       f=tuple(f_new), Re=tuple(Re), max_df=max_df))
        log.debug(f"it={it} Q={Q:.6g} m^3/s f={['%.5f' % x for x in f_new]} df={max_df:.2e}", extra=ctx)
        f = f_new
        if max_df < tol:
            converged = True
            break

    if converged:
        log.info(f"converged in {it} iterations", extra=ctx)
    else:
        log.warning(f"friction factors did not converge within {max_iter} iterations", extra=ctx)

    # final state consistent with the last friction factors
    Q = sqrt(2 * g_si * H / _coefficient(system, f))
    V, Re = _flow_state(system, fluid, Q)
    major, minor = _losses(system, V, f, g_si)
    return PipeFlowResult(
        system_name=system.name,
        Q=Q_(Q, "m^3/s"),
        velocities=[Q_(v, "m/s") for v in V],
        Re=list(Re),
        f=list(f),
        head_loss_major=major,
        head_loss_minor=minor,
        available_head=Q_(H, "m"),
        iterations=it,
        converged=converged,
        history=history,
        pipe_names=[p.name for p in system.pipes],
    )


def head_for_flow(system: PipeSystem, fluid, Q, g=g0) -> Head:
    """Head the system consumes at flow rate Q (losses plus exit kinetic energy)."""
    g_si = as_quantity(g, "m/s^2").magnitude
    Qm = as_quantity(Q, "m^3/s").magnitude
    if Qm <= 0:
        raise ValueError(f"flow rate must be > 0, got {Q}")
    _, Re = _flow_state(system, fluid, Qm)
    f = [friction_factor(r, p.relative_roughness) for r, p in zip(Re, system.pipes)]
    return Head(Q_(Qm**2 * _coefficient(system, f) / (2 * g_si), "m"))


def required_pump_head(system: PipeSystem, fluid, Q, g=g0) -> Head:
    """Pump head that delivers Q; negative means the system has head to spare."""
    static = available_head(replace(system, pump_head=Q_(0.0, "m")), fluid, g)
    return Head(head_for_flow(system, fluid, Q, g).q - static.q)


def pump_power(Q, head, rho, g=g0, efficiency: float = 1.0) -> Power:
    if not 0 < efficiency <= 1:
        raise ValueError(f"efficiency must be in (0, 1], got {efficiency}")
    P = as_quantity(rho, "kg/m^3") * as_quantity(g, "m/s^2") * as_quantity(Q, "m^3/s") * as_quantity(head, "m")
    return Power(P / efficiency)


def size_pipe(system: PipeSystem, fluid, Q, index: int = 0, g=g0,
              D_min=Q_(1.0, "mm"), D_max=Q_(5.0, "m")) -> Length:
    """Diameter of pipe ``index`` that passes Q with exactly the available head."""
    H = available_head(system, fluid, g).value
    if H <= 0:
        raise ValueError(f"{system.name}: available head {H:.4g} m <= 0, no forward flow")

    def _resid(D: float) -> float:
        pipes: List[Pipe] = list(system.pipes)
        pipes[index] = replace(pipes[index], diameter=Q_(D, "m"))
        trial = replace(system, pipes=pipes)
        return head_for_flow(trial, fluid, Q, g).value - H

    lo, hi = as_quantity(D_min, "m").magnitude, as_quantity(D_max, "m").magnitude
    if _resid(lo) * _resid(hi) > 0:
        raise ValueError(f"{system.name}: no diameter in [{lo}, {hi}] m carries {Q} with {H:.4g} m of head")
    sol = root_scalar(_resid, bracket=(lo, hi), method="brentq", xtol=1e-9)
    log.info(f"sized {system.pipes[index].name}: D={sol.root:.5g} m", extra=context(system.name, "size_pipe"))
    return Length(sol.root)
