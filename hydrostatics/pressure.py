from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from common.constants import g0
from common.quantities import as_quantity, Pressure, Length, Force


def pressure_at_depth(h, rho, p_surface=0.0, g=g0) -> Pressure:
    """p = p_s + rho g h. Gauge if p_surface is gauge."""
    h = as_quantity(h, "m")
    if h.magnitude < 0:
        raise ValueError(f"depth must be >= 0, got {h}")
    p = as_quantity(p_surface, "Pa") + as_quantity(rho, "kg/m^3") * as_quantity(g, "m/s^2") * h
    return Pressure(p)


def depth_for_pressure(p, rho, p_surface=0.0, g=g0) -> Length:
    dp = as_quantity(p, "Pa") - as_quantity(p_surface, "Pa")
    if dp.magnitude < 0:
        raise ValueError(f"pressure {p} is below the surface pressure {p_surface}")
    return Length(dp / (as_quantity(rho, "kg/m^3") * as_quantity(g, "m/s^2")))


@dataclass(frozen=True)
class ManometerLeg:
    rho: object     # kg/m^3
    dz: object      # m, positive going down


def manometer(start_pressure, legs: Iterable[ManometerLeg], g=g0) -> Pressure:
    """Walk a manometer: down a leg adds rho g dz, up subtracts."""
    g = as_quantity(g, "m/s^2")
    p = as_quantity(start_pressure, "Pa")
    for leg in legs:
        p = p + as_quantity(leg.rho, "kg/m^3") * g * as_quantity(leg.dz, "m")
    return Pressure(p)


def buoyant_force(volume, rho, g=g0) -> Force:
    """Archimedes: weight of displaced fluid."""
    return Force(as_quantity(volume, "m^3") * as_quantity(rho, "kg/m^3") * as_quantity(g, "m/s^2"))
