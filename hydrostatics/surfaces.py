"""
Hydrostatic forces on submerged surfaces.

Plane surfaces are measured along the plate: ``y`` is the distance from the
line where the plate's plane meets the free surface, ``h = y sin(theta)`` the
vertical depth. A surface pressure ``p_s`` is handled with an equivalent free
surface raised by ``p_s / (rho g)``.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from math import pi, sin, atan2, degrees, sqrt
import logging

from common.constants import g0
from common.units import Q_
from common.quantities import as_quantity
from common.results import HydrostaticForceResult, CurvedSurfaceResult
from common.logging_utils import trace_calls, context

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rectangle:
    width: Q_
    height: Q_

    @property
    def area(self) -> Q_:     return (self.width * self.height).to("m^2")
    @property
    def y_c(self) -> Q_:      return (self.height / 2).to("m")
    @property
    def I_xc(self) -> Q_:     return (self.width * self.height**3 / 12).to("m^4")
    @property
    def extent(self) -> Q_:   return self.height.to("m")


@dataclass(frozen=True)
class Circle:
    radius: Q_

    @property
    def area(self) -> Q_:     return (pi * self.radius**2).to("m^2")
    @property
    def y_c(self) -> Q_:      return self.radius.to("m")
    @property
    def I_xc(self) -> Q_:     return (pi * self.radius**4 / 4).to("m^4")
    @property
    def extent(self) -> Q_:   return (2 * self.radius).to("m")


@dataclass(frozen=True)
class Triangle:
    """Base along the top edge, apex pointing down the plate."""
    base: Q_
    height: Q_

    @property
    def area(self) -> Q_:     return (self.base * self.height / 2).to("m^2")
    @property
    def y_c(self) -> Q_:      return (self.height / 3).to("m")
    @property
    def I_xc(self) -> Q_:     return (self.base * self.height**3 / 36).to("m^4")
    @property
    def extent(self) -> Q_:   return self.height.to("m")


@dataclass(frozen=True)
class Semicircle:
    """Flat edge on top."""
    radius: Q_

    @property
    def area(self) -> Q_:     return (pi * self.radius**2 / 2).to("m^2")
    @property
    def y_c(self) -> Q_:      return (4 * self.radius / (3 * pi)).to("m")
    @property
    def I_xc(self) -> Q_:     return ((pi / 8 - 8 / (9 * pi)) * self.radius**4).to("m^4")
    @property
    def extent(self) -> Q_:   return self.radius.to("m")


SHAPES = {
    "rectangle": Rectangle,
    "circle": Circle,
    "triangle": Triangle,
    "semicircle": Semicircle,
}


@dataclass(frozen=True)
class PlaneSurface:
    name: str
    shape: object
    top_depth: Q_                 # vertical depth of the top edge
    angle: Q_ = field(default_factory=lambda: Q_(90.0, "deg"))  # from the free surface; 90 deg is vertical

    @property
    def sin_theta(self) -> float:
        return sin(self.angle.to("rad").magnitude)


@trace_calls(values=True)
def hydrostatic_force(surface: PlaneSurface, rho, g=g0, p_surface=0.0) -> HydrostaticForceResult:
    rho = as_quantity(rho, "kg/m^3")
    g = as_quantity(g, "m/s^2")
    p_s = as_quantity(p_surface, "Pa")
    d_top = surface.top_depth.to("m")
    if d_top.magnitude < 0:
        raise ValueError(f"{surface.name}: top edge is above the free surface (depth {d_top})")

    shape = surface.shape
    A = shape.area
    s = surface.sin_theta

    if abs(s) < 1e-12:
        # horizontal plate: uniform pressure, acts at the centroid
        p_c = (p_s + rho * g * d_top).to("Pa")
        return HydrostaticForceResult(
            force=(p_c * A).to("N"), area=A,
            centroid_depth=d_top, pressure_center_depth=d_top,
            y_centroid=Q_(float("inf"), "m"), y_pressure_center=Q_(float("inf"), "m"),
            centroid_pressure=p_c,
        )

    y_c = (d_top / s + shape.y_c).to("m")
    h_c = (y_c * s).to("m")
    p_c = (p_s + rho * g * h_c).to("Pa")
    F = (p_c * A).to("N")

    # equivalent free surface for p_s != 0
    y_shift = (p_s / (rho * g) / s).to("m")
    y_eq = y_c + y_shift
    if y_eq.magnitude <= 0:
        raise ValueError(f"{surface.name}: net pressure at the centroid is not positive")
    y_cp = (y_eq + shape.I_xc / (y_eq * A) - y_shift).to("m")

    log.debug(f"F={F:.6g~P} at y_cp={y_cp:.4g~P}", extra=context(surface.name, "force"))
    return HydrostaticForceResult(
        force=F, area=A,
        centroid_depth=h_c, pressure_center_depth=(y_cp * s).to("m"),
        y_centroid=y_c, y_pressure_center=y_cp,
        centroid_pressure=p_c,
    )


def pressure_profile(surface: PlaneSurface, rho, g=g0, p_surface=0.0, n: int = 21):
    """(distance along plate from top edge, pressure) pairs for a pressure-prism plot."""
    if n < 2:
        raise ValueError(f"pressure profile needs at least 2 points, got n={n}")
    rho = as_quantity(rho, "kg/m^3")
    g = as_quantity(g, "m/s^2")
    p_s = as_quantity(p_surface, "Pa")
    L = surface.shape.extent.to("m")
    s = surface.sin_theta
    out = []
    for i in range(n):
        xi = L * (i / (n - 1))
        h = surface.top_depth.to("m") + xi * s
        out.append((xi.magnitude, (p_s + rho * g * h).to("Pa").magnitude))
    return out


def curved_quarter_cylinder(radius, width, top_depth, rho, g=g0, fluid_inside: bool = False) -> CurvedSurfaceResult:
    """
    Quarter-circle gate with its top edge at ``top_depth`` and liquid above it.

    Horizontal component = force on the vertical projection; vertical
    component = weight of liquid above the curve. ``fluid_inside`` selects
    whether the liquid fills the quarter disk (concave side) or sits on the
    convex side.
    """
    R = as_quantity(radius, "m")
    w = as_quantity(width, "m")
    d = as_quantity(top_depth, "m")
    rho = as_quantity(rho, "kg/m^3")
    g = as_quantity(g, "m/s^2")
    if d.magnitude < 0:
        raise ValueError(f"top edge is above the free surface (depth {d})")

    F_H = (rho * g * (d + R / 2) * R * w).to("N")
    segment = pi * R**2 / 4 if fluid_inside else R**2 - pi * R**2 / 4
    F_V = (rho * g * w * (d * R + segment)).to("N")
    F = Q_(sqrt(F_H.magnitude**2 + F_V.magnitude**2), "N")
    ang = Q_(degrees(atan2(F_V.magnitude, F_H.magnitude)), "deg")
    return CurvedSurfaceResult(horizontal=F_H, vertical=F_V, resultant=F, angle=ang)
