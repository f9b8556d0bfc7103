"""
Perfect-gas property catalog.

All functions take wrapper types, pint quantities or bare SI numbers and
return wrapper types from ``common.quantities``.
"""
from __future__ import annotations
from dataclasses import dataclass

from common.constants import g0
from common.models import Gas
from common.quantities import (
    as_quantity, Density, Pressure, Temperature, Velocity, SpecificWeight,
    DynamicViscosity, KinematicViscosity, SpecificHeat, MachNumber,
)

AIR = Gas.from_table("air")


def density(p, T, gas: Gas = AIR) -> Density:
    """Ideal gas law, rho = p / (R T)."""
    p = as_quantity(p, "Pa")
    T = as_quantity(T, "K")
    return Density(p / (gas.R * T))


def pressure(rho, T, gas: Gas = AIR) -> Pressure:
    return Pressure(as_quantity(rho, "kg/m^3") * gas.R * as_quantity(T, "K"))


def temperature(p, rho, gas: Gas = AIR) -> Temperature:
    return Temperature(as_quantity(p, "Pa") / (as_quantity(rho, "kg/m^3") * gas.R))


def sound_speed(T, gas: Gas = AIR) -> Velocity:
    """a = sqrt(gamma R T)."""
    T = as_quantity(T, "K")
    k = gas.gamma.to("").magnitude
    return Velocity((k * gas.R * T) ** 0.5)


def specific_weight(rho, g=g0) -> SpecificWeight:
    return SpecificWeight(as_quantity(rho, "kg/m^3") * as_quantity(g, "m/s^2"))


def viscosity(T, gas: Gas = AIR) -> DynamicViscosity:
    """Sutherland's law."""
    T = as_quantity(T, "K").magnitude
    Tr = gas.T_ref.to("K").magnitude
    S = gas.S.to("K").magnitude
    ratio = (T / Tr) ** 1.5 * (Tr + S) / (T + S)
    return DynamicViscosity(gas.mu_ref * ratio)


def kinematic_viscosity(p, T, gas: Gas = AIR) -> KinematicViscosity:
    return KinematicViscosity(viscosity(T, gas).q / density(p, T, gas).q)


def cp(gas: Gas = AIR) -> SpecificHeat:
    return SpecificHeat(gas.cp)


def cv(gas: Gas = AIR) -> SpecificHeat:
    return SpecificHeat(gas.cv)


def mach_number(V, T, gas: Gas = AIR) -> MachNumber:
    return MachNumber(as_quantity(V, "m/s") / sound_speed(T, gas).q)


def stagnation_temperature(T, V, gas: Gas = AIR) -> Temperature:
    T = as_quantity(T, "K")
    V = as_quantity(V, "m/s")
    return Temperature(T + V**2 / (2 * gas.cp))


def stagnation_pressure(p, T, V, gas: Gas = AIR) -> Pressure:
    """Isentropic deceleration to rest."""
    k = gas.gamma.to("").magnitude
    T0 = stagnation_temperature(T, V, gas).value
    ratio = (T0 / as_quantity(T, "K").magnitude) ** (k / (k - 1.0))
    return Pressure(as_quantity(p, "Pa") * ratio)


@dataclass(frozen=True)
class GasState:
    gas: Gas
    p: Pressure
    T: Temperature
    rho: Density
    a: Velocity
    mu: DynamicViscosity
    nu: KinematicViscosity

    @classmethod
    def from_pT(cls, p, T, gas: Gas = AIR) -> "GasState":
        rho = density(p, T, gas)
        mu = viscosity(T, gas)
        return cls(
            gas=gas, p=Pressure(as_quantity(p, "Pa")), T=Temperature(as_quantity(T, "K")),
            rho=rho, a=sound_speed(T, gas), mu=mu,
            nu=KinematicViscosity(mu.q / rho.q),
        )

    def rows(self):
        return [
            ("gas", self.gas.name, ""),
            ("p", self.p.value, "Pa"),
            ("T", self.T.value, "K"),
            ("rho", self.rho.value, "kg/m^3"),
            ("a", self.a.value, "m/s"),
            ("mu", self.mu.value, "Pa*s"),
            ("nu", self.nu.value, "m^2/s"),
            ("cp", self.gas.cp.magnitude, "J/kg/K"),
            ("cv", self.gas.cv.magnitude, "J/kg/K"),
        ]
