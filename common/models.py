from __future__ import annotations
from dataclasses import dataclass, field
from math import pi
from typing import List

from common.units import Q_
from common import constants


@dataclass(frozen=True)
class Gas:
    """Perfect gas: specific-heat ratio, gas constant and Sutherland viscosity data."""
    name: str
    gamma: Q_         # -
    R: Q_             # J/kg/K
    mu_ref: Q_        # Pa*s at T_ref
    T_ref: Q_         # K
    S: Q_             # K, Sutherland constant

    @property
    def cp(self) -> Q_:
        k = self.gamma.to("").magnitude
        return (k * self.R / (k - 1.0)).to("J/kg/K")

    @property
    def cv(self) -> Q_:
        k = self.gamma.to("").magnitude
        return (self.R / (k - 1.0)).to("J/kg/K")

    @classmethod
    def from_table(cls, name: str) -> "Gas":
        try:
            row = constants.gases[name]
        except KeyError:
            raise KeyError(f"unknown gas '{name}', known: {sorted(constants.gases)}") from None
        return cls(name=name, **row)


@dataclass(frozen=True)
class Liquid:
    name: str
    rho: Q_           # kg/m^3
    mu: Q_            # Pa*s

    @property
    def nu(self) -> Q_:
        return (self.mu / self.rho).to("m^2/s")

    kinematic_viscosity = nu

    @property
    def specific_weight(self) -> Q_:
        return (self.rho * constants.g0).to("N/m^3")

    @classmethod
    def from_table(cls, name: str) -> "Liquid":
        try:
            row = constants.liquids[name]
        except KeyError:
            raise KeyError(f"unknown liquid '{name}', known: {sorted(constants.liquids)}") from None
        return cls(name=name, rho=row["rho"], mu=row["mu"])

    @classmethod
    def water(cls, T: Q_, P: Q_ = constants.p_atm) -> "Liquid":
        from common.props import WaterProps
        return cls(name="water", rho=WaterProps.rho_from_PT(P, T), mu=WaterProps.mu_from_PT(P, T))


@dataclass(frozen=True)
class MinorLoss:
    name: str
    K: Q_             # -


@dataclass
class Pipe:
    name: str
    length: Q_        # m
    diameter: Q_      # m
    roughness: Q_     # m
    minor_losses: List[MinorLoss] = field(default_factory=list)

    @property
    def area(self) -> Q_:
        return (pi * self.diameter**2 / 4).to("m^2")

    @property
    def relative_roughness(self) -> float:
        return (self.roughness / self.diameter).to("").magnitude

    @property
    def K_sum(self) -> float:
        return sum(ml.K.to("").magnitude for ml in self.minor_losses)


@dataclass(frozen=True)
class Station:
    """Energy-equation end point; in_pipe=False is a free surface at rest."""
    p: Q_             # Pa, gauge or absolute (consistent at both ends)
    z: Q_             # m
    in_pipe: bool = False


@dataclass
class PipeSystem:
    name: str
    pipes: List[Pipe]
    inlet: Station
    outlet: Station
    pump_head: Q_ = field(default_factory=lambda: Q_(0.0, "m"))
    turbine_head: Q_ = field(default_factory=lambda: Q_(0.0, "m"))


@dataclass(frozen=True)
class NozzleCase:
    """Converging-diverging nozzle fed from a reservoir at (p0, T0)."""
    gas: Gas
    p0: Q_            # Pa
    T0: Q_            # K
    A_throat: Q_      # m^2
    A_exit: Q_        # m^2

    @property
    def area_ratio(self) -> float:
        return (self.A_exit / self.A_throat).to("").magnitude
