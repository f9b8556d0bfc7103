from __future__ import annotations
from common.units import Q_
from common.quantities import as_quantity

import cantera as ct


class GasProps:
    """Cantera-backed air properties, used to check the perfect-gas catalog."""
    def __init__(self, mech_path: str = "air.yaml", phase: str | None = None):
        self._sol = ct.Solution(mech_path, phase) if phase else ct.Solution(mech_path)

    def _set(self, T, P):
        self._sol.TP = as_quantity(T, "K").magnitude, as_quantity(P, "Pa").magnitude
        return self._sol

    def rho(self, T, P) -> Q_: return Q_(self._set(T,P).density, "kg/m^3")

    def cp(self, T, P) -> Q_:  return Q_(self._set(T,P).cp_mass, "J/kg/K")

    def cv(self, T, P) -> Q_:  return Q_(self._set(T,P).cv_mass, "J/kg/K")

    def mu(self, T, P) -> Q_:  return Q_(self._set(T,P).viscosity, "Pa*s")

    def gamma(self, T, P) -> Q_:
        s = self._set(T, P)
        return Q_(s.cp_mass / s.cv_mass, "")

    def sound_speed(self, T, P) -> Q_:
        # ideal-gas mixture: a^2 = gamma * p / rho
        s = self._set(T, P)
        return Q_((s.cp_mass / s.cv_mass * s.P / s.density) ** 0.5, "m/s")
