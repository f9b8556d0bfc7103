from __future__ import annotations
from common.units import Q_
from common.constants import g0

from iapws import IAPWS97


class WaterProps:
    """IAPWS-97 liquid water properties from (P,T)."""
    @staticmethod
    def _PT(P: Q_, T: Q_) -> IAPWS97:
        return IAPWS97(P=P.to("megapascal").magnitude, T=T.to("K").magnitude)

    @staticmethod
    def rho_from_PT(P: Q_, T: Q_) -> Q_: return Q_(WaterProps._PT(P,T).rho, "kg/m^3")

    @staticmethod
    def mu_from_PT(P: Q_, T: Q_) -> Q_:  return Q_(WaterProps._PT(P,T).mu, "Pa*s")

    @staticmethod
    def nu_from_PT(P: Q_, T: Q_) -> Q_:
        return (WaterProps.mu_from_PT(P, T) / WaterProps.rho_from_PT(P, T)).to("m^2/s")

    @staticmethod
    def gamma_from_PT(P: Q_, T: Q_, g: Q_ = g0) -> Q_:
        # specific weight
        return (WaterProps.rho_from_PT(P, T) * g).to("N/m^3")

    @staticmethod
    def Psat(T: Q_) -> Q_:
        # vapour pressure, for cavitation checks on suction lines
        return Q_(IAPWS97(T=T.to("K").magnitude, x=0.0).P, "MPa").to("Pa")
