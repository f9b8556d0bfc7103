from __future__ import annotations
from dataclasses import dataclass
from math import sqrt

from common.quantities import as_quantity
from gasdyn.isentropic import p0_p


def _upstream(M1, gamma) -> tuple[float, float]:
    m = as_quantity(M1, "").magnitude
    k = as_quantity(gamma, "").magnitude
    if m < 1.0:
        raise ValueError(f"normal shock needs supersonic upstream flow, got M1={m}")
    return m, k


def M2(M1, gamma=1.4) -> float:
    m, k = _upstream(M1, gamma)
    return sqrt((1.0 + 0.5 * (k - 1.0) * m * m) / (k * m * m - 0.5 * (k - 1.0)))


def p2_p1(M1, gamma=1.4) -> float:
    m, k = _upstream(M1, gamma)
    return 1.0 + 2.0 * k / (k + 1.0) * (m * m - 1.0)


def rho2_rho1(M1, gamma=1.4) -> float:
    m, k = _upstream(M1, gamma)
    return (k + 1.0) * m * m / ((k - 1.0) * m * m + 2.0)


def T2_T1(M1, gamma=1.4) -> float:
    return p2_p1(M1, gamma) / rho2_rho1(M1, gamma)


def p02_p01(M1, gamma=1.4) -> float:
    """Stagnation pressure ratio across the shock (entropy rise)."""
    m, k = _upstream(M1, gamma)
    m2 = M2(m, k)
    return p2_p1(m, k) * p0_p(m2, k) / p0_p(m, k)


@dataclass(frozen=True)
class NormalShock:
    M1: float
    gamma: float = 1.4

    @property
    def M2(self) -> float:        return M2(self.M1, self.gamma)
    @property
    def p2_p1(self) -> float:     return p2_p1(self.M1, self.gamma)
    @property
    def rho2_rho1(self) -> float: return rho2_rho1(self.M1, self.gamma)
    @property
    def T2_T1(self) -> float:     return T2_T1(self.M1, self.gamma)
    @property
    def p02_p01(self) -> float:   return p02_p01(self.M1, self.gamma)

    def rows(self):
        return [
            ("M1", self.M1, ""), ("M2", self.M2, ""), ("p2/p1", self.p2_p1, ""),
            ("rho2/rho1", self.rho2_rho1, ""), ("T2/T1", self.T2_T1, ""),
            ("p02/p01", self.p02_p01, ""),
        ]
