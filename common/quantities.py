"""
Unit-tagged scalar types.

Every type stores its value in ``default_unit``; construction converts,
display prints the stored value with the default unit symbol:

    >>> Pressure(1, "atm")
    Pressure(101325 Pa)
    >>> Temperature(20, "degC").value
    293.15

Arithmetic hands back plain pint quantities, so results can be wrapped again
(``Density(p / (R * T))``) or used directly.
"""
from __future__ import annotations
from typing import Any

from common.units import Q_, ureg


def as_quantity(x: Any, unit: str) -> Q_:
    """Wrapper, pint quantity or bare number (taken in ``unit``) -> Q_ in ``unit``."""
    if isinstance(x, PhysicalQuantity):
        return x.q.to(unit)
    if isinstance(x, ureg.Quantity):
        return x.to(unit)
    return Q_(x, unit)


def magnitude(x: Any, unit: str) -> float:
    return as_quantity(x, unit).magnitude


class PhysicalQuantity:
    default_unit: str = ""

    __slots__ = ("_q",)

    def __init__(self, value: Any, unit: str | None = None):
        if isinstance(value, PhysicalQuantity):
            value = value.q
        if isinstance(value, ureg.Quantity):
            if unit is not None:
                raise TypeError(f"{type(self).__name__}: unit given for a value that already has one")
            q = value
        else:
            q = Q_(value, self.default_unit if unit is None else unit)
        # raises pint.DimensionalityError on a wrong dimension
        self._q = q.to(self.default_unit)

    @classmethod
    def accepts(cls, q: Q_) -> bool:
        return q.is_compatible_with(cls.default_unit)

    @property
    def q(self) -> Q_:
        return self._q

    @property
    def value(self) -> float:
        return float(self._q.magnitude)

    @property
    def dimension(self) -> str:
        # e.g. "[mass] / [length] / [time] ** 2" for Pressure
        return str(self._q.dimensionality)

    @property
    def symbol(self) -> str:
        return format(self._q.units, "~P")

    def to(self, unit: str) -> Q_:
        return self._q.to(unit)

    def __float__(self) -> float:
        return self.value

    def __str__(self) -> str:
        sym = self.symbol
        return f"{self.value:.6g} {sym}" if sym else f"{self.value:.6g}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"

    def __format__(self, spec: str) -> str:
        if not spec:
            return str(self)
        sym = self.symbol
        return f"{format(self.value, spec)} {sym}" if sym else format(self.value, spec)

    # arithmetic goes through pint
    @staticmethod
    def _raw(other: Any) -> Any:
        return other.q if isinstance(other, PhysicalQuantity) else other

    def __add__(self, other):      return self._q + self._raw(other)
    def __radd__(self, other):     return self._raw(other) + self._q
    def __sub__(self, other):      return self._q - self._raw(other)
    def __rsub__(self, other):     return self._raw(other) - self._q
    def __mul__(self, other):      return self._q * self._raw(other)
    def __rmul__(self, other):     return self._raw(other) * self._q
    def __truediv__(self, other):  return self._q / self._raw(other)
    def __rtruediv__(self, other): return self._raw(other) / self._q
    def __pow__(self, n):          return self._q ** n
    def __neg__(self):             return -self._q
    def __abs__(self):             return abs(self._q)

    def __eq__(self, other):  return self._q == self._raw(other)
    def __lt__(self, other):  return self._q < self._raw(other)
    def __le__(self, other):  return self._q <= self._raw(other)
    def __gt__(self, other):  return self._q > self._raw(other)
    def __ge__(self, other):  return self._q >= self._raw(other)

    __hash__ = None


class Length(PhysicalQuantity):              default_unit = "m"
class Area(PhysicalQuantity):                default_unit = "m**2"
class Volume(PhysicalQuantity):              default_unit = "m**3"
class Velocity(PhysicalQuantity):            default_unit = "m/s"
class Acceleration(PhysicalQuantity):        default_unit = "m/s**2"
class Mass(PhysicalQuantity):                default_unit = "kg"
class Force(PhysicalQuantity):               default_unit = "N"
class Pressure(PhysicalQuantity):            default_unit = "Pa"
class Temperature(PhysicalQuantity):         default_unit = "K"
class Density(PhysicalQuantity):             default_unit = "kg/m**3"
class SpecificWeight(PhysicalQuantity):      default_unit = "N/m**3"
class DynamicViscosity(PhysicalQuantity):    default_unit = "Pa*s"
class KinematicViscosity(PhysicalQuantity):  default_unit = "m**2/s"
class SpecificHeat(PhysicalQuantity):        default_unit = "J/kg/K"
class GasConstant(PhysicalQuantity):         default_unit = "J/kg/K"
class VolumeFlowRate(PhysicalQuantity):      default_unit = "m**3/s"
class MassFlowRate(PhysicalQuantity):        default_unit = "kg/s"
class Head(PhysicalQuantity):                default_unit = "m"
class Power(PhysicalQuantity):               default_unit = "W"
class SecondMomentOfArea(PhysicalQuantity):  default_unit = "m**4"
class Circulation(PhysicalQuantity):         default_unit = "m**2/s"

# dimensionless
class SpecificHeatRatio(PhysicalQuantity):   default_unit = ""
class MachNumber(PhysicalQuantity):          default_unit = ""
class ReynoldsNumber(PhysicalQuantity):      default_unit = ""
class FrictionFactor(PhysicalQuantity):      default_unit = ""
