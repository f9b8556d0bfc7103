import pint
import pytest

from common.units import Q_
from common.quantities import (
    as_quantity, magnitude, Pressure, Temperature, Length, Velocity, MachNumber, Density,
)


def test_construction_converts_to_default_unit():
    assert Pressure(1, "atm").value == pytest.approx(101325.0)
    assert Temperature(20, "degC").value == pytest.approx(293.15)
    assert Length(Q_(250, "mm")).value == pytest.approx(0.25)
    assert Length(3.0).value == 3.0


def test_wrong_dimension_raises():
    with pytest.raises(pint.DimensionalityError):
        Pressure(Q_(1.0, "m"))
    with pytest.raises(pint.DimensionalityError):
        Velocity(5, "kg")


def test_unit_given_twice_raises():
    with pytest.raises(TypeError):
        Pressure(Q_(1.0, "bar"), "Pa")


def test_display():
    assert repr(Pressure(1, "atm")) == "Pressure(101325 Pa)"
    assert str(Length(2.5)) == "2.5 m"
    assert f"{Velocity(3):.2f}" == "3.00 m/s"
    assert str(MachNumber(2)) == "2"


def test_arithmetic_returns_pint_quantities():
    a = Length(2) * Length(3)
    assert a.to("m^2").magnitude == pytest.approx(6.0)
    rho = Density(Pressure(101325) / (Temperature(288.15) * Q_(287.0, "J/kg/K")))
    assert rho.value == pytest.approx(1.2252, rel=1e-3)


def test_comparisons_and_hash():
    assert Length(100, "cm") == Length(1)
    assert Length(1) < Length(2)
    assert Length(3) >= Q_(3000, "mm")
    with pytest.raises(TypeError):
        hash(Length(1))


def test_as_quantity_and_magnitude():
    assert as_quantity(2.0, "m").to("cm").magnitude == pytest.approx(200.0)
    assert as_quantity(Pressure(2, "bar"), "kPa").magnitude == pytest.approx(200.0)
    assert magnitude(Q_(1, "km"), "m") == pytest.approx(1000.0)


def test_dimension_matches_declared_unit():
    assert Pressure(1.0).dimension == str(Q_(1, "Pa").dimensionality)
    assert MachNumber(2).dimension == str(Q_(1, "").dimensionality)
    assert Pressure.accepts(Q_(1, "psi"))
    assert not Pressure.accepts(Q_(1, "m"))
