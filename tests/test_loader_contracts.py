import pytest
import yaml

from common.units import Q_
from io_loader import (
    _q, has_nozzle, load_fluid, load_gas, load_nozzle_case, load_pipe_system, load_design_point,
    load_surfaces, load_vortex_case,
)
from hydrostatics.surfaces import Rectangle, Circle
from vortex.fields import FieldSum


def _dump(tmp_path, doc, name="case.yaml"):
    p = tmp_path / name
    p.write_text(yaml.safe_dump(doc), encoding="utf-8")
    return str(p)


def test__q_parses_quantity():
    q = _q({"value": 5, "unit": "m"})
    assert isinstance(q, Q_)
    assert q.to("m").magnitude == 5
    assert _q({"value": 0.3, "unit": "dimensionless"}).to("").magnitude == pytest.approx(0.3)
    assert _q({"value": 45, "unit": "micrometer"}).to("m").magnitude == pytest.approx(45e-6)
    with pytest.raises(ValueError):
        _q(5)
    with pytest.raises(ValueError):
        _q({"value": 5})


def test_load_pipe_system_shipped(config_dir, fake_water):
    system, fluid = load_pipe_system(str(config_dir / "pipe_system.yaml"))
    assert [p.name for p in system.pipes] == ["supply", "discharge"]
    supply, discharge = system.pipes
    assert supply.diameter.to("mm").magnitude == pytest.approx(100.0)
    assert supply.roughness.to("um").magnitude == pytest.approx(45.0)
    assert supply.K_sum == pytest.approx(0.5 + 0.3 + 0.3 + 0.15)
    assert discharge.roughness.to("mm").magnitude == pytest.approx(0.15)
    assert discharge.K_sum == pytest.approx(1.25)
    assert system.inlet.z.to("m").magnitude == 30 and not system.outlet.in_pipe
    assert fluid.rho.to("kg/m^3").magnitude == pytest.approx(998.2)
    design = load_design_point(str(config_dir / "pipe_system.yaml"))
    assert design["Q"].to("L/s").magnitude == pytest.approx(15.0)


def test_pipe_missing_key_raises(tmp_path):
    doc = {
        "fluid": "water",
        "system": {
            "name": "s",
            "inlet": {"pressure": {"value": 0, "unit": "Pa"}, "elevation": {"value": 1, "unit": "m"}},
            "outlet": {"pressure": {"value": 0, "unit": "Pa"}, "elevation": {"value": 0, "unit": "m"}},
            "pipes": {"p1": {"length": {"value": 1, "unit": "m"}, "material": "pvc"}},
        },
    }
    with pytest.raises(KeyError, match="p1: 'diameter' is required"):
        load_pipe_system(_dump(tmp_path, doc))

    doc["system"]["pipes"]["p1"]["diameter"] = {"value": 1, "unit": "cm"}
    doc["system"]["pipes"]["p1"]["minor_losses"] = ["not_a_fitting"]
    with pytest.raises(KeyError, match="unknown fitting"):
        load_pipe_system(_dump(tmp_path, doc))


def test_load_fluid_forms():
    assert load_fluid("mercury").rho.to("kg/m^3").magnitude == pytest.approx(13550.0)
    oil = load_fluid({"name": "oil", "density": {"value": 900, "unit": "kg/m^3"},
                      "viscosity": {"value": 0.1, "unit": "Pa*s"}})
    assert oil.nu.to("m^2/s").magnitude == pytest.approx(0.1 / 900)
    with pytest.raises(KeyError):
        load_fluid({"name": "oil", "density": {"value": 900, "unit": "kg/m^3"}})


def test_custom_gas_needs_sutherland_data(tmp_path):
    doc = {"gas": {"name": "argon", "gamma": {"value": 1.67, "unit": "dimensionless"},
                   "R": {"value": 208.1, "unit": "J/kg/K"}},
           "state": {"pressure": {"value": 1, "unit": "bar"}, "temperature": {"value": 300, "unit": "K"}}}
    with pytest.raises(KeyError, match="argon: 'mu_ref' is required"):
        load_gas(_dump(tmp_path, doc))

    doc["gas"].update(mu_ref={"value": 2.125e-5, "unit": "Pa*s"}, T_ref={"value": 273.15, "unit": "K"},
                      S={"value": 144, "unit": "K"})
    gas, _ = load_gas(_dump(tmp_path, doc))
    assert gas.S.to("K").magnitude == pytest.approx(144.0)

    # a table gas may override gamma and R and keep its own viscosity data
    doc["gas"] = {"name": "N2", "gamma": {"value": 1.4, "unit": "dimensionless"},
                  "R": {"value": 296.8, "unit": "J/kg/K"}}
    gas, _ = load_gas(_dump(tmp_path, doc))
    assert gas.S.to("K").magnitude == pytest.approx(107.0)
    assert not has_nozzle(_dump(tmp_path, doc))


def test_load_gas_and_nozzle_shipped(config_dir):
    gas, state = load_gas(str(config_dir / "gas.yaml"))
    assert gas.name == "air"
    assert state["T"].to("K").magnitude == pytest.approx(288.15)
    assert state["p"].to("Pa").magnitude == pytest.approx(101325.0)
    assert state["V"].to("m/s").magnitude == pytest.approx(250.0)
    nz = load_nozzle_case(str(config_dir / "gas.yaml"))
    assert nz.area_ratio == pytest.approx(2.5)
    assert nz.p0.to("kPa").magnitude == pytest.approx(500.0)


def test_nozzle_exit_smaller_than_throat(tmp_path):
    doc = {"gas": "air", "nozzle": {
        "stagnation_pressure": {"value": 5, "unit": "bar"},
        "stagnation_temperature": {"value": 300, "unit": "K"},
        "throat_area": {"value": 10, "unit": "cm^2"},
        "exit_area": {"value": 5, "unit": "cm^2"},
    }}
    with pytest.raises(ValueError):
        load_nozzle_case(_dump(tmp_path, doc))


def test_load_surfaces_shipped(config_dir):
    case = load_surfaces(str(config_dir / "surfaces.yaml"))
    names = [s.name for s in case.plane]
    assert names == ["vertical_gate", "inclined_hatch", "triangular_window", "semicircular_port"]
    assert isinstance(case.plane[0].shape, Rectangle)
    assert isinstance(case.plane[1].shape, Circle)
    assert case.plane[1].angle.to("deg").magnitude == pytest.approx(60.0)
    assert case.rho.to("kg/m^3").magnitude == pytest.approx(998.0)
    assert case.curved["quarter_gate"]["fluid_inside"] is False


def test_surface_missing_dimension(tmp_path):
    doc = {"liquid": "water", "surfaces": {"s": {"shape": "rectangle", "width": {"value": 1, "unit": "m"},
                                                 "top_depth": {"value": 0, "unit": "m"}}}}
    with pytest.raises(KeyError, match="s: 'height' is required"):
        load_surfaces(_dump(tmp_path, doc))


def test_load_vortex_case_shipped(config_dir):
    grid, cases, boundary = load_vortex_case(str(config_dir / "vortices.yaml"))
    assert grid.shape == (201, 201)
    assert boundary == "unbounded"
    assert list(cases) == ["oseen", "corotating_pair", "quadrupole"]
    assert isinstance(cases["corotating_pair"].vorticity, FieldSum)
    assert cases["corotating_pair"].stagnation_guesses[0] == (0.2, 0.1)
    assert cases["oseen"].stagnation_guesses == []
