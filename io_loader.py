from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Tuple, List, Dict, Any
import yaml

from common.units import Q_
from common import constants
from common.models import Gas, Liquid, MinorLoss, Pipe, Station, PipeSystem, NozzleCase
from hydrostatics.surfaces import SHAPES, PlaneSurface
from vortex.grid import PhysicalGrid
from vortex.fields import Field, vortex_set


def _q(node: Any) -> Q_:
    if isinstance(node, dict) and "value" in node and "unit" in node:
        unit = str(node["unit"])
        if unit == "micrometer":
            unit = "um"
        if unit in ("dimensionless", "1"):
            unit = ""
        return Q_(node["value"], unit)
    raise ValueError(f"Invalid quantity format: {node!r}")


def _get(d: Dict[str, Any], key: str, default=None):
    return d.get(key, default) if isinstance(d, dict) else default


def _require(node: Dict[str, Any], name: str, keys):
    for k in keys:
        if not isinstance(node, dict) or k not in node:
            raise KeyError(f"{name}: '{k}' is required")


def _read(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


@dataclass
class VortexCase:
    name: str
    vorticity: Field
    stagnation_guesses: List[Tuple[float, float]] = field(default_factory=list)


@dataclass
class SurfaceCase:
    rho: Q_
    p_surface: Q_
    plane: List[PlaneSurface]
    curved: Dict[str, Dict[str, Any]] = field(default_factory=dict)


# ---------------------------------------------------------------- fluids

def load_fluid(node: Any) -> Liquid:
    """
    A liquid from a config node. Accepted forms:

        water                                   # table entry
        {name: water, temperature: .., pressure: ..}   # IAPWS-97 water
        {name: oil, density: .., viscosity: ..}        # explicit
    """
    if isinstance(node, str):
        return Liquid.from_table(node)
    _require(node, "fluid", ["name"])
    name = str(node["name"])
    if "density" in node or "viscosity" in node:
        _require(node, name, ["density", "viscosity"])
        return Liquid(name=name, rho=_q(node["density"]).to("kg/m^3"), mu=_q(node["viscosity"]).to("Pa*s"))
    if name == "water" and "temperature" in node:
        P = _q(node["pressure"]) if "pressure" in node else constants.p_atm
        return Liquid.water(_q(node["temperature"]), P)
    return Liquid.from_table(name)


def load_gas(path: str) -> Tuple[Gas, Dict[str, Q_]]:
    """Gas plus its free-stream state (pressure, temperature and optional velocity)."""
    doc = _read(path)
    _require(doc, path, ["gas", "state"])
    g = doc["gas"]
    if isinstance(g, str):
        gas = Gas.from_table(g)
    else:
        _require(g, "gas", ["name", "gamma", "R"])
        name = str(g["name"])
        if name not in constants.gases:
            # no table row to fall back on for the Sutherland law
            _require(g, name, ["mu_ref", "T_ref", "S"])
        base = constants.gases.get(name, {})
        gas = Gas(
            name=name,
            gamma=_q(g["gamma"]),
            R=_q(g["R"]).to("J/kg/K"),
            mu_ref=_q(g["mu_ref"]) if "mu_ref" in g else base["mu_ref"],
            T_ref=_q(g["T_ref"]) if "T_ref" in g else base["T_ref"],
            S=_q(g["S"]) if "S" in g else base["S"],
        )

    st = doc["state"]
    _require(st, "state", ["pressure", "temperature"])
    state = {"p": _q(st["pressure"]).to("Pa"), "T": _q(st["temperature"]).to("K")}
    if "velocity" in st:
        state["V"] = _q(st["velocity"]).to("m/s")
    return gas, state


def has_nozzle(path: str) -> bool:
    return isinstance(_get(_read(path), "nozzle"), dict)


def load_nozzle_case(path: str) -> NozzleCase:
    doc = _read(path)
    _require(doc, path, ["nozzle"])
    gas = Gas.from_table(doc["gas"]) if isinstance(_get(doc, "gas"), str) else load_gas(path)[0]
    n = doc["nozzle"]
    _require(n, "nozzle", ["stagnation_pressure", "stagnation_temperature", "throat_area", "exit_area"])
    case = NozzleCase(
        gas=gas,
        p0=_q(n["stagnation_pressure"]).to("Pa"),
        T0=_q(n["stagnation_temperature"]).to("K"),
        A_throat=_q(n["throat_area"]).to("m^2"),
        A_exit=_q(n["exit_area"]).to("m^2"),
    )
    if case.area_ratio < 1:
        raise ValueError(f"nozzle: exit area {case.A_exit} is smaller than the throat {case.A_throat}")
    return case


# ---------------------------------------------------------------- pipes

def _minor_loss(node: Any, pipe: str) -> MinorLoss:
    if isinstance(node, str):
        try:
            return MinorLoss(name=node, K=constants.minor_loss_K[node])
        except KeyError:
            raise KeyError(f"{pipe}: unknown fitting '{node}', known: {sorted(constants.minor_loss_K)}") from None
    _require(node, pipe, ["name", "K"])
    return MinorLoss(name=str(node["name"]), K=_q(node["K"]))


def _pipe(name: str, node: Dict[str, Any]) -> Pipe:
    _require(node, name, ["length", "diameter"])
    if "roughness" in node:
        eps = _q(node["roughness"])
    elif "material" in node:
        mat = str(node["material"])
        if mat not in constants.roughness:
            raise KeyError(f"{name}: unknown material '{mat}', known: {sorted(constants.roughness)}")
        eps = constants.roughness[mat]
    else:
        raise KeyError(f"{name}: 'roughness' or 'material' is required")
    return Pipe(
        name=name,
        length=_q(node["length"]).to("m"),
        diameter=_q(node["diameter"]).to("m"),
        roughness=eps.to("m"),
        minor_losses=[_minor_loss(m, name) for m in (_get(node, "minor_losses") or [])],
    )


def _station(node: Dict[str, Any], name: str) -> Station:
    _require(node, name, ["pressure", "elevation"])
    return Station(p=_q(node["pressure"]).to("Pa"), z=_q(node["elevation"]).to("m"),
                   in_pipe=bool(_get(node, "in_pipe", False)))


def load_pipe_system(path: str) -> Tuple[PipeSystem, Liquid]:
    doc = _read(path)
    _require(doc, path, ["system", "fluid"])
    s = doc["system"]
    name = str(_get(s, "name", "system"))
    _require(s, name, ["pipes", "inlet", "outlet"])

    pipes: List[Pipe] = [_pipe(pn, pnode) for pn, pnode in (s["pipes"] or {}).items()]
    system = PipeSystem(
        name=name,
        pipes=pipes,
        inlet=_station(s["inlet"], f"{name}.inlet"),
        outlet=_station(s["outlet"], f"{name}.outlet"),
        pump_head=_q(s["pump_head"]).to("m") if "pump_head" in s else Q_(0.0, "m"),
        turbine_head=_q(s["turbine_head"]).to("m") if "turbine_head" in s else Q_(0.0, "m"),
    )
    return system, load_fluid(doc["fluid"])


def load_design_point(path: str) -> Dict[str, Q_]:
    """Optional ``design`` block of a pipe case: flow rate and pump efficiency."""
    d = _get(_read(path), "design") or {}
    out: Dict[str, Q_] = {}
    if "flow_rate" in d:
        out["Q"] = _q(d["flow_rate"]).to("m^3/s")
    if "pump_efficiency" in d:
        out["efficiency"] = _q(d["pump_efficiency"])
    return out


# ---------------------------------------------------------------- surfaces

def _shape(name: str, node: Dict[str, Any]):
    _require(node, name, ["shape"])
    kind = str(node["shape"])
    if kind not in SHAPES:
        raise KeyError(f"{name}: unknown shape '{kind}', known: {sorted(SHAPES)}")
    cls = SHAPES[kind]
    keys = [f.name for f in fields(cls)]
    _require(node, name, keys)
    return cls(**{k: _q(node[k]).to("m") for k in keys})


def load_surfaces(path: str) -> SurfaceCase:
    doc = _read(path)
    _require(doc, path, ["surfaces"])
    if "liquid" in doc:
        rho = load_fluid(doc["liquid"]).rho
    elif "density" in doc:
        rho = _q(doc["density"])
    else:
        raise KeyError(f"{path}: 'liquid' or 'density' is required")

    plane: List[PlaneSurface] = []
    for name, node in (doc["surfaces"] or {}).items():
        _require(node, name, ["top_depth"])
        plane.append(PlaneSurface(
            name=name,
            shape=_shape(name, node),
            top_depth=_q(node["top_depth"]).to("m"),
            angle=_q(node["angle"]).to("deg") if "angle" in node else Q_(90.0, "deg"),
        ))

    curved: Dict[str, Dict[str, Any]] = {}
    for name, node in (_get(doc, "curved") or {}).items():
        _require(node, name, ["radius", "width", "top_depth"])
        curved[name] = {
            "radius": _q(node["radius"]).to("m"),
            "width": _q(node["width"]).to("m"),
            "top_depth": _q(node["top_depth"]).to("m"),
            "fluid_inside": bool(_get(node, "fluid_inside", False)),
        }

    p_s = _q(doc["surface_pressure"]).to("Pa") if "surface_pressure" in doc else Q_(0.0, "Pa")
    return SurfaceCase(rho=rho.to("kg/m^3"), p_surface=p_s, plane=plane, curved=curved)


# ---------------------------------------------------------------- vortices

def load_vortex_case(path: str) -> Tuple[PhysicalGrid, Dict[str, VortexCase], str]:
    """Grid, named vortex arrangements and the streamfunction boundary treatment."""
    doc = _read(path)
    _require(doc, path, ["grid", "cases"])
    gnode = doc["grid"]
    _require(gnode, "grid", ["xlim", "ylim", "dx"])
    grid = PhysicalGrid(
        xlim=tuple(float(v) for v in gnode["xlim"]),
        ylim=tuple(float(v) for v in gnode["ylim"]),
        dx=float(gnode["dx"]),
    )

    cases: Dict[str, VortexCase] = {}
    for name, node in (doc["cases"] or {}).items():
        _require(node, name, ["vortices"])
        guesses = [(float(g[0]), float(g[1])) for g in (_get(node, "stagnation_guesses") or [])]
        cases[name] = VortexCase(name=name, vorticity=vortex_set(node["vortices"]), stagnation_guesses=guesses)
    if not cases:
        raise ValueError(f"{path}: no vortex cases")

    boundary = str(_get(doc, "boundary", "unbounded"))
    return grid, cases, boundary
