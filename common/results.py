from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import pandas as pd

from common.units import Q_


@dataclass(frozen=True)
class FrictionResult:
    f: float
    Re: float
    iterations: int
    converged: bool
    history: Sequence[float] = field(default_factory=tuple)


@dataclass(frozen=True)
class IterationRecord:
    # one pass of the pipe-system fixed point
    iteration: int
    Q: Q_
    f: Tuple[float, ...]
    Re: Tuple[float, ...]
    max_df: float


@dataclass(frozen=True)
class PipeFlowResult:
    system_name: str
    Q: Q_                      # m^3/s
    velocities: List[Q_]       # m/s, per pipe
    Re: List[float]
    f: List[float]
    head_loss_major: List[Q_]  # m, per pipe
    head_loss_minor: List[Q_]  # m, per pipe
    available_head: Q_         # m
    iterations: int
    converged: bool
    history: List[IterationRecord] = field(default_factory=list)
    pipe_names: List[str] = field(default_factory=list)

    @property
    def head_loss(self) -> Q_:
        total = Q_(0.0, "m")
        for hf, hm in zip(self.head_loss_major, self.head_loss_minor):
            total = total + hf + hm
        return total.to("m")


@dataclass(frozen=True)
class HydrostaticForceResult:
    force: Q_                  # N
    area: Q_                   # m^2
    centroid_depth: Q_         # m, vertical
    pressure_center_depth: Q_  # m, vertical
    y_centroid: Q_             # m, along the plane from the free-surface line
    y_pressure_center: Q_      # m, along the plane
    centroid_pressure: Q_      # Pa


@dataclass(frozen=True)
class CurvedSurfaceResult:
    horizontal: Q_             # N
    vertical: Q_               # N
    resultant: Q_              # N
    angle: Q_                  # deg above horizontal


@dataclass(frozen=True)
class StagnationPoint:
    x: float
    y: float
    speed: float
    converged: bool
    message: str = ""


def pipe_result_to_dataframe(res: PipeFlowResult) -> pd.DataFrame:
    rows = []
    names = res.pipe_names or [f"pipe{i}" for i in range(len(res.velocities))]
    for i, name in enumerate(names):
        rows.append({
            "pipe": name,
            "Q[m^3/s]": res.Q.to("m^3/s").magnitude,
            "V[m/s]": res.velocities[i].to("m/s").magnitude,
            "Re[-]": res.Re[i],
            "f[-]": res.f[i],
            "h_major[m]": res.head_loss_major[i].to("m").magnitude,
            "h_minor[m]": res.head_loss_minor[i].to("m").magnitude,
        })
    return pd.DataFrame(rows)


def iteration_history_to_dataframe(res: PipeFlowResult) -> pd.DataFrame:
    rows = []
    for rec in res.history:
        row: Dict[str, float] = {
            "iteration": rec.iteration,
            "Q[m^3/s]": rec.Q.to("m^3/s").magnitude,
            "max_df[-]": rec.max_df,
        }
        for i, (f, Re) in enumerate(zip(rec.f, rec.Re)):
            row[f"f_{i}[-]"] = f
            row[f"Re_{i}[-]"] = Re
        rows.append(row)
    return pd.DataFrame(rows)


def summary_rows(items: Sequence[Tuple[str, object, str]]) -> pd.DataFrame:
    """(label, value, unit) triples -> two-column table."""
    return pd.DataFrame(
        [{"quantity": f"{k}[{u}]" if u else k, "value": v} for k, v, u in items]
    )


def write_results_csvs(
    tables: Dict[str, pd.DataFrame],
    outdir: str | Path,
    run_id: str,
) -> List[str]:
    """
    Write one CSV per table as <outdir>/<run_id>_<name>.csv.

    Returns:
        the written paths, in the order of ``tables``.
    """
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    paths: List[str] = []
    for name, df in tables.items():
        path = outdir / f"{run_id}_{name}.csv"
        df.to_csv(path, index=False)
        paths.append(str(path))
    return paths
