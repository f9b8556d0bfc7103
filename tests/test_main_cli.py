# tests/test_main_cli.py
import sys, runpy
from pathlib import Path

import yaml


def _run(monkeypatch, argv):
    repo_root = Path(__file__).resolve().parents[1]
    monkeypatch.chdir(repo_root)
    monkeypatch.syspath_prepend(str(repo_root))
    monkeypatch.setattr(sys, "argv", ["main.py", *argv], raising=False)
    runpy.run_path(str(repo_root / "main.py"), run_name="__main__")


def test_main_all_with_trace(capsys, monkeypatch):
    _run(monkeypatch, ["all", "--log", "TRACE"])
    out, err = capsys.readouterr()
    assert "== gas state (air)" in out
    assert "M_exit supersonic:" in out
    assert "== plane surface vertical_gate" in out
    assert "== pipe system reservoir_transfer" in out
    assert "converged: True" in out
    assert "== vortex case corotating_pair" in out
    # TRACE records from the decorated solvers reach stderr
    assert "TRACE" in err


def test_main_writes_csvs_and_figures(tmp_path, capsys, monkeypatch):
    _run(monkeypatch, ["hydrostatics", "--outdir", str(tmp_path), "--plots"])
    csvs = sorted(p.name for p in tmp_path.glob("*.csv"))
    assert any(n.endswith("_plane_surfaces.csv") for n in csvs)
    assert any(n.endswith("_curved_surfaces.csv") for n in csvs)
    assert (tmp_path / "fig" / "prism_vertical_gate.png").exists()
    assert (tmp_path / "run.log").exists()
    out, _ = capsys.readouterr()
    assert "h_cp: 2 m" in out


def test_main_vortex_custom_config(tmp_path, capsys, monkeypatch):
    cfg = tmp_path / "small.yaml"
    cfg.write_text(yaml.safe_dump({
        "grid": {"xlim": [-2, 2], "ylim": [-2, 2], "dx": 0.05},
        "boundary": "dirichlet",
        "cases": {"pair": {
            "vortices": [{"x0": -1, "y0": 0, "circulation": 1, "sigma": 0.3},
                         {"x0": 1, "y0": 0, "circulation": 1, "sigma": 0.3}],
            "stagnation_guesses": [[0.2, 0.1]],
        }},
    }), encoding="utf-8")
    outdir = tmp_path / "out"
    _run(monkeypatch, ["vortex", "--config", str(cfg), "--outdir", str(outdir), "--plots"])
    out, _ = capsys.readouterr()
    assert "grid: 81x81" in out
    assert "converged=True" in out
    assert (outdir / "fig" / "pair_01_vorticity.png").exists()
    assert (outdir / "fig" / "pair_stagnation.png").exists()


def _gas_file(tmp_path, velocity=None, nozzle=True):
    doc = {
        "gas": "air",
        "state": {"pressure": {"value": 101.325, "unit": "kPa"},
                  "temperature": {"value": 288.15, "unit": "K"}},
    }
    if velocity is not None:
        doc["state"]["velocity"] = {"value": velocity, "unit": "m/s"}
    if nozzle:
        doc["nozzle"] = {
            "stagnation_pressure": {"value": 500, "unit": "kPa"},
            "stagnation_temperature": {"value": 300, "unit": "K"},
            "throat_area": {"value": 10, "unit": "cm^2"},
            "exit_area": {"value": 25, "unit": "cm^2"},
        }
    cfg = tmp_path / "gas_case.yaml"
    cfg.write_text(yaml.safe_dump(doc), encoding="utf-8")
    return str(cfg)


def test_main_gas_at_rest(tmp_path, capsys, monkeypatch):
    _run(monkeypatch, ["gas", "--config", _gas_file(tmp_path, velocity=0.0)])
    out, _ = capsys.readouterr()
    assert "M: 0" in out
    assert "fL*/D (Fanno)" not in out
    assert "T0/T0* (Rayleigh)" not in out
    assert "== nozzle" in out


def test_main_gas_state_only(tmp_path, capsys, monkeypatch):
    outdir = tmp_path / "out"
    _run(monkeypatch, ["gas", "--config", _gas_file(tmp_path, velocity=100.0, nozzle=False),
                       "--outdir", str(outdir)])
    out, _ = capsys.readouterr()
    assert "== gas state (air)" in out
    assert "fL*/D (Fanno)" in out
    assert "== nozzle" not in out and "normal shock" not in out
    csvs = [p.name for p in outdir.glob("*.csv")]
    assert any(n.endswith("_gas_state.csv") for n in csvs)
    assert not any(n.endswith("_nozzle.csv") for n in csvs)
