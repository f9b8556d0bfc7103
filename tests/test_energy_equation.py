import logging
from dataclasses import replace

import pytest

from common.units import Q_
from common.constants import g0
from common.models import Liquid, MinorLoss, Pipe, Station, PipeSystem
from common.results import pipe_result_to_dataframe, iteration_history_to_dataframe, write_results_csvs
from pipeflow.energy import (
    velocity_head, head_loss, minor_head_loss, pressure_drop, available_head,
    solve_flow, head_for_flow, required_pump_head, pump_power, size_pipe,
)
from pipeflow.friction import friction_factor

G = g0.to("m/s^2").magnitude
WATER = Liquid("water", Q_(998.2, "kg/m^3"), Q_(1.002e-3, "Pa*s"))


def _pipe(name="p1", L=120.0, D=0.1, K=(0.5, 1.0)):
    return Pipe(name, Q_(L, "m"), Q_(D, "m"), Q_(45, "um"),
                [MinorLoss(f"k{i}", Q_(k, "")) for i, k in enumerate(K)])


def _tanks(z1=30.0, z2=5.0, pipes=None, **kw):
    return PipeSystem(
        name="tanks",
        pipes=[_pipe()] if pipes is None else pipes,
        inlet=Station(Q_(0, "Pa"), Q_(z1, "m")),
        outlet=Station(Q_(0, "Pa"), Q_(z2, "m")),
        **kw,
    )


def test_loss_helpers():
    assert velocity_head(2.0).value == pytest.approx(4.0 / (2 * G))
    assert head_loss(0.02, 100.0, 0.1, 2.0).value == pytest.approx(0.02 * 1000 * 4.0 / (2 * G))
    assert minor_head_loss(0.5, 2.0).value == pytest.approx(0.5 * 4.0 / (2 * G))
    assert pressure_drop(0.02, 100.0, 0.1, 1000.0, 2.0).value == pytest.approx(0.02 * 1000 * 1000 * 4.0 / 2)


def test_available_head():
    sys_ = _tanks(pump_head=Q_(10, "m"))
    assert available_head(sys_, WATER).value == pytest.approx(35.0)


def test_gravity_flow_balances_head():
    res = solve_flow(_tanks(), WATER)
    assert res.converged
    assert res.iterations == len(res.history)
    # free surfaces at both ends: all the head goes into losses
    assert res.head_loss.to("m").magnitude == pytest.approx(25.0, rel=1e-6)
    # the reported f matches the Colebrook value at the reported Re
    assert res.f[0] == pytest.approx(friction_factor(res.Re[0], 45e-6 / 0.1), rel=1e-4)
    V = res.velocities[0].to("m/s").magnitude
    assert res.Re[0] == pytest.approx(998.2 * V * 0.1 / 1.002e-3)


def test_outlet_jet_keeps_its_velocity_head():
    sys_ = replace(_tanks(), outlet=Station(Q_(0, "Pa"), Q_(5, "m"), in_pipe=True))
    res = solve_flow(sys_, WATER)
    V = res.velocities[-1].to("m/s").magnitude
    assert res.head_loss.to("m").magnitude + V * V / (2 * G) == pytest.approx(25.0, rel=1e-6)


def test_series_pipes_share_the_flow():
    pipes = [_pipe("a", D=0.1, K=(0.5,)), _pipe("b", L=60.0, D=0.08, K=(1.0,))]
    res = solve_flow(_tanks(pipes=pipes), WATER)
    Va, Vb = (v.to("m/s").magnitude for v in res.velocities)
    assert Vb / Va == pytest.approx((0.1 / 0.08) ** 2)
    df = pipe_result_to_dataframe(res)
    assert list(df["pipe"]) == ["a", "b"]
    hist = iteration_history_to_dataframe(res)
    assert {"iteration", "Q[m^3/s]", "max_df[-]", "f_0[-]", "f_1[-]"} <= set(hist.columns)


def test_no_forward_flow_raises():
    with pytest.raises(ValueError, match="no forward flow"):
        solve_flow(_tanks(z1=5.0, z2=30.0), WATER)
    with pytest.raises(ValueError):
        solve_flow(_tanks(pipes=[]), WATER)


def test_non_convergence_flagged(caplog):
    with caplog.at_level(logging.WARNING):
        res = solve_flow(_tanks(), WATER, f_guess=0.05, max_iter=1)
    assert not res.converged
    assert "did not converge" in caplog.text


def test_head_for_flow_and_pump_head():
    sys_ = _tanks()
    res = solve_flow(sys_, WATER)
    assert head_for_flow(sys_, WATER, res.Q).value == pytest.approx(25.0, rel=1e-4)
    assert required_pump_head(sys_, WATER, res.Q).value == pytest.approx(0.0, abs=1e-3)

    level = _tanks(z1=0.0, z2=0.0)
    hp = required_pump_head(level, WATER, Q_(10, "L/s"))
    assert hp.value == pytest.approx(head_for_flow(level, WATER, Q_(10, "L/s")).value)
    with pytest.raises(ValueError):
        head_for_flow(level, WATER, 0.0)


def test_pump_power():
    assert pump_power(0.01, 20.0, 1000.0, efficiency=0.8).value == pytest.approx(1000 * G * 0.01 * 20 / 0.8)
    with pytest.raises(ValueError):
        pump_power(0.01, 20.0, 1000.0, efficiency=0.0)


def test_size_pipe_recovers_diameter():
    sys_ = _tanks()
    Q = solve_flow(sys_, WATER).Q
    D = size_pipe(sys_, WATER, Q)
    assert D.value == pytest.approx(0.1, rel=1e-3)


def test_write_results_csvs(tmp_path):
    res = solve_flow(_tanks(), WATER)
    paths = write_results_csvs({"pipes": pipe_result_to_dataframe(res)}, tmp_path, "run1")
    assert paths == [str(tmp_path / "run1_pipes.csv")]
    assert (tmp_path / "run1_pipes.csv").read_text().startswith("pipe,")
