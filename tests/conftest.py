import matplotlib
matplotlib.use("Agg")

import logging
from pathlib import Path

import pytest

from common.units import Q_
from common import props
from common.logging_utils import _Context

REPO = Path(__file__).resolve().parents[1]


class _FakeWater:
    # constant-property water to keep IAPWS out of the flow tests
    @staticmethod
    def rho_from_PT(P, T): return Q_(998.2, "kg/m^3")
    @staticmethod
    def mu_from_PT(P, T):  return Q_(1.002e-3, "Pa*s")


@pytest.fixture
def fake_water(monkeypatch):
    monkeypatch.setattr(props, "WaterProps", _FakeWater)


@pytest.fixture
def config_dir():
    return REPO / "config"


@pytest.fixture(autouse=True)
def _drop_installed_handlers():
    # setup_logging() replaces the root handlers; undo that between tests
    level = logging.getLogger().level
    yield
    root = logging.getLogger()
    for h in [h for h in root.handlers if any(isinstance(f, _Context) for f in h.filters)]:
        root.removeHandler(h)
        h.close()
    root.setLevel(level)
