from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class PhysicalGrid:
    """
    Uniform node-centred grid covering ``xlim`` x ``ylim`` with spacing ``dx``.

    Field arrays are indexed ``[i, j]`` with ``i`` along x and ``j`` along y.
    """
    xlim: Tuple[float, float]
    ylim: Tuple[float, float]
    dx: float

    def __post_init__(self):
        if self.dx <= 0:
            raise ValueError(f"grid spacing must be > 0, got {self.dx}")
        for name, (lo, hi) in (("xlim", self.xlim), ("ylim", self.ylim)):
            if hi <= lo:
                raise ValueError(f"{name} must be increasing, got {(lo, hi)}")
            if (hi - lo) < 2 * self.dx:
                raise ValueError(f"{name} spans fewer than three nodes at dx={self.dx}")

    @property
    def nx(self) -> int:
        return int(round((self.xlim[1] - self.xlim[0]) / self.dx)) + 1

    @property
    def ny(self) -> int:
        return int(round((self.ylim[1] - self.ylim[0]) / self.dx)) + 1

    @property
    def shape(self) -> Tuple[int, int]:
        return self.nx, self.ny

    @property
    def cell_area(self) -> float:
        return self.dx * self.dx

    def coordinates(self) -> Tuple[np.ndarray, np.ndarray]:
        x = self.xlim[0] + self.dx * np.arange(self.nx)
        y = self.ylim[0] + self.dx * np.arange(self.ny)
        return x, y

    def meshgrid(self) -> Tuple[np.ndarray, np.ndarray]:
        x, y = self.coordinates()
        return np.meshgrid(x, y, indexing="ij")

    def zeros(self) -> np.ndarray:
        return np.zeros(self.shape)

    def nearest_index(self, x: float, y: float) -> Tuple[int, int]:
        i = int(round((x - self.xlim[0]) / self.dx))
        j = int(round((y - self.ylim[0]) / self.dx))
        return min(max(i, 0), self.nx - 1), min(max(j, 0), self.ny - 1)
