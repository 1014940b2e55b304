from __future__ import annotations

from typing import Iterator

from phzpy.modeling.axes import GridAxes
from phzpy.modeling.sed import ModelCell, ModelDataManager


class ModelMatrix:
    """Lazy view of all the model spectra of a grid.

    Cells are produced on demand in storage order and are not cached.
    """

    def __init__(self, manager: ModelDataManager, axes: GridAxes | None = None):
        self.manager = manager
        self.axes = manager.axes if axes is None else axes

    def __len__(self) -> int:
        return self.axes.size

    @property
    def size(self) -> int:
        return self.axes.size

    def cell(self, z_idx: int, ebv_idx: int, curve_idx: int, sed_idx: int) -> ModelCell:
        return self.manager.cell(z_idx, ebv_idx, curve_idx, sed_idx)

    def cells(self, start: int = 0, stop: int | None = None) -> Iterator[ModelCell]:
        for indices in self.axes.indices(start, stop):
            yield self.manager.cell(*indices)

    def __iter__(self) -> Iterator[ModelCell]:
        return self.cells()
