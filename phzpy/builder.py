"""Model photometry builder.

For every cell of a :class:`~phzpy.modeling.ModelMatrix` and every filter the
builder computes

.. math::

    F = \\frac{\\int_{\\lambda_{min}}^{\\lambda_{max}} f(\\lambda) T(\\lambda)\\, d\\lambda}
             {\\int T(\\lambda)\\, c / \\lambda^2\\, d\\lambda}

where ``f`` is the model spectrum sampled on its own wavelength grid, ``T`` the
filter response and the denominator (the filter compensation) is integrated
over ``[0, 120000]`` Angstrom.

Cells are independent of each other. :meth:`PhotometryBuilder.build` can
split the flat cell range into chunks handled by a pool of worker processes;
every worker receives its own copy of the filter data and fills a disjoint
slice of the result.
"""

from __future__ import annotations

import logging
from multiprocessing import Pool
from time import time
from typing import Callable, Sequence

import numpy as np

from phzpy.dataset.provider import DatasetProvider
from phzpy.dataset.qualified_name import QualifiedName
from phzpy.dataset.xydataset import XYDataset
from phzpy.errors import BuildAborted, DomainError, PhzError, PhzIOError
from phzpy.function import integrate
from phzpy.functions.cpu_numba import filtered_integral
from phzpy.interpolation import linear_interpolation
from phzpy.modeling.model_matrix import ModelMatrix
from phzpy.modeling.sed import ModelCell
from phzpy.photometry import Photometry, PhotometryMatrix

SPEED_OF_LIGHT = 2.99792458e18  # Angstrom / s
COMPENSATION_RANGE = (0.0, 120000.0)
PROGRESS_STEP = 1000
BACKENDS = ("algebra", "numba")


class FilterInfo:
    """Per-filter data computed once before the grid is processed.

    Parameters
    ----------
    name:
        Qualified name of the filter.
    dataset:
        Filter transmission samples, wavelengths in Angstrom.
    """

    def __init__(self, name: QualifiedName, dataset: XYDataset):
        if dataset.x[0] <= 0:
            raise DomainError("Filter wavelengths must be strictly positive", name)
        self.name = QualifiedName(name)
        self.x = dataset.x
        self.y = dataset.y
        self.function = linear_interpolation(dataset.x, dataset.y)
        self.limits = (float(dataset.x[0]), float(dataset.x[-1]))

        compensation_function = linear_interpolation(
            dataset.x, dataset.y * SPEED_OF_LIGHT / dataset.x**2
        )
        self.compensation = integrate(compensation_function, *COMPENSATION_RANGE)
        if not np.isfinite(self.compensation) or self.compensation == 0:
            raise DomainError("Filter compensation is zero", name)


class PhotometryBuilder:
    """Compute the photometry of every model of a grid.

    Parameters
    ----------
    filters:
        ``(name, dataset)`` pairs; the order defines the order of the fluxes.
    backend:
        ``"numba"`` uses the compiled kernel, ``"algebra"`` goes through the
        function objects. Both give the same values up to rounding.
    """

    def __init__(
        self,
        filters: Sequence[tuple[str | QualifiedName, XYDataset]],
        backend: str = "numba",
    ):
        self.log = logging.getLogger(self.__class__.__module__)
        backend = backend.lower()
        if backend not in BACKENDS:
            raise ValueError(f"Unsupported backend {backend!r}. Expected one of {BACKENDS}.")
        if len(filters) == 0:
            raise DomainError("At least one filter is needed")
        self.backend = backend

        self.filters = []
        for name, dataset in filters:
            info = FilterInfo(QualifiedName(name), dataset)
            self.log.debug(
                "Filter %s: range [%g, %g], compensation %g",
                info.name,
                *info.limits,
                info.compensation,
            )
            self.filters.append(info)
        self.filter_names = tuple(str(info.name) for info in self.filters)

    @classmethod
    def from_provider(
        cls,
        provider: DatasetProvider,
        filter_list: Sequence[str | QualifiedName],
        backend: str = "numba",
    ) -> "PhotometryBuilder":
        filters = []
        for name in filter_list:
            name = QualifiedName(name)
            dataset = provider.get_dataset(name)
            if dataset is None:
                raise PhzIOError("Missing filter dataset", name)
            filters.append((name, dataset))
        return cls(filters, backend=backend)

    def filter_flux(self, info: FilterInfo, x: np.ndarray, y: np.ndarray) -> float:
        """Flux of the spectrum samples ``(x, y)`` through one filter."""

        low, high = info.limits
        if self.backend == "numba":
            integral = filtered_integral(x, y, info.x, info.y, low, high)
        else:
            mask = (x >= low) & (x <= high)
            if np.count_nonzero(mask) < 2:
                return 0.0
            x = x[mask]
            filtered = linear_interpolation(x, y[mask] * info.function(x))
            integral = integrate(filtered, low, high)
        return integral / info.compensation

    def cell_photometry(self, cell: ModelCell) -> Photometry:
        x = cell.dataset.x
        y = cell.dataset.y
        values = [(self.filter_flux(info, x, y), 0.0) for info in self.filters]
        return Photometry(self.filter_names, values)

    def build_range(
        self,
        model_matrix: ModelMatrix,
        start: int = 0,
        stop: int | None = None,
        abort: Callable[[], bool] | None = None,
    ) -> list[Photometry]:
        """Photometries of the cells ``[start, stop)`` of the flat cell order."""

        photometries = []
        cell = None
        try:
            for cell in model_matrix.cells(start, stop):
                if abort is not None and abort():
                    raise BuildAborted("Photometry build aborted")
                photometries.append(self.cell_photometry(cell))
                done = start + len(photometries)
                if done % PROGRESS_STEP == 0:
                    self.log.info("Number of models processed: %d", done)
        except BuildAborted:
            raise
        except PhzError as error:
            if cell is not None:
                error.with_name(f"{cell.sed}, {cell.reddening_curve}")
            raise
        return photometries

    def build(
        self,
        model_matrix: ModelMatrix,
        abort: Callable[[], bool] | None = None,
        workers: int = 1,
        chunk_size: int | None = None,
    ) -> PhotometryMatrix:
        """Compute the full photometry matrix.

        Parameters
        ----------
        model_matrix:
            The lazy model grid.
        abort:
            Queried once per cell (per chunk when running in parallel); when
            it returns true the build stops with :class:`BuildAborted` and the
            partial results are discarded.
        workers:
            Number of worker processes, 1 runs in this process.
        chunk_size:
            Number of cells per parallel task.
        """

        size = len(model_matrix)
        self.log.info("Number of models to create photometry for: %d", size)
        start_time = time()

        if workers <= 1 or size < 2:
            photometries = self.build_range(model_matrix, abort=abort)
        else:
            photometries = self.__build_parallel(model_matrix, abort, workers, chunk_size)

        self.log.info(
            "Computing %d photometries took %f s", size, time() - start_time
        )
        return PhotometryMatrix(model_matrix.axes, photometries)

    def __build_parallel(
        self,
        model_matrix: ModelMatrix,
        abort: Callable[[], bool] | None,
        workers: int,
        chunk_size: int | None,
    ) -> list[Photometry]:
        size = len(model_matrix)
        if chunk_size is None:
            chunk_size = max(1, -(-size // (4 * workers)))
        tasks = [
            (self, model_matrix, start, min(start + chunk_size, size))
            for start in range(0, size, chunk_size)
        ]

        slots: list[Photometry | None] = [None] * size
        with Pool(workers) as pool:
            for start, chunk in pool.imap_unordered(_build_chunk, tasks):
                if abort is not None and abort():
                    raise BuildAborted("Photometry build aborted")
                for offset, photometry in enumerate(chunk):
                    # re-attach the shared filter name tuple
                    slots[start + offset] = Photometry(self.filter_names, photometry.values)
                self.log.debug("Chunk starting at %d done", start)
        return slots


def _build_chunk(task: tuple[PhotometryBuilder, ModelMatrix, int, int]) -> tuple[int, list[Photometry]]:
    builder, model_matrix, start, stop = task
    return start, builder.build_range(model_matrix, start, stop)
