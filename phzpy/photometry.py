"""Photometry values and the photometry matrix of a model grid.

The matrix can be written to and read from disk. The record holds, in order,
the axis definitions, the shared filter names and the flat ``(flux, error)``
values. The file format follows the file suffix.
"""

from __future__ import annotations

import _pickle
import bz2
import json
from pathlib import Path
from typing import Iterator, NamedTuple, Sequence

import numpy as np
import yaml
from pydantic import BaseModel, Field, model_validator
from typing_extensions import Self

from phzpy.dataset.qualified_name import QualifiedName
from phzpy.errors import ConfigError, DomainError, ParseError, PhzIOError
from phzpy.modeling.axes import GridAxes


class FluxErrorPair(NamedTuple):
    flux: float
    error: float


class Photometry:
    """Flux values of one source, one per filter.

    Parameters
    ----------
    filter_names:
        Filter names; the same tuple object is shared by all the photometries
        of a matrix.
    values:
        ``(flux, error)`` pairs, one per filter.
    """

    __slots__ = ("_filter_names", "_values")

    def __init__(self, filter_names: tuple[str, ...], values: Sequence[tuple[float, float]] | np.ndarray):
        values = np.array(values, dtype=float).reshape(-1, 2)
        if values.shape[0] != len(filter_names):
            raise DomainError(
                f"Photometry has {values.shape[0]} values for {len(filter_names)} filters"
            )
        values.setflags(write=False)
        self._filter_names = filter_names
        self._values = values

    @property
    def filter_names(self) -> tuple[str, ...]:
        return self._filter_names

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def fluxes(self) -> np.ndarray:
        return self._values[:, 0]

    @property
    def errors(self) -> np.ndarray:
        return self._values[:, 1]

    def find(self, filter_name: str) -> FluxErrorPair | None:
        try:
            i = self._filter_names.index(str(filter_name))
        except ValueError:
            return None
        return FluxErrorPair(*self._values[i].tolist())

    def __len__(self) -> int:
        return len(self._filter_names)

    def __iter__(self) -> Iterator[tuple[str, FluxErrorPair]]:
        for name, row in zip(self._filter_names, self._values.tolist()):
            yield name, FluxErrorPair(*row)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Photometry):
            return NotImplemented
        return self._filter_names == other._filter_names and np.array_equal(
            self._values, other._values
        )

    def __getstate__(self):
        return self._filter_names, self._values

    def __setstate__(self, state):
        self._filter_names, values = state
        self._values = np.array(values)
        self._values.setflags(write=False)

    def __repr__(self) -> str:
        return f"Photometry({dict((n, v.flux) for n, v in self)})"


class PhotometryMatrix:
    """Immutable flat container of :class:`Photometry`, one per grid cell.

    Entries are ordered row-major over ``(sed, curve, ebv, z)``. Random access
    uses ``matrix[z_idx, ebv_idx, curve_idx, sed_idx]``.
    """

    def __init__(self, axes: GridAxes, photometries: Sequence[Photometry]):
        photometries = tuple(photometries)
        if len(photometries) != axes.size:
            raise DomainError(
                f"Photometry matrix needs {axes.size} entries, got {len(photometries)}"
            )
        filter_names = photometries[0].filter_names
        if any(p.filter_names != filter_names for p in photometries):
            raise DomainError("All photometries of a matrix must use the same filters")
        self.axes = axes
        self._filter_names = filter_names
        self._photometries = photometries

    @classmethod
    def from_values(
        cls, axes: GridAxes, filter_names: Sequence[str], values: np.ndarray
    ) -> "PhotometryMatrix":
        """Build from an array of shape ``(size, n_filters, 2)``."""

        names = tuple(str(n) for n in filter_names)
        values = np.asarray(values, dtype=float).reshape(axes.size, len(names), 2)
        return cls(axes, [Photometry(names, row) for row in values])

    @property
    def filter_names(self) -> tuple[str, ...]:
        return self._filter_names

    @property
    def size(self) -> int:
        return len(self._photometries)

    def __len__(self) -> int:
        return len(self._photometries)

    def __iter__(self) -> Iterator[Photometry]:
        return iter(self._photometries)

    def flat(self, index: int) -> Photometry:
        return self._photometries[index]

    def __getitem__(self, indices: tuple[int, int, int, int]) -> Photometry:
        return self._photometries[self.axes.flat_index(*indices)]

    def values(self) -> np.ndarray:
        """All ``(flux, error)`` pairs, shape ``(size, n_filters, 2)``."""

        return np.stack([p.values for p in self._photometries])

    def fluxes(self) -> np.ndarray:
        """Fluxes with shape ``(n_sed, n_curve, n_ebv, n_z, n_filters)``."""

        return self.values()[:, :, 0].reshape(self.axes.shape + (len(self._filter_names),))

    def flux(self, filter_idx: int, z_idx: int, ebv_idx: int, curve_idx: int, sed_idx: int) -> float:
        return float(self[z_idx, ebv_idx, curve_idx, sed_idx].values[filter_idx, 0])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PhotometryMatrix):
            return NotImplemented
        return self.axes == other.axes and self._photometries == other._photometries

    def save(self, filename: str | Path) -> None:
        MatrixExport.from_matrix(self).save(filename)

    @staticmethod
    def load(filename: str | Path) -> "PhotometryMatrix":
        return MatrixExport.load(filename).to_matrix()


class MatrixExport(BaseModel):
    """On-disk record of a :class:`PhotometryMatrix`."""

    z: list[float] = Field()
    ebv: list[float] = Field()
    reddening_curves: list[str] = Field()
    seds: list[str] = Field()
    filters: list[str] = Field()
    values: list[list[list[float]]] = Field()

    @model_validator(mode="after")
    def number_of_elements(self) -> Self:
        size = len(self.z) * len(self.ebv) * len(self.reddening_curves) * len(self.seds)
        if len(self.values) != size:
            raise ValueError(
                f"Number of photometries ({len(self.values)}) does not match the axes ({size})"
            )
        for row in self.values:
            if len(row) != len(self.filters) or any(len(pair) != 2 for pair in row):
                raise ValueError("Every photometry needs one (flux, error) pair per filter")
        return self

    @classmethod
    def from_matrix(cls, matrix: PhotometryMatrix) -> "MatrixExport":
        axes = matrix.axes
        return cls(
            z=list(axes.z),
            ebv=list(axes.ebv),
            reddening_curves=[str(c) for c in axes.reddening_curves],
            seds=[str(s) for s in axes.seds],
            filters=list(matrix.filter_names),
            values=matrix.values().tolist(),
        )

    def to_matrix(self) -> PhotometryMatrix:
        axes = GridAxes(
            self.z,
            self.ebv,
            [QualifiedName(c) for c in self.reddening_curves],
            [QualifiedName(s) for s in self.seds],
        )
        values = np.asarray(self.values, dtype=float).reshape(axes.size, len(self.filters), 2)
        return PhotometryMatrix.from_values(axes, self.filters, values)

    def save(self, filename: str | Path) -> None:
        if isinstance(filename, str):
            filename = Path(filename)

        try:
            match filename.suffix:
                case ".json":
                    with open(filename, "w") as f:
                        json.dump(self.model_dump(), f)
                case ".yml" | ".yaml":
                    with open(filename, "w") as f:
                        yaml.dump(self.model_dump(), f, default_flow_style=None)
                case ".pkl" | ".bin":
                    with open(filename, "wb") as f:
                        _pickle.dump(self.model_dump(), f)
                case ".bz2":
                    with bz2.BZ2File(filename, "w") as outfile:
                        _pickle.dump(self.model_dump(), outfile)
                case ".npz":
                    np.savez(filename, **self.__arrays())
                case _:
                    raise ConfigError(f"Unknown file extension {filename.suffix}")
        except OSError as error:
            raise PhzIOError(f"Could not write {filename}: {error}") from error

    def __arrays(self) -> dict[str, np.ndarray]:
        return dict(
            z=np.asarray(self.z, dtype=float),
            ebv=np.asarray(self.ebv, dtype=float),
            reddening_curves=np.asarray(self.reddening_curves, dtype=object),
            seds=np.asarray(self.seds, dtype=object),
            filters=np.asarray(self.filters, dtype=object),
            values=np.asarray(self.values, dtype=float).reshape(-1, len(self.filters), 2),
        )

    @classmethod
    def load(cls, filename: str | Path) -> "MatrixExport":
        filename = Path(filename)
        if not filename.is_file():
            raise PhzIOError(f"File does not exist : {filename}")

        match filename.suffix:
            case ".json":
                with open(filename) as f:
                    data = json.load(f)
            case ".yml" | ".yaml":
                with open(filename) as f:
                    data = yaml.safe_load(f)
            case ".pkl" | ".bin":
                with open(filename, "rb") as f:
                    data = _pickle.load(f)
            case ".bz2":
                with bz2.BZ2File(filename, "r") as f:
                    data = _pickle.load(f)
            case ".npz":
                with np.load(filename, allow_pickle=True) as arrays:
                    data = {key: arrays[key].tolist() for key in arrays.files}
            case _:
                raise ConfigError(f"Unknown file extension {filename.suffix}")

        try:
            return cls(**data)
        except ValueError as error:
            raise ParseError(f"Invalid photometry matrix file {filename}: {error}") from error
