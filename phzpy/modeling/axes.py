"""Parameter grid axes.

The grid is the Cartesian product of four axes: redshift, E(B-V), reddening
curve and SED. Cells are stored and enumerated row-major over
``(sed, curve, ebv, z)``, so the SED is the slowest varying axis and the
redshift the fastest one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

from phzpy.dataset.qualified_name import QualifiedName
from phzpy.errors import ConfigError, DomainError

RANGE_TOLERANCE = 1e-12

NO_REDDENING = QualifiedName("none")


def numeric_range(start: float, stop: float, step: float) -> list[float]:
    """Values ``start + i * step`` up to ``stop``.

    ``stop`` is included when it is reachable by an integer number of steps
    within ``1e-12``.
    """

    if step <= 0:
        raise ConfigError(f"Range step must be positive, got {step}")
    if stop < start:
        raise ConfigError(f"Range stop {stop} is smaller than start {start}")
    count = int(np.floor((stop - start) / step + RANGE_TOLERANCE)) + 1
    values = [start + i * step for i in range(count)]
    while values and values[-1] > stop + RANGE_TOLERANCE:
        values.pop()
    return values


@dataclass(frozen=True)
class GridAxes:
    """The four axes of the model grid.

    Attributes
    ----------
    z:
        Redshift values, non-negative.
    ebv:
        E(B-V) values, non-negative.
    reddening_curves:
        Reddening curve names; ``none`` means no attenuation.
    seds:
        SED names.
    """

    z: tuple[float, ...]
    ebv: tuple[float, ...]
    reddening_curves: tuple[QualifiedName, ...]
    seds: tuple[QualifiedName, ...]

    def __init__(
        self,
        z: Sequence[float],
        ebv: Sequence[float],
        reddening_curves: Sequence[str | QualifiedName],
        seds: Sequence[str | QualifiedName],
    ):
        object.__setattr__(self, "z", tuple(float(v) for v in z))
        object.__setattr__(self, "ebv", tuple(float(v) for v in ebv))
        object.__setattr__(
            self, "reddening_curves", tuple(QualifiedName(c) for c in reddening_curves)
        )
        object.__setattr__(self, "seds", tuple(QualifiedName(s) for s in seds))

        for label, axis in zip(("z", "ebv", "reddening curve", "sed"), self.axes):
            if len(axis) == 0:
                raise DomainError(f"The {label} axis is empty")
        if min(self.z) < 0:
            raise DomainError("Redshift values must be non-negative")
        if min(self.ebv) < 0:
            raise DomainError("E(B-V) values must be non-negative")

    @property
    def axes(self) -> tuple[tuple, tuple, tuple, tuple]:
        return self.z, self.ebv, self.reddening_curves, self.seds

    @property
    def shape(self) -> tuple[int, int, int, int]:
        """Storage shape ``(n_sed, n_curve, n_ebv, n_z)``."""

        return len(self.seds), len(self.reddening_curves), len(self.ebv), len(self.z)

    @property
    def size(self) -> int:
        return int(np.prod(self.shape))

    def __len__(self) -> int:
        return self.size

    def flat_index(self, z_idx: int, ebv_idx: int, curve_idx: int, sed_idx: int) -> int:
        n_sed, n_curve, n_ebv, n_z = self.shape
        for value, bound in zip((sed_idx, curve_idx, ebv_idx, z_idx), self.shape):
            if not 0 <= value < bound:
                raise IndexError(f"Grid index {value} out of range [0, {bound})")
        return ((sed_idx * n_curve + curve_idx) * n_ebv + ebv_idx) * n_z + z_idx

    def unravel(self, flat: int) -> tuple[int, int, int, int]:
        """Inverse of :meth:`flat_index`, returns ``(z, ebv, curve, sed)``."""

        if not 0 <= flat < self.size:
            raise IndexError(f"Flat index {flat} out of range [0, {self.size})")
        sed_idx, curve_idx, ebv_idx, z_idx = np.unravel_index(flat, self.shape)
        return int(z_idx), int(ebv_idx), int(curve_idx), int(sed_idx)

    def indices(self, start: int = 0, stop: int | None = None) -> Iterator[tuple[int, int, int, int]]:
        """Iterate ``(z_idx, ebv_idx, curve_idx, sed_idx)`` in storage order.

        Each call returns a new finite iterator, optionally restricted to the
        flat range ``[start, stop)``.
        """

        stop = self.size if stop is None else min(stop, self.size)
        for flat in range(start, stop):
            yield self.unravel(flat)

    def __iter__(self) -> Iterator[tuple[int, int, int, int]]:
        return self.indices()

    def values(self, z_idx: int, ebv_idx: int, curve_idx: int, sed_idx: int):
        """The parameter values of a cell."""

        return (
            self.z[z_idx],
            self.ebv[ebv_idx],
            self.reddening_curves[curve_idx],
            self.seds[sed_idx],
        )
