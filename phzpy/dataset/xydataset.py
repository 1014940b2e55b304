from __future__ import annotations

from typing import Iterable, Iterator, Sequence

import numpy as np

from phzpy.errors import DomainError


class XYDataset:
    """Immutable sequence of ``(x, y)`` pairs with strictly increasing x.

    Parameters
    ----------
    x, y:
        Equal length sequences with at least two entries.
    """

    __slots__ = ("_x", "_y")

    def __init__(self, x: Sequence[float], y: Sequence[float]):
        x = np.array(x, dtype=float)
        y = np.array(y, dtype=float)
        if x.ndim != 1 or y.ndim != 1 or x.size != y.size:
            raise DomainError("XYDataset needs two 1D sequences of equal length")
        if x.size < 2:
            raise DomainError("XYDataset needs at least two entries")
        if not np.all(np.isfinite(x)) or not np.all(np.diff(x) > 0):
            raise DomainError("XYDataset x values must be finite and strictly increasing")
        x.setflags(write=False)
        y.setflags(write=False)
        self._x = x
        self._y = y

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[float, float]]) -> "XYDataset":
        pairs = list(pairs)
        if not pairs:
            raise DomainError("XYDataset needs at least two entries")
        x, y = zip(*pairs)
        return cls(x, y)

    @classmethod
    def from_arrays(cls, x: Sequence[float], y: Sequence[float]) -> "XYDataset":
        return cls(x, y)

    @property
    def x(self) -> np.ndarray:
        return self._x

    @property
    def y(self) -> np.ndarray:
        return self._y

    @property
    def front(self) -> tuple[float, float]:
        return float(self._x[0]), float(self._y[0])

    @property
    def back(self) -> tuple[float, float]:
        return float(self._x[-1]), float(self._y[-1])

    def __len__(self) -> int:
        return self._x.size

    def __iter__(self) -> Iterator[tuple[float, float]]:
        return zip(self._x.tolist(), self._y.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, XYDataset):
            return NotImplemented
        return np.array_equal(self._x, other._x) and np.array_equal(self._y, other._y)

    def __getstate__(self):
        return self._x, self._y

    def __setstate__(self, state):
        x, y = state
        self._x = np.array(x)
        self._y = np.array(y)
        self._x.setflags(write=False)
        self._y.setflags(write=False)

    def __repr__(self) -> str:
        return f"XYDataset(size={len(self)}, x=[{self._x[0]}, {self._x[-1]}])"
