"""SED transformations used to build the model grid cells.

A cell spectrum is produced from an SED template in three steps:

1. attenuation by dust, ``y * 10**(-0.4 * ebv * k(lambda))`` with the
   reddening curve evaluated at rest-frame wavelength;
2. redshift, ``lambda -> lambda * (1 + z)`` and ``y -> y / (1 + z)``;
3. an optional constant scale factor per SED.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Iterator, Mapping

import numpy as np

from phzpy.dataset.provider import DatasetProvider
from phzpy.dataset.qualified_name import QualifiedName
from phzpy.dataset.xydataset import XYDataset
from phzpy.errors import DomainError, PhzIOError
from phzpy.function import Function
from phzpy.interpolation import linear_interpolation
from phzpy.modeling.axes import NO_REDDENING, GridAxes


def check_sed(sed: XYDataset, name: QualifiedName | None = None) -> XYDataset:
    if len(sed) == 0:
        raise DomainError("Empty SED", name)
    if sed.x[0] <= 0:
        raise DomainError("SED wavelengths must be strictly positive", name)
    return sed


def apply_reddening(sed: XYDataset, curve: Function | None, ebv: float) -> XYDataset:
    """Attenuate ``sed`` by ``ebv`` magnitudes of colour excess along ``curve``."""

    if curve is None or ebv == 0:
        return sed
    factor = np.power(10.0, -0.4 * ebv * np.asarray(curve(sed.x)))
    return XYDataset(sed.x, sed.y * factor)


def apply_redshift(sed: XYDataset, z: float) -> XYDataset:
    """Stretch wavelengths by ``1 + z`` and dim the flux by the same factor."""

    if z == 0:
        return sed
    factor = 1.0 + z
    return XYDataset(sed.x * factor, sed.y / factor)


def apply_scale(sed: XYDataset, scale: float) -> XYDataset:
    if scale == 1.0:
        return sed
    return XYDataset(sed.x, sed.y * scale)


@dataclass(frozen=True)
class ModelCell:
    """One realised model spectrum of the grid."""

    z: float
    ebv: float
    reddening_curve: QualifiedName
    sed: QualifiedName
    dataset: XYDataset

    @cached_property
    def function(self) -> Function:
        """Linear interpolant over the transformed wavelength grid."""

        return linear_interpolation(self.dataset.x, self.dataset.y)

    def __iter__(self) -> Iterator[tuple[float, float]]:
        return iter(self.dataset)

    def __len__(self) -> int:
        return len(self.dataset)


class ModelDataManager:
    """Owns the SED and reddening curve data of a grid and produces its cells.

    All datasets are loaded when the manager is created, so producing a cell
    performs no I/O.

    Parameters
    ----------
    axes:
        The grid axes.
    sed_provider, curve_provider:
        Providers of the SED templates and reddening curves. The curve
        provider may be ``None`` when the only curve is ``none``.
    scales:
        Optional scale factor per SED name, 1 when missing.
    """

    def __init__(
        self,
        axes: GridAxes,
        sed_provider: DatasetProvider,
        curve_provider: DatasetProvider | None = None,
        scales: Mapping[str | QualifiedName, float] | None = None,
    ):
        self.axes = axes
        self.log = logging.getLogger(self.__class__.__module__)
        scales = {QualifiedName(k): float(v) for k, v in (scales or {}).items()}

        self.seds: list[XYDataset] = []
        for name in axes.seds:
            self.seds.append(check_sed(self.__fetch(sed_provider, name, "SED"), name))
        self.scales = [scales.get(name, 1.0) for name in axes.seds]

        self.curves: list[Function | None] = []
        for name in axes.reddening_curves:
            if name == NO_REDDENING:
                self.curves.append(None)
                continue
            dataset = self.__fetch(curve_provider, name, "reddening curve")
            self.curves.append(linear_interpolation(dataset.x, dataset.y))

        self.log.info(
            "Loaded %d SEDs and %d reddening curves", len(self.seds), len(self.curves)
        )

    @staticmethod
    def __fetch(
        provider: DatasetProvider | None, name: QualifiedName, kind: str
    ) -> XYDataset:
        dataset = provider.get_dataset(name) if provider is not None else None
        if dataset is None:
            raise PhzIOError(f"Missing {kind} dataset", name)
        return dataset

    def cell(self, z_idx: int, ebv_idx: int, curve_idx: int, sed_idx: int) -> ModelCell:
        z, ebv, curve_name, sed_name = self.axes.values(z_idx, ebv_idx, curve_idx, sed_idx)
        try:
            dataset = apply_reddening(self.seds[sed_idx], self.curves[curve_idx], ebv)
            dataset = apply_redshift(dataset, z)
            dataset = apply_scale(dataset, self.scales[sed_idx])
        except DomainError as error:
            raise error.with_name(sed_name)
        return ModelCell(z, ebv, curve_name, sed_name, dataset)
