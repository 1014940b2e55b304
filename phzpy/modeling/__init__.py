"""Model grid: axes, SED transformations and lazy cells."""

from phzpy.modeling.axes import NO_REDDENING, GridAxes, numeric_range
from phzpy.modeling.model_matrix import ModelMatrix
from phzpy.modeling.sed import (
    ModelCell,
    ModelDataManager,
    apply_reddening,
    apply_redshift,
    apply_scale,
)

__all__ = [
    "GridAxes",
    "ModelCell",
    "ModelDataManager",
    "ModelMatrix",
    "NO_REDDENING",
    "apply_reddening",
    "apply_redshift",
    "apply_scale",
    "numeric_range",
]
