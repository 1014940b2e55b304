import cProfile
import logging
import pstats
from functools import cached_property
from pathlib import Path

from phzpy.builder import PhotometryBuilder
from phzpy.config import Config
from phzpy.modeling.model_matrix import ModelMatrix
from phzpy.modeling.sed import ModelDataManager
from phzpy.photometry import PhotometryMatrix


class ModelPhotometry:
    """Top-level handler: read the config, build the photometry matrix, export it.

    Args:
        path_config (str): Path of the json or yaml config file.
        output (str, optional): Output path, overrides ``binary-photometry-matrix``.
        workers (int, optional): Number of worker processes, overrides ``workers``.
        backend (str, optional): Builder backend, overrides ``backend``.
    """

    path_config: str
    overrides: dict

    def __init__(
        self,
        path_config: str,
        output: str = "",
        workers: int | None = None,
        backend: str | None = None,
    ):
        self.path_config = path_config
        self.log = logging.getLogger(self.__class__.__module__)
        self.overrides = {
            "binary-photometry-matrix": output or None,
            "workers": workers,
            "backend": backend,
        }
        if self.config.log_level is not None:
            logging.getLogger("phzpy").setLevel(self.config.log_level)

        self.manager = ModelDataManager(
            self.config.axes,
            self.config.sed_provider,
            self.config.reddening_curve_provider,
            scales=self.config.sed_scales,
        )
        self.model_matrix = ModelMatrix(self.manager)
        self.builder = PhotometryBuilder.from_provider(
            self.config.filter_provider,
            self.config.filter_list,
            backend=self.config.backend,
        )
        self.photometry_matrix: PhotometryMatrix | None = None

    @cached_property
    def config(self) -> Config:
        return Config(self.path_config, overrides=self.overrides)

    def run(self, abort=None) -> PhotometryMatrix:
        self.photometry_matrix = self.builder.build(
            self.model_matrix, abort=abort, workers=self.config.workers
        )
        return self.photometry_matrix

    def export(self, output_path: str = "") -> Path:
        if self.photometry_matrix is None:
            raise RuntimeError("Run the photometry build before exporting it")
        filename = Path(output_path) if output_path else self.config.output_filename
        filename.parent.mkdir(parents=True, exist_ok=True)
        self.photometry_matrix.save(filename)
        self.log.info("Photometry matrix written to %s", filename)
        return filename

    @staticmethod
    def profiler(config_path: str | None = None, output: str | None = None):
        if config_path is None:
            raise Exception("Plase provide a config file!")
        with cProfile.Profile() as pr:
            handler = ModelPhotometry(config_path)
            handler.run()
            stats = pstats.Stats(pr).sort_stats(pstats.SortKey.TIME)
            stats.print_stats() if output is None else stats.dump_stats(output)
            return handler
