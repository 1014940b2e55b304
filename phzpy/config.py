import json
import logging
from pathlib import Path

import yaml

from phzpy.dataset.provider import DatasetProvider, FileSystemProvider
from phzpy.dataset.qualified_name import QualifiedName
from phzpy.errors import ConfigError, PhzIOError
from phzpy.modeling.axes import NO_REDDENING, GridAxes, numeric_range


class Config:
    """Options of a model photometry run.

    The options are read from a json or yaml file and may be overridden (e.g.
    from the command line). Keys follow the long option names::

        binary-photometry-matrix: out/matrix.bz2
        sed-root-path: data/SEDs
        sed-group: [CWW]
        sed-scale: {CWW/Ell: 2.0}
        reddening-curve-root-path: data/ReddeningCurves
        reddening-curve-list: [calzetti, none]
        filter-root-path: data/Filters
        filter-group: [MER]
        z-start: 0.0
        z-stop: 6.0
        z-step: 0.01
        ebv-start: 0.0
        ebv-stop: 1.0
        ebv-step: 0.1

    Relative paths are resolved against the folder of the config file.

    Args:
        path_config (str | Path | dict): Path of the config file, or the options themselves.
        overrides (dict, optional): Options replacing the ones of the file. ``None`` values are ignored.
        base_path (str | Path, optional): Folder for relative paths when ``path_config`` is a dict.
    """

    config: dict = {}

    def __init__(
        self,
        path_config: "str | Path | dict",
        overrides: dict | None = None,
        base_path: "str | Path | None" = None,
    ):
        self.log = logging.getLogger(self.__class__.__module__)

        if isinstance(path_config, dict):
            self.config = dict(path_config)
            self.file_type = ""
            self.base_path = Path(base_path) if base_path is not None else Path(".")
        elif isinstance(path_config, (str, Path)):
            _path_config = Path(path_config)
            if not _path_config.is_file():
                raise PhzIOError(f"Could not read config file {path_config}. Check if the file exists.")
            self.file_type = _path_config.suffix
            match self.file_type:
                case ".json":
                    with open(_path_config) as data:
                        self.config = json.load(data)
                case ".yaml" | ".yml":
                    with open(_path_config) as data:
                        self.config = yaml.safe_load(data)
                case _:
                    raise ConfigError(
                        "The provided config file needs to be a json or yaml file!"
                    )
            self.base_path = (
                Path(base_path) if base_path is not None else _path_config.parent
            )
        else:
            raise ConfigError("The config needs to be a file path or a dict!")

        if not isinstance(self.config, dict):
            raise ConfigError(f"The config {path_config} does not contain any options")

        for key, value in (overrides or {}).items():
            if value is not None:
                self.config[key] = value

        self.__read()

    def __require(self, key: str):
        if key not in self.config or self.config[key] is None:
            raise ConfigError(f"Missing required option {key}")
        return self.config[key]

    def __as_list(self, key: str) -> list[str]:
        value = self.config.get(key)
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [str(v) for v in value]
        raise ConfigError(f"Option {key} must be a string or a list of strings")

    def __path(self, value: str) -> Path:
        path = Path(value)
        return path if path.is_absolute() else self.base_path / path

    def __number(self, key: str) -> float:
        value = self.__require(key)
        try:
            return float(value)
        except (TypeError, ValueError) as error:
            raise ConfigError(f"Option {key} must be a number, got {value!r}") from error

    def __range(self, prefix: str) -> list[float]:
        return numeric_range(
            self.__number(f"{prefix}-start"),
            self.__number(f"{prefix}-stop"),
            self.__number(f"{prefix}-step"),
        )

    def __provider(self, key: str) -> DatasetProvider:
        path = self.__path(str(self.__require(key)))
        if not path.is_dir():
            raise ConfigError(f"Option {key}: {path} is not a directory")
        return FileSystemProvider(path)

    def __resolve(
        self,
        provider: DatasetProvider | None,
        prefix: str,
        allow_none: bool = False,
    ) -> list[QualifiedName]:
        names: list[QualifiedName] = []
        for group in self.__as_list(f"{prefix}-group"):
            contents = provider.list_contents(group)
            if not contents:
                raise ConfigError(f"Option {prefix}-group: group {group!r} is empty")
            names.extend(contents)

        known = set(provider.list_contents("")) if provider is not None else set()
        for item in self.__as_list(f"{prefix}-list"):
            try:
                name = QualifiedName(item)
            except ValueError as error:
                raise ConfigError(f"Option {prefix}-list: {error}") from error
            if allow_none and name == NO_REDDENING:
                pass
            elif provider is None:
                raise ConfigError(f"Missing required option {prefix}-root-path")
            elif name not in known:
                raise PhzIOError(f"Option {prefix}-list: dataset not found", name)
            names.append(name)

        # drop duplicates, keep the first occurrence
        names = list(dict.fromkeys(names))
        if not names:
            raise ConfigError(f"No datasets selected by the {prefix}-group/{prefix}-list options")
        return names

    def __scales(self, key: str, names: list[QualifiedName]) -> dict[QualifiedName, float]:
        value = self.config.get(key)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ConfigError(f"Option {key} must map dataset names to factors")
        scales = {}
        for item, factor in value.items():
            try:
                name = QualifiedName(str(item))
                scales[name] = float(factor)
            except (TypeError, ValueError) as error:
                raise ConfigError(f"Option {key}: invalid entry {item!r}: {factor!r}") from error
            if name not in names:
                raise ConfigError(f"Option {key}: dataset not selected", name)
        return scales

    def __read(self):
        self.output_filename = self.__path(str(self.__require("binary-photometry-matrix")))

        self.sed_provider = self.__provider("sed-root-path")
        self.sed_list = self.__resolve(self.sed_provider, "sed")
        self.sed_scales = self.__scales("sed-scale", self.sed_list)

        curve_options = ("reddening-curve-group", "reddening-curve-list")
        if not any(self.config.get(key) for key in curve_options):
            self.log.info("No reddening curve selected, using 'none'")
            self.config["reddening-curve-list"] = [str(NO_REDDENING)]
        self.reddening_curve_provider = (
            self.__provider("reddening-curve-root-path")
            if self.config.get("reddening-curve-root-path") is not None
            else None
        )
        if self.reddening_curve_provider is None and self.config.get("reddening-curve-group"):
            raise ConfigError("Missing required option reddening-curve-root-path")
        self.reddening_curve_list = self.__resolve(
            self.reddening_curve_provider, "reddening-curve", allow_none=True
        )

        self.filter_provider = self.__provider("filter-root-path")
        self.filter_list = self.__resolve(self.filter_provider, "filter")

        self.z_list = self.__range("z")
        self.ebv_list = self.__range("ebv")

        self.workers = int(self.config.get("workers", 1))
        if self.workers < 1:
            raise ConfigError("Option workers must be at least 1")
        self.backend = str(self.config.get("backend", "numba")).lower()
        if self.backend not in ("numba", "algebra"):
            raise ConfigError(f"Unknown backend {self.backend!r}")
        log_level = self.config.get("log-level")
        self.log_level = str(log_level).upper() if log_level is not None else None
        if self.log_level not in (None, "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"Unknown log-level {log_level!r}")

        self.log.info(
            "Grid: %d redshifts, %d E(B-V) values, %d reddening curves, %d SEDs; %d filters",
            len(self.z_list),
            len(self.ebv_list),
            len(self.reddening_curve_list),
            len(self.sed_list),
            len(self.filter_list),
        )

    @property
    def axes(self) -> GridAxes:
        return GridAxes(self.z_list, self.ebv_list, self.reddening_curve_list, self.sed_list)
