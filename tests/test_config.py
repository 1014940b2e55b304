import json

import pytest
import yaml

from phzpy import Config
from phzpy.dataset import QualifiedName
from phzpy.errors import ConfigError, PhzIOError


def _options(config_file):
    return yaml.safe_load(config_file.read_text())


def test_read_yaml(config_file, data_tree):
    config = Config(config_file)

    assert config.output_filename == data_tree / "out" / "matrix.bz2"
    assert config.sed_list == [QualifiedName("CWW/Ell"), QualifiedName("CWW/Sbc")]
    assert config.reddening_curve_list == [QualifiedName("none"), QualifiedName("calzetti")]
    assert config.filter_list == [QualifiedName("MER/h"), QualifiedName("MER/vis")]
    assert config.z_list == pytest.approx([0.0, 0.2, 0.4])
    assert config.ebv_list == pytest.approx([0.0, 0.1])
    assert config.workers == 1
    assert config.backend == "numba"
    assert config.axes.size == 3 * 2 * 2 * 2


def test_read_json(config_file, data_tree):
    path = data_tree / "config.json"
    path.write_text(json.dumps(_options(config_file)))
    assert Config(path).sed_list == Config(config_file).sed_list


def test_dict_and_overrides(config_file, data_tree):
    options = _options(config_file)
    options["sed-list"] = ["other/flat", "CWW/Ell"]
    config = Config(
        options,
        overrides={"workers": 3, "backend": None, "z-stop": 0.2},
        base_path=data_tree,
    )
    assert config.sed_list == [
        QualifiedName("CWW/Ell"),
        QualifiedName("CWW/Sbc"),
        QualifiedName("other/flat"),
    ]
    assert config.workers == 3
    assert config.backend == "numba"
    assert config.z_list == pytest.approx([0.0, 0.2])


def test_default_reddening_curve(config_file, data_tree):
    options = _options(config_file)
    del options["reddening-curve-root-path"]
    del options["reddening-curve-list"]
    config = Config(options, base_path=data_tree)
    assert config.reddening_curve_list == [QualifiedName("none")]
    assert config.reddening_curve_provider is None


@pytest.mark.parametrize(
    "change, error",
    [
        ({"binary-photometry-matrix": None}, ConfigError),
        ({"z-step": 0.0}, ConfigError),
        ({"z-start": "zero"}, ConfigError),
        ({"sed-group": ["nothing"]}, ConfigError),
        ({"sed-list": ["CWW/missing"]}, PhzIOError),
        ({"sed-root-path": "nowhere"}, ConfigError),
        ({"reddening-curve-root-path": None}, ConfigError),
        ({"workers": 0}, ConfigError),
        ({"log-level": "LOUD"}, ConfigError),
        ({"backend": "gpu"}, ConfigError),
    ],
)
def test_invalid_options(config_file, data_tree, change, error):
    options = _options(config_file)
    options.update(change)
    with pytest.raises(error):
        Config(options, base_path=data_tree)


def test_unsupported_file(data_tree):
    path = data_tree / "config.ini"
    path.write_text("[options]\n")
    with pytest.raises(ConfigError):
        Config(path)
    with pytest.raises(PhzIOError):
        Config(data_tree / "missing.yaml")


def test_sed_scales(config_file, data_tree):
    options = _options(config_file)
    options["sed-scale"] = {"CWW/Ell": 2.5}
    config = Config(options, base_path=data_tree)
    assert config.sed_scales == {QualifiedName("CWW/Ell"): 2.5}
    assert Config(_options(config_file), base_path=data_tree).sed_scales == {}


@pytest.mark.parametrize(
    "scales",
    [{"other/flat": 2.0}, {"CWW/Ell": "double"}, ["CWW/Ell", 2.0]],
)
def test_invalid_sed_scales(config_file, data_tree, scales):
    options = _options(config_file)
    options["sed-scale"] = scales
    with pytest.raises(ConfigError):
        Config(options, base_path=data_tree)
