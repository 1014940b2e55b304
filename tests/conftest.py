import numpy as np
import pytest
import yaml


def _write_dataset(path, x, y, name=None):
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [f"# NAME: {name}"] if name else []
    lines += [f"{a!r} {b!r}" for a, b in zip(np.asarray(x).tolist(), np.asarray(y).tolist())]
    path.write_text("\n".join(lines) + "\n")


@pytest.fixture
def data_tree(tmp_path):
    """A small SED, reddening curve and filter tree."""

    x = np.linspace(1000.0, 20000.0, 300)
    _write_dataset(tmp_path / "SEDs" / "CWW" / "ell.sed", x, np.ones_like(x), name="Ell")
    _write_dataset(tmp_path / "SEDs" / "CWW" / "sbc.sed", x, 1.0 + x / 20000.0, name="Sbc")
    _write_dataset(tmp_path / "SEDs" / "other" / "flat.sed", x, np.full_like(x, 2.0))

    curve_x = np.linspace(500.0, 30000.0, 40)
    _write_dataset(
        tmp_path / "ReddeningCurves" / "calzetti.dat", curve_x, 4.0 - curve_x / 10000.0
    )

    _write_dataset(
        tmp_path / "Filters" / "MER" / "vis.dat",
        [5000.0, 6000.0, 8000.0, 9000.0],
        [0.0, 1.0, 1.0, 0.0],
        name="vis",
    )
    _write_dataset(
        tmp_path / "Filters" / "MER" / "h.dat",
        [14000.0, 16000.0, 18000.0],
        [0.0, 0.9, 0.0],
    )
    return tmp_path


@pytest.fixture
def config_file(data_tree):
    options = {
        "binary-photometry-matrix": "out/matrix.bz2",
        "sed-root-path": "SEDs",
        "sed-group": ["CWW"],
        "reddening-curve-root-path": "ReddeningCurves",
        "reddening-curve-list": ["none", "calzetti"],
        "filter-root-path": "Filters",
        "filter-group": "MER",
        "z-start": 0.0,
        "z-stop": 0.4,
        "z-step": 0.2,
        "ebv-start": 0.0,
        "ebv-stop": 0.1,
        "ebv-step": 0.1,
    }
    path = data_tree / "config.yaml"
    path.write_text(yaml.safe_dump(options))
    return path
