import numpy.testing as npt
import yaml
from click.testing import CliRunner

from phzpy import ModelPhotometry, PhotometryMatrix
from phzpy.cli import cli


def test_model_photometry(config_file, data_tree):
    handler = ModelPhotometry(str(config_file), backend="algebra")
    matrix = handler.run()
    assert matrix.size == 24
    assert matrix.filter_names == ("MER/h", "MER/vis")
    assert (matrix.fluxes() > 0).all()

    filename = handler.export()
    assert filename == data_tree / "out" / "matrix.bz2"
    assert PhotometryMatrix.load(filename) == matrix


def test_compute_and_info(config_file, data_tree):
    runner = CliRunner()
    output = data_tree / "result" / "matrix.json"

    result = runner.invoke(
        cli, ["compute", "--config", str(config_file), "--output", str(output)]
    )
    assert result.exit_code == 0, result.output
    assert output.is_file()

    result = runner.invoke(cli, ["info", "--matrix", str(output)])
    assert result.exit_code == 0, result.output
    assert "models: 24" in result.output
    assert "filters: MER/h, MER/vis" in result.output


def test_compute_reports_errors(data_tree):
    config = data_tree / "broken.yaml"
    config.write_text("binary-photometry-matrix: out.bz2\n")

    result = CliRunner().invoke(cli, ["compute", "--config", str(config)])
    assert result.exit_code == 1
    assert "Missing required option sed-root-path" in result.output


def test_model_photometry_config_is_built_once(config_file):
    handler = ModelPhotometry(str(config_file), workers=2, backend="algebra")
    assert handler.config is handler.config
    assert handler.config.workers == 2
    assert handler.config.backend == "algebra"
    assert handler.builder.backend == "algebra"


def test_model_photometry_sed_scale(config_file, data_tree):
    plain = ModelPhotometry(str(config_file), backend="algebra").run()

    options = yaml.safe_load(config_file.read_text())
    options["sed-scale"] = {"CWW/Sbc": 3.0}
    scaled_config = data_tree / "scaled.yaml"
    scaled_config.write_text(yaml.safe_dump(options))
    scaled = ModelPhotometry(str(scaled_config), backend="algebra").run()

    # SED axis is first: Ell, then Sbc
    npt.assert_allclose(scaled.fluxes()[0], plain.fluxes()[0], rtol=1e-12)
    npt.assert_allclose(scaled.fluxes()[1], 3.0 * plain.fluxes()[1], rtol=1e-12)
