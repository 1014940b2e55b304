import logging

import click

from phzpy import ModelPhotometry, PhotometryMatrix
from phzpy.errors import PhzError


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@cli.command()
@click.option(
    "--config",
    required=True,
    type=str,
    help="Specify the path to the config file to be used.",
)
@click.option(
    "--output",
    type=str,
    default="",
    help="Path of the photometry matrix file. Overrides binary-photometry-matrix in the config.",
)
@click.option("--workers", type=int, default=None, help="Number of worker processes.")
@click.option(
    "--backend",
    type=click.Choice(["numba", "algebra"], case_sensitive=False),
    default=None,
    help="Integration backend of the photometry builder.",
)
def compute(config: str, output: str, workers: int | None, backend: str | None) -> None:
    try:
        handler = ModelPhotometry(config, output=output, workers=workers, backend=backend)
        handler.run()
        handler.export()
    except PhzError as error:
        raise click.ClickException(str(error)) from error


@cli.command()
@click.option("--matrix", required=True, type=str, help="Photometry matrix file.")
def info(matrix: str) -> None:
    try:
        photometry_matrix = PhotometryMatrix.load(matrix)
    except PhzError as error:
        raise click.ClickException(str(error)) from error
    axes = photometry_matrix.axes
    click.echo(f"z: {len(axes.z)} values [{axes.z[0]}, {axes.z[-1]}]")
    click.echo(f"ebv: {len(axes.ebv)} values [{axes.ebv[0]}, {axes.ebv[-1]}]")
    click.echo(f"reddening curves: {len(axes.reddening_curves)}")
    click.echo(f"seds: {len(axes.seds)}")
    click.echo(f"filters: {', '.join(photometry_matrix.filter_names)}")
    click.echo(f"models: {len(photometry_matrix)}")
