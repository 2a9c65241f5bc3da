"""Command line interface for reconciliation jobs."""
import logging
from typing import Optional

import typer

from .config import ConfigLoader
from .job import run_job
from .report import OutputFormat, format_report
from .run_context import RunContext

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)

app = typer.Typer(help="Break/sync reconciliation of sorted record files")


def _load(config_path: Optional[str]) -> ConfigLoader:
    try:
        return ConfigLoader(path=config_path)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def run(
    config_path: Optional[str] = typer.Option(None, "--config", help="Job YAML file"),
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", case_sensitive=False),
    steps: bool = typer.Option(False, "--steps", help="Include one row per step"),
    verbose: bool = typer.Option(False, "--verbose", help="Log every step"),
) -> None:
    """Run a reconciliation job and print its report."""
    if verbose:
        logging.getLogger("breaksync").setLevel(logging.DEBUG)
    loader = _load(config_path)
    run_context = RunContext.create(loader.model.name)
    logger.info(
        "Starting job %s from %s run_id=%s",
        run_context.job_name,
        loader.config_path,
        run_context.run_id,
    )
    try:
        report = run_job(loader.model, run_context=run_context, keep_steps=steps)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(format_report(report, output_format=output_format, show_steps=steps))


@app.command()
def check(
    config_path: Optional[str] = typer.Option(None, "--config", help="Job YAML file"),
) -> None:
    """Validate a job file without reading any source."""
    loader = _load(config_path)
    job = loader.model
    typer.echo(f"Job {job.name} is valid | sources={len(job.sources)} ruptures={len(job.ruptures)}")
    for source in job.sources:
        key = "+".join(field.field for field in source.key)
        typer.echo(
            f"source {source.name} format={source.format} key={key} "
            f"rupture={source.rupture or '-'} path={source.path}"
        )
    for rupture in job.ruptures:
        typer.echo(f"rupture {rupture.name} width={rupture.width if rupture.width is not None else '-'}")


if __name__ == "__main__":
    app()
