#!filepath: forestlab/cli.py
from pathlib import Path
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError
from rich import print
from rich.markup import escape
from rich.table import Table

from forestlab import __version__, init_logging
from forestlab.config.app_config import AppConfig
from forestlab.utils.errors import UserInputError

app = typer.Typer(help="forestlab: H2O Random Forest / GBM training workflow")


def _load(config: Optional[Path]) -> AppConfig:
    try:
        return AppConfig.load(str(config) if config else None)
    except (FileNotFoundError, ValidationError) as e:
        raise UserInputError(str(e)) from e


def _fail(e: Exception) -> NoReturn:
    print(f"[red]{escape(str(e))}[/red]")
    raise typer.Exit(code=2)


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def train(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config"),
    run_id: Optional[str] = typer.Option(None, "--run-id", help="defaults to <name>_<timestamp>"),
):
    """
    Import → split → fit every configured model → evaluate → report.
    """
    from forestlab.workflows.offline_training import build_offline_training, new_run_id

    try:
        cfg = _load(config)
        init_logging(cfg.log)

        run_id = run_id or new_run_id(cfg.training.name)
        print(f"[green]Training run {run_id}[/green]")

        ctx = build_offline_training(cfg).run(run_id)
    except UserInputError as e:
        _fail(e)

    if ctx.leaderboard is not None and not ctx.leaderboard.empty:
        table = Table(title=f"leaderboard ({run_id})")
        for col in ("rank", "model_id", "family", "accuracy"):
            table.add_column(col)
        for _, row in ctx.leaderboard.iterrows():
            table.add_row(
                str(row["rank"]), row["model_id"], str(row["family"]), f"{row['accuracy']:.4f}"
            )
        print(table)

    print(f"[blue]outputs: {ctx.run_dir}[/blue]")


@app.command()
def models(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config"),
):
    """
    List configured model runs and their hyperparameters.
    """
    from forestlab.training.steps.model_train_step import resolve_model_ids

    try:
        cfg = _load(config)
        ids = resolve_model_ids(cfg.training.name, cfg.training.models)
    except UserInputError as e:
        _fail(e)

    table = Table(title=f"{cfg.training.name}: {len(ids)} model(s)")
    table.add_column("model_id")
    table.add_column("family")
    table.add_column("params")
    for model_id, run_cfg in zip(ids, cfg.training.models):
        params = ", ".join(f"{k}={v}" for k, v in run_cfg.hyperparameters().items())
        table.add_row(model_id, run_cfg.family, params or "(h2o defaults)")
    print(table)


@app.command()
def inspect(artifact_dir: Path):
    """
    Print the metrics stored in a model's artifact.json.
    """
    from forestlab.pipeline.model_artifact import resolve_model_artifact_from_dir

    try:
        artifact = resolve_model_artifact_from_dir(artifact_dir)
    except FileNotFoundError as e:
        _fail(e)

    print(f"[bold]{artifact.model_id}[/bold] ({artifact.spec.family}) run={artifact.run_id}")
    for key, value in (artifact.metrics or {}).items():
        print(f"  {key}: {value}")
    if artifact.saved_model_path:
        print(f"  saved model: {artifact.saved_model_path}")


if __name__ == "__main__":
    app()

# python -m forestlab.cli train --config forestlab/config/base.yml
