# forestlab/training/steps/varimp_plot_step.py
from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from forestlab import logs  # noqa: E402
from forestlab.pipeline.step import PipelineStep  # noqa: E402
from forestlab.training.context import TrainingContext  # noqa: E402
from forestlab.utils.filesystem import FileSystem  # noqa: E402

# scoring_history metric columns, first present one is plotted
_HISTORY_METRICS = (
    "classification_error",
    "logloss",
    "rmse",
)


class VarImpPlotStep(PipelineStep):
    """
    VarImpPlotStep

    Outputs (per model, under models/<model_id>/reports/):
    - varimp.png          : horizontal bar chart of scaled importance
    - scoring_history.png : train / valid metric per scoring event
    """

    stage = "training_report"

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if not ctx.cfg.training.artifacts.plots:
            return ctx

        for model_id, ev in ctx.evaluations.items():
            out_dir = FileSystem.ensure_dir(
                ctx.pm.model_reports_dir(ctx.run_id, model_id)
            )

            if ev.varimp is not None and len(ev.varimp):
                self._plot_varimp(ev.varimp, model_id, out_dir / "varimp.png")

            if ev.scoring_history is not None and len(ev.scoring_history):
                self._plot_history(
                    ev.scoring_history, model_id, out_dir / "scoring_history.png"
                )

        return ctx

    def _plot_varimp(self, varimp, model_id: str, path: Path) -> None:
        df = varimp.iloc[::-1]

        fig = plt.figure(figsize=(8, max(3, 0.3 * len(df))))
        plt.barh(df["variable"].astype(str), df["scaled_importance"])
        plt.title(f"Variable importance: {model_id}")
        plt.xlabel("scaled importance")
        plt.tight_layout()
        fig.savefig(path)
        plt.close(fig)
        logs.info(f"[VarImpPlot] saved {path}")

    def _plot_history(self, history, model_id: str, path: Path) -> None:
        metric = next(
            (m for m in _HISTORY_METRICS if f"training_{m}" in history.columns),
            None,
        )
        if metric is None:
            logs.debug(f"[VarImpPlot] {model_id}: no plottable scoring metric")
            return

        x = history["number_of_trees"] if "number_of_trees" in history.columns else history.index

        fig = plt.figure(figsize=(10, 4))
        plt.plot(x, history[f"training_{metric}"], marker="o", label="train")
        if f"validation_{metric}" in history.columns:
            plt.plot(x, history[f"validation_{metric}"], marker="o", label="valid")
        plt.title(f"Scoring history: {model_id}")
        plt.xlabel("trees")
        plt.ylabel(metric)
        plt.legend()
        plt.grid(True)
        plt.tight_layout()
        fig.savefig(path)
        plt.close(fig)
        logs.info(f"[VarImpPlot] saved {path}")
