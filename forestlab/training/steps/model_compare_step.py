# forestlab/training/steps/model_compare_step.py
from __future__ import annotations

from pathlib import Path

import pandas as pd

from forestlab import logs
from forestlab.pipeline.step import PipelineStep
from forestlab.training.context import TrainingContext
from forestlab.utils.filesystem import FileSystem

LEADERBOARD_COLUMNS = ["rank", "model_id", "family", "split", "accuracy", "valid_top1"]


def build_leaderboard(ctx: TrainingContext) -> pd.DataFrame:
    """
    Accuracy descending; ties keep training order.
    """
    rows = []
    for model_id, ev in ctx.evaluations.items():
        summary = ev.summary()
        state = ctx.models.get(model_id)
        rows.append(
            {
                "model_id": model_id,
                "family": state.family if state else None,
                "split": ev.split,
                "accuracy": summary["accuracy"],
                "valid_top1": summary.get("valid_top1"),
            }
        )

    if not rows:
        return pd.DataFrame(columns=LEADERBOARD_COLUMNS)

    df = pd.DataFrame(rows).sort_values("accuracy", ascending=False, kind="stable")
    df.insert(0, "rank", range(1, len(df) + 1))
    return df.reset_index(drop=True)


class ModelCompareStep(PipelineStep):
    """
    ModelCompareStep

    - leaderboard.csv under the run dir
    - ctx.leaderboard / ctx.metrics["best_model"]
    """

    stage = "training_report"

    def run(self, ctx: TrainingContext) -> TrainingContext:
        board = build_leaderboard(ctx)
        ctx.leaderboard = board

        if board.empty:
            logs.warning("[ModelCompare] no evaluations, leaderboard empty")
            return ctx

        FileSystem.write_csv(Path(ctx.run_dir) / "leaderboard.csv", board)

        best = board.iloc[0]
        ctx.metrics["best_model"] = best["model_id"]
        ctx.metrics["best_accuracy"] = float(best["accuracy"])

        for _, row in board.iterrows():
            logs.info(
                f"[ModelCompare] #{row['rank']} {row['model_id']:<24} "
                f"{row['split']}_accuracy={row['accuracy']:.6f}"
            )
        logs.info(f"[ModelCompare] best={best['model_id']} accuracy={best['accuracy']:.6f}")
        return ctx
