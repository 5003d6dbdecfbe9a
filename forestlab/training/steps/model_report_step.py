# forestlab/training/steps/model_report_step.py
from __future__ import annotations

from datetime import datetime, timezone

from forestlab import logs
from forestlab.pipeline.step import PipelineStep
from forestlab.training.context import TrainingContext
from forestlab.utils.filesystem import FileSystem


class ModelReportStep(PipelineStep):
    """
    ModelReportStep

    Persists per-model evaluation output under <run_dir>/models/<model_id>/:
    - metrics.json
    - hit_ratios.csv / valid_hit_ratios.csv
    - confusion.csv
    - varimp.csv
    - scoring_history.csv
    - predictions.parquet (optional)
    """

    stage = "model_report"

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if not ctx.evaluations:
            logs.warning("[ModelReportStep] no evaluations, skip")
            return ctx

        artifacts_cfg = ctx.cfg.training.artifacts

        for model_id, ev in ctx.evaluations.items():
            out_dir = FileSystem.ensure_dir(ctx.pm.model_dir(ctx.run_id, model_id))
            state = ctx.models.get(model_id)

            record = {
                **ev.summary(),
                "run_id": ctx.run_id,
                "family": state.family if state else None,
                "params": state.params if state else {},
                "hit_ratios": ev.hit_ratios.to_dict(orient="records"),
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
            FileSystem.write_json(out_dir / "metrics.json", record)

            FileSystem.write_csv(out_dir / "hit_ratios.csv", ev.hit_ratios)
            if ev.valid_hit_ratios is not None:
                FileSystem.write_csv(out_dir / "valid_hit_ratios.csv", ev.valid_hit_ratios)
            FileSystem.write_csv(out_dir / "confusion.csv", ev.confusion.reset_index())
            if ev.varimp is not None:
                FileSystem.write_csv(out_dir / "varimp.csv", ev.varimp)
            if ev.scoring_history is not None and len(ev.scoring_history):
                FileSystem.write_csv(out_dir / "scoring_history.csv", ev.scoring_history)

            if artifacts_cfg.save_predictions:
                pred_path = out_dir / "predictions.parquet"
                ev.predictions.to_parquet(pred_path, index=False)

            logs.info(f"[ModelReportStep] {model_id} reports saved: {out_dir}")

        return ctx
