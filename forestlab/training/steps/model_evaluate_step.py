# forestlab/training/steps/model_evaluate_step.py
from __future__ import annotations

from forestlab import logs
from forestlab.pipeline.step import PipelineStep
from forestlab.training.context import TrainingContext
from forestlab.training.engines.model_report_engine import ModelReportEngine
from forestlab.utils.errors import PipelineAbort


class ModelEvaluateStep(PipelineStep):
    """
    ModelEvaluateStep

    Per model:
    - hit-ratio table on the validation split (model selection)
    - accuracy / hit ratios / confusion on the evaluation split
    - variable importance and scoring history

    Does NOT modify ctx.models.
    """

    stage = "model_evaluate"

    def __init__(self, engine: ModelReportEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if not ctx.models:
            logs.warning("[ModelEvaluateStep] no fitted models, skip")
            return ctx
        if ctx.splits is None:
            raise PipelineAbort("no splits to evaluate on")

        eval_cfg = ctx.cfg.training.evaluation
        eval_frame = ctx.splits.get(eval_cfg.eval_split)

        for model_id, state in ctx.models.items():
            with self.inst.model_timer(model_id, "evaluate"):
                evaluation = self.engine.evaluate(
                    model=state.model,
                    frame=eval_frame,
                    target=ctx.y,
                    k=eval_cfg.hit_ratio_k,
                    split=eval_cfg.eval_split,
                    model_id=model_id,
                )
                evaluation.valid_hit_ratios = self.engine.hit_ratios(
                    model=state.model,
                    frame=ctx.splits.valid,
                    target=ctx.y,
                    k=eval_cfg.hit_ratio_k,
                    model_id=model_id,
                )
                evaluation.varimp = self.engine.varimp(
                    state.model, top_n=eval_cfg.varimp_top_n
                )
                evaluation.scoring_history = self.engine.scoring_history(state.model)

            ctx.evaluations[model_id] = evaluation
            ctx.metrics[f"accuracy@{model_id}"] = evaluation.accuracy
            self.inst.metrics.record_model("accuracy", model_id, round(evaluation.accuracy, 6))

            top = evaluation.varimp["variable"].head(3).tolist() if len(evaluation.varimp) else []
            logs.info(
                f"[ModelEvaluateStep] {model_id} "
                f"{eval_cfg.eval_split}_accuracy={evaluation.accuracy:.6f} "
                f"valid_top1={evaluation.summary().get('valid_top1', float('nan')):.6f} "
                f"top_vars={top}"
            )

        return ctx
