# forestlab/training/steps/dataset_import_step.py
from __future__ import annotations

from forestlab import logs
from forestlab.pipeline.step import PipelineStep
from forestlab.training.context import TrainingContext
from forestlab.training.engines.dataset_engine import DatasetEngine


class DatasetImportStep(PipelineStep):
    """
    DatasetImportStep

    Contract:
    - produces ctx.frame (factors applied), ctx.x, ctx.y
    - no splitting here
    """

    stage = "dataset_import"

    def __init__(self, engine: DatasetEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: TrainingContext) -> TrainingContext:
        data_cfg = ctx.cfg.data

        frame = self.engine.import_frame(data_cfg.path)
        frame = self.engine.prepare(frame, data_cfg)

        ctx.frame = frame
        ctx.y = data_cfg.target
        ctx.x = self.engine.resolve_features(list(frame.columns), data_cfg)

        ctx.metrics["rows"] = int(frame.nrows)
        ctx.metrics["n_features"] = len(ctx.x)
        self.inst.metrics.record("rows", int(frame.nrows))

        logs.info(
            f"[DatasetImportStep] y={ctx.y} n_features={len(ctx.x)} "
            f"features={ctx.x[:5]}{'...' if len(ctx.x) > 5 else ''}"
        )
        return ctx
