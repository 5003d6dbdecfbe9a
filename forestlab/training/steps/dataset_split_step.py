# forestlab/training/steps/dataset_split_step.py
from __future__ import annotations

from forestlab.pipeline.step import PipelineStep
from forestlab.training.context import TrainingContext
from forestlab.training.engines.dataset_engine import DatasetEngine
from forestlab.utils.errors import PipelineAbort


class DatasetSplitStep(PipelineStep):
    """
    DatasetSplitStep

    Contract:
    - consumes ctx.frame
    - produces ctx.splits (train / valid / test); test = remainder
    """

    stage = "dataset_split"

    def __init__(self, engine: DatasetEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if ctx.frame is None:
            raise PipelineAbort("no frame to split; DatasetImportStep must run first")

        data_cfg = ctx.cfg.data
        ctx.splits = self.engine.split(
            ctx.frame,
            ratios=data_cfg.split_ratios,
            seed=data_cfg.split_seed,
        )

        for name, n in ctx.splits.row_counts().items():
            ctx.metrics[f"rows_{name}"] = n

        return ctx
