# forestlab/training/steps/cluster_init_step.py
from __future__ import annotations

from forestlab.pipeline.step import PipelineStep
from forestlab.training.context import TrainingContext
from forestlab.training.engines.cluster_engine import H2OClusterEngine


class ClusterInitStep(PipelineStep):
    """
    ClusterInitStep

    Contract:
    - produces ctx.cluster
    - the pipeline owns shutdown (TrainingPipeline._shutdown)
    """

    stage = "cluster_init"

    def __init__(self, engine: H2OClusterEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: TrainingContext) -> TrainingContext:
        ctx.cluster = self.engine.start()
        return ctx
