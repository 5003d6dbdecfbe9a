# forestlab/training/pipeline.py
from __future__ import annotations

from typing import List, Optional

from forestlab import logs
from forestlab.observability.instrumentation import Instrumentation
from forestlab.pipeline.step import PipelineStep
from forestlab.training.context import TrainingContext
from forestlab.training.engines.cluster_engine import H2OClusterEngine
from forestlab.utils.errors import PipelineAbort
from forestlab.utils.path import PathManager


class TrainingPipeline:
    """
    TrainingPipeline

    Semantics:
    - Pipeline owns step order and step timing
    - Steps execute semantics
    - the cluster is shut down on success and on failure (when it should be);
      a failed shutdown never hides the step error
    """

    def __init__(
            self,
            *,
            steps: List[PipelineStep],
            pm: PathManager,
            inst: Instrumentation,
            cfg,
            cluster_engine: Optional[H2OClusterEngine] = None,
    ):
        self.steps = steps
        self.pm = pm
        self.inst = inst
        self.cfg = cfg
        self.cluster_engine = cluster_engine

    def run(self, run_id: str) -> TrainingContext:
        logs.info(f"[TrainingPipeline] START run_id={run_id}")

        ctx = TrainingContext(
            run_id=run_id,
            cfg=self.cfg,
            inst=self.inst,
            pm=self.pm,
        )

        try:
            for step in self.steps:
                with step.timed():
                    ctx = step.run(ctx)
        except PipelineAbort as e:
            logs.error(f"[TrainingPipeline][ABORT] {e}")
            self._shutdown(quiet=True)
            raise
        except BaseException:
            self._shutdown(quiet=True)
            raise

        self._shutdown()
        self.inst.generate_timeline_report(run_id)
        logs.info(f"[TrainingPipeline] DONE run_id={run_id}")
        return ctx

    def _shutdown(self, *, quiet: bool = False) -> None:
        """
        quiet=True while a step failure is propagating: a failing shutdown
        is logged and must not replace that error.
        """
        if self.cluster_engine is None:
            return
        if not self.cfg.cluster.should_shutdown():
            logs.info("[TrainingPipeline] leaving cluster running")
            return

        try:
            self.cluster_engine.shutdown()
        except Exception as e:
            if not quiet:
                raise
            logs.warning(f"[TrainingPipeline] cluster shutdown failed: {e!r}")
