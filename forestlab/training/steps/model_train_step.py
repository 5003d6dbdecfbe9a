# forestlab/training/steps/model_train_step.py
from __future__ import annotations

from collections import Counter
from typing import Callable, List

from forestlab import logs
from forestlab.config.training_config import ModelRunConfig
from forestlab.pipeline.step import PipelineStep
from forestlab.training.context import ModelState, TrainingContext
from forestlab.training.engines.model_train_engine import ModelTrainEngine
from forestlab.training.engines.registry import resolve_model_train_engine
from forestlab.utils.errors import PipelineAbort, UserInputError


def default_model_id(experiment: str, run_cfg: ModelRunConfig, index: int) -> str:
    return f"{experiment}_{run_cfg.family}_v{index}"


def resolve_model_ids(experiment: str, runs: List[ModelRunConfig]) -> List[str]:
    ids = [
        r.model_id or default_model_id(experiment, r, i)
        for i, r in enumerate(runs, start=1)
    ]
    dups = sorted(i for i, n in Counter(ids).items() if n > 1)
    if dups:
        raise UserInputError(f"duplicate model_id(s): {dups}")
    return ids


class ModelTrainStep(PipelineStep):
    """
    ModelTrainStep

    Contract:
    - consumes ctx.splits.train (fit) / ctx.splits.valid (early stopping)
    - produces ctx.models[model_id] for every configured run, in order
    """

    stage = "model_train"

    def __init__(
        self,
        inst=None,
        *,
        resolve: Callable[[ModelRunConfig], ModelTrainEngine] = resolve_model_train_engine,
    ):
        super().__init__(inst)
        self.resolve = resolve

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if ctx.splits is None:
            raise PipelineAbort("no splits; DatasetSplitStep must run first")

        cfg = ctx.cfg.training
        runs = list(cfg.models)
        ids = resolve_model_ids(cfg.name, runs)

        self.inst.progress.start("train", len(runs), "models")

        for i, (run_cfg, model_id) in enumerate(zip(runs, ids), start=1):
            engine = self.resolve(run_cfg)

            with self.inst.model_timer(model_id, "train"):
                model = engine.train(
                    x=ctx.x,
                    y=ctx.y,
                    training_frame=ctx.splits.train,
                    validation_frame=ctx.splits.valid,
                    model_id=model_id,
                )

            ctx.models[model_id] = ModelState(
                model=model,
                model_id=model_id,
                family=run_cfg.family,
                params=run_cfg.hyperparameters(),
            )
            logs.info(f"[ModelTrainStep] fitted {model_id} ({run_cfg.family})")
            self.inst.progress.update("train", i, len(runs), model_id)

        self.inst.progress.done("train")
        return ctx
