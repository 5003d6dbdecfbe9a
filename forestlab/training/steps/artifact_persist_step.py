# forestlab/training/steps/artifact_persist_step.py
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import h2o

from forestlab import __version__, logs
from forestlab.pipeline.model_artifact import (
    ModelArtifact,
    ModelSpec,
    write_model_artifact,
)
from forestlab.pipeline.step import PipelineStep
from forestlab.training.context import TrainingContext
from forestlab.utils.filesystem import FileSystem


class ArtifactPersistStep(PipelineStep):
    """
    ArtifactPersistStep

    Semantics:
    - h2o.save_model per fitted model (when save_models)
    - artifact.json per model + run-level artifact.json
    - produces ctx.artifacts[model_id]
    """

    stage = "training_finalize"

    def __init__(self, inst=None, *, backend: Any = None):
        super().__init__(inst)
        self.backend = backend if backend is not None else h2o

    def run(self, ctx: TrainingContext) -> TrainingContext:
        if not ctx.models:
            raise RuntimeError("No fitted models to persist")

        cfg = ctx.cfg.training
        run_dir = FileSystem.ensure_dir(ctx.run_dir)

        for model_id, state in ctx.models.items():
            model_dir = FileSystem.ensure_dir(ctx.pm.model_dir(ctx.run_id, model_id))

            saved_path = None
            if cfg.artifacts.save_models:
                saved_path = self.backend.save_model(
                    model=state.model,
                    path=str(ctx.pm.saved_model_dir(ctx.run_id, model_id)),
                    force=True,
                )
                logs.info(f"[ArtifactPersist] saved {model_id} → {saved_path}")

            ev = ctx.evaluations.get(model_id)
            artifact = ModelArtifact(
                path=model_dir,
                spec=ModelSpec(
                    family=state.family,
                    task=cfg.task_type,
                    version=__version__,
                ),
                model_id=model_id,
                run_id=ctx.run_id,
                saved_model_path=str(saved_path) if saved_path else None,
                metrics=ev.summary() if ev else None,
                created_at=datetime.now(timezone.utc),
                feature_names=list(ctx.x),
                params=state.params,
            )
            write_model_artifact(artifact)
            ctx.artifacts[model_id] = artifact

        FileSystem.write_json(
            Path(run_dir) / "artifact.json",
            {
                "run_id": ctx.run_id,
                "experiment": cfg.name,
                "target": ctx.y,
                "features": list(ctx.x),
                "metrics": dict(ctx.metrics),
                "models": sorted(ctx.artifacts),
                "created_at": datetime.now(timezone.utc).isoformat(),
            },
        )
        logs.info(f"[ArtifactPersist] run artifacts: {run_dir}")
        return ctx
