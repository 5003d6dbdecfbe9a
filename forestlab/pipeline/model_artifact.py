# forestlab/pipeline/model_artifact.py
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

from forestlab.utils.filesystem import FileSystem


@dataclass(frozen=True)
class ModelSpec:
    family: Literal["random_forest", "gbm"]
    task: Literal["classification"]
    version: str


@dataclass(frozen=True)
class ModelArtifact:
    """
    One fitted model of a run.

    path points to the model's artifact directory, never to a single file.
    saved_model_path is the file written by h2o.save_model (None when
    models are not persisted).
    """

    path: Path
    spec: ModelSpec
    model_id: str
    run_id: str | None = None
    saved_model_path: str | None = None
    metrics: dict[str, Any] | None = None
    created_at: datetime | None = None
    feature_names: list[str] | None = None
    params: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "model_id": self.model_id,
            "run_id": self.run_id,
            "spec": {
                "family": self.spec.family,
                "task": self.spec.task,
                "version": self.spec.version,
            },
            "saved_model_path": self.saved_model_path,
            "metrics": self.metrics or {},
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "feature_names": list(self.feature_names or []),
            "params": dict(self.params),
        }


def write_model_artifact(artifact: ModelArtifact) -> Path:
    return FileSystem.write_json(artifact.path / "artifact.json", artifact.to_dict())


def resolve_model_artifact_from_dir(artifact_dir: Path) -> ModelArtifact:
    """
    Read artifact.json back into a ModelArtifact.
    """
    artifact_dir = Path(artifact_dir)
    meta_path = artifact_dir / "artifact.json"
    if not meta_path.exists():
        raise FileNotFoundError(
            f"[ModelArtifact] artifact.json not found in {artifact_dir}"
        )

    meta = json.loads(meta_path.read_text(encoding="utf-8"))
    created_at = meta.get("created_at")

    return ModelArtifact(
        path=artifact_dir,
        spec=ModelSpec(
            family=meta["spec"]["family"],
            task=meta["spec"]["task"],
            version=meta["spec"]["version"],
        ),
        model_id=meta["model_id"],
        run_id=meta.get("run_id"),
        saved_model_path=meta.get("saved_model_path"),
        metrics=meta.get("metrics"),
        created_at=datetime.fromisoformat(created_at) if created_at else None,
        feature_names=meta.get("feature_names"),
        params=meta.get("params") or {},
    )
