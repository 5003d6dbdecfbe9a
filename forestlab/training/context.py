# forestlab/training/context.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from forestlab.utils.path import PathManager


@dataclass(frozen=True)
class DatasetSplits:
    train: Any
    valid: Any
    test: Any

    def get(self, name: str) -> Any:
        if name not in ("train", "valid", "test"):
            raise KeyError(f"unknown split: {name}")
        return getattr(self, name)

    def row_counts(self) -> Dict[str, int]:
        return {
            "train": int(self.train.nrows),
            "valid": int(self.valid.nrows),
            "test": int(self.test.nrows),
        }


@dataclass
class ModelState:
    model: Any
    model_id: str
    family: str
    params: Dict[str, Any]


@dataclass
class ModelEvaluation:
    """
    Held-out evaluation of one model.

    hit_ratios: rank k → fraction of rows whose true class is in the top-k
    """

    model_id: str
    split: str
    accuracy: float
    hit_ratios: pd.DataFrame
    confusion: pd.DataFrame
    predictions: pd.DataFrame
    valid_hit_ratios: Optional[pd.DataFrame] = None
    varimp: Optional[pd.DataFrame] = None
    scoring_history: Optional[pd.DataFrame] = None

    def summary(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "model_id": self.model_id,
            "split": self.split,
            "accuracy": float(self.accuracy),
            "n_rows": int(len(self.predictions)),
        }
        if self.valid_hit_ratios is not None and len(self.valid_hit_ratios):
            out["valid_top1"] = float(self.valid_hit_ratios["hit_ratio"].iloc[0])
        return out


@dataclass
class TrainingContext:
    """
    One context == one training run. run_id is immutable and mandatory.
    """

    # -------------------------
    # Identity
    # -------------------------
    run_id: str

    # -------------------------
    # Static bindings
    # -------------------------
    cfg: Any
    inst: Any
    pm: PathManager

    # -------------------------
    # Engine / data
    # -------------------------
    cluster: Any = None
    frame: Any = None
    splits: Optional[DatasetSplits] = None
    x: List[str] = field(default_factory=list)
    y: str = ""

    # -------------------------
    # Results
    # -------------------------
    models: Dict[str, ModelState] = field(default_factory=dict)
    evaluations: Dict[str, ModelEvaluation] = field(default_factory=dict)
    leaderboard: Optional[pd.DataFrame] = None
    artifacts: Dict[str, Any] = field(default_factory=dict)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def run_dir(self) -> Path:
        return self.pm.run_dir(self.run_id)
