# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import numpy as np
import pandas as pd
import pytest
from loguru import logger

from forestlab.config.app_config import AppConfig


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


# =============================================================================
# Fake h2o backend (pandas-backed, no JVM)
# =============================================================================

class FakeFrame:
    """
    Minimal H2OFrame surface used by forestlab:
    columns / nrows / [] / []= / asfactor / split_frame / as_data_frame
    """

    def __init__(self, df: pd.DataFrame):
        self.df = df.reset_index(drop=True)
        self.factors: set[str] = set()

    @property
    def columns(self) -> List[str]:
        return list(self.df.columns)

    @property
    def nrows(self) -> int:
        return len(self.df)

    def __getitem__(self, col: str) -> "FakeFrame":
        sub = FakeFrame(self.df[[col]])
        if col in self.factors:
            sub.factors.add(col)
        return sub

    def __setitem__(self, col: str, value: "FakeFrame") -> None:
        self.df[col] = value.df.iloc[:, 0].to_numpy()
        if col in value.factors:
            self.factors.add(col)

    def asfactor(self) -> "FakeFrame":
        out = FakeFrame(self.df.astype(str))
        out.factors = set(self.df.columns)
        return out

    def split_frame(self, ratios: List[float], seed: int) -> List["FakeFrame"]:
        u = np.random.default_rng(seed).random(len(self.df))
        c1, c2 = ratios[0], ratios[0] + ratios[1]
        parts = []
        for mask in (u < c1, (u >= c1) & (u < c2), u >= c2):
            part = FakeFrame(self.df.loc[mask])
            part.factors = set(self.factors)
            parts.append(part)
        return parts

    def as_data_frame(self, use_pandas: bool = True) -> pd.DataFrame:
        return self.df.copy()


class FakeEstimator:
    """
    Records constructor / train arguments. Predicts "b" when x1 > 0.5,
    which matches the synthetic dataset up to its label noise.
    """

    instances: List["FakeEstimator"] = []

    def __init__(self, **params):
        self.params = params
        self.model_id = params.get("model_id")
        self.train_kwargs: Dict[str, Any] = {}
        FakeEstimator.instances.append(self)

    def train(self, x=None, y=None, training_frame=None, validation_frame=None):
        self.train_kwargs = dict(
            x=x, y=y, training_frame=training_frame, validation_frame=validation_frame
        )
        self.x = list(x)

    def predict(self, frame: FakeFrame) -> FakeFrame:
        p_b = frame.df["x1"].astype(float).clip(0, 1).to_numpy()
        return FakeFrame(
            pd.DataFrame(
                {
                    "predict": np.where(p_b > 0.5, "b", "a"),
                    "a": 1 - p_b,
                    "b": p_b,
                }
            )
        )

    def varimp(self, use_pandas: bool = False):
        n = len(self.x)
        rel = np.arange(n, 0, -1, dtype=float)
        return pd.DataFrame(
            {
                "variable": self.x,
                "relative_importance": rel,
                "scaled_importance": rel / rel.max(),
                "percentage": rel / rel.sum(),
            }
        )

    def scoring_history(self):
        trees = [0, 1, 2, 3]
        return pd.DataFrame(
            {
                "number_of_trees": trees,
                "training_classification_error": [0.5, 0.2, 0.1, 0.1],
                "validation_classification_error": [0.5, 0.25, 0.15, 0.15],
            }
        )


class FakeCluster:
    cloud_name = "fake-cluster"
    cloud_size = 1

    def __init__(self):
        self.shutdown_calls: List[dict] = []

    def shutdown(self, prompt: bool = True):
        self.shutdown_calls.append({"prompt": prompt})


class FakeH2O:
    """Stands in for the `h2o` module."""

    def __init__(self, fail_init: int = 0):
        self.fail_init = fail_init
        self.init_calls: List[dict] = []
        self.imported: List[str] = []
        self.saved: List[str] = []
        self._cluster: FakeCluster | None = None

    def init(self, **kwargs):
        self.init_calls.append(kwargs)
        if self.fail_init > 0:
            self.fail_init -= 1
            raise ConnectionError("cannot reach cluster")
        self._cluster = FakeCluster()

    def cluster(self):
        return self._cluster

    def import_file(self, path: str) -> FakeFrame:
        self.imported.append(path)
        return FakeFrame(pd.read_csv(path))

    def save_model(self, model, path: str, force: bool = False) -> str:
        out = Path(path)
        out.mkdir(parents=True, exist_ok=True)
        target = out / (model.model_id or "model")
        target.write_text("fake h2o model", encoding="utf-8")
        self.saved.append(str(target))
        return str(target)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_h2o() -> FakeH2O:
    return FakeH2O()


@pytest.fixture
def make_h2o():
    return FakeH2O


@pytest.fixture
def fake_estimator():
    FakeEstimator.instances = []
    return FakeEstimator


@pytest.fixture
def make_frame():
    return FakeFrame


def _synthetic(n: int = 300, seed: int = 7) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    x1 = rng.random(n)
    label = np.where(x1 >= 0.5, "b", "a")
    flip = rng.random(n) < 0.05
    label = np.where(flip, np.where(label == "a", "b", "a"), label)
    return pd.DataFrame(
        {
            "x1": x1.round(4),
            "x2": rng.normal(size=n).round(4),
            "cat": rng.choice(["u", "v", "w"], size=n),
            "row_id": np.arange(n),
            "label": label,
        }
    )


@pytest.fixture
def synthetic_df() -> pd.DataFrame:
    return _synthetic()


@pytest.fixture
def csv_path(tmp_path: Path, synthetic_df: pd.DataFrame) -> Path:
    p = tmp_path / "data" / "synthetic.csv"
    p.parent.mkdir(parents=True)
    synthetic_df.to_csv(p, index=False)
    return p


@pytest.fixture
def app_config_dict(tmp_path: Path, csv_path: Path) -> dict:
    return {
        "log": {"dir": str(tmp_path / "logs"), "level": "DEBUG"},
        "cluster": {"nthreads": 2, "max_mem_size": "1G", "connect_attempts": 2, "connect_delay": 0},
        "data": {
            "path": str(csv_path),
            "target": "label",
            "ignore_columns": ["row_id"],
            "categorical_columns": ["cat"],
            "split_ratios": [0.6, 0.2],
            "split_seed": 1234,
        },
        "training": {
            "name": "synthetic",
            "models": [
                {"family": "random_forest", "model_id": "rf_v1",
                 "params": {"ntrees": 20, "stopping_rounds": 2, "score_each_iteration": True, "seed": 1}},
                {"family": "gbm", "model_id": "gbm_v1",
                 "params": {"ntrees": 10, "learn_rate": 0.2, "max_depth": 4,
                            "sample_rate": 0.7, "col_sample_rate": 0.7,
                            "stopping_rounds": 2, "stopping_tolerance": 0.01, "seed": 2}},
            ],
            "evaluation": {"hit_ratio_k": 3, "eval_split": "test", "varimp_top_n": 10},
            "artifacts": {"output_dir": str(tmp_path / "outputs"), "save_models": True,
                          "save_predictions": True, "plots": True},
        },
    }


@pytest.fixture
def app_config(app_config_dict: dict) -> AppConfig:
    return AppConfig(**app_config_dict)
