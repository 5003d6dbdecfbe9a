# forestlab/training/engines/dataset_engine.py
from __future__ import annotations

import os
from typing import Any, List, Sequence
from urllib.parse import urlparse

import h2o

from forestlab.config.data_config import DataConfig
from forestlab.training.context import DatasetSplits
from forestlab.utils.errors import PipelineAbort, UserInputError
from forestlab.utils.logger import logs

_REMOTE_SCHEMES = {"http", "https", "s3", "s3a", "s3n", "hdfs", "gs", "ftp"}


class DatasetEngine:
    """
    DatasetEngine

    Responsibility:
    - import a delimited file into an H2OFrame
    - factor conversion (categoricals / target)
    - feature resolution
    - seeded train / valid / test split

    Contract:
    - never touches row data; everything runs inside the engine
    """

    def __init__(self, *, backend: Any = None):
        self.backend = backend if backend is not None else h2o

    # ======================================================================
    # Import
    # ======================================================================
    def import_frame(self, path: str) -> Any:
        if not is_remote_path(path) and not os.path.exists(path):
            raise UserInputError(f"data file not found: {path}")

        logs.info(f"[DatasetEngine] import_file {path}")
        frame = self.backend.import_file(path)

        if frame is None or int(frame.nrows) == 0:
            raise PipelineAbort(f"imported frame is empty: {path}")

        logs.info(
            f"[DatasetEngine] imported rows={frame.nrows} cols={len(frame.columns)}"
        )
        return frame

    # ======================================================================
    # Prepare
    # ======================================================================
    def prepare(self, frame: Any, cfg: DataConfig) -> Any:
        columns = list(frame.columns)
        check_columns_exist(columns, [cfg.target], what="target")
        check_columns_exist(columns, cfg.categorical_columns, what="categorical")
        check_columns_exist(columns, cfg.ignore_columns, what="ignored")

        to_factor: List[str] = list(cfg.categorical_columns)
        if cfg.target_as_factor and cfg.target not in to_factor:
            to_factor.append(cfg.target)

        for col in to_factor:
            frame[col] = frame[col].asfactor()
            logs.debug(f"[DatasetEngine] asfactor {col}")

        return frame

    def resolve_features(self, columns: Sequence[str], cfg: DataConfig) -> List[str]:
        return resolve_features(columns, cfg)

    # ======================================================================
    # Split
    # ======================================================================
    def split(self, frame: Any, ratios: Sequence[float], seed: int) -> DatasetSplits:
        check_split_ratios(ratios)

        parts = frame.split_frame(ratios=list(ratios), seed=seed)
        if len(parts) != 3:
            raise PipelineAbort(f"split_frame returned {len(parts)} parts, expected 3")

        splits = DatasetSplits(train=parts[0], valid=parts[1], test=parts[2])

        counts = splits.row_counts()
        logs.info(f"[DatasetEngine] split ratios={list(ratios)} seed={seed} rows={counts}")

        empty = [name for name, n in counts.items() if n == 0]
        if empty:
            raise PipelineAbort(f"empty split(s) {empty}; ratios={list(ratios)}")

        return splits


# ----------------------------------------------------------------------
# Pure helpers (no engine access)
# ----------------------------------------------------------------------
def is_remote_path(path: str) -> bool:
    return urlparse(path).scheme.lower() in _REMOTE_SCHEMES


def check_columns_exist(columns: Sequence[str], wanted: Sequence[str], *, what: str) -> None:
    missing = [c for c in wanted if c not in columns]
    if missing:
        raise UserInputError(f"unknown {what} column(s): {missing}")


def check_split_ratios(ratios: Sequence[float]) -> None:
    if len(ratios) != 2:
        raise UserInputError(f"expected 2 split ratios, got {list(ratios)}")
    if any(r <= 0 or r >= 1 for r in ratios):
        raise UserInputError(f"split ratios must lie in (0, 1): {list(ratios)}")
    if sum(ratios) >= 1:
        raise UserInputError(f"split ratios must sum to < 1: {list(ratios)}")


def resolve_features(columns: Sequence[str], cfg: DataConfig) -> List[str]:
    """
    Explicit features win; otherwise every column except target / ignored,
    in frame order.
    """
    if cfg.features is not None:
        check_columns_exist(columns, cfg.features, what="feature")
        if cfg.target in cfg.features:
            raise UserInputError(f"target {cfg.target!r} listed as a feature")
        features = list(cfg.features)
    else:
        excluded = set(cfg.ignore_columns) | {cfg.target}
        features = [c for c in columns if c not in excluded]

    if not features:
        raise UserInputError("no feature columns left after exclusions")
    return features
