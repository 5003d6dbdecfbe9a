# forestlab/training/engines/model_report_engine.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

import numpy as np
import pandas as pd
from sklearn.metrics import accuracy_score, confusion_matrix

from forestlab.training.context import ModelEvaluation
from forestlab.utils.logger import logs

PREDICT_COLUMN = "predict"
VARIMP_COLUMNS = ["variable", "relative_importance", "scaled_importance", "percentage"]


class ModelReportEngine:
    """
    ModelReportEngine

    Responsibility:
    - score a fitted model on an H2OFrame (predict runs inside the engine)
    - pull predictions / truth back as pandas
    - compute accuracy, accuracy-at-rank, confusion
    - read variable importance / scoring history off the model

    Pure w.r.t. the TrainingContext; returns values only.
    """

    def predict(self, model: Any, frame: Any) -> pd.DataFrame:
        return to_pandas(model.predict(frame))

    def actual(self, frame: Any, target: str) -> pd.Series:
        return to_pandas(frame[target])[target]

    def evaluate(
        self,
        *,
        model: Any,
        frame: Any,
        target: str,
        k: int,
        split: str,
        model_id: str,
    ) -> ModelEvaluation:
        preds, truth = self._scored_rows(model, frame, target, model_id)

        acc = accuracy(preds[PREDICT_COLUMN], truth)
        hits = hit_ratio_table(preds, truth, k)
        conf = confusion(preds[PREDICT_COLUMN], truth)

        logs.info(
            f"[ModelReportEngine] {model_id} split={split} rows={len(truth)} "
            f"accuracy={acc:.6f}"
        )

        return ModelEvaluation(
            model_id=model_id,
            split=split,
            accuracy=acc,
            hit_ratios=hits,
            confusion=conf,
            predictions=preds,
        )

    def hit_ratios(
        self, *, model: Any, frame: Any, target: str, k: int, model_id: str = ""
    ) -> pd.DataFrame:
        preds, truth = self._scored_rows(model, frame, target, model_id)
        return hit_ratio_table(preds, truth, k)

    def _scored_rows(self, model: Any, frame: Any, target: str, model_id: str):
        """
        Predictions and truth for rows that carry a label; unlabelled rows
        are left out of every metric, as H2O does.
        """
        preds = self.predict(model, frame)
        truth = self.actual(frame, target)

        if len(preds) != len(truth):
            raise ValueError(
                f"[ModelReportEngine] {model_id}: {len(preds)} predictions "
                f"for {len(truth)} rows"
            )

        labelled = labelled_mask(truth)
        dropped = int((~labelled).sum())
        if dropped:
            logs.warning(
                f"[ModelReportEngine] {model_id}: {dropped} row(s) without "
                f"{target} skipped"
            )
            preds = preds.loc[labelled].reset_index(drop=True)
            truth = truth.loc[labelled].reset_index(drop=True)

        return preds, truth

    # ------------------------------------------------------------------
    # Model inspection
    # ------------------------------------------------------------------
    def varimp(self, model: Any, top_n: int | None = None) -> pd.DataFrame:
        raw = model.varimp(use_pandas=True)
        if raw is None:
            return pd.DataFrame(columns=VARIMP_COLUMNS)

        df = raw if isinstance(raw, pd.DataFrame) else pd.DataFrame(raw, columns=VARIMP_COLUMNS)
        df = df.sort_values("relative_importance", ascending=False).reset_index(drop=True)
        if top_n is not None:
            df = df.head(top_n)
        return df

    def scoring_history(self, model: Any) -> pd.DataFrame:
        try:
            raw = model.scoring_history()
        except AttributeError:
            return pd.DataFrame()

        if raw is None:
            return pd.DataFrame()
        return to_pandas(raw)


# ----------------------------------------------------------------------
# Pure metrics
# ----------------------------------------------------------------------
def to_pandas(obj: Any) -> pd.DataFrame:
    """H2OFrame / H2OTwoDimTable / DataFrame → DataFrame."""
    if isinstance(obj, pd.DataFrame):
        return obj
    if hasattr(obj, "as_data_frame"):
        try:
            return obj.as_data_frame(use_pandas=True)
        except TypeError:
            return obj.as_data_frame()
    return pd.DataFrame(obj)


def normalize_labels(values: Iterable[Any]) -> pd.Series:
    """
    Class labels as strings; integral floats lose their ".0" so that
    factor levels read back as 1 / 1.0 / "1" compare equal.
    """

    def _one(v: Any) -> str:
        if isinstance(v, (float, np.floating)) and float(v).is_integer():
            return str(int(v))
        if isinstance(v, (np.integer,)):
            return str(int(v))
        return str(v)

    return pd.Series([_one(v) for v in values], dtype=object)


def labelled_mask(actual: Iterable[Any]) -> np.ndarray:
    """True where the row carries a class label (not None / NaN)."""
    return ~pd.isna(pd.Series(list(actual), dtype=object)).to_numpy()


def label_sort_key(label: str):
    try:
        value = float(label)
    except ValueError:
        return (1, 0.0, label)

    if np.isnan(value):
        raise ValueError("missing label cannot be ordered; drop unlabelled rows first")
    return (0, value, label)


def accuracy(predicted: Sequence[Any], actual: Sequence[Any]) -> float:
    """Fraction of labelled rows predicted correctly."""
    if len(predicted) != len(actual):
        raise ValueError(f"length mismatch: {len(predicted)} vs {len(actual)}")

    labelled = labelled_mask(actual)
    pred = normalize_labels(predicted)[labelled]
    truth = normalize_labels(actual)[labelled]
    if len(truth) == 0:
        raise ValueError("accuracy of an empty set is undefined")

    return float(accuracy_score(truth, pred))


def probability_columns(pred_df: pd.DataFrame, known_labels: Iterable[str]) -> Dict[str, str]:
    """
    Map probability column → class label.

    H2O prefixes numeric levels with "p" (level "3" → column "p3").
    """
    known = set(known_labels)
    out: Dict[str, str] = {}
    for col in pred_df.columns:
        if col == PREDICT_COLUMN:
            continue
        name = str(col)
        if name in known:
            out[col] = name
        elif name.startswith("p") and name[1:] in known:
            out[col] = name[1:]
        else:
            out[col] = name
    return out


def hit_ratio_table(pred_df: pd.DataFrame, actual: Sequence[Any], k: int) -> pd.DataFrame:
    """
    Accuracy-at-rank: for r = 1..k, the fraction of rows whose true class
    is among the r most probable classes. Non-decreasing in r.
    """
    if len(pred_df) != len(actual):
        raise ValueError(f"length mismatch: {len(pred_df)} vs {len(actual)}")
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")

    labelled = labelled_mask(actual)
    pred_df = pred_df[labelled]
    truth = normalize_labels(actual)[labelled].reset_index(drop=True)
    if len(truth) == 0:
        raise ValueError("hit ratios of an empty set are undefined")

    known = set(truth)
    if PREDICT_COLUMN in pred_df.columns:
        known |= set(normalize_labels(pred_df[PREDICT_COLUMN]))

    mapping = probability_columns(pred_df, known)
    if not mapping:
        raise ValueError("prediction frame has no probability columns")

    prob_cols: List[Any] = list(mapping)
    labels = np.array([mapping[c] for c in prob_cols], dtype=object)

    probs = pred_df[prob_cols].to_numpy(dtype=float)
    order = np.argsort(-probs, axis=1, kind="stable")
    ranked = labels[order]

    # position of the true class in each row's ranking; n_classes if absent
    hits = ranked == truth.to_numpy(dtype=object)[:, None]
    position = np.where(hits.any(axis=1), hits.argmax(axis=1), len(labels))

    k = min(k, len(labels))
    ratios = [float(np.mean(position < r)) for r in range(1, k + 1)]
    return pd.DataFrame({"k": list(range(1, k + 1)), "hit_ratio": ratios})


def confusion(predicted: Sequence[Any], actual: Sequence[Any]) -> pd.DataFrame:
    """Rows: actual class, columns: predicted class. Unlabelled rows are skipped."""
    labelled = labelled_mask(actual)
    pred = normalize_labels(predicted)[labelled]
    truth = normalize_labels(actual)[labelled]
    labels = sorted(set(truth) | set(pred), key=label_sort_key)

    matrix = confusion_matrix(truth, pred, labels=labels)
    df = pd.DataFrame(matrix, index=labels, columns=labels)
    df.index.name = "actual"
    df.columns.name = "predicted"
    return df
