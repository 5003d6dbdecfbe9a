# tests/training/engines/test_dataset_engine.py
import pandas as pd
import pytest

from forestlab.config.data_config import DataConfig
from forestlab.training.engines.dataset_engine import (
    DatasetEngine,
    check_split_ratios,
    is_remote_path,
    resolve_features,
)
from forestlab.utils.errors import PipelineAbort, UserInputError


COLUMNS = ["x1", "x2", "cat", "row_id", "label"]


def _cfg(**kw) -> DataConfig:
    base = dict(path="x.csv", target="label")
    base.update(kw)
    return DataConfig(**base)


# ----------------------------------------------------------------------
# import
# ----------------------------------------------------------------------
def test_import_frame(fake_h2o, csv_path):
    frame = DatasetEngine(backend=fake_h2o).import_frame(str(csv_path))

    assert frame.nrows == 300
    assert frame.columns == COLUMNS
    assert fake_h2o.imported == [str(csv_path)]


def test_import_missing_local_file(fake_h2o, tmp_path):
    with pytest.raises(UserInputError):
        DatasetEngine(backend=fake_h2o).import_frame(str(tmp_path / "missing.csv"))
    assert fake_h2o.imported == []


def test_import_empty_frame(fake_h2o, tmp_path):
    empty = tmp_path / "empty.csv"
    pd.DataFrame(columns=COLUMNS).to_csv(empty, index=False)

    with pytest.raises(PipelineAbort):
        DatasetEngine(backend=fake_h2o).import_frame(str(empty))


def test_remote_paths_skip_local_check():
    assert is_remote_path("https://h2o-public-test-data.s3.amazonaws.com/covtype.full.csv")
    assert is_remote_path("s3://bucket/key.csv")
    assert not is_remote_path("/data/covtype.full.csv")
    assert not is_remote_path("data/covtype.full.csv")


# ----------------------------------------------------------------------
# prepare / features
# ----------------------------------------------------------------------
def test_prepare_factors_target_and_categoricals(fake_h2o, make_frame, synthetic_df):
    frame = make_frame(synthetic_df)
    cfg = _cfg(categorical_columns=["cat"])

    DatasetEngine(backend=fake_h2o).prepare(frame, cfg)

    assert frame.factors == {"cat", "label"}


def test_prepare_keeps_numeric_target_when_disabled(fake_h2o, make_frame, synthetic_df):
    frame = make_frame(synthetic_df)

    DatasetEngine(backend=fake_h2o).prepare(frame, _cfg(target_as_factor=False))

    assert frame.factors == set()


def test_prepare_unknown_target(fake_h2o, make_frame, synthetic_df):
    with pytest.raises(UserInputError, match="target"):
        DatasetEngine(backend=fake_h2o).prepare(make_frame(synthetic_df), _cfg(target="Cover_Type"))


def test_prepare_unknown_categorical(fake_h2o, make_frame, synthetic_df):
    with pytest.raises(UserInputError, match="categorical"):
        DatasetEngine(backend=fake_h2o).prepare(
            make_frame(synthetic_df), _cfg(categorical_columns=["nope"])
        )


def test_features_default_excludes_target_and_ignored():
    cfg = _cfg(ignore_columns=["row_id"])
    assert resolve_features(COLUMNS, cfg) == ["x1", "x2", "cat"]


def test_explicit_features():
    assert resolve_features(COLUMNS, _cfg(features=["x2", "x1"])) == ["x2", "x1"]


def test_explicit_features_must_exist():
    with pytest.raises(UserInputError, match="feature"):
        resolve_features(COLUMNS, _cfg(features=["x9"]))


def test_target_cannot_be_feature():
    with pytest.raises(UserInputError):
        resolve_features(COLUMNS, _cfg(features=["x1", "label"]))


def test_no_features_left():
    with pytest.raises(UserInputError):
        resolve_features(["label", "row_id"], _cfg(ignore_columns=["row_id"]))


# ----------------------------------------------------------------------
# split
# ----------------------------------------------------------------------
def test_split_partitions_all_rows(fake_h2o, make_frame, synthetic_df):
    splits = DatasetEngine(backend=fake_h2o).split(make_frame(synthetic_df), [0.6, 0.2], seed=1234)
    counts = splits.row_counts()

    assert sum(counts.values()) == len(synthetic_df)
    assert counts["train"] > counts["valid"] > 0
    assert counts["test"] > 0

    ids = pd.concat([splits.get(n).df["row_id"] for n in ("train", "valid", "test")])
    assert ids.is_unique


def test_split_same_seed_same_rows(fake_h2o, make_frame, synthetic_df):
    engine = DatasetEngine(backend=fake_h2o)
    a = engine.split(make_frame(synthetic_df), [0.6, 0.2], seed=42)
    b = engine.split(make_frame(synthetic_df), [0.6, 0.2], seed=42)

    assert a.train.df["row_id"].tolist() == b.train.df["row_id"].tolist()
    assert a.test.df["row_id"].tolist() == b.test.df["row_id"].tolist()


def test_split_empty_part_aborts(fake_h2o, make_frame, synthetic_df):
    tiny = make_frame(synthetic_df.head(2))
    with pytest.raises(PipelineAbort):
        DatasetEngine(backend=fake_h2o).split(tiny, [0.98, 0.01], seed=1)


@pytest.mark.parametrize("ratios", [[0.5], [0.5, 0.5], [0.0, 0.2], [1.2, 0.1]])
def test_bad_ratios(ratios):
    with pytest.raises(UserInputError):
        check_split_ratios(ratios)


def test_split_get_unknown_name(fake_h2o, make_frame, synthetic_df):
    splits = DatasetEngine(backend=fake_h2o).split(make_frame(synthetic_df), [0.6, 0.2], seed=1)
    with pytest.raises(KeyError):
        splits.get("holdout")
