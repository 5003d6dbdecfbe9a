# tests/training/conftest.py
from __future__ import annotations

import pytest

from forestlab.observability.instrumentation import Instrumentation
from forestlab.training.context import TrainingContext
from forestlab.training.engines.dataset_engine import DatasetEngine
from forestlab.training.engines.model_report_engine import ModelReportEngine
from forestlab.training.engines.registry import resolve_model_train_engine
from forestlab.training.steps.dataset_import_step import DatasetImportStep
from forestlab.training.steps.dataset_split_step import DatasetSplitStep
from forestlab.training.steps.model_evaluate_step import ModelEvaluateStep
from forestlab.training.steps.model_train_step import ModelTrainStep
from forestlab.utils.path import PathManager


@pytest.fixture
def training_ctx(app_config, tmp_path) -> TrainingContext:
    """
    Empty TrainingContext bound to the synthetic config.
    """
    return TrainingContext(
        run_id="test_run",
        cfg=app_config,
        inst=Instrumentation(enabled=False),
        pm=PathManager(tmp_path / "outputs"),
    )


@pytest.fixture
def split_ctx(training_ctx, fake_h2o) -> TrainingContext:
    """Frame imported, factors applied, split into train / valid / test."""
    engine = DatasetEngine(backend=fake_h2o)
    ctx = DatasetImportStep(engine).run(training_ctx)
    return DatasetSplitStep(engine).run(ctx)


@pytest.fixture
def fitted_ctx(split_ctx, fake_estimator) -> TrainingContext:
    def resolve(run_cfg):
        return resolve_model_train_engine(run_cfg, estimator_cls=fake_estimator)

    return ModelTrainStep(resolve=resolve).run(split_ctx)


@pytest.fixture
def evaluated_ctx(fitted_ctx) -> TrainingContext:
    return ModelEvaluateStep(ModelReportEngine()).run(fitted_ctx)
