# forestlab/workflows/offline_training.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from forestlab.config.app_config import AppConfig
from forestlab.observability.instrumentation import Instrumentation
from forestlab.training.engines.cluster_engine import H2OClusterEngine
from forestlab.training.engines.dataset_engine import DatasetEngine
from forestlab.training.engines.model_report_engine import ModelReportEngine
from forestlab.training.engines.registry import resolve_model_train_engine
from forestlab.training.pipeline import TrainingPipeline
from forestlab.training.steps.artifact_persist_step import ArtifactPersistStep
from forestlab.training.steps.cluster_init_step import ClusterInitStep
from forestlab.training.steps.dataset_import_step import DatasetImportStep
from forestlab.training.steps.dataset_split_step import DatasetSplitStep
from forestlab.training.steps.model_compare_step import ModelCompareStep
from forestlab.training.steps.model_evaluate_step import ModelEvaluateStep
from forestlab.training.steps.model_report_step import ModelReportStep
from forestlab.training.steps.model_train_step import ModelTrainStep
from forestlab.training.steps.varimp_plot_step import VarImpPlotStep
from forestlab.utils.path import PathManager


def new_run_id(name: str) -> str:
    return f"{name}_{datetime.now():%Y%m%d_%H%M%S}"


def build_offline_training(
    cfg: AppConfig | None = None,
    *,
    backend: Any = None,
    estimator_cls: Any = None,
    inst: Instrumentation | None = None,
) -> TrainingPipeline:
    """
    Offline training workflow: import → split → fit → evaluate → report.

    backend / estimator_cls replace the h2o module and estimator classes
    (tests run without a JVM).
    """
    if cfg is None:
        cfg = AppConfig.load()

    pm = PathManager(cfg.training.artifacts.output_dir)
    inst = inst if inst is not None else Instrumentation()

    cluster_engine = H2OClusterEngine(cfg.cluster, backend=backend)
    dataset_engine = DatasetEngine(backend=backend)

    def resolve(run_cfg):
        return resolve_model_train_engine(run_cfg, estimator_cls=estimator_cls)

    return TrainingPipeline(
        steps=[
            ClusterInitStep(cluster_engine, inst=inst),
            DatasetImportStep(dataset_engine, inst=inst),
            DatasetSplitStep(dataset_engine, inst=inst),
            ModelTrainStep(inst, resolve=resolve),
            ModelEvaluateStep(ModelReportEngine(), inst=inst),
            ModelReportStep(inst),
            VarImpPlotStep(inst),
            ModelCompareStep(inst),
            ArtifactPersistStep(inst, backend=backend),
        ],
        pm=pm,
        inst=inst,
        cfg=cfg,
        cluster_engine=cluster_engine,
    )
