from .app_config import AppConfig
from .cluster_config import ClusterConfig
from .data_config import DataConfig
from .log_config import LogConfig
from .training_config import (
    ArtifactConfig,
    EvaluationConfig,
    GBMParams,
    ModelRunConfig,
    RandomForestParams,
    TrainingConfig,
)

__all__ = [
    "AppConfig",
    "ArtifactConfig",
    "ClusterConfig",
    "DataConfig",
    "EvaluationConfig",
    "GBMParams",
    "LogConfig",
    "ModelRunConfig",
    "RandomForestParams",
    "TrainingConfig",
]
