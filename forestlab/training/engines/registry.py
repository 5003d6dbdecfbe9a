from typing import Any, Callable, Dict

from forestlab.config.training_config import ModelRunConfig
from forestlab.training.engines.model_train_engine import ModelTrainEngine
from forestlab.training.engines.model.h2o_random_forest_train_engine import (
    H2ORandomForestTrainEngine,
)
from forestlab.training.engines.model.h2o_gbm_train_engine import (
    H2OGradientBoostingTrainEngine,
)
from forestlab.utils.errors import UserInputError

_ENGINE_REGISTRY: Dict[str, Callable[..., ModelTrainEngine]] = {
    "random_forest": H2ORandomForestTrainEngine,
    "gbm": H2OGradientBoostingTrainEngine,
}


def available_families() -> list[str]:
    return sorted(_ENGINE_REGISTRY)


def resolve_model_train_engine(
        run_cfg: ModelRunConfig, *, estimator_cls: Any = None
) -> ModelTrainEngine:
    if run_cfg.family not in _ENGINE_REGISTRY:
        raise UserInputError(
            f"No ModelTrainEngine for {run_cfg.family!r}. "
            f"Available: {', '.join(available_families())}"
        )

    return _ENGINE_REGISTRY[run_cfg.family](
        run_cfg.hyperparameters(), estimator_cls=estimator_cls
    )
