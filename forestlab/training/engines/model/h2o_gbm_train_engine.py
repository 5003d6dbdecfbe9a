# forestlab/training/engines/model/h2o_gbm_train_engine.py
from __future__ import annotations

from h2o.estimators import H2OGradientBoostingEstimator

from forestlab.training.engines.model_train_engine import ModelTrainEngine


class H2OGradientBoostingTrainEngine(ModelTrainEngine):
    """
    Boosted ensemble: each tree fit to the residual of the current model,
    shrunk by learn_rate.
    """

    family = "gbm"

    def default_estimator(self):
        return H2OGradientBoostingEstimator
