# forestlab/training/engines/model/h2o_random_forest_train_engine.py
from __future__ import annotations

from h2o.estimators import H2ORandomForestEstimator

from forestlab.training.engines.model_train_engine import ModelTrainEngine


class H2ORandomForestTrainEngine(ModelTrainEngine):
    """
    Bagged ensemble: independent trees over row / column subsamples,
    class votes averaged.
    """

    family = "random_forest"

    def default_estimator(self):
        return H2ORandomForestEstimator
