# forestlab/config/training_config.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

StoppingMetric = Literal[
    "AUTO", "deviance", "logloss", "MSE", "RMSE", "MAE", "RMSLE",
    "AUC", "AUCPR", "lift_top_group", "misclassification",
    "mean_per_class_error",
]


class _TreeParams(BaseModel):
    """
    Hyperparameters shared by H2O tree ensembles.

    Only explicitly set fields are forwarded; H2O keeps its own defaults
    for the rest.
    """

    model_config = ConfigDict(extra="forbid")

    ntrees: Optional[int] = Field(default=None, ge=1)
    max_depth: Optional[int] = Field(default=None, ge=0)
    min_rows: Optional[float] = Field(default=None, gt=0)
    nbins: Optional[int] = Field(default=None, ge=1)
    nbins_cats: Optional[int] = Field(default=None, ge=1)
    sample_rate: Optional[float] = Field(default=None, gt=0, le=1)
    col_sample_rate_per_tree: Optional[float] = Field(default=None, gt=0, le=1)
    seed: Optional[int] = None

    # early stopping（rolling window over scoring events）
    stopping_rounds: Optional[int] = Field(default=None, ge=0)
    stopping_tolerance: Optional[float] = Field(default=None, ge=0)
    stopping_metric: Optional[StoppingMetric] = None
    score_each_iteration: Optional[bool] = None
    score_tree_interval: Optional[int] = Field(default=None, ge=0)

    balance_classes: Optional[bool] = None

    def to_h2o(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class RandomForestParams(_TreeParams):
    mtries: Optional[int] = Field(default=None, ge=-2)
    binomial_double_trees: Optional[bool] = None


class GBMParams(_TreeParams):
    learn_rate: Optional[float] = Field(default=None, gt=0, le=1)
    learn_rate_annealing: Optional[float] = Field(default=None, gt=0, le=1)
    col_sample_rate: Optional[float] = Field(default=None, gt=0, le=1)
    distribution: Optional[str] = None


ModelFamily = Literal["random_forest", "gbm"]

PARAMS_BY_FAMILY = {
    "random_forest": RandomForestParams,
    "gbm": GBMParams,
}


class ModelRunConfig(BaseModel):
    """
    One model to fit: family + optional identifier + hyperparameters.
    """

    family: ModelFamily
    model_id: Optional[str] = None
    params: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_params(self) -> "ModelRunConfig":
        # raises ValidationError on unknown / out-of-range keys
        self.hyperparameters()
        return self

    def hyperparameters(self) -> Dict[str, Any]:
        return PARAMS_BY_FAMILY[self.family](**self.params).to_h2o()


class EvaluationConfig(BaseModel):
    hit_ratio_k: int = Field(default=10, ge=1)
    eval_split: Literal["train", "valid", "test"] = "test"
    varimp_top_n: int = Field(default=20, ge=1)


class ArtifactConfig(BaseModel):
    output_dir: str = "outputs"
    save_models: bool = True
    save_predictions: bool = False
    plots: bool = True


class TrainingConfig(BaseModel):
    """
    TrainingConfig（one experiment = one run over several models）
    """

    name: str = "experiment"
    task_type: Literal["classification"] = "classification"
    models: List[ModelRunConfig] = Field(min_length=1)

    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)
    artifacts: ArtifactConfig = Field(default_factory=ArtifactConfig)
