from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from forestlab.utils.logger import logs


class ModelTrainEngine(ABC):
    """
    Abstract ModelTrainEngine

    Subclasses name the H2O estimator; fitting itself is shared.
    """

    family: str = ""

    def __init__(self, params: Dict[str, Any], *, estimator_cls: Any = None):
        self.params = dict(params)
        self.estimator_cls = estimator_cls or self.default_estimator()

    @abstractmethod
    def default_estimator(self) -> Any:
        raise NotImplementedError

    def build(self, model_id: Optional[str]) -> Any:
        kwargs = dict(self.params)
        if model_id:
            kwargs["model_id"] = model_id
        return self.estimator_cls(**kwargs)

    @logs.catch("model training failed")
    def train(
        self,
        *,
        x: List[str],
        y: str,
        training_frame: Any,
        validation_frame: Any = None,
        model_id: Optional[str] = None,
    ) -> Any:
        """
        Returns the fitted estimator. A validation frame makes early
        stopping score on held-out rows instead of training rows.
        """
        model = self.build(model_id)

        logs.info(
            f"[{self.__class__.__name__}] train model_id={model_id} "
            f"n_features={len(x)} y={y} params={self.params}"
        )

        model.train(
            x=x,
            y=y,
            training_frame=training_frame,
            validation_frame=validation_frame,
        )
        return model
