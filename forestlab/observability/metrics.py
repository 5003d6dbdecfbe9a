#!filepath: forestlab/observability/metrics.py
from dataclasses import dataclass, field
from typing import Dict, Any

from forestlab.utils.logger import logs


@dataclass
class MetricRecorder:
    """
    Run-level metrics ("rows_train") and per-model ones, stored as
    "<name>@<model_id>" ("accuracy@gbm_covType_v3").
    """

    enabled: bool = True
    metrics: Dict[str, Any] = field(default_factory=dict)

    def record(self, name: str, value: Any):
        if not self.enabled:
            return
        self.metrics[name] = value
        logs.info(f"[Metric] {name} = {value}")

    def record_model(self, name: str, model_id: str, value: Any):
        self.record(f"{name}@{model_id}", value)

    def for_model(self, model_id: str) -> Dict[str, Any]:
        suffix = f"@{model_id}"
        return {
            key[: -len(suffix)]: value
            for key, value in self.metrics.items()
            if key.endswith(suffix)
        }
