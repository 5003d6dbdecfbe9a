#!filepath: forestlab/observability/timeline_reporter.py
from typing import Dict, Optional

from forestlab.observability.metrics import MetricRecorder
from forestlab.utils.logger import logs


class TimelineReporter:
    """
    End-of-run summary:
    - step → elapsed seconds, with the run total
    - per model: train / evaluate seconds and evaluation accuracy
    """

    def __init__(
        self,
        timeline: Dict[str, float],
        run_id: str,
        *,
        model_timeline: Optional[Dict[str, Dict[str, float]]] = None,
        metrics: Optional[MetricRecorder] = None,
    ):
        self.timeline = timeline
        self.run_id = run_id
        self.model_timeline = model_timeline or {}
        self.metrics = metrics

    def print(self):
        logs.info(f"[Timeline] ===== Training timeline for {self.run_id} =====")

        total = 0.0
        for name, sec in self.timeline.items():
            logs.info(f"[Timeline] {str(name):<30} {sec:>8.3f}s")
            total += sec
        logs.info(f"[Timeline] Total{'':<27} {total:>8.3f}s")

        if self.model_timeline:
            logs.info(f"[Timeline] {'model':<24} {'train':>9} {'evaluate':>9} {'accuracy':>9}")
            for model_id, phases in self.model_timeline.items():
                logs.info(
                    f"[Timeline] {model_id:<24} "
                    f"{phases.get('train', 0.0):>8.3f}s "
                    f"{phases.get('evaluate', 0.0):>8.3f}s "
                    f"{self._accuracy(model_id):>9}"
                )

        logs.info("[Timeline] ===========================================")

    def _accuracy(self, model_id: str) -> str:
        if self.metrics is None:
            return "-"
        acc = self.metrics.for_model(model_id).get("accuracy")
        return f"{acc:.4f}" if acc is not None else "-"
