#!filepath: forestlab/observability/instrumentation.py
from __future__ import annotations

from dataclasses import dataclass
from contextlib import contextmanager
from collections import OrderedDict
from typing import Dict

from forestlab.observability.progress import ProgressReporter
from forestlab.observability.timer import Timer
from forestlab.observability.metrics import MetricRecorder
from forestlab.observability.timeline_reporter import TimelineReporter


@dataclass
class Instrumentation:
    """
    Step timings + per-model timings + metrics + progress.

    - timeline       : step name → seconds; steps do not nest, so the sum is wall time
    - model_timeline : model_id → phase (train / evaluate) → seconds; these run
                       inside a step and are reported beside it, never summed in
    """

    enabled: bool = True

    def __post_init__(self):
        self.progress = ProgressReporter(enabled=self.enabled)
        self._timer = Timer(enabled=self.enabled)
        self.metrics = MetricRecorder(enabled=self.enabled)

        self.timeline: Dict[str, float] = OrderedDict()
        self.model_timeline: Dict[str, Dict[str, float]] = OrderedDict()

    def _timed(self, key: str, sink):
        inst = self

        @contextmanager
        def _ctx():
            if not inst.enabled:
                yield
                return

            inst._timer.start(key)
            try:
                yield
            finally:
                sink(inst._timer.end(key))

        return _ctx()

    def timer(self, name: str):
        """One pipeline step."""
        return self._timed(name, lambda sec: self.timeline.__setitem__(name, sec))

    def model_timer(self, model_id: str, phase: str):
        """One phase of one model, nested inside a step."""

        def _sink(sec: float):
            phases = self.model_timeline.setdefault(model_id, OrderedDict())
            phases[phase] = phases.get(phase, 0.0) + sec

        return self._timed(f"{model_id}:{phase}", _sink)

    def generate_timeline_report(self, run_id: str):
        TimelineReporter(
            self.timeline,
            run_id,
            model_timeline=self.model_timeline,
            metrics=self.metrics,
        ).print()


class NoOpInstrumentation:
    """Used when observability is disabled."""

    def __init__(self):
        self.progress = ProgressReporter(enabled=False)
        self.metrics = MetricRecorder(enabled=False)
        self.timeline: Dict[str, float] = OrderedDict()
        self.model_timeline: Dict[str, Dict[str, float]] = OrderedDict()

    def timer(self, name: str):
        return _NoOpTimer()

    def model_timer(self, model_id: str, phase: str):
        return _NoOpTimer()

    def generate_timeline_report(self, run_id: str):
        pass


class _NoOpTimer:
    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc, tb):
        pass
