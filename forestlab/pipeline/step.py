#!filepath: forestlab/pipeline/step.py
from __future__ import annotations

from typing import Any

from forestlab.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)


class PipelineStep:
    """
    Pipeline step base.

    - Pipeline owns ordering and the step-level timer
    - Step owns semantics; reads / writes the context only
    - Instrumentation is optional; behaviour never depends on it
    """

    stage: str = ""

    def __init__(self, inst: Instrumentation | None = None):
        self.inst: Instrumentation | NoOpInstrumentation = (
            inst if inst is not None else NoOpInstrumentation()
        )

    @property
    def step_name(self) -> str:
        return self.__class__.__name__

    def timed(self):
        """Step wall-time, one timeline entry."""
        return self.inst.timer(self.step_name)

    def run(self, ctx: Any) -> Any:
        raise NotImplementedError
