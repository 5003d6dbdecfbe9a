#!filepath: forestlab/observability/timer.py
import time
from typing import Dict


class Timer:
    """
    perf_counter based named timer
    - start(name)
    - end(name) → elapsed seconds (0.0 if never started)
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._start: Dict[str, float] = {}

    def start(self, name: str):
        if not self.enabled:
            return
        self._start[name] = time.perf_counter()

    def end(self, name: str) -> float:
        if not self.enabled or name not in self._start:
            return 0.0
        return time.perf_counter() - self._start.pop(name)
