#!filepath: forestlab/observability/progress.py
from typing import Optional

from forestlab.utils.logger import logs


class ProgressReporter:
    """
    Log-line progress over the configured models (one fit per update).
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def start(self, task: str, total: int, unit: str = ""):
        if not self.enabled:
            return
        logs.info(f"[Progress] {task} started total={total} {unit}".rstrip())

    def update(self, task: str, current: int, total: int, item: Optional[str] = None):
        if not self.enabled:
            return
        pct = 100.0 * current / total if total else 100.0
        last = f" last={item}" if item else ""
        logs.info(f"[Progress] {task}: {current}/{total} ({pct:.0f}%){last}")

    def done(self, task: str):
        if not self.enabled:
            return
        logs.info(f"[Progress] {task} done")
