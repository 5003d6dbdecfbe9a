#!filepath: forestlab/utils/path.py
from pathlib import Path
from typing import Optional

from forestlab.utils.logger import logs


class PathManager:
    """
    Output layout of one training run:

    <output_root>/
     └── runs/
           └── <run_id>/
                 ├── leaderboard.csv
                 ├── artifact.json
                 └── models/
                       └── <model_id>/
                             ├── metrics.json
                             ├── varimp.csv
                             ├── reports/*.png
                             └── h2o/<saved model>
    """

    def __init__(self, output_root: str | Path | None = None):
        self._root: Optional[Path] = (
            Path(output_root).resolve() if output_root is not None else None
        )

    def root(self) -> Path:
        if self._root is None:
            self._root = Path.cwd() / "outputs"
            logs.debug(f"[PathManager] default root = {self._root}")
        return self._root

    # ---------------------------------------------------------
    # run scoped
    # ---------------------------------------------------------
    def runs_dir(self) -> Path:
        return self.root() / "runs"

    def run_dir(self, run_id: str) -> Path:
        return self.runs_dir() / run_id

    def model_dir(self, run_id: str, model_id: str) -> Path:
        return self.run_dir(run_id) / "models" / model_id

    def model_reports_dir(self, run_id: str, model_id: str) -> Path:
        return self.model_dir(run_id, model_id) / "reports"

    def saved_model_dir(self, run_id: str, model_id: str) -> Path:
        return self.model_dir(run_id, model_id) / "h2o"
