#!filepath: forestlab/utils/filesystem.py
import json
from pathlib import Path
from typing import Any

import pandas as pd

from forestlab.utils.logger import logs


class FileSystem:
    """
    File helpers for run outputs
    - create dirs
    - atomic writes (tmp → rename)
    """

    @staticmethod
    def ensure_dir(path: str | Path) -> Path:
        p = Path(path)
        if not p.exists():
            p.mkdir(parents=True, exist_ok=True)
            logs.debug(f"[FS] mkdir {p}")
        return p

    @staticmethod
    def safe_write_text(path: str | Path, text: str) -> Path:
        """
        Atomic write: tmp file first, then rename over the target.
        """
        path = Path(path)
        FileSystem.ensure_dir(path.parent)

        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)

        logs.debug(f"[FS] wrote {path}")
        return path

    @staticmethod
    def write_json(path: str | Path, payload: Any) -> Path:
        return FileSystem.safe_write_text(
            path, json.dumps(payload, indent=2, ensure_ascii=False, default=str)
        )

    @staticmethod
    def write_csv(path: str | Path, df: pd.DataFrame) -> Path:
        return FileSystem.safe_write_text(path, df.to_csv(index=False))
