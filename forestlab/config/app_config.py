#!filepath: forestlab/config/app_config.py
import os

import yaml
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from .log_config import LogConfig
from .cluster_config import ClusterConfig
from .data_config import DataConfig
from .training_config import TrainingConfig


def project_root() -> str:
    """
    forestlab/config/app_config.py → forestlab/config → forestlab → project_root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


def default_config_path() -> str:
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), "base.yml")


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    cluster: ClusterConfig = Field(default_factory=ClusterConfig)
    data: DataConfig
    training: TrainingConfig

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        YAML config + .env
        - default: forestlab/config/base.yml
        - FORESTLAB_H2O_URL overrides cluster.url
        - FORESTLAB_OUTPUT_DIR overrides training.artifacts.output_dir
        """
        load_dotenv(os.path.join(project_root(), ".env"))

        if path is None:
            path = default_config_path()

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        url = os.getenv("FORESTLAB_H2O_URL")
        if url:
            raw.setdefault("cluster", {})["url"] = url

        output_dir = os.getenv("FORESTLAB_OUTPUT_DIR")
        if output_dir:
            training = raw.setdefault("training", {})
            training.setdefault("artifacts", {})["output_dir"] = output_dir

        return cls(**raw)
