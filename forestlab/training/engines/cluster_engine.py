# forestlab/training/engines/cluster_engine.py
from __future__ import annotations

from typing import Any

import h2o
from h2o.exceptions import H2OConnectionError

from forestlab.config.cluster_config import ClusterConfig
from forestlab.utils.logger import logs
from forestlab.utils.retry import Retry


class H2OClusterEngine:
    """
    H2OClusterEngine

    Responsibility:
    - start a local engine or attach to a running one (h2o.init)
    - shut it down at the end of the run

    backend defaults to the h2o module; tests inject a fake.
    """

    def __init__(self, cfg: ClusterConfig, *, backend: Any = None):
        self.cfg = cfg
        self.backend = backend if backend is not None else h2o
        self._started = False

    def start(self) -> Any:
        kwargs = self.cfg.init_kwargs()
        logs.info(f"[H2OClusterEngine] init {kwargs}")

        Retry.run(
            self.backend.init,
            exceptions=(H2OConnectionError, ConnectionError),
            max_attempts=self.cfg.connect_attempts,
            delay=self.cfg.connect_delay,
            **kwargs,
        )
        self._started = True

        cluster = self.backend.cluster()
        logs.info(
            f"[H2OClusterEngine] connected "
            f"name={getattr(cluster, 'cloud_name', '?')} "
            f"nodes={getattr(cluster, 'cloud_size', '?')}"
        )
        return cluster

    def shutdown(self) -> None:
        if not self._started:
            return

        cluster = self.backend.cluster()
        if cluster is None:
            self._started = False
            return

        logs.info("[H2OClusterEngine] shutdown")
        cluster.shutdown(prompt=False)
        self._started = False

    @property
    def started(self) -> bool:
        return self._started
