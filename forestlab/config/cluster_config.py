# forestlab/config/cluster_config.py
from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field


class ClusterConfig(BaseModel):
    """
    H2O engine bootstrap.

    - url / ip+port set  → attach to a running cluster
    - otherwise          → h2o.init starts a local JVM
    """

    nthreads: int = -1
    max_mem_size: Optional[Union[int, str]] = None

    url: Optional[str] = None
    ip: Optional[str] = None
    port: Optional[int] = None

    connect_attempts: int = Field(default=3, ge=1)
    connect_delay: float = Field(default=2.0, ge=0)

    # None → shut down only clusters this run started (not when attaching)
    shutdown_on_exit: Optional[bool] = None

    @property
    def attaching(self) -> bool:
        return bool(self.url or self.ip or self.port)

    def should_shutdown(self) -> bool:
        if self.shutdown_on_exit is not None:
            return self.shutdown_on_exit
        return not self.attaching

    def init_kwargs(self) -> dict:
        """Keyword arguments forwarded to h2o.init (unset values dropped)."""
        if self.url:
            return {"url": self.url}

        kwargs: dict = {"nthreads": self.nthreads}
        if self.max_mem_size is not None:
            kwargs["max_mem_size"] = self.max_mem_size
        if self.ip:
            kwargs["ip"] = self.ip
        if self.port:
            kwargs["port"] = self.port
        return kwargs
