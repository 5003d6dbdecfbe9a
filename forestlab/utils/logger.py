#!filepath: forestlab/utils/logger.py
import os
import sys
import json
from functools import wraps
from time import perf_counter
from loguru import logger
from typing import Callable, Optional

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"


class Logging:
    """
    Training run logger (loguru)
    ---------------------------------------
    - console sink always on
    - file sink with rotation / retention once configured
    - function-level catch decorator
    ---------------------------------------
    """

    def __init__(self, level: str = "INFO"):
        self.level = level
        self.log_dir: Optional[str] = None
        self._configured = False

        logger.remove()
        logger.add(sys.stderr, level=self.level, format=_FORMAT)

    def configure(
        self,
        log_dir: str = "logs",
        rotation: str = "1 day",
        retention: str = "30 days",
        level: str = "INFO",
    ) -> None:
        """
        Attach the rotating file sink. Only the first call has effect.
        """
        if self._configured:
            return

        self.log_dir = log_dir
        self.level = level
        os.makedirs(log_dir, exist_ok=True)

        logger.remove()
        logger.add(sys.stderr, level=level, format=_FORMAT)
        logger.add(
            sink=f"{log_dir}/{{time:YYYY-MM-DD}}.log",
            rotation=rotation,
            retention=retention,
            level=level,
            format=_FORMAT,
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )

        self._configured = True
        logger.info("-----------Logger initialized-----------")

    # ----------- passthrough -----------
    def debug(self, msg: str, *args, **kwargs):
        logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        logger.exception(msg, *args, **kwargs)

    # ---------- decorator ----------
    def catch(
        self,
        msg: str = "Exception occurred",
        log_inputs: bool = False,
        log_outputs: bool = False,
        log_time: bool = True,
    ) -> Callable:

        def decorator(func: Callable):
            @wraps(func)
            def wrapper(*args, **kwargs):

                if log_inputs:
                    logger.info(
                        f"[CALL] {func.__name__} kwargs={json.dumps(kwargs, default=str)}"
                    )

                start = perf_counter()

                try:
                    result = func(*args, **kwargs)
                except Exception:
                    logger.exception(f"[ERROR] {func.__name__}: {msg}")
                    raise

                if log_outputs:
                    logger.info(f"[RETURN] {func.__name__} result={result}")

                if log_time:
                    cost = perf_counter() - start
                    logger.info(f"[TIME] {func.__name__} took {cost:.4f}s")

                return result

            return wrapper

        return decorator


def init_logging(cfg) -> Logging:
    """Configure the global `logs` from a LogConfig."""
    logs.configure(
        log_dir=cfg.dir,
        rotation=cfg.rotation,
        retention=cfg.retention,
        level=cfg.level,
    )
    return logs


logs = Logging()
