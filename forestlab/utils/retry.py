#!filepath: forestlab/utils/retry.py
import time
import random
from typing import Callable, Tuple, Type

from forestlab.utils.logger import logs


class Retry:
    """
    Synchronous retry with exponential backoff and jitter.

    Used around cluster connection; everything else fails fast.
    """

    @staticmethod
    def run(
        func: Callable,
        *args,
        exceptions: Tuple[Type[BaseException], ...] = (Exception,),
        max_attempts: int = 3,
        delay: float = 1.0,
        backoff: float = 2.0,
        jitter: bool = True,
        **kwargs,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

        name = getattr(func, "__name__", repr(func))
        attempt = 1
        while True:
            try:
                return func(*args, **kwargs)

            except exceptions as e:
                if attempt >= max_attempts:
                    logs.error(f"[Retry] {name} failed after {attempt} attempts")
                    raise

                wait = delay * (backoff ** (attempt - 1))
                if jitter:
                    wait = wait * random.uniform(0.8, 1.2)

                logs.warning(
                    f"[Retry] {name} attempt {attempt}/{max_attempts} failed: {e}. "
                    f"retry in {wait:.2f}s"
                )
                time.sleep(wait)
                attempt += 1
