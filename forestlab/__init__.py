#!filepath: forestlab/__init__.py

from .utils.logger import Logging, logs, init_logging
from .utils.retry import Retry
from .utils.filesystem import FileSystem
from .utils.path import PathManager
from .utils.errors import UserInputError, PipelineAbort
from .config.app_config import AppConfig

__version__ = "0.1.0"

# alias
retry = Retry
fs = FileSystem

__all__ = [
    "logs", "Logging", "init_logging",
    "retry", "fs",
    "PathManager",
    "UserInputError", "PipelineAbort",
    "AppConfig",
    "__version__",
]
