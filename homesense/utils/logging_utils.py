from __future__ import annotations

import logging
import os
from typing import Optional

from loguru import logger

from homesense.config import settings

# Python-side loggers of the inference stack. SavedModel loading alone emits
# dozens of INFO lines (fingerprints, restore ops) through these.
_FRAMEWORK_LOGGERS = ("tensorflow", "absl", "h5py")

# Native TensorFlow log floor: 0 all, 1 no INFO, 2 no WARNING, 3 no ERROR.
# Read by the C++ runtime once, when tensorflow is first imported.
_TF_CPP_QUIET = "2"
_TF_CPP_VERBOSE = "0"


class _InterceptHandler(logging.Handler):
    """Forward stdlib records (tensorflow, absl) into loguru, tagged with their origin logger."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, f"[{record.name}] {record.getMessage()}")


def _route_framework_loggers(verbose: bool) -> None:
    # Framework chatter stays at WARNING unless we are debugging model loading
    framework_level = logging.DEBUG if verbose else logging.WARNING
    for name in _FRAMEWORK_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers = []
        lg.propagate = True
        lg.setLevel(framework_level)
    os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", _TF_CPP_VERBOSE if verbose else _TF_CPP_QUIET)


def configure_logging(log_path: Optional[str] = None, verbose: bool = False) -> str:
    """Set up loguru sinks for the perception adapter and fold TensorFlow logging into them.

    Call this before the first tensorflow import so TF_CPP_MIN_LOG_LEVEL also
    quiets the native runtime. The log file is <LOG_DIR>/homesense.log unless
    `log_path` or LOG_PATH say otherwise; it rotates at 10 MB, kept 7 days.
    verbose=True lowers everything, TensorFlow included, to DEBUG.
    """
    level = "DEBUG" if verbose else "INFO"

    log_path = log_path or os.getenv("LOG_PATH") or os.path.join(os.path.abspath(settings.log_dir), "homesense.log")
    os.makedirs(os.path.dirname(os.path.abspath(log_path)), exist_ok=True)

    logging.root.handlers = [_InterceptHandler()]
    logging.root.setLevel(logging.DEBUG if verbose else logging.INFO)
    _route_framework_loggers(verbose)

    # Calling twice must not duplicate sinks
    logger.remove()

    logger.add(lambda msg: print(msg, end=""), level=level, enqueue=True)

    logger.add(
        log_path,
        level=level,
        rotation="10 MB",
        retention="7 days",
        backtrace=False,
        diagnose=False,
        enqueue=True,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}",
    )

    logger.debug(f"[logging_utils] loguru configured: path={log_path}, level={level}")
    return log_path
