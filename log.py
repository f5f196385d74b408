"""QPerceptron logging system.

Provides structured logging under the ``qperceptron`` hierarchy.
Training progress and task output go through :func:`get_logger` instead of
``print()``.

Environment variables:
    QPERCEPTRON_LOG_LEVEL: DEBUG / INFO (default) / WARNING / ERROR
    QPERCEPTRON_LOG_FILE: optional path; appends plain-text log lines

The ``log_level`` config key overrides the environment at runtime
(see :func:`set_level`).
"""

import logging
import os
import sys
from typing import Mapping, Optional, Union

ROOT_LOGGER = "qperceptron"

_CONFIGURED = False

# ANSI colour codes (used only when stderr is a TTY)
_COLORS = {
    logging.DEBUG: "\033[36m",     # cyan
    logging.INFO: "\033[32m",      # green
    logging.WARNING: "\033[33m",   # yellow
    logging.ERROR: "\033[31m",     # red
    logging.CRITICAL: "\033[35m",  # magenta
}
_RESET = "\033[0m"


class _ColorFormatter(logging.Formatter):
    """Adds ANSI colour to level names when writing to a TTY."""

    def __init__(self, fmt: str, use_color: bool = True):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)
        # Colour a copy so the file handler sees the plain level name
        record = logging.makeLogRecord(record.__dict__)
        color = _COLORS.get(record.levelno, "")
        record.levelname = f"{color}{record.levelname}{_RESET}"
        return super().format(record)


def _parse_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), default)


def _configure_once() -> None:
    """One-time lazy init of the ``qperceptron`` root logger."""
    global _CONFIGURED
    if _CONFIGURED:
        return
    _CONFIGURED = True

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(_parse_level(os.environ.get("QPERCEPTRON_LOG_LEVEL")))
    # Hydra installs its own root handlers; keep our lines from printing twice
    root.propagate = False

    # Console handler (stderr, so tqdm on stderr is unaffected)
    fmt = "%(levelname)s %(name)s: %(message)s"
    use_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_ColorFormatter(fmt, use_color=use_color))
    root.addHandler(console)

    # Optional file handler
    log_file = os.environ.get("QPERCEPTRON_LOG_FILE")
    if log_file:
        fh = logging.FileHandler(log_file, mode="a")
        fh.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s"
        ))
        root.addHandler(fh)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``qperceptron`` hierarchy.

    Args:
        name: Typically ``__name__`` of the calling module.

    Returns:
        A :class:`logging.Logger` instance.
    """
    _configure_once()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def set_level(level: Union[str, int, None]) -> None:
    """Sets the level of the whole hierarchy; ``None`` leaves it unchanged."""
    _configure_once()
    if level is None:
        return
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(_parse_level(level, default=root.level))


def format_metrics(metrics: Mapping[str, float], precision: Optional[int] = 4) -> str:
    """Renders ``{'Acc': 0.75, 'Skip': 2}`` as ``"Acc: 0.7500 | Skip: 2"``.

    Integers are printed as-is, floats with *precision* decimals.
    """
    parts = []
    for key, value in metrics.items():
        if isinstance(value, int) and not isinstance(value, bool):
            parts.append(f"{key}: {value}")
        else:
            parts.append(f"{key}: {value:.{precision}f}")
    return " | ".join(parts)
