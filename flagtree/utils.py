# Flagtree CLI Builder — (c) 2025 rtj.dev LLC — MIT Licensed
"""utils.py

Process-level helpers: program name detection, hook adaptation and logging setup.
"""
from __future__ import annotations

import functools
import inspect
import logging
import os
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import pythonjsonlogger.json
from rich.logging import RichHandler

T = TypeVar("T")

LOG_MODE_ENV = "FLAGTREE_LOG_MODE"
JSON_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
CONTAINER_MARKERS = ("docker", "kubepods", "containerd", "podman")


def get_program_invocation() -> str:
    """
    Name shown in usage lines for a root command built without a name.

    `python -m tool` reports `tool/__main__.py` as argv[0], which is shown as
    `python -m tool`. Anything else is shown by its file name.
    """
    script = Path(sys.argv[0]) if sys.argv and sys.argv[0] else None
    if script is None:
        return Path(sys.executable).name
    if script.name == "__main__.py":
        return f"python -m {script.parent.name}"
    return script.name


def ensure_async(function: Callable[..., T]) -> Callable[..., Awaitable[T]]:
    """Wrap a plain hook so it can be awaited like a coroutine hook."""
    if inspect.iscoroutinefunction(function):
        return function  # type: ignore

    if not callable(function):
        raise TypeError(f"{function} is not callable")

    @functools.wraps(function)
    async def async_wrapper(*args: Any, **kwargs: Any) -> T:
        return function(*args, **kwargs)

    return async_wrapper


def running_in_container() -> bool:
    if os.path.exists("/.dockerenv"):
        return True
    try:
        content = Path("/proc/1/cgroup").read_text(encoding="UTF-8")
    except OSError:
        return False
    return any(marker in content for marker in CONTAINER_MARKERS)


def _json_formatter() -> pythonjsonlogger.json.JsonFormatter:
    return pythonjsonlogger.json.JsonFormatter(JSON_LOG_FORMAT)


def setup_logging(
    mode: str | None = None,
    log_filename: str | None = None,
    json_log_to_file: bool = False,
    file_log_level: int = logging.DEBUG,
    console_log_level: int = logging.WARNING,
) -> None:
    """
    Configure the root logger for a program built with Flagtree.

    Flagtree only logs resolution details at debug level and hook failures at
    warning level, so the console handler defaults to warnings. Nothing is
    written to disk unless `log_filename` is given.

    Args:
        mode (str | None): "cli" for a Rich console handler, "json" for
            structured lines on stderr. Defaults to `FLAGTREE_LOG_MODE`, then to
            "json" inside a container and "cli" elsewhere.
        log_filename (str | None): Optional log file, appended to.
        json_log_to_file (bool): Write the log file as JSON lines.
        file_log_level (int): Level for the log file.
        console_log_level (int): Level for the console handler.

    Raises:
        ValueError: If `mode` is neither "cli" nor "json".
    """
    if not mode:
        mode = os.getenv(LOG_MODE_ENV) or ("json" if running_in_container() else "cli")

    if mode == "cli":
        console_handler: logging.Handler = RichHandler(
            rich_tracebacks=True,
            show_path=False,
            markup=False,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
    elif mode == "json":
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(_json_formatter())
    else:
        raise ValueError(f"Invalid log mode: {mode}")
    console_handler.setLevel(console_log_level)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()
    root.addHandler(console_handler)

    if log_filename:
        file_handler = logging.FileHandler(log_filename, "a", "UTF-8")
        file_handler.setLevel(file_log_level)
        if json_log_to_file:
            file_handler.setFormatter(_json_formatter())
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s [%(name)s] [%(levelname)s] %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
        root.addHandler(file_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("flagtree").debug("Logging initialized in '%s' mode.", mode)
