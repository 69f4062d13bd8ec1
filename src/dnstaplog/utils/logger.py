"""
Diagnostics logging for dnstaplog.

stdout carries the audit lines, so every handler installed here writes to
stderr or to a log file. Per-module levels come from DNSTAPLOG_LOG_LEVELS,
e.g. "packet=ERROR,fstrm=DEBUG".
"""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional, Union

import colorlog

from .. import constants

CONSOLE_FORMAT = '[%(levelname).4s] %(name)s: %(message)s'
COLOR_CONSOLE_FORMAT = '%(log_color)s[%(levelname).4s]%(reset)s %(cyan)s%(name)s%(reset)s: %(message)s'
FILE_FORMAT = '%(asctime)s [%(levelname).4s] %(name)s: %(message)s'

LEVEL_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}

# Marks handlers owned by setup_logger so a second call replaces them
_HANDLER_TAG = '_dnstaplog_handler'


def _use_colors(stream) -> bool:
    # https://no-color.org/
    return stream.isatty() and not os.environ.get("NO_COLOR")


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if _use_colors(sys.stderr):
        handler.setFormatter(colorlog.ColoredFormatter(
            COLOR_CONSOLE_FORMAT, log_colors=LEVEL_COLORS, reset=True))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _file_handler(log_file: Union[str, Path]) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding='utf-8')
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def setup_logger(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    module_levels: Optional[Dict[str, str]] = None,
):
    """
    Configure the root logger for a dnstaplog run.

    Args:
        level: Root level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Also write diagnostics to this file
        module_levels: Logger name or alias -> level name, overrides the
            DNSTAPLOG_LOG_LEVELS environment variable
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]:
        root.removeHandler(handler)
        handler.close()

    handlers = [_console_handler()]
    if log_file:
        handlers.append(_file_handler(log_file))
    for handler in handlers:
        setattr(handler, _HANDLER_TAG, True)
        root.addHandler(handler)

    apply_module_levels(module_levels)


def resolve_logger_name(name: str) -> str:
    """Expand an alias ("fstrm") or short module name ("reader.*") to a logger name"""
    if name in constants.LOG_ALIAS_MAP:
        return constants.LOG_ALIAS_MAP[name]
    name = name.removesuffix('.*')
    if name.split('.', 1)[0] in constants.KNOWN_TOP_MODULES:
        return f'dnstaplog.{name}'
    return name


def parse_module_levels(value: str) -> Dict[str, str]:
    """Parse "reader=DEBUG,packet=INFO" into a mapping, skipping malformed pairs"""
    module_levels = {}
    for pair in value.split(','):
        name, sep, lvl = pair.partition('=')
        if sep and name.strip():
            module_levels[name.strip()] = lvl.strip().upper()
    return module_levels


def apply_module_levels(module_levels: Optional[Dict[str, str]] = None):
    if module_levels is None:
        module_levels = parse_module_levels(os.environ.get(constants.ENV_LOG_LEVELS, ''))

    for name, lvl_name in module_levels.items():
        lvl = logging.getLevelName(lvl_name.upper())
        if not isinstance(lvl, int):
            logging.getLogger(__name__).warning(f"Ignoring invalid log level {lvl_name!r} for {name}")
            continue
        logging.getLogger(resolve_logger_name(name)).setLevel(lvl)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


def log_system_info(logger: logging.Logger, level: int = logging.DEBUG):
    """Log host and process details, useful next to the end-of-run summary"""
    import platform
    import psutil

    process = psutil.Process()
    logger.log(level, f"System: {platform.system()} {platform.release()}, Python {platform.python_version()}")
    logger.log(level, f"CPU cores: {psutil.cpu_count()}, "
                      f"memory: {psutil.virtual_memory().total // (1024**3)} GB")
    logger.log(level, f"Process {process.pid} RSS: {process.memory_info().rss // 1024} KiB")
