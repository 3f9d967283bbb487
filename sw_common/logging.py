"""Logging setup: stdlib handlers rendered through structlog.

Library modules only call ``logging.getLogger(__name__)``; the CLI calls
:func:`configure_logging` once. ``SW_LOG_LEVEL``, ``SW_LOG_JSON`` and
``SW_LOG_FILE`` fill in whatever the caller leaves unset.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Mapping

import structlog

from sw_common.config.env import env_flag, env_value, parse_int_env

_SHARED_PROCESSORS: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
)


def _level_from(value: str | int | None) -> int:
    if value is None:
        return logging.INFO
    if isinstance(value, int):
        return value
    numeric = parse_int_env(value)
    if numeric is not None:
        return numeric
    return logging._nameToLevel.get(value.upper(), logging.INFO)


@dataclass(frozen=True)
class LoggingSettings:
    level: int = logging.INFO
    json: bool = False
    log_file: str | None = None

    @classmethod
    def resolve(
        cls,
        *,
        level: str | int | None = None,
        debug: bool = False,
        log_file: str | None = None,
        json: bool | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "LoggingSettings":
        """Merge explicit arguments over the environment; ``debug`` beats any level."""
        if debug:
            resolved_level = logging.DEBUG
        else:
            resolved_level = _level_from(level if level is not None else env_value("log_level", environ))
        if json is None:
            json = bool(env_flag("log_json", environ))
        if log_file is None:
            log_file = env_value("log_file", environ)
        return cls(level=resolved_level, json=json, log_file=log_file)

    def formatter(self) -> structlog.stdlib.ProcessorFormatter:
        renderer: structlog.types.Processor
        if self.json:
            renderer = structlog.processors.JSONRenderer()
        else:
            renderer = structlog.dev.ConsoleRenderer()
        return structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=list(_SHARED_PROCESSORS),
        )

    def handlers(self) -> list[logging.Handler]:
        formatter = self.formatter()
        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
        if self.log_file:
            handlers.append(logging.FileHandler(self.log_file))
        for handler in handlers:
            handler.setFormatter(formatter)
        return handlers


def configure_logging(
    *,
    level: str | int | None = None,
    debug: bool = False,
    log_file: str | None = None,
    json: bool | None = None,
    force: bool = False,
) -> LoggingSettings:
    """Install the structlog formatter on the root logger.

    An already configured root logger is left alone unless ``force`` is set.
    """
    settings = LoggingSettings.resolve(level=level, debug=debug, log_file=log_file, json=json)

    root_logger = logging.getLogger()
    if force or not root_logger.handlers:
        root_logger.handlers.clear()
        for handler in settings.handlers():
            root_logger.addHandler(handler)
        root_logger.setLevel(settings.level)

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return settings
