"""linguakit structured logging module.

Every module obtains its logger through get_module_logger(), which binds the
calling module's name so events can be filtered per component:

    logger = get_module_logger()
    logger.info("locale_changed", locale="fr", previous_locale="en")

Importing linguakit never configures logging. Module loggers are lazy
structlog proxies that follow whatever configuration the host application
sets up. Hosts without their own setup can call configure_logging() once at
start-up.
"""

import inspect
import logging
import sys
from typing import List, Optional

import structlog
from structlog.stdlib import BoundLogger

from .config import get_settings

SILENT_LEVEL = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    """Detect if running in a test environment."""
    return "pytest" in sys.modules


def _build_processors(json_output: bool) -> List:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structlog on top of the standard logging module.

    Under pytest all output is suppressed. Otherwise production renders JSON
    lines and development renders colored console output.

    Args:
        log_level: Level name overriding the LOG_LEVEL setting.
        is_production: Overrides the PREFIX-derived production flag.

    Returns:
        The root structlog logger.
    """
    if _is_test_environment():
        # Bound loggers still need a processor chain; the root level keeps them quiet
        processors = [
            structlog.stdlib.add_log_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ]
        level = SILENT_LEVEL
        logging.root.setLevel(SILENT_LEVEL)
    else:
        if is_production is None:
            is_production = get_settings().is_production
        processors = _build_processors(is_production)
        level_name = (log_level or get_settings().LOG_LEVEL).upper()
        level = getattr(logging, level_name, logging.INFO)

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=level, force=_is_test_environment())

    return structlog.stdlib.get_logger()


def get_module_logger() -> BoundLogger:
    """Get a lazy logger bound to the calling module's name.

    The configuration is resolved on each call until structlog caches it, so
    loggers created at import time honor a later configure_logging().
    """
    frame = inspect.currentframe()
    module = inspect.getmodule(frame.f_back) if frame is not None else None
    if module is None:
        return structlog.stdlib.get_logger(component="unknown")

    module_name = module.__name__
    return structlog.stdlib.get_logger(
        module_name,
        component=module_name.rsplit(".", 1)[-1],
        module_path=module_name,
    )
