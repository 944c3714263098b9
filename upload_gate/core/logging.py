# core/logging.py
import sys
import logging
import structlog
from pathlib import Path
from typing import List, Optional
from upload_gate.config.settings import settings

# Handlers installed by the last configure_logging call
_handlers: List[logging.Handler] = []

def configure_logging(log_file: Optional[str] = None, log_to_console: Optional[bool] = None):
    """Configure structlog for JSON logging to file and optional console output"""

    if log_file is None:
        log_file = settings.log_file
    if log_to_console is None:
        log_to_console = settings.log_to_console

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Ensure log directory exists
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    # Shared processors, also applied to records from plain logging users
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # JSON renderer for file
    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ],
        foreign_pre_chain=shared_processors,
    ))
    handlers = [file_handler]

    # Console renderer for development
    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.dev.ConsoleRenderer(),
            ],
            foreign_pre_chain=shared_processors,
        ))
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    for handler in _handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _handlers[:] = handlers
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Reduce noise from external libraries
    logging.getLogger('hypercorn').setLevel(logging.WARNING)

def get_logger(name: str):
    """Get a structured logger for the given module name"""
    return structlog.get_logger(name)
