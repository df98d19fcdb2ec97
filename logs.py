'''structlog setup shared by the server and its tests.

POSTBOARD_LOG_LEVEL picks the level (INFO by default) and
POSTBOARD_LOG_FORMAT picks ``json`` (default) or ``console`` output.
Werkzeug and SQLAlchemy log through the standard library, which is routed
into the same renderer.
'''
import logging
import os
import sys
from typing import Optional

import structlog

_service_name : Optional[str] = None


def _add_service_name(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    if '_service_name' in event_dict:
        event_dict['service'] = event_dict.pop('_service_name')
    return event_dict


def configure(service_name: str) -> None:
    global _service_name

    level_name : str = os.getenv('POSTBOARD_LOG_LEVEL', 'INFO').upper()
    level : int = getattr(logging, level_name, logging.INFO)
    log_format : str = os.getenv('POSTBOARD_LOG_FORMAT', 'json').lower()

    shared_processors : list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt='iso'),
        _add_service_name,
    ]
    if log_format == 'console':
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
        )
    )
    root.addHandler(handler)
    root.setLevel(level)

    _service_name = service_name
    structlog.contextvars.bind_contextvars(_service_name=service_name)


def reset_context(**extra: str) -> None:
    '''Clear request-scoped context, keeping the service name.'''
    structlog.contextvars.clear_contextvars()
    if _service_name:
        structlog.contextvars.bind_contextvars(_service_name=_service_name)
    if extra:
        structlog.contextvars.bind_contextvars(**extra)
