"""structlog setup for the command line and server entry points."""

import logging

import structlog


def configure_logging(debug: bool = False) -> None:
    """Configure structlog for console output.

    Args:
        debug: If True, also emit debug-level events (RPC polling, builds)
    """
    level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
