"""
Centralized logging configuration.

Logs go to stderr so stdout stays free for protocol output when the
server is driven by a local MCP client.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Quiet third-party loggers that report every request or file event
_SUPPRESSED_LOGGERS = [
    'watchdog',
    'multipart',
]


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at startup"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    for logger_name in _SUPPRESSED_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
