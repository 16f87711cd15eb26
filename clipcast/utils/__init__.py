"""ClipCast utilities."""

from clipcast.utils.logging_setup import get_logger, log_exception, parse_size, setup_logging

__all__ = ["get_logger", "log_exception", "parse_size", "setup_logging"]
