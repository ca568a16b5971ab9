"""Logging helpers."""
from pulsechart.shared.logging.logger import get_logger, quiet_loggers, setup_logging

__all__ = ["setup_logging", "get_logger", "quiet_loggers"]
