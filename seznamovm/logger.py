"""
Structured logging system for seznamovm.

Provides centralized logging with console and file outputs, log levels,
and counters for registry imports and coat-of-arms lookups.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json

from .env import get_setting


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for registry parsing and coat-of-arms resolution.
    """

    def __init__(
        self,
        name: str = "seznamovm",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to stderr
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()

        self.metrics = {
            "api_calls": 0,
            "pages_fetched": 0,
            "coa_attempted": 0,
            "coa_matched": 0,
            "coa_unmatched": 0,
            "subjects_seen": 0,
            "subjects_parsed": 0,
            "errors_by_type": {},
        }

        if enable_console:
            # stdout is reserved for command output
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"seznamovm_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def set_level(self, level: str):
        """Change the logger and console level; the log file keeps DEBUG."""
        value = getattr(logging, level.upper())
        self.logger.setLevel(value)
        for handler in self.logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(value)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, ensure_ascii=False)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_api_call(self):
        """Increment search API call counter."""
        self.metrics["api_calls"] += 1

    def record_page_fetch(self):
        self.metrics["pages_fetched"] += 1

    def record_coa_result(self, matched: bool):
        """Record the outcome of one coat-of-arms resolution."""
        self.metrics["coa_attempted"] += 1
        if matched:
            self.metrics["coa_matched"] += 1
        else:
            self.metrics["coa_unmatched"] += 1

    def record_subjects(self, seen: int, parsed: int):
        """Record how many registry nodes were read and how many were kept."""
        self.metrics["subjects_seen"] += seen
        self.metrics["subjects_parsed"] += parsed

    def record_error(self, error_type: str):
        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return current metrics, including the coat-of-arms match rate."""
        metrics_copy = dict(self.metrics)
        metrics_copy["errors_by_type"] = dict(self.metrics["errors_by_type"])
        attempted = metrics_copy["coa_attempted"]
        if attempted > 0:
            metrics_copy["coa_match_rate"] = round(
                metrics_copy["coa_matched"] / attempted, 3
            )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Session Metrics ===")
        if metrics["subjects_seen"]:
            dropped = metrics["subjects_seen"] - metrics["subjects_parsed"]
            self.info(
                f"Subjects: {metrics['subjects_parsed']}/{metrics['subjects_seen']} parsed ({dropped} dropped)"
            )
        if metrics["coa_attempted"]:
            rate = metrics.get("coa_match_rate", 0) * 100
            self.info(f"Search API calls: {metrics['api_calls']}, pages fetched: {metrics['pages_fetched']}")
            self.info(
                f"Coats of arms: {metrics['coa_matched']}/{metrics['coa_attempted']} matched ({rate:.1f}%)"
            )

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "seznamovm",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level; defaults to the SEZNAMOVM_LOG_LEVEL setting
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if level is None:
            level = get_setting("SEZNAMOVM_LOG_LEVEL")
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
