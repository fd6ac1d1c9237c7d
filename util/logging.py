"""Structured console logging for the owner migration tool."""

import logging
import os
import sys
from typing import Any, Dict, Optional


class StructuredLogger:
    """Structured logger with consistent formatting."""

    def __init__(self, name: str, level: Optional[int] = None):
        if level is None:
            level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
            if not isinstance(level, int):
                level = logging.INFO

        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Operator-facing progress goes to stdout
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)

        formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)

        if not self.logger.handlers:
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str = "success",
                      details: Optional[Dict[str, Any]] = None):
        """Log structured operation with status."""
        message_parts = [f"operation={operation}", f"status={status}"]

        if details:
            detail_str = " ".join([f"{k}={v}" for k, v in details.items()])
            message_parts.append(detail_str)

        message = " | ".join(message_parts)

        if status in ("success", "started", "migrated", "noop"):
            self.logger.info(message)
        elif status == "error":
            self.logger.error(message)
        else:
            self.logger.warning(message)

    def log_table_migration(self, table: str, status: str, changed: int = None,
                            found=None, error: str = None):
        """Log the outcome of migrating one tenant-scoped table."""
        details = {"table": table}
        if found:
            details["found"] = ",".join(found)
        if changed is not None:
            details["changed"] = changed
        if error:
            details["error"] = error

        self.log_operation("table_migrate", status, details)

    def log_path_migration(self, operation: str, source: str, target: str,
                           status: str = "migrated", reason: str = None):
        """Log a filesystem rename or copy."""
        details = {"source": source, "target": target}
        if reason:
            details["reason"] = reason

        self.log_operation(operation, status, details)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)


def get_logger(name: str, level: Optional[int] = None) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name, level)
