"""
Structured logging for ingestion, queries and assessments.
"""

import logging
import sys
from typing import Any, Dict, Optional


def _truncate(text: str, limit: int = 50) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class StructuredLogger:
    """Structured logger with consistent formatting."""

    def __init__(self, name: str = "noveltymap", level: int = logging.INFO):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setLevel(level)
            formatter = logging.Formatter(
                '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str = "success",
                      duration_ms: Optional[float] = None,
                      details: Optional[Dict[str, Any]] = None):
        """Log structured operation with status and timing."""
        message_parts = [f"operation={operation}", f"status={status}"]

        if duration_ms is not None:
            message_parts.append(f"duration_ms={duration_ms:.2f}")

        if details:
            detail_str = " ".join([f"{k}={v}" for k, v in details.items()])
            message_parts.append(detail_str)

        message = " | ".join(message_parts)

        if status == "success":
            self.logger.info(message)
        elif status == "error":
            self.logger.error(message)
        else:
            self.logger.warning(message)

    def log_ingestion_item(self, position: int, text: str, status: str = "success", error: str = None):
        """Log the outcome of embedding one corpus text."""
        details = {"item": position, "text": _truncate(text)}
        if error:
            details["error"] = error

        if status == "success":
            # One line per item is noise at INFO for large registries
            self.logger.debug(f"operation=ingestion.item | status=success | item={position}")
        else:
            self.log_operation("ingestion.item", status, details=details)

    def log_ingestion_summary(self, report):
        """Log counters for a finished index build."""
        status = "success" if report.failed == 0 else "partial"
        self.log_operation(
            "ingestion.build",
            status,
            report.duration_ms,
            {
                "attempted": report.attempted,
                "indexed": report.indexed,
                "failed": report.failed,
                "skipped_short": report.skipped_short,
            },
        )

    def log_query(self, text: str, status: str = "success", duration_ms: float = None, **details):
        """Log a novelty query; the pitch is truncated."""
        log_details = {"pitch": _truncate(text, 30)}
        log_details.update(details)
        self.log_operation("query", status, duration_ms, log_details)

    def log_assessment(self, provider: str, status: str = "success", error: str = None):
        """Log which assessment tier answered."""
        details = {"provider": provider}
        if error:
            details["error"] = error[:100]
        self.log_operation("assessment", status, details=details)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()
