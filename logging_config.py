# logging_config.py

import logging
import structlog
import sys
from typing import Any, Dict, Optional


def add_service_name(app_name: str):
    """Build a processor stamping every entry with the application name"""
    def processor(logger: logging.Logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", app_name)
        return event_dict
    return processor


def setup_logging(app_name: str = "cre-import-mapping", log_level: str = "INFO") -> None:
    """
    Configure structured logging for production use

    Args:
        app_name: Application name for log identification
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_service_name(app_name),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    # Set application logger
    logging.getLogger(app_name).setLevel(level)


def get_logger(name: str = None) -> structlog.BoundLogger:
    """
    Get a structured logger instance

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog instance
    """
    return structlog.get_logger(name or __name__)


def bind_import_context(**values: Any) -> None:
    """Attach per-file context (source, filename, ...) to every log entry in this context"""
    structlog.contextvars.bind_contextvars(**values)


def clear_import_context() -> None:
    """Drop context bound by bind_import_context"""
    structlog.contextvars.clear_contextvars()


class ImportAuditLogger:
    """Dedicated logger for batch-level import events"""

    def __init__(self):
        self.logger = get_logger("import_audit")

    def log_auto_map(self, detected_source: str, mapped: int, unmapped: int, warnings: int):
        """Log the outcome of column auto-mapping"""
        self.logger.info(
            "Columns auto-mapped",
            detected_source=detected_source,
            mapped_columns=mapped,
            unmapped_columns=unmapped,
            warning_count=warnings,
            event_type="auto_map"
        )

    def log_structural_warning(self, warning: str):
        """Log a batch-level mapping warning"""
        self.logger.warning(
            "Import mapping warning",
            warning=warning,
            event_type="mapping_warning"
        )

    def log_batch_complete(self, rows: int, rows_with_errors: int, duration_ms: float,
                           handler_failures: Optional[int] = None):
        """Log completion of a row-transform batch"""
        self.logger.info(
            "Import batch complete",
            rows=rows,
            rows_with_errors=rows_with_errors,
            handler_failures=handler_failures,
            duration_ms=duration_ms,
            event_type="batch_complete"
        )


# Global logger instance
import_audit_logger = ImportAuditLogger()
