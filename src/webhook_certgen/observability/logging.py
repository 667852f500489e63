"""
Structured logging utilities for the certificate job.

This module provides correlation ID tracking and structured log formatting
so that a single run can be followed through the cluster's log aggregation.
"""

import json
import logging
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

# Context variable for tracking the correlation ID of the current run
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Structured fields copied from log record attributes into the JSON payload
STRUCTURED_FIELDS = (
    "resource_type",
    "resource_name",
    "secret_name",
    "namespace",
    "crd_name",
    "service_name",
    "operation",
    "outcome",
    "duration",
    "error_type",
    "not_valid_after",
)


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add correlation ID to the log record.

        Args:
            record: The log record to process

        Returns:
            True to allow the record to be processed
        """
        current_correlation_id = correlation_id.get()
        if not current_correlation_id:
            current_correlation_id = generate_correlation_id()
            correlation_id.set(current_correlation_id)

        record.correlation_id = current_correlation_id
        return True


class StructuredFormatter(logging.Formatter):
    """
    Structured JSON formatter for logs with correlation ID support.

    Formats log records as structured JSON for better parsing and analysis
    in production monitoring systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as structured JSON.

        Args:
            record: The log record to format

        Returns:
            JSON-formatted log message
        """
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", ""),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


def generate_correlation_id() -> str:
    """Generate a short correlation ID."""
    return str(uuid.uuid4())[:8]


def set_correlation_id(corr_id: str) -> str:
    """
    Set the correlation ID for the current context.

    Args:
        corr_id: Correlation ID to set

    Returns:
        The correlation ID that was set
    """
    correlation_id.set(corr_id)
    return corr_id


def get_correlation_id() -> str:
    """Get the current correlation ID, or empty string if none set."""
    return correlation_id.get("")


def setup_structured_logging(
    log_level: str = "INFO",
    enable_json_formatting: bool = True,
    correlation_id_enabled: bool = True,
) -> None:
    """
    Set up structured logging for the job.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_json_formatting: Whether to use JSON formatting
        correlation_id_enabled: Whether to enable correlation ID tracking
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()

    if enable_json_formatting:
        formatter: logging.Formatter = StructuredFormatter()
    elif correlation_id_enabled:
        formatter = logging.Formatter(
            "%(asctime)s - %(correlation_id)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler.setFormatter(formatter)

    if correlation_id_enabled:
        handler.addFilter(CorrelationIDFilter())

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Third-party libraries are noisy at INFO
    logging.getLogger("kubernetes").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


class CertgenLogger:
    """
    Logger for reconciliation runs with structured logging support.

    Provides convenient methods for logging the run lifecycle with
    correlation ID tracking and structured data.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def log_reconciliation_start(
        self,
        secret_name: str,
        namespace: str,
        crd_name: str,
        correlation_id: str | None = None,
    ) -> str:
        """
        Log the start of a reconciliation run.

        Args:
            secret_name: Name of the TLS secret
            namespace: Namespace of the TLS secret
            crd_name: Name of the CRD receiving the CA bundle
            correlation_id: Optional correlation ID (will generate if not provided)

        Returns:
            The correlation ID used for this run
        """
        if correlation_id is None:
            correlation_id = generate_correlation_id()

        set_correlation_id(correlation_id)

        self.logger.info(
            f"Starting certificate reconciliation for secret {namespace}/{secret_name}",
            extra={
                "secret_name": secret_name,
                "namespace": namespace,
                "crd_name": crd_name,
                "operation": "reconcile_start",
            },
        )

        return correlation_id

    def log_reconciliation_success(
        self, secret_name: str, namespace: str, outcome: str, duration: float
    ) -> None:
        """Log successful reconciliation completion."""
        self.logger.info(
            f"Certificate reconciliation completed for secret {namespace}/{secret_name}: {outcome}",
            extra={
                "secret_name": secret_name,
                "namespace": namespace,
                "operation": "reconcile_success",
                "outcome": outcome,
                "duration": duration,
            },
        )

    def log_reconciliation_error(
        self,
        secret_name: str,
        namespace: str,
        error: Exception,
        duration: float,
    ) -> None:
        """Log a failed reconciliation run with the error's class as error_type."""
        self.logger.error(
            f"Certificate reconciliation failed for secret {namespace}/{secret_name}: {error}",
            extra={
                "secret_name": secret_name,
                "namespace": namespace,
                "operation": "reconcile_error",
                "error_type": type(error).__name__,
                "duration": duration,
            },
            exc_info=True,
        )
