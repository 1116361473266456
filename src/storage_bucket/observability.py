"""Observability utilities for structured logging during synthesis.

Events are emitted as JSON strings with an ``eventType`` key so that
``cdk synth`` output can be grepped or piped to ``jq``.

Example:
    ```python
    from storage_bucket import log_event

    log_event('bucket_config_resolved', {
        'bucket_type': 'media',
        'retention': 'retain',
    })
    ```
"""

import json
import logging
import os
import time
from typing import Any, Dict, Optional

LOG_FORMAT = "%(levelname)s %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Set up logging for a CDK app or script.

    Args:
        level: Log level name. Defaults to ``LOG_LEVEL`` env var or INFO.
    """
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format=LOG_FORMAT,
    )


def log_event(
    event_type: str,
    details: Optional[Dict[str, Any]] = None,
    level: str = "INFO",
) -> None:
    """
    Log a structured observability event.

    Args:
        event_type: Type of event (e.g., 'bucket_config_resolved')
        details: Additional context (bucket_type, environment, etc.)
        level: Log level ('INFO', 'WARNING', 'ERROR')
    """
    if details is None:
        details = {}

    log_entry = {
        "eventType": event_type,
        **details,
    }

    logger = logging.getLogger()

    if level == "WARNING":
        logger.warning(json.dumps(log_entry, default=str))
    elif level == "ERROR":
        logger.error(json.dumps(log_entry, default=str))
    else:
        logger.info(json.dumps(log_entry, default=str))


def log_error(
    event_type: str,
    error: Exception,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log an error event with exception details.

    Args:
        event_type: Type of error event (e.g., 'synthesis_failed')
        error: The exception that occurred
        details: Additional context

    Example:
        ```python
        try:
            build_bucket_config("custom")
        except ConfigurationError as e:
            log_error('synthesis_failed', e, {'bucket_type': 'custom'})
        ```
    """
    if details is None:
        details = {}

    log_entry = {
        "eventType": event_type,
        "error": str(error),
        "errorType": type(error).__name__,
        **details,
    }

    logger = logging.getLogger()
    logger.error(json.dumps(log_entry, default=str))


def log_metrics(
    event_type: str,
    metrics: Dict[str, Any],
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log measured values as structured data.

    Args:
        event_type: Type of metric event (e.g., 'stack_assembly_completed')
        metrics: Metric values (duration, counts, etc.)
        details: Additional context
    """
    if details is None:
        details = {}

    log_entry = {
        "eventType": event_type,
        "metrics": metrics,
        **details,
    }

    logger = logging.getLogger()
    logger.info(json.dumps(log_entry, default=str))


class ObservabilityContext:
    """
    Context manager for logging operations with timing.

    Automatically logs operation start, duration, and result.

    Example:
        ```python
        with ObservabilityContext('stack_assembly', {'stack_name': 'media-dev'}):
            build_stack()
        ```

    Logs:
        - 'stack_assembly_started'
        - 'stack_assembly_completed' (with duration_ms)
        - 'stack_assembly_failed' (if an exception escapes)
    """

    def __init__(self, operation_name: str, context: Optional[Dict[str, Any]] = None):
        """
        Initialize observability context.

        Args:
            operation_name: Name of the operation being monitored
            context: Additional context to include in all logs
        """
        self.operation_name = operation_name
        self.context = context or {}
        self.start_time: Optional[float] = None

    def __enter__(self):
        """Log operation start."""
        self.start_time = time.time()

        log_event(f"{self.operation_name}_started", self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Log operation completion or error. Exceptions are never suppressed."""
        if self.start_time is None:
            return False

        duration_ms = int((time.time() - self.start_time) * 1000)

        if exc_type is not None:
            log_error(
                f"{self.operation_name}_failed",
                exc_val,
                {**self.context, "duration_ms": duration_ms},
            )
        else:
            log_metrics(
                f"{self.operation_name}_completed",
                {"duration_ms": duration_ms},
                self.context,
            )
        return False
