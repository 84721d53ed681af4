"""
Error Handling Utilities for tincconf

Provides consistent error reporting across the configuration subsystem:
1. One-line diagnostics carrying the variable, file and line of origin
2. Error categorization and severity levels
3. Error aggregation so front ends can summarise what went wrong

USAGE:
    from tincconf.utils.error_handling import (
        handle_error,
        ErrorCategory,
    )

    try:
        read_config_file(store, path)
    except ConfigError as e:
        handle_error(e, "read_config_file", ErrorCategory.CONFIG)
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """Categories of errors for reporting."""
    # Directive parsing and typed conversion
    CONFIG = "configuration"

    # File system errors (open, read, write, permissions)
    FILESYSTEM = "filesystem"

    # Name resolution
    NETWORK = "network"

    # Key material handling
    SECURITY = "security"

    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


@dataclass
class ErrorContext:
    """Context information for a reported error."""
    error: Exception
    category: ErrorCategory
    severity: ErrorSeverity
    operation: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    additional_context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            'error_type': type(self.error).__name__,
            'error_message': str(self.error),
            'category': self.category.value,
            'severity': self.severity.value,
            'operation': self.operation,
            'timestamp': self.timestamp,
            'additional_context': self.additional_context,
        }

    def format_log_message(self) -> str:
        """Format the diagnostic as a single log line."""
        return str(self.error)


class ErrorAggregator:
    """
    Collects reported errors for later summaries.

    Bounded to max_errors; older errors are dropped first.
    """

    def __init__(self, max_errors: int = 1000):
        self._errors: List[ErrorContext] = []
        self._lock = threading.Lock()
        self._max_errors = max_errors

    def add_error(self, context: ErrorContext) -> None:
        with self._lock:
            self._errors.append(context)
            if len(self._errors) > self._max_errors:
                self._errors = self._errors[-self._max_errors:]

    def get_error_summary(self) -> Dict[str, Any]:
        """Get a summary of aggregated errors."""
        with self._lock:
            by_category: Dict[str, int] = {}
            by_severity: Dict[str, int] = {}

            for ctx in self._errors:
                cat = ctx.category.value
                sev = ctx.severity.value
                by_category[cat] = by_category.get(cat, 0) + 1
                by_severity[sev] = by_severity.get(sev, 0) + 1

            return {
                'total_errors': len(self._errors),
                'by_category': by_category,
                'by_severity': by_severity,
            }

    def get_recent_errors(self, count: int = 10) -> List[Dict[str, Any]]:
        """Get the most recent errors."""
        with self._lock:
            return [e.to_dict() for e in self._errors[-count:]]

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors)

    def clear(self):
        """Clear all aggregated errors."""
        with self._lock:
            self._errors.clear()


_global_aggregator = ErrorAggregator()


def get_error_aggregator() -> ErrorAggregator:
    """Get the global error aggregator instance."""
    return _global_aggregator


def handle_error(
    error: Exception,
    operation: str,
    category: ErrorCategory = ErrorCategory.UNKNOWN,
    severity: ErrorSeverity = ErrorSeverity.ERROR,
    additional_context: Optional[Dict[str, Any]] = None,
    reraise: bool = False,
    log: Optional[logging.Logger] = None,
) -> ErrorContext:
    """
    Log an error and record it in the global aggregator.

    Args:
        error: The exception that occurred
        operation: Name of the operation that failed
        category: Category of the error
        severity: Severity level
        additional_context: Extra key/value context for the log record
        reraise: Whether to re-raise the exception after handling
        log: Logger to report through (defaults to this module's logger)

    Returns:
        ErrorContext with the error details
    """
    context = ErrorContext(
        error=error,
        category=category,
        severity=severity,
        operation=operation,
        additional_context=additional_context or {},
    )

    _global_aggregator.add_error(context)

    (log or logger).log(
        _LOG_LEVELS[severity],
        context.format_log_message(),
        extra={'extra_data': context.additional_context},
    )

    if reraise:
        raise error

    return context

