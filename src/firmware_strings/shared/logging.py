"""Structured logging utilities for firmware string handling.

This module provides correlation-aware logging so that encode and validation
failures can be traced back to the call that produced them. Loggers carry a
context (the character kind, the view type) that is attached to every record
next to the component and correlation ID.
"""

import logging
from typing import Any, Dict, Optional


class CorrelationLogger:
    """Logger that automatically includes correlation ID, component and context."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        **context: Any
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name for structured logging
            **context: Fields added to every record, e.g. ``kind="Char16"``
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split('.')[-1]
        self.context = context

    def bind(self, **context: Any) -> "CorrelationLogger":
        """Return a logger for the same target with extra context fields."""
        return CorrelationLogger(
            self.logger.name,
            self.correlation_id,
            self.component,
            **{**self.context, **context}
        )

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
            **self.context,
        }

        if extra:
            combined_extra.update(extra)

        return combined_extra

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with correlation info and context."""
        self.logger.debug(message, extra=self._get_extra(extra))


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None,
    **context: Any
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging
        **context: Fields added to every record

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component, **context)
