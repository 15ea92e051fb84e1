"""Correlation-aware logging for the DOM pipeline.

Every component (tokenizer, builder, normalizer, serializer, api) logs through
a ``CorrelationLogger`` so that records emitted while handling one document
carry the same ``correlation_id`` and the name of the component that produced
them. The library never configures handlers; applications do.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional


class CorrelationLogger:
    """Logger that stamps every record with component and correlation id."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID shared by one parse/serialize run
            component: Component name; defaults to the last segment of ``name``
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def _log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]],
        exc_info: bool,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(level, message, extra=self._get_extra(extra), exc_info=exc_info)

    def is_debug_enabled(self) -> bool:
        """Whether DEBUG records would be emitted; guards per-event logging in hot loops."""
        return self.logger.isEnabledFor(logging.DEBUG)

    def debug(
        self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False
    ) -> None:
        self._log(logging.DEBUG, message, extra, exc_info)

    def info(
        self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False
    ) -> None:
        self._log(logging.INFO, message, extra, exc_info)

    def warning(
        self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False
    ) -> None:
        self._log(logging.WARNING, message, extra, exc_info)

    def error(
        self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = True
    ) -> None:
        """Log error message; includes the active traceback by default."""
        self._log(logging.ERROR, message, extra, exc_info)

    @contextmanager
    def timed(
        self, operation: str, extra: Optional[Dict[str, Any]] = None
    ) -> Iterator[Dict[str, Any]]:
        """Log the start and end of ``operation`` with its duration.

        Yields a mutable dict; keys added to it by the caller are included in
        the completion record. Failures are logged at ERROR and re-raised.

        Example:
            >>> with logger.timed("serialize", {"root": "doc"}) as fields:
            ...     fields["bytes_written"] = 42
        """
        fields: Dict[str, Any] = dict(extra or {})
        start_time = time.time()
        self.debug(f"Starting {operation}", extra=fields)
        try:
            yield fields
        except Exception as e:
            fields["duration_ms"] = (time.time() - start_time) * 1000
            fields["exception_type"] = type(e).__name__
            self.error(f"{operation} failed: {e}", extra=fields)
            raise
        fields["duration_ms"] = (time.time() - start_time) * 1000
        self.info(f"Completed {operation}", extra=fields)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None,
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)
