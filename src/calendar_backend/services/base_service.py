"""
Base Service Class

Provides common functionality for the service layer: a database session,
a per-service logger and timing of slow operations.
"""

import logging
import time
from typing import Optional
from sqlalchemy.orm import Session

# Operations slower than this are logged as warnings
SLOW_OPERATION_MS = 5000


class BaseService:
    """
    Base class for all service implementations.

    Provides:
    - Standardized logging
    - Slow operation detection
    - Database session access
    """

    def __init__(self, db: Session, service_name: Optional[str] = None):
        """
        Initialize base service.

        Args:
            db: Database session
            service_name: Service name for logging (defaults to class name)
        """
        self.db = db
        self.service_name = service_name or self.__class__.__name__
        self.logger = logging.getLogger(self.service_name)

    def _timed_operation(self, operation_name: str) -> "TimedOperation":
        """
        Context manager for timing operations.

        Usage:
            with self._timed_operation("list_events"):
                ...
        """
        return TimedOperation(self, operation_name)


class TimedOperation:
    """Context manager that logs how long a service operation took."""

    def __init__(self, service: BaseService, operation_name: str):
        self.service = service
        self.operation_name = operation_name
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration_ms = int((time.time() - self.start_time) * 1000)

        if exc_type is not None:
            self.service.logger.error(
                f"{self.operation_name} failed after {duration_ms}ms: {exc_val}"
            )
        elif duration_ms > SLOW_OPERATION_MS:
            self.service.logger.warning(
                f"Slow operation detected: {self.operation_name} took {duration_ms}ms"
            )
        else:
            self.service.logger.debug(f"{self.operation_name} completed in {duration_ms}ms")

        return False
