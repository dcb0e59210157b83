# backend/app/services/base.py
"""
Base Service Pattern for the studio booking API.

Provides common functionality for all service classes:
- Transaction management
- Logging with operation context
- Performance monitoring (Prometheus)
"""

from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Dict, Iterator, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import ServiceException
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0


class BaseService:
    """
    Base class for all service layer components.

    Services own the transaction boundary; repositories only flush.
    """

    # Class-level metrics storage
    _class_metrics: Dict[str, Dict[str, Dict[str, float]]] = {}

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Context manager for database transactions.

        Usage:
            with self.transaction():
                self.repository.create(...)
                # commit is handled automatically
        """
        try:
            yield self.db
            self.db.commit()
            self.logger.debug("Transaction committed successfully")
        except SQLAlchemyError as e:
            self.logger.error(f"Transaction failed: {str(e)}")
            self.db.rollback()
            raise ServiceException(f"Database operation failed: {str(e)}") from e
        except Exception:
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to measure operation performance.

        Usage:
            @BaseService.measure_operation("create_booking")
            def create_booking(self, data):
                ...
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> Any:
                start_time = time.time()
                success = False
                error_type = None
                try:
                    result = func(self, *args, **kwargs)
                    success = True
                    return result
                except Exception as e:
                    error_type = type(e).__name__
                    raise
                finally:
                    elapsed = time.time() - start_time
                    self._record_metric(operation_name, elapsed, success)

                    if elapsed > SLOW_OPERATION_SECONDS:
                        self.logger.warning(
                            f"Slow operation detected: {operation_name} took {elapsed:.2f}s"
                        )

                    prometheus_metrics.record_service_operation(
                        service=self.__class__.__name__,
                        operation=operation_name,
                        duration=elapsed,
                        status="success" if success else "error",
                        error_type=error_type,
                    )

            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context: Any) -> None:
        """
        Log an operation with context.

        Context keys must not clash with LogRecord attributes (``name``,
        ``msg``, ``args`` ...).
        """
        self.logger.info(f"Operation: {operation}", extra={"operation": operation, **context})

    def _record_metric(self, operation: str, elapsed: float, success: bool) -> None:
        class_name = self.__class__.__name__
        metrics = BaseService._class_metrics.setdefault(class_name, {})
        metric_data = metrics.setdefault(
            operation,
            {
                "count": 0,
                "total_time": 0.0,
                "success_count": 0,
                "failure_count": 0,
                "min_time": float("inf"),
                "max_time": 0.0,
            },
        )
        metric_data["count"] += 1
        metric_data["total_time"] += elapsed
        metric_data["min_time"] = min(metric_data["min_time"], elapsed)
        metric_data["max_time"] = max(metric_data["max_time"], elapsed)
        if success:
            metric_data["success_count"] += 1
        else:
            metric_data["failure_count"] += 1

    def get_metrics(self) -> Dict[str, Dict[str, float]]:
        """Return this service's in-process operation stats with average times."""
        stats = {}
        for operation, data in BaseService._class_metrics.get(self.__class__.__name__, {}).items():
            count = data["count"] or 1
            stats[operation] = {**data, "avg_time": data["total_time"] / count}
        return stats
