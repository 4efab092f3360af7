"""Performance logging utilities for repository scans."""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, List, Optional, Any, Generator


@dataclass
class PerformanceMetrics:
    """Timing of one scan operation."""
    operation: str
    duration: float
    start_time: float
    end_time: float
    context: Optional[Dict[str, Any]] = None
    success: bool = True


class PerformanceLogger:
    """
    Timing utilities for repository inspections.

    Every timed operation is kept so a summary can be logged once the
    traversal is done.
    """

    # Inspections slower than this are logged as warnings
    slow_threshold = 30.0

    def __init__(self, logger_name: str = 'gitsync.scan.performance'):
        self.logger = logging.getLogger(logger_name)
        self._metrics: List[PerformanceMetrics] = []

    @contextmanager
    def time_operation(
        self,
        operation: str,
        context: Optional[Dict[str, Any]] = None,
        log_level: int = logging.DEBUG
    ) -> Generator[None, None, None]:
        """
        Context manager for timing operations.

        Args:
            operation: Name of the operation being timed
            context: Additional context information
            log_level: Logging level for completion messages
        """
        start_time = time.time()
        self.logger.log(log_level, f"Starting {operation}")

        success = True
        try:
            yield
        except Exception as e:
            success = False
            self.logger.error(f"{operation} failed after {time.time() - start_time:.3f}s: {e}")
            raise
        finally:
            end_time = time.time()
            duration = end_time - start_time
            self._metrics.append(PerformanceMetrics(
                operation=operation,
                duration=duration,
                start_time=start_time,
                end_time=end_time,
                context=context,
                success=success
            ))

            if success:
                self.logger.log(log_level, f"{operation} completed in {duration:.3f}s")
                if context:
                    context_str = ", ".join(f"{k}={v}" for k, v in context.items())
                    self.logger.debug(f"{operation} context: {context_str}")
            if duration > self.slow_threshold:
                self.logger.warning(f"Slow operation detected: '{operation}' took {duration:.3f}s")

    def get_performance_summary(self) -> Dict[str, Any]:
        """Summarize all timed operations."""
        if not self._metrics:
            return {"total_operations": 0, "total_duration": 0.0, "average_duration": 0.0}

        total_operations = len(self._metrics)
        total_duration = sum(m.duration for m in self._metrics)
        slowest_op = max(self._metrics, key=lambda m: m.duration)

        return {
            "total_operations": total_operations,
            "total_duration": total_duration,
            "average_duration": total_duration / total_operations,
            "failed_operations": sum(1 for m in self._metrics if not m.success),
            "slowest_operation": {
                "name": slowest_op.operation,
                "duration": slowest_op.duration
            }
        }

    def log_performance_summary(self) -> None:
        """Log a summary of all performance metrics."""
        summary = self.get_performance_summary()

        if summary["total_operations"] == 0:
            self.logger.info("No repositories inspected")
            return

        self.logger.info(
            f"Inspected {summary['total_operations']} repositories in "
            f"{summary['total_duration']:.3f}s (avg {summary['average_duration']:.3f}s)"
        )

        slowest = summary["slowest_operation"]
        self.logger.info(f"Slowest inspection: {slowest['name']} ({slowest['duration']:.3f}s)")
