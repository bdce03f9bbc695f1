"""
Timing diagnostics for API endpoints and database operations.
"""

import time
import logging
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)

SLOW_MS = 100
VERY_SLOW_MS = 1000


def _marker(duration_ms: float) -> str:
    if duration_ms < SLOW_MS:
        return "✅"
    if duration_ms < VERY_SLOW_MS:
        return "⚠️ "
    return "🔴"


@asynccontextmanager
async def async_timing_context(label: str, log_level: int = logging.DEBUG):
    """Async context manager that logs how long the wrapped block took."""
    start_time = time.perf_counter()
    failed = False

    try:
        yield
    except Exception:
        failed = True
        raise
    finally:
        duration = (time.perf_counter() - start_time) * 1000  # ms

        if failed:
            logger.log(log_level, f"❌ [TIMING] {label} - FAILED after {duration:.2f}ms")
        else:
            level = logging.WARNING if duration >= VERY_SLOW_MS else log_level
            logger.log(level, f"{_marker(duration)} [TIMING] {label} - COMPLETED in {duration:.2f}ms")
