# ==============================================================================
# HELPER UTILITIES
# ==============================================================================
# Common utility functions used across the application
# ==============================================================================

from __future__ import annotations

from datetime import datetime, timezone
import math


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def calculate_offset(page: int, page_size: int) -> int:
    """Calculate database offset from page number."""
    return (page - 1) * page_size


def page_count(total: int, page_size: int) -> int:
    """Number of pages for ``total`` items; an empty set still has one page."""
    return max(1, math.ceil(total / page_size)) if page_size > 0 else 1
