"""Small helpers shared by the data and service layers."""

from resource_api.utils.helpers import calculate_offset, page_count, utc_now

__all__ = ["calculate_offset", "page_count", "utc_now"]
