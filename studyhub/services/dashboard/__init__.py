"""Dashboard services."""

from studyhub.services.dashboard.dashboard_service import calculate_dashboard_stats, find_next_lesson

__all__ = [
    "calculate_dashboard_stats",
    "find_next_lesson",
]
