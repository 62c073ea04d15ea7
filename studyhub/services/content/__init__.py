"""Content services."""

from studyhub.services.content.content_service import ContentService, filter_lessons, filter_subjects
from studyhub.services.content.demo_content import is_demo_id

__all__ = [
    "ContentService",
    "filter_lessons",
    "filter_subjects",
    "is_demo_id",
]
