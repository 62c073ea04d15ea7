"""Discussion services."""

from studyhub.services.discussion.discussion_service import DiscussionService

__all__ = ["DiscussionService"]
