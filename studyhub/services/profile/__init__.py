"""Profile services."""

from studyhub.services.profile.profile_service import ProfileService

__all__ = ["ProfileService"]
