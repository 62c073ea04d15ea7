"""AI tutor services."""

from studyhub.services.tutor.tutor_service import TutorService, TUTOR_SUBJECTS

__all__ = ["TutorService", "TUTOR_SUBJECTS"]
