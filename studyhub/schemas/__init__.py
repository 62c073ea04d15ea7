"""
StudyHub Schemas.

Pydantic models for request validation.
"""

from studyhub.schemas.quiz import *
from studyhub.schemas.tutor import *
from studyhub.schemas.discussion import *
from studyhub.schemas.profile import *
