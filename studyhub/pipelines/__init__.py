"""
StudyHub Pipelines.

Business logic orchestration functions.
"""

from studyhub.pipelines.progress import *
from studyhub.pipelines.quiz import *
from studyhub.pipelines.dashboard import *
