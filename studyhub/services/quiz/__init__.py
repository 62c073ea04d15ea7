"""Quiz services."""

from studyhub.services.quiz.quiz_service import QuizService, QuizResult, score_answers, public_question

__all__ = [
    "QuizService",
    "QuizResult",
    "score_answers",
    "public_question",
]
