"""
Quiz service.

Loads quiz questions for a lesson and scores submitted answers.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from studyhub.services.content.demo_content import DEMO_QUESTIONS, is_demo_id
from studyhub.services.progress.accrual import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class QuizResult:
    """Outcome of scoring one submission."""
    correct: int
    total: int
    score: int  # Percentage, rounded half up
    results: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correct": self.correct,
            "total": self.total,
            "score": self.score,
            "results": self.results,
        }


def public_question(question: Dict[str, Any]) -> Dict[str, Any]:
    """Strip the correct answer before sending a question to the client."""
    return {key: value for key, value in question.items() if key != "correctAnswer"}


def score_answers(
    questions: List[Dict[str, Any]],
    answers: Dict[str, str],
) -> QuizResult:
    """
    Score answers against quiz questions.

    Unanswered questions count as wrong. Answers to unknown question ids
    are ignored.

    Args:
        questions: Questions including their correctAnswer
        answers: Dict mapping question id to the chosen option label

    Returns:
        QuizResult; a quiz with no questions scores 0
    """
    results = []
    correct = 0

    for question in questions:
        selected = answers.get(question["id"])
        is_correct = selected is not None and selected == question.get("correctAnswer")
        if is_correct:
            correct += 1
        results.append({
            "questionId": question["id"],
            "selected": selected,
            "correctAnswer": question.get("correctAnswer"),
            "isCorrect": is_correct,
        })

    total = len(questions)
    score = round_half_up(100 * correct, total) if total else 0

    return QuizResult(correct=correct, total=total, score=score, results=results)


class QuizService:
    """
    Handles quiz lookup for lessons.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize QuizService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._quizzes_collection = db["quizzes"]
        self._questions_collection = db["quizQuestions"]

    async def get_questions(self, lesson_id: str) -> Optional[List[Dict[str, Any]]]:
        """
        Get a lesson's quiz questions, including correct answers.

        Args:
            lesson_id: Lesson ID

        Returns:
            Ordered questions, demo questions for demo lessons, or None if
            the lesson has no quiz
        """
        if is_demo_id(lesson_id):
            return [dict(q) for q in DEMO_QUESTIONS]

        quiz = await self._quizzes_collection.find_one({"lessonId": lesson_id})
        if not quiz:
            logger.debug(f"No quiz for lesson {lesson_id}")
            return None

        quiz_id = quiz["_id"]
        cursor = self._questions_collection.find(
            {"quizId": {"$in": [quiz_id, str(quiz_id)]}}
        ).sort("orderIndex", 1)
        items = await cursor.to_list(length=100)

        if not items:
            logger.warning(f"Quiz {quiz_id} for lesson {lesson_id} has no questions")
            return None

        return [self._format_question(item) for item in items]

    def _format_question(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Format question document."""
        return {
            "id": str(item["_id"]),
            "questionText": item.get("questionText", ""),
            "options": [
                {"label": option.get("label", ""), "text": option.get("text", "")}
                for option in item.get("options") or []
            ],
            "correctAnswer": item.get("correctAnswer"),
        }
