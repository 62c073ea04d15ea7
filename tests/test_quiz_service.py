"""Tests for quiz scoring, question lookup and the quiz pipelines."""

import pytest
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from common.utils.exceptions import NotFoundException
from studyhub.pipelines.quiz import get_quiz_pipeline, submit_quiz_pipeline
from studyhub.services.content.demo_content import DEMO_QUESTIONS
from studyhub.services.quiz.quiz_service import QuizService, public_question, score_answers
from conftest import make_cursor


def _questions(n):
    return [
        {
            "id": f"q{i}",
            "questionText": f"Question {i}",
            "options": [{"label": "A", "text": "yes"}, {"label": "B", "text": "no"}],
            "correctAnswer": "A",
        }
        for i in range(n)
    ]


# ─────────────────────────────────────────────────────────────────
# score_answers / public_question
# ─────────────────────────────────────────────────────────────────


class TestScoreAnswers:
    @pytest.mark.parametrize("total,correct,expected", [
        (4, 4, 100),
        (4, 3, 75),
        (8, 1, 13),  # 12.5 rounds up
        (3, 2, 67),
        (3, 1, 33),
        (5, 0, 0),
    ])
    def test_percentage_rounding(self, total, correct, expected):
        questions = _questions(total)
        answers = {q["id"]: "A" for q in questions[:correct]}

        result = score_answers(questions, answers)

        assert result.correct == correct
        assert result.total == total
        assert result.score == expected

    def test_no_questions_scores_zero(self):
        result = score_answers([], {"q0": "A"})

        assert result.score == 0
        assert result.total == 0

    def test_unanswered_and_unknown_answers(self):
        questions = _questions(2)

        result = score_answers(questions, {"q0": "B", "nope": "A"})

        assert result.correct == 0
        assert result.results[0]["isCorrect"] is False
        assert result.results[1]["selected"] is None

    def test_results_reveal_correct_answer(self):
        result = score_answers(_questions(1), {"q0": "A"})

        assert result.to_dict()["results"] == [
            {"questionId": "q0", "selected": "A", "correctAnswer": "A", "isCorrect": True}
        ]


class TestPublicQuestion:
    def test_strips_correct_answer(self):
        question = _questions(1)[0]

        public = public_question(question)

        assert "correctAnswer" not in public
        assert public["options"] == question["options"]
        assert "correctAnswer" in question


# ─────────────────────────────────────────────────────────────────
# QuizService.get_questions
# ─────────────────────────────────────────────────────────────────


class TestGetQuestions:
    @pytest.mark.asyncio
    async def test_demo_lesson_gets_demo_questions(self, mock_db, mock_collection):
        service = QuizService(mock_db)

        questions = await service.get_questions("demo-4")

        assert [q["id"] for q in questions] == [q["id"] for q in DEMO_QUESTIONS]
        mock_collection.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_quiz_returns_none(self, mock_db, mock_collection, sample_lesson_id):
        mock_collection.find_one.return_value = None
        service = QuizService(mock_db)

        assert await service.get_questions(sample_lesson_id) is None

    @pytest.mark.asyncio
    async def test_quiz_without_questions_returns_none(self, mock_db, mock_collection, sample_lesson_id):
        mock_collection.find_one.return_value = {"_id": ObjectId(), "lessonId": sample_lesson_id}
        mock_collection.find.return_value = make_cursor([])
        service = QuizService(mock_db)

        assert await service.get_questions(sample_lesson_id) is None

    @pytest.mark.asyncio
    async def test_formats_questions_in_order(self, mock_db, mock_collection, sample_lesson_id):
        quiz_id = ObjectId()
        question_id = ObjectId()
        mock_collection.find_one.return_value = {"_id": quiz_id, "lessonId": sample_lesson_id}
        cursor = make_cursor([{
            "_id": question_id,
            "quizId": quiz_id,
            "questionText": "Load factor?",
            "options": [{"label": "A", "text": "n/m"}],
            "correctAnswer": "A",
            "orderIndex": 0,
        }])
        mock_collection.find.return_value = cursor
        service = QuizService(mock_db)

        questions = await service.get_questions(sample_lesson_id)

        mock_collection.find.assert_called_once_with({"quizId": {"$in": [quiz_id, str(quiz_id)]}})
        cursor.sort.assert_called_once_with("orderIndex", 1)
        assert questions == [{
            "id": str(question_id),
            "questionText": "Load factor?",
            "options": [{"label": "A", "text": "n/m"}],
            "correctAnswer": "A",
        }]


# ─────────────────────────────────────────────────────────────────
# Pipelines
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def quiz_service():
    service = MagicMock()
    service.get_questions = AsyncMock(return_value=_questions(4))
    return service


@pytest.fixture
def progress_service():
    service = MagicMock()
    service.get_record = AsyncMock(return_value={"completionPercentage": 60, "quizScore": None})
    service.save_accrual = AsyncMock(return_value={"completionPercentage": 100, "quizScore": 75})
    return service


@pytest.fixture
def content_service(sample_lesson):
    service = MagicMock()
    service.get_lesson = AsyncMock(return_value=sample_lesson)
    return service


class TestGetQuizPipeline:
    @pytest.mark.asyncio
    async def test_hides_answers(self, quiz_service, sample_lesson_id):
        quiz = await get_quiz_pipeline(quiz_service, sample_lesson_id, time_limit_minutes=10)

        assert quiz["timeLimitMinutes"] == 10
        assert quiz["isDemo"] is False
        assert all("correctAnswer" not in q for q in quiz["questions"])

    @pytest.mark.asyncio
    async def test_no_quiz_is_404(self, quiz_service, sample_lesson_id):
        quiz_service.get_questions.return_value = None

        with pytest.raises(NotFoundException) as exc_info:
            await get_quiz_pipeline(quiz_service, sample_lesson_id, time_limit_minutes=10)

        assert exc_info.value.code == "QUIZ_NOT_FOUND"


class TestSubmitQuizPipeline:
    @pytest.mark.asyncio
    async def test_records_score_as_progress(
        self, quiz_service, engine, progress_service, content_service, sample_user_id,
        sample_lesson_id,
    ):
        result = await submit_quiz_pipeline(
            quiz_service, engine, progress_service, content_service, sample_user_id,
            sample_lesson_id, answers={"q0": "A", "q1": "A", "q2": "A", "q3": "B"},
        )

        assert result["score"] == 75
        assert result["progress"]["completionPercentage"] == 100
        saved = progress_service.save_accrual.call_args[0][2]
        assert saved.quiz_score == 75
        assert saved.completion_percentage == 100

    @pytest.mark.asyncio
    async def test_demo_quiz_is_not_stored(
        self, quiz_service, engine, progress_service, content_service, sample_user_id,
    ):
        result = await submit_quiz_pipeline(
            quiz_service, engine, progress_service, content_service, sample_user_id, "demo-1",
            answers={},
        )

        assert result["score"] == 0
        assert result["progress"] is None
        progress_service.get_record.assert_not_awaited()
        progress_service.save_accrual.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_first_submission_counts_lesson_as_opened(
        self, quiz_service, engine, progress_service, content_service, sample_user_id,
        sample_lesson_id,
    ):
        progress_service.get_record.return_value = None

        await submit_quiz_pipeline(
            quiz_service, engine, progress_service, content_service, sample_user_id,
            sample_lesson_id, answers={"q0": "A"},
        )

        content_service.get_lesson.assert_awaited_once_with(sample_lesson_id)
        saved = progress_service.save_accrual.call_args[0][2]
        assert saved.completion_percentage == 70
        assert saved.created is True
