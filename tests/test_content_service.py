"""Tests for ContentService and the catalogue filters."""

import pytest
from bson import ObjectId

from studyhub.services.content.content_service import ContentService, filter_lessons, filter_subjects
from studyhub.services.content.demo_content import DEMO_LESSONS, DEMO_SUBJECTS
from conftest import make_cursor


LESSONS = [
    {"id": "1", "title": "Binary Search", "difficultyLevel": "beginner", "tags": ["search"]},
    {"id": "2", "title": "Heaps", "difficultyLevel": "intermediate", "tags": ["trees", "priority"]},
    {"id": "3", "title": "Segment Trees", "difficultyLevel": "advanced", "tags": []},
]


class TestFilterLessons:
    def test_no_filters_returns_everything(self):
        assert filter_lessons(LESSONS) == LESSONS

    def test_search_matches_title_or_tag_case_insensitively(self):
        assert [l["id"] for l in filter_lessons(LESSONS, search="TREES")] == ["2", "3"]

    @pytest.mark.parametrize("difficulty,expected", [
        ("all", ["1", "2", "3"]),
        ("advanced", ["3"]),
        (None, ["1", "2", "3"]),
    ])
    def test_difficulty(self, difficulty, expected):
        assert [l["id"] for l in filter_lessons(LESSONS, difficulty=difficulty)] == expected

    def test_search_and_difficulty_combine(self):
        assert filter_lessons(LESSONS, search="trees", difficulty="beginner") == []


class TestFilterSubjects:
    def test_matches_description(self):
        matched = filter_subjects(DEMO_SUBJECTS, search="molecular")

        assert [s["id"] for s in matched] == ["chemistry"]


class TestGetSubjects:
    @pytest.mark.asyncio
    async def test_falls_back_to_demo_subjects(self, mock_db, mock_collection):
        mock_collection.find.return_value = make_cursor([])

        subjects = await ContentService(mock_db).get_subjects()

        assert [s["id"] for s in subjects] == [s["id"] for s in DEMO_SUBJECTS]

    @pytest.mark.asyncio
    async def test_formats_stored_subjects(self, mock_db, mock_collection):
        subject_id = ObjectId()
        mock_collection.find.return_value = make_cursor([
            {"_id": subject_id, "name": "Graphs", "orderIndex": 2},
        ])

        subjects = await ContentService(mock_db).get_subjects()

        assert subjects[0]["id"] == str(subject_id)
        assert subjects[0]["name"] == "Graphs"


class TestGetLessons:
    @pytest.mark.asyncio
    async def test_excludes_body_and_sorts(self, mock_db, mock_collection):
        cursor = make_cursor([
            {"_id": ObjectId(), "title": "Tries", "subjectId": "dsa", "videos": [{"id": "a"}, {"id": "b"}]},
        ])
        mock_collection.find.return_value = cursor

        lessons = await ContentService(mock_db).get_lessons(subject_id="dsa")

        mock_collection.find.assert_called_once_with({"subjectId": "dsa"}, {"content": 0})
        cursor.sort.assert_called_once_with("orderIndex", 1)
        assert lessons[0]["videoCount"] == 2

    @pytest.mark.asyncio
    async def test_demo_fallback_for_default_subject(self, mock_db, mock_collection):
        mock_collection.find.return_value = make_cursor([])

        lessons = await ContentService(mock_db).get_lessons(difficulty="advanced")

        assert [l["id"] for l in lessons] == ["demo-8"]

    @pytest.mark.asyncio
    async def test_no_demo_fallback_for_other_subjects(self, mock_db, mock_collection):
        mock_collection.find.return_value = make_cursor([])

        assert await ContentService(mock_db).get_lessons(subject_id="physics") == []


class TestGetLesson:
    @pytest.mark.asyncio
    async def test_demo_lesson_needs_no_lookup(self, mock_db, mock_collection):
        lesson = await ContentService(mock_db).get_lesson("demo-3")

        assert lesson["title"] == DEMO_LESSONS[2]["title"]
        assert lesson["isDemo"] is True
        assert lesson["videos"] == []
        mock_collection.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_lesson_returns_none(self, mock_db, mock_collection, sample_lesson_id):
        mock_collection.find_one.return_value = None

        assert await ContentService(mock_db).get_lesson(sample_lesson_id) is None

    @pytest.mark.asyncio
    async def test_formats_videos(self, mock_db, mock_collection, sample_lesson_id):
        mock_collection.find_one.return_value = {
            "_id": ObjectId(sample_lesson_id),
            "title": "Hash Tables",
            "content": "Buckets",
            "videos": [{"id": "v1", "title": "Intro", "url": "https://videos.example/v1"}, {"title": "Untitled id"}],
        }

        lesson = await ContentService(mock_db).get_lesson(sample_lesson_id)

        query = mock_collection.find_one.call_args[0][0]
        assert query == {"_id": {"$in": [ObjectId(sample_lesson_id), sample_lesson_id]}}
        assert lesson["content"] == "Buckets"
        assert [v["id"] for v in lesson["videos"]] == ["v1", "1"]
        assert lesson["isDemo"] is False


class TestGetLessonSummaries:
    @pytest.mark.asyncio
    async def test_queries_both_id_forms(self, mock_db, mock_collection, sample_lesson_id):
        mock_collection.find.return_value = make_cursor([
            {"_id": ObjectId(sample_lesson_id), "title": "Hash Tables"},
        ])

        summaries = await ContentService(mock_db).get_lesson_summaries([sample_lesson_id, "intro"])

        query = mock_collection.find.call_args[0][0]
        assert query == {"_id": {"$in": [ObjectId(sample_lesson_id), sample_lesson_id, "intro"]}}
        assert summaries[sample_lesson_id]["title"] == "Hash Tables"

    @pytest.mark.asyncio
    async def test_empty_ids_skip_query(self, mock_db, mock_collection):
        assert await ContentService(mock_db).get_lesson_summaries([]) == {}
        mock_collection.find.assert_not_called()
