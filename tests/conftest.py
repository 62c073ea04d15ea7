"""Shared test fixtures for StudyHub backend tests."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from studyhub.services.progress.accrual import MilestoneWeights, ProgressAccrualEngine


def make_cursor(docs):
    """Create a mock Motor cursor (sync chaining, async to_list)."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


@pytest.fixture
def sample_user_id():
    return "0b7c9a52-5f43-4d7e-9a5e-3c1f2d4e5a6b"


@pytest.fixture
def sample_lesson_id():
    return str(ObjectId())


@pytest.fixture
def now():
    return datetime(2026, 3, 2, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() and watch() return cursors synchronously (not
    # coroutines), so use MagicMock for them. Async methods like find_one,
    # insert_one, find_one_and_update stay as AsyncMock.
    collection.find = MagicMock()
    collection.watch = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def engine():
    return ProgressAccrualEngine(MilestoneWeights(content=30, video=30, quiz=40))


@pytest.fixture
def sample_lesson(sample_lesson_id):
    """A formatted lesson with three videos."""
    return {
        "id": sample_lesson_id,
        "subjectId": "dsa",
        "title": "Hash Tables",
        "difficultyLevel": "intermediate",
        "tags": ["hashing"],
        "orderIndex": 3,
        "videoCount": 3,
        "content": "Hash tables map keys to buckets.",
        "videos": [
            {"id": "v1", "title": "Hashing", "url": "https://videos.example/v1"},
            {"id": "v2", "title": "Collisions", "url": "https://videos.example/v2"},
            {"id": "v3", "title": "Resizing", "url": "https://videos.example/v3"},
        ],
        "isDemo": False,
    }


@pytest.fixture
def sample_progress_doc(sample_user_id, sample_lesson_id, now):
    return {
        "_id": ObjectId(),
        "userId": sample_user_id,
        "lessonId": sample_lesson_id,
        "completionPercentage": 30,
        "quizScore": None,
        "watchedVideoIds": [],
        "createdAt": now,
        "updatedAt": now,
    }
