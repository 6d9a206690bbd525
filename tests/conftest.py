"""
Shared fixtures: an in-memory MongoDB (mongomock-motor) behind the Motor
API the services use, plus users, tokens and question factories.
"""

from datetime import datetime

import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import ServerSelectionTimeoutError

from placement_prep.main import app
from placement_prep.utils.database import get_database
from placement_prep.utils.security import create_user_token, get_password_hash

TEST_PASSWORD = "Secret123!"
TEST_DB = "placement_prep_test"


class BrokenCollection:
    """A collection whose server never answers."""

    def aggregate(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("no servers")

    def find(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("no servers")

    async def find_one(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("no servers")

    async def insert_one(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("no servers")


class BrokenDatabase:
    def __getitem__(self, name):
        return BrokenCollection()


@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture
def mongo(mongo_client):
    """Synchronous view of the test database, for arranging and asserting."""
    return mongo_client[TEST_DB]


@pytest.fixture
def db(mongo_client):
    return AsyncMongoMockClient(mock_mongo_client=mongo_client)[TEST_DB]


@pytest.fixture
def client(db):
    app.dependency_overrides[get_database] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(mongo, name="Test User", email="test@example.com", role="student"):
    doc = {
        "name": name,
        "email": email,
        "password_hash": get_password_hash(TEST_PASSWORD),
        "avatar_url": "",
        "role": role,
        "created_at": datetime.utcnow(),
    }
    mongo["users"].insert_one(doc)
    return doc


def bearer(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def user(mongo):
    return make_user(mongo)


@pytest.fixture
def other_user(mongo):
    return make_user(mongo, name="Other User", email="other@example.com")


@pytest.fixture
def admin_user(mongo):
    return make_user(mongo, name="Admin", email="admin@example.com", role="admin")


@pytest.fixture
def auth_headers(user):
    return bearer(user)


@pytest.fixture
def other_headers(other_user):
    return bearer(other_user)


@pytest.fixture
def admin_headers(admin_user):
    return bearer(admin_user)


@pytest.fixture
def add_question(mongo):
    """Insert a question document and return its id as a string."""

    def _add(
        category="Aptitude",
        difficulty="Easy",
        options=("a", "b", "c"),
        correct_index=0,
        topics=None,
        text=None,
        explanation="",
    ):
        doc = {
            "text": text or f"{category} {difficulty} question",
            "options": list(options),
            "correct_index": correct_index,
            "explanation": explanation,
            "category": category,
            "difficulty": difficulty,
            "topics": list(topics) if topics else [],
        }
        return str(mongo["questions"].insert_one(doc).inserted_id)

    return _add


@pytest.fixture
def add_result(mongo):
    """Insert a stored test result directly, bypassing grading."""

    def _add(user, category="Aptitude", score=50, submitted_at=None, status="manual_review", total=4):
        correct = round(total * score / 100)
        doc = {
            "user": user["_id"] if isinstance(user, dict) else ObjectId(user),
            "category": category,
            "difficulty": "Easy",
            "total": total,
            "correct_answers": correct,
            "wrong_answers": total - correct,
            "score": score,
            "submitted_at": submitted_at or datetime.utcnow(),
            "submission_code": "",
            "language": "javascript",
            "status": status,
            "topic_results": [],
            "correct_answers_map": {},
            "questions_snapshot": [],
            "time_taken": "",
            "admin_notes": "",
            "reviewed_at": None,
        }
        return str(mongo["test_results"].insert_one(doc).inserted_id)

    return _add
