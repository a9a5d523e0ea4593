"""
Shared fixtures for the mock interview test suite.

MongoDB is replaced by mongomock-motor and the text-generation service by a
fake AsyncOpenAI client that replays queued replies, so every test runs
offline and deterministically. Route tests drive the FastAPI app in-process
through httpx with dependency overrides.

Dependencies:
- pytest: For testing framework
- mongomock_motor: For an in-memory motor-compatible database
- httpx: For the ASGI test client

Author: @kcaparas1630
"""

import httpx
import pytest
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient
from mockinterview.database import SESSIONS_COLLECTION, ensure_indexes
from mockinterview.services.conversation.conversation_service import InterviewConversationService
from mockinterview.services.conversation.conversation_store import ConversationStore
from mockinterview.services.conversation.session_store import SessionStore
from mockinterview.services.generation import GenerationClient
from mockinterview.test.support import EXPERIENCE, ROLE, TOPICS, USER_ID, FakeOpenAI


@pytest.fixture
async def db():
    database = AsyncMongoMockClient()["mockinterview_test"]
    await ensure_indexes(database)
    return database


@pytest.fixture
async def session_id(db):
    """An interview-prep session owned by USER_ID."""
    oid = ObjectId()
    await db[SESSIONS_COLLECTION].insert_one({
        "_id": oid,
        "user": USER_ID,
        "role": ROLE,
        "experience": EXPERIENCE,
        "topicsToFocus": TOPICS,
    })
    return str(oid)


@pytest.fixture
def fake_llm():
    return FakeOpenAI()


@pytest.fixture
def generation(fake_llm):
    return GenerationClient(fake_llm, model="test-model")


@pytest.fixture
def store(db):
    return ConversationStore(db)


@pytest.fixture
def sessions(db):
    return SessionStore(db)


@pytest.fixture
def service(store, sessions, generation):
    return InterviewConversationService(store, sessions, generation)


@pytest.fixture
async def client(db, generation):
    """In-process API client authenticated as USER_ID."""
    from mockinterview.main import app
    from mockinterview.core.dependencies import get_generation_client, get_question_generation_client
    from mockinterview.core.route_limiters import limiter
    from mockinterview.database import get_database
    from mockinterview.services.auth.firebase_auth import get_current_user_uid

    app.dependency_overrides[get_database] = lambda: db
    app.dependency_overrides[get_generation_client] = lambda: generation
    app.dependency_overrides[get_question_generation_client] = lambda: generation
    app.dependency_overrides[get_current_user_uid] = lambda: USER_ID
    limiter.enabled = False

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()
    limiter.enabled = True
