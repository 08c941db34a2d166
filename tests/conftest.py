"""Shared fixtures: an isolated gateway per test with in-memory SQLite."""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from spirit.config import Settings
from spirit.db import drop_db, init_db
from spirit.main import create_app
from spirit.services import ChatReply

ADMIN_TOKEN = "test-admin-secret"
JWT_SECRET = "test-jwt-secret"


def make_settings(**overrides) -> Settings:
    values = {
        "admin_token": ADMIN_TOKEN,
        "jwt_secret": JWT_SECRET,
        "openai_api_key": "sk-test",
        "database_url": "sqlite+aiosqlite:///:memory:",
        "rate_limit_per_minute": 1000,
        "log_json": False,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeChatService:
    """Stands in for the OpenAI-backed ChatService."""

    def __init__(self, reply: str = "The river remembers."):
        self.reply_text = reply
        self.calls = []

    async def reply(self, messages):
        self.calls.append(messages)
        return ChatReply(content=self.reply_text, model="fake")


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def app(settings):
    """Create a fresh app and database for each test"""
    application = create_app(settings)
    application.state.chat_service = FakeChatService()
    await init_db(application.state.engine)
    yield application
    await drop_db(application.state.engine)
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    """Create an async test client"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers() -> dict:
    return {"x-admin-token": ADMIN_TOKEN}
