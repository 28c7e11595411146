import copy
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from postcraft.db.base import Base
import postcraft.models  # noqa: F401
from postcraft.dependencies.auth import get_synthesizer
from postcraft.main import app
from postcraft.schemas.generation import GenerateRequest
from postcraft.store import get_store
from postcraft.store.json_store import JsonFileStore
from postcraft.store.sql_store import SqlStore

SAMPLE_CONTENT = {
    "blogPost": {
        "title": "Remote Work Is Here to Stay",
        "metaDescription": "How distributed startup teams stay aligned, productive and happy.",
        "intro": "Remote work changed how startups hire.\n\nIt also changed how they ship.\n\nHere is what works.",
        "sections": [
            {"heading": "Async by default", "content": "Write things down. Decide in documents."},
            {"heading": "Rituals that scale", "content": "Weekly demos and short written updates."},
            {"heading": "Hiring across time zones", "content": "Overlap hours matter more than location."},
        ],
        "conclusion": "Teams thrive when they design for distance.\n\nStart with one ritual this week.",
        "tags": ["remote work", "startups", "teams", "productivity", "future of work"],
    },
    "twitterThread": {
        "tweets": [
            "Remote teams are not a trend. They are the default. 🧵",
            "The best remote teams write more than they talk.",
            "One founder cut meetings by 40% with written updates.",
            "Tip: set 3 overlap hours and protect them.",
            "Culture is what you repeat, not what you post.",
            "Follow for more on building distributed teams.",
        ]
    },
    "instagramCaption": {
        "caption": "Your office is wherever your team does its best work ✨",
        "hashtags": [
            "remotework", "startup", "founders", "wfh", "teamwork", "productivity",
            "futureofwork", "asyncwork", "leadership", "hiring", "culture", "growth",
        ],
    },
    "linkedinPost": {"content": "Three years ago we went fully remote. Here is what we learned."},
    "facebookAd": {
        "headline": "Build a Remote Team That Ships",
        "primaryText": "Join 2,000 founders running calm, productive remote teams.",
        "cta": "Learn More",
    },
    "googleAd": {
        "headlines": ["Remote Team Playbook", "Ship Faster Remotely", "Free Founder Guide"],
        "descriptions": [
            "Practical rituals for distributed startup teams.",
            "Download the free playbook and start this week.",
        ],
    },
}

VALID_INPUT = {
    "prompt": "The future of remote work and how teams thrive",
    "tone": "professional",
    "audience": "startup founders",
}


def make_request(**overrides) -> GenerateRequest:
    data = dict(VALID_INPUT)
    data.update(overrides)
    return GenerateRequest(**data)


class FakeSynthesizer:
    """Stands in for ContentSynthesizer; records every call."""

    def __init__(self, content=None, error=None, before_return=None):
        self.content = content if content is not None else SAMPLE_CONTENT
        self.error = error
        self.before_return = before_return
        self.calls = []

    def synthesize(self, prompt, tone, audience):
        self.calls.append((prompt, tone, audience))
        if self.before_return is not None:
            self.before_return()
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.content)


class FakeCompletions:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.reply is None:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeGroqClient:
    """Minimal stand-in for groq.Groq: client.chat.completions.create(...)."""

    def __init__(self, reply=None, error=None):
        self.completions = FakeCompletions(reply=reply, error=error)
        self.chat = SimpleNamespace(completions=self.completions)


class CountingStore:
    """Wraps a store and counts write calls."""

    WRITES = ("create_user", "increment_usage", "upgrade_plan", "create_generation", "delete_generation")

    def __init__(self, inner):
        self.inner = inner
        self.writes = []

    def __getattr__(self, name):
        attr = getattr(self.inner, name)
        if name in self.WRITES:
            def wrapper(*args, **kwargs):
                self.writes.append(name)
                return attr(*args, **kwargs)
            return wrapper
        return attr


@pytest.fixture
def sql_store():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield SqlStore(session_factory)
    engine.dispose()


@pytest.fixture
def json_store(tmp_path):
    return JsonFileStore(str(tmp_path / "data"))


@pytest.fixture(params=["sql", "json"])
def store(request):
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def account(store):
    return store.create_user(email="founder@example.com", name="Founder", hashed_password="not-a-real-hash")


@pytest.fixture
def synthesizer():
    return FakeSynthesizer()


@pytest.fixture
def client(store, synthesizer):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_synthesizer] = lambda: synthesizer
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def registered_client(client):
    """API client holding a session cookie for a freshly registered free account."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "correct horse"},
    )
    assert response.status_code == 201
    client.user = response.json()["user"]
    return client
