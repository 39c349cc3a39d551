# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["REPUTATION_DECAY_ENABLED"] = "false"

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from pulse_stage.api.v1 import dependencies  # noqa: E402
from pulse_stage.core.security import create_access_token  # noqa: E402
from pulse_stage.core.settings import settings  # noqa: E402
from pulse_stage.db.session import Base  # noqa: E402
from pulse_stage.db.session import get_db as app_get_session  # noqa: E402
from pulse_stage.main import app as fastapi_app  # noqa: E402
from pulse_stage.models import Post, Preview, User  # noqa: E402
from pulse_stage.services.broadcast import Broadcaster  # noqa: E402

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeMetadataClient:
    """Stands in for the metadata-extraction service."""

    def __init__(self) -> None:
        self.responses: dict[str, dict[str, Any]] = {}
        self.errors: dict[str, Exception] = {}
        self.calls: list[str] = []

    def respond(self, url: str, payload: dict[str, Any]) -> None:
        self.responses[url] = payload

    def fail(self, url: str, error: Exception) -> None:
        self.errors[url] = error

    async def fetch(self, url: str) -> dict[str, Any]:
        self.calls.append(url)
        if url in self.errors:
            raise self.errors[url]
        return self.responses.get(url, {"meta": {"title": url}, "links": {}})

    async def close(self) -> None:
        return None


class RecordingMediaStore:
    """Media store remembering what it was asked to delete."""

    def __init__(self) -> None:
        self.deleted: list[str] = []

    def delete(self, path: str) -> None:
        self.deleted.append(path)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def session_factory(engine: Engine) -> Callable[[], Session]:
    """Return a factory producing independent sessions on the test database."""
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def metadata_client() -> FakeMetadataClient:
    return FakeMetadataClient()


@pytest.fixture()
def broadcaster() -> Broadcaster:
    return Broadcaster(queue_size=10)


@pytest.fixture()
def media_store() -> RecordingMediaStore:
    return RecordingMediaStore()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    metadata_client: FakeMetadataClient,
    broadcaster: Broadcaster,
    media_store: RecordingMediaStore,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    overrides: dict[Callable[..., Any], Callable[..., Any]] = {
        app_get_session: _get_session_override,
        dependencies.get_metadata_client_dep: lambda: metadata_client,
        dependencies.get_broadcaster_dep: lambda: broadcaster,
        dependencies.get_media_store_dep: lambda: media_store,
    }
    app.dependency_overrides.update(overrides)
    try:
        yield
    finally:
        for dependency in overrides:
            app.dependency_overrides.pop(dependency, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users."""

    def _make_user(username: str, balance: int = 10, reputation: float = 1.0) -> User:
        user = User(
            username=username,
            display_name=username.title(),
            balance=balance,
            reputation=reputation,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return make_user("alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second user."""
    return make_user("bob")


@pytest.fixture()
def admin_user(make_user: Callable[..., User], monkeypatch: pytest.MonkeyPatch) -> User:
    """Create the system account and register it in settings."""
    admin = make_user("system", balance=0)
    monkeypatch.setattr(settings, "admin_account_id", admin.id)
    return admin


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    token = create_access_token(other_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory persisting posts with controllable creation times."""

    def _make_post(
        author: User,
        *,
        minutes: int = 0,
        parent: Post | None = None,
        preview: Preview | None = None,
        reputation: float = 1.0,
        **fields: Any,
    ) -> Post:
        post = Post(
            user_id=author.id,
            replied_to_id=parent.id if parent is not None else None,
            preview_id=preview.id if preview is not None else None,
            title=fields.pop("title", "A post"),
            text=fields.pop("text", "<p>Body</p>"),
            images=fields.pop("images", []),
            reputation=reputation,
            created_at=BASE_TIME + timedelta(minutes=minutes),
            **fields,
        )
        db_session.add(post)
        db_session.commit()
        return post

    return _make_post


@pytest.fixture()
def test_post(make_post: Callable[..., Post], test_user: User) -> Post:
    """Create a baseline post authored by the primary test user."""
    return make_post(test_user, title="Hello")


@pytest.fixture()
def make_preview(db_session: Session) -> Callable[..., Preview]:
    """Return a factory persisting previews."""

    def _make_preview(url: str, **fields: Any) -> Preview:
        preview = Preview(url=url, title=fields.pop("title", "Example"), **fields)
        db_session.add(preview)
        db_session.commit()
        return preview

    return _make_preview
