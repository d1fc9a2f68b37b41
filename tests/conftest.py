# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")

from newsdesk.api.v1.dependencies import get_moderation_service_dep
from newsdesk.core.settings import settings
from newsdesk.db.session import Base
from newsdesk.db.session import get_db as app_get_session
from newsdesk.main import app as fastapi_app
from newsdesk.models import Comment, ModerationKeyword, Post, User
from newsdesk.repositories.keyword_repo import KeywordRepository
from newsdesk.services.keyword_cache import KeywordCache
from newsdesk.services.moderation import ModerationService

TEST_DB_URL = "sqlite://"

_USERNAME_COUNTER = count(1)


@pytest.fixture(scope="session")
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
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def keyword_cache(db_session: Session) -> KeywordCache:
    """Keyword cache reading rules through the test session."""
    return KeywordCache(
        lambda: KeywordRepository(db_session).load_active_keywords(),
        ttl_seconds=300.0,
    )


@pytest.fixture()
def moderation_service(keyword_cache: KeywordCache) -> ModerationService:
    return ModerationService(keyword_cache, auto_hide_report_threshold=3)


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    moderation_service: ModerationService,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    overrides: dict[Callable[..., object], Callable[..., object]] = {
        app_get_session: _get_session_override,
        get_moderation_service_dep: lambda: moderation_service,
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


def _create_user(db_session: Session, *, is_admin: bool = False) -> User:
    user = User(username=f"reader{next(_USERNAME_COUNTER)}", is_admin=is_admin)
    db_session.add(user)
    db_session.flush()
    db_session.refresh(user)
    return user


def _auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers carrying a token for ``user``."""
    token = jwt.encode(
        {"sub": str(user.id)},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory creating additional persisted readers."""

    def _make(*, is_admin: bool = False) -> User:
        return _create_user(db_session, is_admin=is_admin)

    return _make


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted reader."""
    return _create_user(db_session)


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second persisted reader."""
    return _create_user(db_session)


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    """Create and return a persisted administrator."""
    return _create_user(db_session, is_admin=True)


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    return _auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    return _auth_headers(other_user)


@pytest.fixture()
def admin_auth_token(admin_user: User) -> dict[str, str]:
    return _auth_headers(admin_user)


@pytest.fixture()
def test_post(db_session: Session, admin_user: User) -> Post:
    """Create a baseline article for comments."""
    post = Post(title="Council approves new park", body="Story body", author_id=admin_user.id)
    db_session.add(post)
    db_session.flush()
    db_session.refresh(post)
    return post


@pytest.fixture()
def add_keyword(db_session: Session) -> Callable[..., ModerationKeyword]:
    """Insert a keyword rule directly, bypassing cache invalidation."""

    def _add(keyword: str, action: str, replacement: str | None = None) -> ModerationKeyword:
        row = ModerationKeyword(keyword=keyword, action=action, replacement=replacement)
        db_session.add(row)
        db_session.flush()
        return row

    return _add


@pytest.fixture()
def make_comment(db_session: Session, test_post: Post) -> Callable[..., Comment]:
    """Insert a comment row directly with the given flags."""

    def _make(author: User, content: str = "A thoughtful reply", **flags: object) -> Comment:
        comment = Comment(
            content=content,
            post_id=test_post.id,
            author_id=author.id,
            **flags,
        )
        db_session.add(comment)
        db_session.flush()
        db_session.refresh(comment)
        return comment

    return _make


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Return a helper building authorization headers for any user."""
    return _auth_headers
