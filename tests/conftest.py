# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-wise-advice")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from wise_advice.core.security import create_access_token, hash_password
from wise_advice.db.session import Base
from wise_advice.db.session import get_db as app_get_session
from wise_advice.main import app as fastapi_app
from wise_advice.models import Category, Comment, Post, User
from wise_advice.services.mailer import MailMessage, Mailer, get_mailer

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct-horse"


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
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database; the code under test commits.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


class RecordingMailer(Mailer):
    """Mailer that keeps every message so tests can read links out of them."""

    def __init__(self) -> None:
        super().__init__(sender="tests@wise-advice.local")
        self.outbox: list[MailMessage] = []

    def send(self, to: str, subject: str, body: str) -> MailMessage:
        message = super().send(to, subject, body)
        self.outbox.append(message)
        return message


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI, db_session: Session, mailer: RecordingMailer
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_mailer] = lambda: mailer
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_mailer, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user.id, user.role, user.login)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Return a helper building authorization headers for any user."""
    return _auth_headers


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory persisting confirmed users with a known password."""

    def _make_user(
        login: str,
        *,
        role: str = "user",
        confirmed: bool = True,
        password: str = TEST_PASSWORD,
    ) -> User:
        user = User(
            login=login,
            email=f"{login}@example.com",
            password=hash_password(password),
            role=role,
            is_confirmed=confirmed,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    return make_user("alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    return make_user("bob")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user("root", role="admin")


@pytest.fixture()
def categories(db_session: Session) -> dict[str, Category]:
    """Create a couple of categories keyed by title."""
    created = {
        title: Category(title=title, description=f"Questions about {title}")
        for title in ("python", "career", "health")
    }
    db_session.add_all(created.values())
    db_session.commit()
    return created


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Factory persisting posts directly, bypassing the API."""

    def _make_post(
        author: User,
        title: str = "How do I learn Python?",
        *,
        content: str = "Looking for practical advice.",
        status: str = "active",
        locked: bool = False,
        categories: tuple[Category, ...] = (),
        publish_date: datetime | None = None,
    ) -> Post:
        kwargs: dict[str, Any] = {}
        if publish_date is not None:
            kwargs["publish_date"] = publish_date
        post = Post(
            author_id=author.id,
            title=title,
            content=content,
            status=status,
            locked=locked,
            categories=list(categories),
            **kwargs,
        )
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post


@pytest.fixture()
def test_post(make_post: Callable[..., Post], test_user: User) -> Post:
    """Create a baseline post authored by the primary test user."""
    return make_post(test_user)


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., Comment]:
    def _make_comment(
        author: User,
        *,
        post: Post | None = None,
        parent: Comment | None = None,
        content: str = "Try building something small.",
        locked: bool = False,
    ) -> Comment:
        comment = Comment(
            author_id=author.id,
            content=content,
            parent_id=parent.id if parent is not None else None,
            locked=locked,
        )
        if post is not None:
            post.comments.append(comment)
        else:
            db_session.add(comment)
        db_session.commit()
        db_session.refresh(comment)
        return comment

    return _make_comment


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return _auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return _auth_headers(other_user)


@pytest.fixture()
def admin_auth_token(admin_user: User) -> dict[str, str]:
    return _auth_headers(admin_user)
