"""Shared test fixtures for the website editor test suite.

Tests run against a throwaway SQLite file unless TEST_DATABASE_URL points at
another database (e.g. a local PostgreSQL). Tables are created by the app on
import and emptied before every test.
"""

import os
import tempfile
from datetime import datetime
from typing import Optional

# Force auth off and use the test database before any app imports.
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL",
    "sqlite:///" + os.path.join(tempfile.mkdtemp(prefix="website-editor-"), "test.db"),
)
os.environ["AUTH_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "text"

import pytest
from sqlalchemy.orm import Session
from fastapi.testclient import TestClient

from website_editor.database import Base, get_db, SessionLocal
from website_editor.main import app
from website_editor.core.token_factory import create_token
from website_editor.core.config import settings
from website_editor.middleware.request_context import _rate_buckets
from website_editor.models import Ui, User
from website_editor.repositories import SubPromptRepository, UiRepository, UserRepository


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty every table before each test, children first.

    Runs before the test (not after) so a failing test leaves its data behind
    for inspection.
    """
    db = SessionLocal()
    try:
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient sharing the test session with the app."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    _rate_buckets.clear()
    # Startup seeding writes through its own session; SQLite needs our read lock gone.
    db.rollback()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers_for(monkeypatch):
    """Turn authentication on and return a ``user_id -> headers`` factory."""
    monkeypatch.setattr(settings, "auth_enabled", True)

    def _headers(user_id: str) -> dict:
        token = create_token(subject=user_id, secret=settings.jwt_secret_key)
        return {"Authorization": f"Bearer {token}"}

    return _headers


def make_user(db: Session, user_id: str = "user-1", first_name: str = "Ada", **overrides) -> User:
    """Insert and commit a user."""
    user = UserRepository(db).create(user_id, first_name=first_name, image_url=overrides.pop("image_url", None))
    for key, value in overrides.items():
        setattr(user, key, value)
    db.commit()
    return user


def make_ui(
    db: Session,
    owner_id: str = "user-1",
    prompt: str = "A landing page for a bakery",
    created_at: Optional[datetime] = None,
    root_sub_ids: tuple = ("a-0",),
    **overrides,
) -> Ui:
    """Insert and commit a UI with one root revision per entry of *root_sub_ids*."""
    ui = UiRepository(db).create(
        owner_id=owner_id,
        ui_type=overrides.pop("ui_type", "landing"),
        prompt=prompt,
        preview_image=overrides.pop("preview_image", "https://img.example/preview.png"),
    )
    for sub_id in root_sub_ids:
        SubPromptRepository(db).create_with_code(
            ui_id=ui.id,
            sub_id=sub_id,
            sub_prompt=prompt,
            code=f"<html><!-- {sub_id} --></html>",
            model_id="test-model",
        )
    if created_at is not None:
        ui.created_at = created_at
        ui.updated_at = created_at
    for key, value in overrides.items():
        setattr(ui, key, value)
    db.commit()
    return ui
