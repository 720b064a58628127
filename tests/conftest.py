"""
tests/conftest.py
"""
from __future__ import annotations

import datetime as _dt
import itertools
from pathlib import Path
from typing import Generator

import pytest
from flask.testing import FlaskClient
from pytest import MonkeyPatch

# The single-file app lives here:
from quire.blog import PostStore, app, get_db, get_store, init_db

ADMIN = "admin@example.com"
CSRF = "test-token"  # shared constant so the token matches the session


@pytest.fixture(scope="session")
def _tmp_db_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """One temp file for the whole test session (faster than per-test)."""
    return tmp_path_factory.mktemp("data") / "test.sqlite3"


@pytest.fixture(scope="session", autouse=True)
def _configure_app(_tmp_db_path: Path) -> None:
    """
    Configure the Flask app *once* before the first test is collected.
    """
    app.config.update(
        TESTING=True,
        DATABASE=str(_tmp_db_path),
        ADMIN_EMAIL=ADMIN,
        SESSION_COOKIE_SECURE=False,
    )
    with app.app_context():
        init_db()


@pytest.fixture(autouse=True)
def _empty_posts() -> Generator[None, None, None]:
    """Every test starts with an empty ``post`` table."""
    yield
    with app.app_context():
        db = get_db()
        db.execute("DELETE FROM post")
        db.commit()


@pytest.fixture
def client() -> Generator[FlaskClient, None, None]:
    """
    Gives each test an isolated application context *and* test client.
    """
    with app.test_client() as client:
        with app.app_context():
            yield client


@pytest.fixture
def store(client) -> PostStore:
    """A store bound to the same connection the client's requests use."""
    return get_store()


@pytest.fixture
def admin(client) -> FlaskClient:
    """The test client, signed in as the administrator."""
    _login_as(client, ADMIN)
    return client


def _login_as(client: FlaskClient, email: str, user_id: int = 1) -> None:
    with client.session_transaction() as sess:
        sess["logged_in"] = True
        sess["user_id"] = user_id
        sess["email"] = email
        sess["csrf"] = CSRF


@pytest.fixture(autouse=True, scope="session")
def _fast_clock():
    """
    Patch quire.blog.utc_now for the whole test session so every call
    returns an ever-increasing timestamp; listings sort deterministically.
    """
    from quire import blog  # import here to avoid early import

    counter = itertools.count()  # 0, 1, 2, …

    base = _dt.datetime(2099, 1, 1, tzinfo=_dt.timezone.utc)

    def _fake_now():
        return base + _dt.timedelta(seconds=next(counter))

    mp = MonkeyPatch()
    mp.setattr(blog, "utc_now", _fake_now)

    yield  # tests run here

    mp.undo()  # clean up at session end
