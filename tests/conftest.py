import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="pagecontent-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["ENVIRONMENT"] = "production"
os.environ["LOG_DIR"] = os.path.join(_TMP, "logs")
os.environ["SECRET_KEY"] = "test-secret"
os.environ["DEFAULT_LANG"] = "en"

import pytest
from fastapi.testclient import TestClient

from pagecontent.db import Base, SessionLocal, engine
from pagecontent.deps import hash_password
from pagecontent.models import (
    STATUS_PUBLISHED,
    Locale,
    Page,
    PageTranslation,
    User,
)
from pagecontent.services.cache import TaggedCache

ADMIN_USERNAME = "editor"
ADMIN_PASSWORD = "s3cret-pass"


# ── Database ──────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def _schema():
    """Fresh tables for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def cache():
    return TaggedCache()


@pytest.fixture
def locales(db):
    """en (default), az and ru enabled; de present but switched off."""
    db.add_all(
        [
            Locale(code="en", name="English", native_name="English", is_default=True),
            Locale(code="az", name="Azerbaijani", native_name="Azərbaycan"),
            Locale(code="ru", name="Russian", native_name="Русский"),
            Locale(code="de", name="German", native_name="Deutsch", is_enabled=False),
        ]
    )
    db.commit()


@pytest.fixture
def make_page(db):
    """make_page("home", en=[...], az=(DRAFT, [...])) with published defaults."""

    def _make(slug, **translations):
        page = Page(slug=slug)
        for code, value in translations.items():
            status, blocks = value if isinstance(value, tuple) else (STATUS_PUBLISHED, value)
            page.translations.append(
                PageTranslation(
                    locale_code=code,
                    title=f"{slug} ({code})",
                    blocks=blocks,
                    status=status,
                )
            )
        db.add(page)
        db.commit()
        return page

    return _make


# ── HTTP ──────────────────────────────────────────────────────────────────

@pytest.fixture
def app():
    from pagecontent.main import app

    app.state.cache.clear()
    return app


@pytest.fixture
def client(app, locales):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_user(db):
    user = User(
        username=ADMIN_USERNAME,
        email="editor@example.com",
        password_hash=hash_password(ADMIN_PASSWORD),
        is_admin=True,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def admin_client(client, admin_user):
    r = client.post("/admin/login", data={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    return client
