import json

import pytest
from typer.testing import CliRunner

from pagecontent.cli import app
from pagecontent.deps import verify_password
from pagecontent.models import STATUS_PUBLISHED, Locale, Page, User

runner = CliRunner()

SEED = {
    "pages": [
        {
            "slug": "services",
            "title": "Services",
            "locales": {
                "en": [
                    {"type": "hero", "tagline": "What we do"},
                    {
                        "type": "serviceDetails",
                        "serviceId": "pharma",
                        "title": "Pharma",
                        "description": "Registration and GMP audits",
                    },
                ],
                "az": [{"type": "hero", "tagline": "Nə edirik"}],
            },
        }
    ]
}


@pytest.fixture
def seed_file(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(SEED), encoding="utf-8")
    return path


def _translation(db, slug, code):
    db.expire_all()
    return db.query(Page).filter_by(slug=slug).one().get_translation(code)


def test_init_db_adds_default_locales(db):
    result = runner.invoke(app, ["init-db"])
    assert result.exit_code == 0, result.output
    codes = {row.code: row for row in db.query(Locale)}
    assert set(codes) == {"en", "az", "ru"}
    assert codes["en"].is_default

    again = runner.invoke(app, ["init-db"])
    assert "0 locale(s) added" in again.output


def test_create_admin(db):
    result = runner.invoke(app, ["create-admin", "editor", "--password", "pw-123"])
    assert result.exit_code == 0, result.output
    user = db.query(User).filter_by(username="editor").one()
    assert user.is_admin
    assert verify_password("pw-123", user.password_hash)


class TestSeed:
    def test_creates_and_fills_pages(self, db, locales, seed_file):
        result = runner.invoke(app, ["seed", str(seed_file), "--publish"])
        assert result.exit_code == 0, result.output
        assert "Created page services" in result.output
        assert "2 changed, 0 unchanged, 0 failed" in result.output

        en = _translation(db, "services", "en")
        assert en.status == STATUS_PUBLISHED
        assert [b["type"] for b in en.blocks] == ["hero", "serviceDetails"]
        assert en.updated_by == "seed"

    def test_rerun_changes_nothing(self, db, locales, seed_file):
        runner.invoke(app, ["seed", str(seed_file), "--publish"])
        result = runner.invoke(app, ["seed", str(seed_file), "--publish"])
        assert result.exit_code == 0, result.output
        assert "0 changed, 2 unchanged, 0 failed" in result.output

    def test_merge_keeps_uploaded_fields(self, db, locales, seed_file):
        runner.invoke(app, ["seed", str(seed_file)])
        tr = _translation(db, "services", "en")
        tr.blocks = [
            {**block, "image": "/uploads/pharma.jpg"} if block.get("serviceId") == "pharma" else block
            for block in tr.blocks
        ]
        db.commit()

        runner.invoke(app, ["seed", str(seed_file), "--mode", "merge"])
        pharma = _translation(db, "services", "en").blocks[1]
        assert pharma["image"] == "/uploads/pharma.jpg"

    def test_replace_drops_extra_blocks(self, db, locales, seed_file, make_page):
        make_page(
            "services",
            en=[{"type": "faq", "headline": "Old", "items": []}, {"type": "hero", "tagline": "Old"}],
        )
        result = runner.invoke(app, ["seed", str(seed_file), "--mode", "replace"])
        assert result.exit_code == 0, result.output
        assert [b["type"] for b in _translation(db, "services", "en").blocks] == ["hero", "serviceDetails"]

    def test_unknown_locale_fails(self, db, locales, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"pages": [{"slug": "home", "locales": {"xx": []}}]}), encoding="utf-8")
        result = runner.invoke(app, ["seed", str(path)])
        assert result.exit_code == 1
        assert "1 failed" in result.output

    def test_invalid_blocks_fail(self, db, locales, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps({"pages": [{"slug": "home", "locales": {"en": [{"type": "hero"}]}}]}),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["seed", str(path)])
        assert result.exit_code == 1
        assert "0.tagline" in result.output
        assert _translation(db, "home", "en").blocks == []

    def test_not_a_seed_file(self, db, locales, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[1, 2]", encoding="utf-8")
        result = runner.invoke(app, ["seed", str(path)])
        assert result.exit_code == 1

    def test_server_needs_credentials(self, db, locales, seed_file):
        result = runner.invoke(app, ["seed", str(seed_file), "--server", "http://localhost:9"])
        assert result.exit_code == 1
        assert "--username" in result.output
