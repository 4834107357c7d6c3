"""
Write side: persisting reconciled blocks and busting the right tags.
"""
import pytest

from pagecontent.models import STATUS_DRAFT, STATUS_PUBLISHED, Locale, Page
from pagecontent.services.content import get_page_content
from pagecontent.services.publishing import (
    BlockValidationError,
    LocaleNotFoundError,
    PageNotFoundError,
    apply_page_blocks,
    provision_page,
    publish_page_translation,
    save_page_translation,
    update_locale,
)

HERO = {"type": "hero", "tagline": "Bridging markets", "image": "/uploads/hero.jpg"}


class TestApplyPageBlocks:
    def test_merges_into_stored(self, db, cache, locales, make_page):
        make_page("home", en=[HERO])
        result = apply_page_blocks(db, cache, "home", "en", [{"type": "hero", "tagline": "New"}])
        assert result.changed and not result.created
        assert result.blocks == [{**HERO, "tagline": "New"}]

        db.expire_all()
        stored = db.query(Page).filter_by(slug="home").one().get_translation("en")
        assert stored.blocks == result.blocks

    def test_creates_missing_translation_as_draft(self, db, cache, locales, make_page):
        make_page("home", en=[HERO])
        result = apply_page_blocks(db, cache, "home", "az", [{"type": "hero", "tagline": "Salam"}])
        assert result.created
        tr = db.query(Page).filter_by(slug="home").one().get_translation("az")
        assert tr.status == STATUS_DRAFT

    def test_new_translation_starts_from_default(self, db, cache, locales, make_page):
        page = make_page("home", en=[HERO, {"type": "faq", "headline": "FAQ", "items": []}])
        page.translations[0].seo_title = "Home | Silk Bridge"
        db.commit()

        result = apply_page_blocks(db, cache, "home", "az", [{"type": "hero", "tagline": "Salam"}])
        assert result.created
        assert result.blocks == [{**HERO, "tagline": "Salam"}, {"type": "faq", "headline": "FAQ", "items": []}]

        db.expire_all()
        page = db.query(Page).filter_by(slug="home").one()
        az = page.get_translation("az")
        assert az.status == STATUS_DRAFT
        assert az.title == "home (en)"
        assert az.seo_title == "Home | Silk Bridge"
        assert page.get_translation("en").blocks[0] == HERO

    def test_publish_flag(self, db, cache, locales, make_page):
        make_page("home", en=(STATUS_DRAFT, [HERO]))
        apply_page_blocks(db, cache, "home", "en", [HERO], publish=True)
        assert get_page_content(db, cache, "home", "en") is not None

    def test_second_run_is_a_no_op(self, db, cache, locales, make_page):
        make_page("home", en=[HERO])
        incoming = [{"type": "hero", "tagline": "Again"}, {"type": "faq", "headline": "FAQ", "items": []}]
        assert apply_page_blocks(db, cache, "home", "en", incoming, mode="replace").changed

        get_page_content(db, cache, "home", "en")
        second = apply_page_blocks(db, cache, "home", "en", incoming, mode="replace")
        assert not second.changed
        assert "page-content:home:en" in cache

    def test_unknown_page(self, db, cache, locales):
        with pytest.raises(PageNotFoundError):
            apply_page_blocks(db, cache, "ghost", "en", [HERO])

    def test_unknown_locale(self, db, cache, locales, make_page):
        make_page("home", en=[HERO])
        with pytest.raises(LocaleNotFoundError):
            apply_page_blocks(db, cache, "home", "xx", [HERO])

    def test_validation_rejects_before_write(self, db, cache, locales, make_page):
        make_page("home", en=[HERO])
        with pytest.raises(BlockValidationError) as exc:
            apply_page_blocks(
                db, cache, "home", "en", [{"type": "hero", "tagline": ""}], mode="replace", validate=True
            )
        assert exc.value.messages[0].startswith("0.tagline:")
        db.rollback()
        db.expire_all()
        assert db.query(Page).filter_by(slug="home").one().get_translation("en").blocks == [HERO]


class TestSaveAndPublish:
    def test_save_replaces_whole_list(self, db, cache, locales, make_page):
        make_page("home", en=[HERO])
        tr = save_page_translation(
            db, cache, "home", "en", [{"type": "cta", "headline": "Talk to us"}], title="Home", seo_title="Home | SB"
        )
        assert tr.blocks == [{"type": "cta", "headline": "Talk to us"}]
        assert tr.seo_title == "Home | SB"

    def test_save_validates(self, db, cache, locales, make_page):
        make_page("home", en=[HERO])
        with pytest.raises(BlockValidationError):
            save_page_translation(db, cache, "home", "en", [{"type": "cta"}])

    def test_save_rejects_unknown_status(self, db, cache, locales, make_page):
        make_page("home", en=[HERO])
        with pytest.raises(ValueError):
            save_page_translation(db, cache, "home", "en", [], status="ARCHIVED")

    def test_publish(self, db, cache, locales, make_page):
        make_page("home", az=(STATUS_DRAFT, [HERO]))
        assert get_page_content(db, cache, "home", "az") is None
        assert publish_page_translation(db, cache, "home", "az").status == STATUS_PUBLISHED
        assert get_page_content(db, cache, "home", "az").locale == "az"


class TestProvisionPage:
    def test_draft_per_enabled_locale(self, db, cache, locales):
        page = provision_page(db, cache, "About Us", title="About")
        assert page.slug == "about-us"
        assert sorted(tr.locale_code for tr in page.translations) == ["az", "en", "ru"]
        assert {tr.status for tr in page.translations} == {STATUS_DRAFT}

    def test_duplicate(self, db, cache, locales):
        provision_page(db, cache, "services")
        with pytest.raises(ValueError):
            provision_page(db, cache, "services")

    def test_empty_slug(self, db, cache, locales):
        with pytest.raises(ValueError):
            provision_page(db, cache, "  !! ")


class TestUpdateLocale:
    def test_default_cannot_be_disabled(self, db, cache, locales):
        with pytest.raises(ValueError):
            update_locale(db, cache, "en", is_enabled=False)

    def test_rejected_change_leaves_locales_untouched(self, db, cache, locales):
        with pytest.raises(ValueError):
            update_locale(db, cache, "az", is_default=True, is_enabled=False)
        assert not db.dirty
        assert db.get(Locale, "en").is_default
        assert db.get(Locale, "az").is_enabled

    def test_single_default(self, db, cache, locales):
        update_locale(db, cache, "az", is_default=True)
        db.expire_all()
        defaults = [row.code for row in db.query(Locale).filter_by(is_default=True)]
        assert defaults == ["az"]
