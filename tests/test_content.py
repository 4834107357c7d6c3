"""
Read side: page/settings/partners/locales through fallback, cache and hydration.
"""
from pagecontent.models import (
    STATUS_DRAFT,
    Partner,
    PartnerTranslation,
    SiteSettings,
    SiteSettingsTranslation,
)
from pagecontent.services.cache import page_cache_tag
from pagecontent.services.content import (
    get_enabled_locales,
    get_page_content,
    get_partners,
    get_site_settings,
)
from pagecontent.services.publishing import (
    apply_page_blocks,
    provision_page,
    save_gallery_group,
    update_locale,
    update_partner,
    update_site_settings,
)

HERO_EN = {"type": "hero", "tagline": "Bridging markets"}
HERO_AZ = {"type": "hero", "tagline": "Bazarları birləşdiririk"}


# ── pages ─────────────────────────────────────────────────────────────────

class TestPageContent:
    def test_exact_locale(self, db, cache, locales, make_page):
        make_page("home", en=[HERO_EN], az=[HERO_AZ])
        page = get_page_content(db, cache, "home", "az")
        assert page.locale == "az"
        assert page.blocks == [HERO_AZ]
        assert page.title == "home (az)"

    def test_fallback_to_default(self, db, cache, locales, make_page):
        make_page("home", en=[HERO_EN])
        page = get_page_content(db, cache, "home", "ru")
        assert page.locale == "en"
        assert page.blocks == [HERO_EN]

    def test_placeholder_when_missing(self, db, cache, locales):
        assert get_page_content(db, cache, "nowhere", "en") is None

    def test_draft_is_placeholder(self, db, cache, locales, make_page):
        make_page("home", en=(STATUS_DRAFT, [HERO_EN]))
        assert get_page_content(db, cache, "home", "en") is None

    def test_served_from_cache_until_tag_busted(self, db, cache, locales, make_page):
        page = make_page("home", en=[HERO_EN])
        assert get_page_content(db, cache, "home", "en").blocks == [HERO_EN]

        # direct write, no invalidation
        page.translations[0].blocks = [{"type": "hero", "tagline": "Changed"}]
        db.commit()
        assert get_page_content(db, cache, "home", "en").blocks == [HERO_EN]

        cache.invalidate_tags(page_cache_tag("home", "en"))
        assert get_page_content(db, cache, "home", "en").blocks[0]["tagline"] == "Changed"

    def test_write_service_busts_cache(self, db, cache, locales, make_page):
        make_page("home", en=[HERO_EN])
        get_page_content(db, cache, "home", "en")
        apply_page_blocks(db, cache, "home", "en", [{"type": "hero", "tagline": "New"}])
        assert get_page_content(db, cache, "home", "en").blocks[0]["tagline"] == "New"

    def test_gallery_hydrated_from_group(self, db, cache, locales, make_page):
        make_page("about", en=[{"type": "gallery", "groupKey": "office"}])
        assert get_page_content(db, cache, "about", "en").blocks[0] == {
            "type": "gallery",
            "groupKey": "office",
        }

        save_gallery_group(db, cache, "office", [{"url": "/o.jpg", "alt": "Office"}, {"alt": "broken"}])
        block = get_page_content(db, cache, "about", "en").blocks[0]
        assert block["images"] == [{"url": "/o.jpg", "alt": "Office"}]
        assert "page-content:about:en" in cache

    def test_unknown_codes_share_the_default_entry(self, db, cache, locales, make_page):
        make_page("home", en=[HERO_EN])
        for i in range(500):
            assert get_page_content(db, cache, "home", f"x{i}").locale == "en"
        for i in range(500):
            assert get_page_content(db, cache, f"nope-{i}", "en") is None
        assert len(cache) < 50
        assert "page-content:home:en" in cache
        assert "page-content:home:x0" not in cache

    def test_disabled_code_served_as_default(self, db, cache, locales, make_page):
        make_page("home", en=[HERO_EN], de=[{"type": "hero", "tagline": "Märkte"}])
        assert get_page_content(db, cache, "home", "de").locale == "en"
        assert "page-content:home:de" not in cache

    def test_provisioned_page_becomes_visible(self, db, cache, locales):
        assert get_page_content(db, cache, "pricing", "en") is None
        provision_page(db, cache, "pricing", "Pricing")
        apply_page_blocks(db, cache, "pricing", "en", [HERO_EN], publish=True)
        assert get_page_content(db, cache, "pricing", "en").blocks == [HERO_EN]


# ── settings ──────────────────────────────────────────────────────────────

def _settings(db):
    row = SiteSettings(site_name="Silk Bridge", default_locale="en", social_links={"x": "https://x.com/sb"})
    row.translations.append(SiteSettingsTranslation(locale_code="en", tagline="Trade made simple"))
    row.translations.append(SiteSettingsTranslation(locale_code="az", tagline="Ticarət asan"))
    db.add(row)
    db.commit()
    return row


class TestSiteSettings:
    def test_exact(self, db, cache, locales):
        _settings(db)
        s = get_site_settings(db, cache, "az")
        assert s.tagline == "Ticarət asan"
        assert s.social_links == {"x": "https://x.com/sb"}

    def test_fallback(self, db, cache, locales):
        _settings(db)
        assert get_site_settings(db, cache, "ru").tagline == "Trade made simple"

    def test_no_settings_row(self, db, cache, locales):
        assert get_site_settings(db, cache, "en") is None

    def test_omitted_text_kept(self, db, cache, locales):
        _settings(db)
        update_site_settings(db, cache, "en", footer_text="All rights reserved")
        s = get_site_settings(db, cache, "en")
        assert s.tagline == "Trade made simple"
        assert s.footer_text == "All rights reserved"

        update_site_settings(db, cache, "en", tagline="")
        assert get_site_settings(db, cache, "en").tagline is None

    def test_update_busts_fallback_readers(self, db, cache, locales):
        _settings(db)
        assert get_site_settings(db, cache, "ru").tagline == "Trade made simple"
        update_site_settings(db, cache, "en", tagline="Updated")
        assert get_site_settings(db, cache, "ru").tagline == "Updated"


# ── partners ──────────────────────────────────────────────────────────────

class TestPartners:
    def _seed(self, db):
        a = Partner(name="Beta", category="logistics", sort_order=2)
        a.translations.append(PartnerTranslation(locale_code="en", description="Freight"))
        b = Partner(name="Alpha", category="pharma", sort_order=1)
        b.translations.append(PartnerTranslation(locale_code="az", description="Əczaçılıq"))
        c = Partner(name="Hidden", is_active=False)
        db.add_all([a, b, c])
        db.commit()
        return a, b

    def test_active_in_order(self, db, cache, locales):
        self._seed(db)
        assert [p.name for p in get_partners(db, cache, "en")] == ["Alpha", "Beta"]

    def test_description_fallback(self, db, cache, locales):
        self._seed(db)
        by_name = {p.name: p for p in get_partners(db, cache, "ru")}
        assert by_name["Beta"].description == "Freight"
        assert by_name["Alpha"].description == "Əczaçılıq"

    def test_empty(self, db, cache, locales):
        assert get_partners(db, cache, "en") == []

    def test_update_busts(self, db, cache, locales):
        beta, _ = self._seed(db)
        get_partners(db, cache, "en")
        update_partner(db, cache, beta.id, {"name": "Beta", "sort_order": 0})
        assert [p.name for p in get_partners(db, cache, "en")] == ["Beta", "Alpha"]


# ── locales ───────────────────────────────────────────────────────────────

class TestEnabledLocales:
    def test_default_first_disabled_hidden(self, db, cache, locales):
        assert [loc.code for loc in get_enabled_locales(db, cache)] == ["en", "az", "ru"]

    def test_update_busts(self, db, cache, locales):
        get_enabled_locales(db, cache)
        update_locale(db, cache, "de", is_enabled=True)
        assert "de" in {loc.code for loc in get_enabled_locales(db, cache)}
