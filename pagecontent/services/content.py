"""
Content access layer.

All public content goes through these functions: locale fallback first,
then the tagged cache, then hydration of the cached blocks. Missing content
comes back as ``None`` (or an empty list) so callers can render a
placeholder instead of failing the request.
"""
import logging
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from pagecontent.config import settings
from pagecontent.models import GalleryGroup, Locale, Page, Partner, SiteSettings
from pagecontent.services.cache import (
    GALLERIES_CACHE_TAG,
    LOCALES_CACHE_TAG,
    TaggedCache,
    all_pages_cache_tag,
    all_partners_cache_tag,
    all_settings_cache_tag,
    page_cache_tag,
    partners_cache_tag,
    settings_cache_tag,
)
from pagecontent.services.hydration import gallery_map, hydrate
from pagecontent.services.locale_resolver import (
    default_locale_code,
    enabled_locale_codes,
    localized_field,
    resolve_page_translation,
)

logger = logging.getLogger(__name__)


class PageContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    slug: str
    title: str
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    og_image: Optional[str] = None
    blocks: List[Dict[str, Any]] = Field(default_factory=list)
    status: str
    locale: str
    updated_at: Optional[datetime] = None


class PublicSiteSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    site_name: Optional[str] = None
    logo_url: Optional[str] = None
    favicon_url: Optional[str] = None
    default_locale: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_address: Optional[str] = None
    social_links: Dict[str, str] = Field(default_factory=dict)
    tagline: Optional[str] = None
    footer_text: Optional[str] = None


class PublicPartner(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    category: str
    description: Optional[str] = None
    order: int = 0


class LocaleInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    native_name: str
    flag: Optional[str] = None
    is_default: bool = False
    is_rtl: bool = False


def serving_locale(db: Session, cache: TaggedCache, locale: Optional[str]) -> str:
    """
    Map a requested code onto the enabled locale it is served as.

    Codes that are not enabled never win the exact-match tier, so they are
    served as the default locale and share its cache entry.
    """
    enabled = get_enabled_locales(db, cache)
    if any(info.code == locale for info in enabled):
        return locale
    default = next((info.code for info in enabled if info.is_default), None)
    return default or settings.DEFAULT_LANG


def get_page_slugs(db: Session, cache: TaggedCache) -> FrozenSet[str]:
    def fetch() -> FrozenSet[str]:
        return frozenset(db.execute(select(Page.slug)).scalars())

    return cache.cached("page-slugs", [all_pages_cache_tag()], fetch)


def get_page_content(
    db: Session, cache: TaggedCache, slug: str, locale: Optional[str]
) -> Optional[PageContent]:
    if slug not in get_page_slugs(db, cache):
        logger.info("Unknown page %s", slug)
        return None
    locale = serving_locale(db, cache, locale)

    def fetch() -> Optional[PageContent]:
        translation = resolve_page_translation(db, slug, locale)
        if translation is None:
            logger.info("No published content for page %s (%s)", slug, locale)
            return None
        return PageContent(
            id=translation.page.id,
            slug=translation.page.slug,
            title=translation.title or "",
            seo_title=translation.seo_title,
            seo_description=translation.seo_description,
            og_image=translation.og_image,
            blocks=list(translation.blocks or []),
            status=translation.status,
            locale=translation.locale_code,
            updated_at=translation.updated_at,
        )

    content = cache.cached(
        f"page-content:{slug}:{locale}",
        [page_cache_tag(slug, locale), all_pages_cache_tag()],
        fetch,
    )
    if content is None:
        return None
    return content.model_copy(
        update={"blocks": hydrate(content.blocks, get_galleries(db, cache))}
    )


def get_site_settings(
    db: Session, cache: TaggedCache, locale: Optional[str]
) -> Optional[PublicSiteSettings]:
    locale = serving_locale(db, cache, locale)

    def fetch() -> Optional[PublicSiteSettings]:
        row = db.execute(
            select(SiteSettings)
            .options(selectinload(SiteSettings.translations))
            .order_by(SiteSettings.id)
        ).scalars().first()
        if row is None:
            return None
        fallback = row.default_locale or default_locale_code(db)
        enabled = enabled_locale_codes(db)
        return PublicSiteSettings(
            site_name=row.site_name,
            logo_url=row.logo_url,
            favicon_url=row.favicon_url,
            default_locale=fallback,
            contact_email=row.contact_email,
            contact_phone=row.contact_phone,
            contact_address=row.contact_address,
            social_links=dict(row.social_links or {}),
            tagline=localized_field(row, locale, "tagline", fallback, enabled),
            footer_text=localized_field(row, locale, "footer_text", fallback, enabled),
        )

    return cache.cached(
        f"site-settings:{locale}",
        [settings_cache_tag(locale), all_settings_cache_tag()],
        fetch,
    )


def get_partners(db: Session, cache: TaggedCache, locale: Optional[str]) -> List[PublicPartner]:
    locale = serving_locale(db, cache, locale)

    def fetch() -> List[PublicPartner]:
        rows = db.execute(
            select(Partner)
            .options(selectinload(Partner.translations))
            .where(Partner.is_active == True)
            .order_by(Partner.sort_order.asc(), Partner.name.asc())
        ).scalars().all()
        fallback = default_locale_code(db)
        enabled = enabled_locale_codes(db)
        return [
            PublicPartner(
                id=partner.id,
                name=partner.name,
                logo_url=partner.logo_url,
                website_url=partner.website_url,
                category=partner.category,
                description=localized_field(partner, locale, "description", fallback, enabled),
                order=partner.sort_order,
            )
            for partner in rows
        ]

    return cache.cached(
        f"partners:{locale}",
        [partners_cache_tag(locale), all_partners_cache_tag()],
        fetch,
    )


def get_enabled_locales(db: Session, cache: TaggedCache) -> List[LocaleInfo]:
    def fetch() -> List[LocaleInfo]:
        rows = db.execute(
            select(Locale)
            .where(Locale.is_enabled == True)
            .order_by(Locale.is_default.desc(), Locale.code.asc())
        ).scalars().all()
        return [
            LocaleInfo(
                code=row.code,
                name=row.name,
                native_name=row.native_name,
                flag=row.flag,
                is_default=row.is_default,
                is_rtl=row.is_rtl,
            )
            for row in rows
        ]

    # pushed invalidation plus a periodic refresh
    return cache.cached(
        "enabled-locales",
        [LOCALES_CACHE_TAG],
        fetch,
        revalidate=settings.LOCALES_REVALIDATE_SECONDS,
    )


def get_galleries(db: Session, cache: TaggedCache) -> Dict[str, List[Any]]:
    def fetch() -> Dict[str, List[Any]]:
        return gallery_map(db.execute(select(GalleryGroup)).scalars().all())

    return cache.cached("gallery-groups", [GALLERIES_CACHE_TAG], fetch)
