"""
Write side: everything that changes stored content and then busts the cache
tags covering it.

Persisting and invalidating are two separate steps. A read that lands
between them can still see the previous cached value; administrative writes
are rare enough that this is accepted.
"""
import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from slugify import slugify
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from pagecontent.blocks import validation_messages
from pagecontent.models import (
    STATUS_DRAFT,
    STATUS_PUBLISHED,
    GalleryGroup,
    Locale,
    Page,
    PageTranslation,
    Partner,
    PartnerTranslation,
    SiteSettings,
    SiteSettingsTranslation,
)
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
from pagecontent.services.locale_resolver import default_locale_code, enabled_locale_codes
from pagecontent.services.reconcile import ReconcileMode, reconcile

logger = logging.getLogger(__name__)


class PageNotFoundError(LookupError):
    pass


class LocaleNotFoundError(LookupError):
    pass


class BlockValidationError(ValueError):
    def __init__(self, messages: List[str]):
        super().__init__("; ".join(messages))
        self.messages = messages


@dataclass
class ApplyResult:
    slug: str
    locale: str
    changed: bool
    created: bool = False
    blocks: List[Dict[str, Any]] = field(default_factory=list)


def page_tags(slug: str, locale: str) -> List[str]:
    return [page_cache_tag(slug, locale), all_pages_cache_tag()]


def _get_page(db: Session, slug: str) -> Page:
    page = db.execute(
        select(Page).options(selectinload(Page.translations)).where(Page.slug == slug)
    ).scalar_one_or_none()
    if page is None:
        raise PageNotFoundError(slug)
    return page


def _require_locale(db: Session, code: str) -> Locale:
    locale = db.get(Locale, code)
    if locale is None:
        raise LocaleNotFoundError(code)
    return locale


def _new_draft(db: Session, page: Page, locale: str) -> PageTranslation:
    # a new locale starts from the default locale's content, still as a draft
    default_code = default_locale_code(db)
    source = page.get_translation(default_code) if default_code != locale else None
    translation = PageTranslation(page=page, locale_code=locale, status=STATUS_DRAFT)
    if source is None:
        translation.title = page.slug
        translation.blocks = []
    else:
        translation.title = source.title
        translation.seo_title = source.seo_title
        translation.seo_description = source.seo_description
        translation.og_image = source.og_image
        translation.blocks = copy.deepcopy(list(source.blocks or []))
    db.add(translation)
    return translation


def _validate(blocks: Sequence[Any]) -> None:
    messages = validation_messages(list(blocks))
    if messages:
        raise BlockValidationError(messages)


def apply_page_blocks(
    db: Session,
    cache: TaggedCache,
    slug: str,
    locale: str,
    incoming: Sequence[Mapping[str, Any]],
    mode: ReconcileMode | str = ReconcileMode.MERGE,
    publish: bool = False,
    updated_by: Optional[str] = None,
    validate: bool = False,
) -> ApplyResult:
    """
    Reconcile ``incoming`` into the stored blocks of ``slug``/``locale``.

    A missing translation is created as a draft copied from the default
    locale, and ``incoming`` is reconciled into that copy. Nothing is
    written, and no tag is busted, when the reconciled list and status equal what is stored.
    """
    page = _get_page(db, slug)
    _require_locale(db, locale)

    translation = page.get_translation(locale)
    created = translation is None
    if created:
        translation = _new_draft(db, page, locale)

    stored = list(translation.blocks or [])
    result = reconcile(stored, incoming, mode)
    if validate:
        _validate(result)

    status = STATUS_PUBLISHED if publish else (translation.status or STATUS_DRAFT)
    if not created and result == stored and status == translation.status:
        logger.info("Page %s (%s) unchanged by %s", slug, locale, ReconcileMode(mode).value)
        return ApplyResult(slug, locale, changed=False, blocks=result)

    translation.blocks = result
    translation.status = status
    translation.updated_by = updated_by
    db.commit()
    cache.invalidate_tags(*page_tags(slug, locale))
    logger.info(
        "Page %s (%s) %s with %d blocks (%s)",
        slug,
        locale,
        "created" if created else "updated",
        len(result),
        ReconcileMode(mode).value,
    )
    return ApplyResult(slug, locale, changed=True, created=created, blocks=result)


def save_page_translation(
    db: Session,
    cache: TaggedCache,
    slug: str,
    locale: str,
    blocks: Sequence[Mapping[str, Any]],
    title: Optional[str] = None,
    seo_title: Optional[str] = None,
    seo_description: Optional[str] = None,
    og_image: Optional[str] = None,
    status: Optional[str] = None,
    updated_by: Optional[str] = None,
) -> PageTranslation:
    """Store the editor's full block list as-is after validating it."""
    _validate(blocks)
    page = _get_page(db, slug)
    _require_locale(db, locale)

    translation = page.get_translation(locale)
    if translation is None:
        translation = _new_draft(db, page, locale)

    translation.blocks = [dict(block) for block in blocks]
    translation.title = title if title is not None else (translation.title or slug)
    translation.seo_title = seo_title or None
    translation.seo_description = seo_description or None
    translation.og_image = og_image or None
    if status is not None:
        if status not in (STATUS_DRAFT, STATUS_PUBLISHED):
            raise ValueError(f"unknown status {status!r}")
        translation.status = status
    translation.updated_by = updated_by
    db.commit()
    cache.invalidate_tags(*page_tags(slug, locale))
    return translation


def get_or_create_translation(db: Session, slug: str, locale: str) -> PageTranslation:
    """
    Translation of ``slug`` in ``locale`` for editing.

    When the locale has none yet, a draft copied from the default locale is
    stored and returned, so the editor opens on real content.
    """
    page = _get_page(db, slug)
    _require_locale(db, locale)
    translation = page.get_translation(locale)
    if translation is None:
        translation = _new_draft(db, page, locale)
        db.commit()
        logger.info("Created draft %s (%s) from the default locale", slug, locale)
    return translation


def publish_page_translation(
    db: Session, cache: TaggedCache, slug: str, locale: str, updated_by: Optional[str] = None
) -> PageTranslation:
    page = _get_page(db, slug)
    translation = page.get_translation(locale)
    if translation is None:
        raise LocaleNotFoundError(locale)
    translation.status = STATUS_PUBLISHED
    translation.updated_by = updated_by
    db.commit()
    cache.invalidate_tags(*page_tags(slug, locale))
    return translation


def provision_page(db: Session, cache: TaggedCache, slug: str, title: Optional[str] = None) -> Page:
    """Create a page with an empty draft translation in every enabled locale."""
    normalized = slugify(slug or "")
    if not normalized:
        raise ValueError("slug must contain at least one letter or digit")
    if db.execute(select(Page.id).where(Page.slug == normalized)).scalar_one_or_none():
        raise ValueError(f"page {normalized!r} already exists")

    page = Page(slug=normalized)
    codes = sorted(enabled_locale_codes(db))
    for code in codes:
        page.translations.append(
            PageTranslation(locale_code=code, title=title or normalized, blocks=[], status=STATUS_DRAFT)
        )
    db.add(page)
    db.commit()
    cache.invalidate_tags(
        all_pages_cache_tag(), *[page_cache_tag(normalized, code) for code in codes]
    )
    logger.info("Provisioned page %s for locales %s", normalized, codes)
    return page


def update_site_settings(
    db: Session,
    cache: TaggedCache,
    locale: str,
    tagline: Optional[str] = None,
    footer_text: Optional[str] = None,
    fields: Optional[Mapping[str, Any]] = None,
) -> SiteSettings:
    """Update the settings row and one locale's texts. Omitted texts are kept; "" clears one."""
    row = db.execute(
        select(SiteSettings).options(selectinload(SiteSettings.translations)).order_by(SiteSettings.id)
    ).scalars().first()
    if row is None:
        row = SiteSettings(social_links={})
        db.add(row)
    for name, value in (fields or {}).items():
        if name not in SiteSettings.__table__.columns or name == "id":
            raise ValueError(f"unknown settings field {name!r}")
        setattr(row, name, value)

    translation = row.get_translation(locale)
    if translation is None:
        translation = SiteSettingsTranslation(locale_code=locale)
        row.translations.append(translation)
    if tagline is not None:
        translation.tagline = tagline
    if footer_text is not None:
        translation.footer_text = footer_text
    db.commit()

    # other locales may be falling back to this one
    cache.invalidate_tags(settings_cache_tag(locale), all_settings_cache_tag())
    return row


def update_partner(
    db: Session,
    cache: TaggedCache,
    partner_id: Optional[int],
    fields: Mapping[str, Any],
    descriptions: Optional[Mapping[str, Optional[str]]] = None,
) -> Partner:
    partner = None
    if partner_id is not None:
        partner = db.execute(
            select(Partner).options(selectinload(Partner.translations)).where(Partner.id == partner_id)
        ).scalar_one_or_none()
    if partner is None:
        partner = Partner(id=partner_id) if partner_id is not None else Partner()
        db.add(partner)
    for name, value in fields.items():
        if name not in ("name", "logo_url", "website_url", "category", "sort_order", "is_active"):
            raise ValueError(f"unknown partner field {name!r}")
        setattr(partner, name, value)

    existing = {tr.locale_code: tr for tr in partner.translations}
    for code, description in (descriptions or {}).items():
        tr = existing.get(code)
        if tr is None:
            tr = PartnerTranslation(locale_code=code)
            partner.translations.append(tr)
        tr.description = description
    db.commit()

    codes = enabled_locale_codes(db) | set(descriptions or {})
    cache.invalidate_tags(
        all_partners_cache_tag(), *[partners_cache_tag(code) for code in sorted(codes)]
    )
    return partner


def save_gallery_group(
    db: Session,
    cache: TaggedCache,
    key: str,
    images: Iterable[Mapping[str, Any]],
    name: Optional[str] = None,
) -> GalleryGroup:
    group = db.execute(select(GalleryGroup).where(GalleryGroup.key == key)).scalar_one_or_none()
    if group is None:
        group = GalleryGroup(key=key, name=name or key)
        db.add(group)
    elif name is not None:
        group.name = name
    group.images = [dict(image) for image in images]
    db.commit()
    cache.invalidate_tags(GALLERIES_CACHE_TAG)
    return group


def update_locale(
    db: Session,
    cache: TaggedCache,
    code: str,
    is_enabled: Optional[bool] = None,
    is_default: Optional[bool] = None,
) -> Locale:
    """Toggle a locale. Making one the default clears the flag everywhere else."""
    locale = _require_locale(db, code)
    if is_enabled is False and (is_default or locale.is_default):
        raise ValueError("the default locale cannot be disabled")
    if is_default:
        for other in db.execute(select(Locale).where(Locale.code != code)).scalars():
            other.is_default = False
        locale.is_default = True
        locale.is_enabled = True
    if is_enabled is not None:
        locale.is_enabled = is_enabled
    db.commit()
    # fallback targets changed for every localized resource
    cache.invalidate_tags(
        LOCALES_CACHE_TAG,
        all_pages_cache_tag(),
        all_partners_cache_tag(),
        all_settings_cache_tag(),
    )
    return locale
