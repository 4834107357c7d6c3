"""
Locale fallback.

Every localized record (page translations, site settings, partner
descriptions) is resolved the same way: the requested locale, then the
default locale, then the first translation that exists, then nothing.
"""
from typing import Any, Collection, Iterable, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from pagecontent.config import settings
from pagecontent.models import Locale, Page, STATUS_PUBLISHED

T = TypeVar("T")


def pick_translation(
    translations: Iterable[T],
    requested: Optional[str],
    default_code: Optional[str],
    enabled: Optional[Collection[str]] = None,
) -> Optional[T]:
    """
    Return the translation to serve for ``requested``, or ``None``.

    ``translations`` only need a ``locale_code`` attribute and are taken in
    the order given, so the first-available tier is stable as long as the
    caller's ordering is. When ``enabled`` is passed, translations in other
    locales are never candidates.
    """
    candidates = [
        tr
        for tr in translations
        if enabled is None or getattr(tr, "locale_code", None) in enabled
    ]
    if not candidates:
        return None
    for code in (requested, default_code):
        if not code:
            continue
        match = next((tr for tr in candidates if tr.locale_code == code), None)
        if match is not None:
            return match
    return candidates[0]


def default_locale_code(db: Session) -> str:
    code = db.execute(
        select(Locale.code).where(Locale.is_default == True).order_by(Locale.code)
    ).scalars().first()
    return code or settings.DEFAULT_LANG


def enabled_locale_codes(db: Session) -> set[str]:
    return set(db.execute(select(Locale.code).where(Locale.is_enabled == True)).scalars())


def resolve_page_translation(db: Session, slug: str, locale: Optional[str]):
    """Published translation of page ``slug`` for ``locale`` after fallback."""
    page = db.execute(
        select(Page).options(selectinload(Page.translations)).where(Page.slug == slug)
    ).scalar_one_or_none()
    if page is None:
        return None
    published = [tr for tr in page.translations if tr.status == STATUS_PUBLISHED]
    return pick_translation(
        published,
        locale,
        default_locale_code(db),
        enabled=enabled_locale_codes(db),
    )


def localized_field(
    entity: Any,
    locale: Optional[str],
    field: str,
    default_code: Optional[str],
    enabled: Optional[Collection[str]] = None,
):
    """Value of ``field`` from the translation picked for ``locale``, else ``None``."""
    if entity is None:
        return None
    translation = pick_translation(
        getattr(entity, "translations", None) or [], locale, default_code, enabled
    )
    if translation is None:
        return None
    return getattr(translation, field, None) or None
