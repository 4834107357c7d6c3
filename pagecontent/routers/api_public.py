from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from pagecontent.config import settings
from pagecontent.db import get_db
from pagecontent.deps import get_cache
from pagecontent.services.cache import TaggedCache
from pagecontent.services.content import (
    get_enabled_locales,
    get_page_content,
    get_partners,
    get_site_settings,
)

router = APIRouter(tags=["content"])


def _locale(request: Request, locale: Optional[str]) -> str:
    return locale or getattr(request.state, "lang", settings.DEFAULT_LANG)


@router.get("/pages/{slug}")
async def page_content(
    slug: str,
    request: Request,
    locale: Optional[str] = None,
    db: Session = Depends(get_db),
    cache: TaggedCache = Depends(get_cache),
):
    # no content is a placeholder, not a 404
    return {"page": get_page_content(db, cache, slug, _locale(request, locale))}


@router.get("/settings")
async def site_settings(
    request: Request,
    locale: Optional[str] = None,
    db: Session = Depends(get_db),
    cache: TaggedCache = Depends(get_cache),
):
    return {"settings": get_site_settings(db, cache, _locale(request, locale))}


@router.get("/partners")
async def partners(
    request: Request,
    locale: Optional[str] = None,
    db: Session = Depends(get_db),
    cache: TaggedCache = Depends(get_cache),
):
    return {"partners": get_partners(db, cache, _locale(request, locale))}


@router.get("/locales")
async def locales(db: Session = Depends(get_db), cache: TaggedCache = Depends(get_cache)):
    return {"locales": get_enabled_locales(db, cache)}
