import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from pagecontent.db import get_db
from pagecontent.deps import get_cache, require_admin, verify_password
from pagecontent.models import User
from pagecontent.services.cache import TaggedCache
from pagecontent.services.publishing import (
    BlockValidationError,
    apply_page_blocks,
    get_or_create_translation,
    provision_page,
    publish_page_translation,
    save_gallery_group,
    save_page_translation,
    update_locale,
    update_partner,
    update_site_settings,
)
from pagecontent.services.reconcile import ReconcileMode

router = APIRouter(tags=["admin"])
logger = logging.getLogger(__name__)


class ProvisionPayload(BaseModel):
    slug: str
    title: Optional[str] = None


class TranslationPayload(BaseModel):
    blocks: List[Dict[str, Any]] = Field(default_factory=list)
    title: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    og_image: Optional[str] = None
    status: Optional[str] = None


class ReconcilePayload(BaseModel):
    blocks: List[Dict[str, Any]]
    mode: ReconcileMode = ReconcileMode.MERGE
    publish: bool = False


class SettingsPayload(BaseModel):
    tagline: Optional[str] = None
    footer_text: Optional[str] = None
    site_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_address: Optional[str] = None


class PartnerPayload(BaseModel):
    name: str
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    category: str = "general"
    sort_order: int = 0
    is_active: bool = True
    descriptions: Dict[str, Optional[str]] = Field(default_factory=dict)


class GalleryPayload(BaseModel):
    name: Optional[str] = None
    images: List[Dict[str, Any]] = Field(default_factory=list)


class LocalePayload(BaseModel):
    is_enabled: Optional[bool] = None
    is_default: Optional[bool] = None


class InvalidatePayload(BaseModel):
    tags: List[str]


def _translation_dict(tr) -> dict:
    return {
        "locale": tr.locale_code,
        "title": tr.title,
        "seo_title": tr.seo_title,
        "seo_description": tr.seo_description,
        "og_image": tr.og_image,
        "blocks": tr.blocks or [],
        "status": tr.status,
        "updated_at": tr.updated_at,
        "updated_by": tr.updated_by,
    }


@router.post("/admin/login")
async def admin_login(
    request: Request,
    db: Session = Depends(get_db),
    username: str = Form(...),
    password: str = Form(...),
):
    user = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if not user or not user.is_admin or not verify_password(password, user.password_hash):
        logger.warning("Rejected admin login for %s", username)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["admin"] = {"id": user.id, "username": user.username}
    return {"ok": True}


@router.post("/admin/logout")
async def admin_logout(request: Request):
    request.session.pop("admin", None)
    return {"ok": True}


@router.post("/api/admin/pages", status_code=201)
async def admin_page_create(
    payload: ProvisionPayload,
    db: Session = Depends(get_db),
    cache: TaggedCache = Depends(get_cache),
    admin: dict = Depends(require_admin),
):
    try:
        page = provision_page(db, cache, payload.slug, payload.title)
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return {"ok": True, "slug": page.slug, "locales": [tr.locale_code for tr in page.translations]}


@router.get("/api/admin/pages/{slug}/{locale}")
async def admin_page_get(
    slug: str,
    locale: str,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    tr = get_or_create_translation(db, slug, locale)
    page = tr.page
    return {
        "slug": page.slug,
        "translation": _translation_dict(tr),
        "all_translations": [
            {"locale": t.locale_code, "status": t.status} for t in page.translations
        ],
    }


@router.put("/api/admin/pages/{slug}/{locale}")
async def admin_page_save(
    slug: str,
    locale: str,
    payload: TranslationPayload,
    db: Session = Depends(get_db),
    cache: TaggedCache = Depends(get_cache),
    admin: dict = Depends(require_admin),
):
    try:
        tr = save_page_translation(
            db,
            cache,
            slug,
            locale,
            payload.blocks,
            title=payload.title,
            seo_title=payload.seo_title,
            seo_description=payload.seo_description,
            og_image=payload.og_image,
            status=payload.status,
            updated_by=admin.get("username"),
        )
    except BlockValidationError:
        raise
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"ok": True, "translation": _translation_dict(tr)}


@router.post("/api/admin/pages/{slug}/{locale}/publish")
async def admin_page_publish(
    slug: str,
    locale: str,
    db: Session = Depends(get_db),
    cache: TaggedCache = Depends(get_cache),
    admin: dict = Depends(require_admin),
):
    tr = publish_page_translation(db, cache, slug, locale, updated_by=admin.get("username"))
    return {"ok": True, "status": tr.status}


@router.post("/api/admin/pages/{slug}/{locale}/reconcile")
async def admin_page_reconcile(
    slug: str,
    locale: str,
    payload: ReconcilePayload,
    db: Session = Depends(get_db),
    cache: TaggedCache = Depends(get_cache),
    admin: dict = Depends(require_admin),
):
    result = apply_page_blocks(
        db,
        cache,
        slug,
        locale,
        payload.blocks,
        mode=payload.mode,
        publish=payload.publish,
        updated_by=admin.get("username"),
        validate=True,
    )
    return {
        "ok": True,
        "changed": result.changed,
        "created": result.created,
        "blocks": result.blocks,
    }


@router.put("/api/admin/settings/{locale}")
async def admin_settings_save(
    locale: str,
    payload: SettingsPayload,
    db: Session = Depends(get_db),
    cache: TaggedCache = Depends(get_cache),
    admin: dict = Depends(require_admin),
):
    fields = payload.model_dump(exclude={"tagline", "footer_text"}, exclude_none=True)
    update_site_settings(
        db, cache, locale, tagline=payload.tagline, footer_text=payload.footer_text, fields=fields
    )
    return {"ok": True}


@router.put("/api/admin/partners/{partner_id}")
async def admin_partner_save(
    partner_id: int,
    payload: PartnerPayload,
    db: Session = Depends(get_db),
    cache: TaggedCache = Depends(get_cache),
    admin: dict = Depends(require_admin),
):
    partner = update_partner(
        db,
        cache,
        partner_id,
        payload.model_dump(exclude={"descriptions"}),
        descriptions=payload.descriptions,
    )
    return {"ok": True, "id": partner.id}


@router.put("/api/admin/galleries/{key}")
async def admin_gallery_save(
    key: str,
    payload: GalleryPayload,
    db: Session = Depends(get_db),
    cache: TaggedCache = Depends(get_cache),
    admin: dict = Depends(require_admin),
):
    group = save_gallery_group(db, cache, key, payload.images, name=payload.name)
    return {"ok": True, "key": group.key, "images": len(group.images)}


@router.put("/api/admin/locales/{code}")
async def admin_locale_save(
    code: str,
    payload: LocalePayload,
    db: Session = Depends(get_db),
    cache: TaggedCache = Depends(get_cache),
    admin: dict = Depends(require_admin),
):
    try:
        locale = update_locale(
            db, cache, code, is_enabled=payload.is_enabled, is_default=payload.is_default
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"ok": True, "code": locale.code, "is_default": locale.is_default}


@router.post("/api/admin/cache/invalidate")
async def admin_cache_invalidate(
    payload: InvalidatePayload,
    cache: TaggedCache = Depends(get_cache),
    admin: dict = Depends(require_admin),
):
    dropped = cache.invalidate_tags(*payload.tags)
    return {"ok": True, "dropped": dropped}
