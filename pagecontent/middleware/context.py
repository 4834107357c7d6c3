from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from pagecontent.config import settings
from pagecontent.db import SessionLocal
from pagecontent.i18n import LANG_COOKIE, LANG_COOKIE_MAX_AGE, pick_lang
from pagecontent.services.content import get_enabled_locales


class ContextInjectorMiddleware(BaseHTTPMiddleware):
    """Pick the request locale among the enabled ones and expose it on ``request.state``."""

    async def dispatch(self, request: Request, call_next):
        db = SessionLocal()
        try:
            locales = get_enabled_locales(db, request.app.state.cache)
        finally:
            db.close()

        codes = {loc.code for loc in locales}
        default_lang = next((loc.code for loc in locales if loc.is_default), settings.DEFAULT_LANG)
        lang = pick_lang(request, codes, default_lang)
        request.state.lang = lang
        request.state.locales = locales

        admin = None
        if "session" in request.scope:
            admin = request.session.get("admin")
        request.state.admin = admin

        response = await call_next(request)
        if request.query_params.get("lang") in codes:
            response.set_cookie(LANG_COOKIE, lang, max_age=LANG_COOKIE_MAX_AGE, samesite="lax")
        return response
