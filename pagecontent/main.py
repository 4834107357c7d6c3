import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware import Middleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from pagecontent.config import settings
from pagecontent.middleware.context import ContextInjectorMiddleware
from pagecontent.routers import admin, api_public
from pagecontent.services.cache import TaggedCache
from pagecontent.services.publishing import (
    BlockValidationError,
    LocaleNotFoundError,
    PageNotFoundError,
)

os.makedirs(settings.LOG_DIR, exist_ok=True)
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.FileHandler(os.path.join(settings.LOG_DIR, "app.log"), encoding="utf-8"),
        logging.StreamHandler(),
    ],
)
logger = logging.getLogger("pagecontent")


app = FastAPI(
    title=settings.APP_NAME,
    middleware=[
        Middleware(SessionMiddleware, secret_key=settings.SECRET_KEY),
        Middleware(ContextInjectorMiddleware),
    ],
)
app.state.cache = TaggedCache(enabled=settings.cache_enabled)
logger.info(
    "Content cache %s (%s)",
    "enabled" if app.state.cache.enabled else "bypassed",
    settings.ENVIRONMENT,
)


@app.exception_handler(PageNotFoundError)
async def page_not_found_handler(request: Request, exc: PageNotFoundError):
    return JSONResponse({"ok": False, "error": f"Page not found: {exc}"}, status_code=404)


@app.exception_handler(LocaleNotFoundError)
async def locale_not_found_handler(request: Request, exc: LocaleNotFoundError):
    return JSONResponse({"ok": False, "error": f"Locale not found: {exc}"}, status_code=404)


@app.exception_handler(BlockValidationError)
async def block_validation_handler(request: Request, exc: BlockValidationError):
    return JSONResponse({"ok": False, "errors": exc.messages}, status_code=422)


@app.get("/health")
def health():
    logger.info("Health check hit")
    return {"ok": True}


app.include_router(api_public.router, prefix="/api")
app.include_router(admin.router)
