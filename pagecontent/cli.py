"""Command line entry point for database setup and content seeding."""
import json
import logging
from pathlib import Path
from typing import List, Optional

import httpx
import typer
from slugify import slugify
from sqlalchemy import select

from pagecontent.config import settings
from pagecontent.db import SessionLocal, init_db
from pagecontent.deps import hash_password
from pagecontent.models import Locale, Page, User
from pagecontent.services.cache import TaggedCache, all_pages_cache_tag, page_cache_tag
from pagecontent.services.publishing import (
    BlockValidationError,
    LocaleNotFoundError,
    apply_page_blocks,
    provision_page,
)
from pagecontent.services.reconcile import ReconcileMode

logger = logging.getLogger("pagecontent.cli")

DEFAULT_LOCALES = [
    {"code": "en", "name": "English", "native_name": "English", "flag": "🇬🇧", "is_default": True},
    {"code": "az", "name": "Azerbaijani", "native_name": "Azərbaycan", "flag": "🇦🇿"},
    {"code": "ru", "name": "Russian", "native_name": "Русский", "flag": "🇷🇺"},
]

MODE_OPTION = typer.Option(ReconcileMode.MERGE, "--mode", "-m", help="merge or replace")
PUBLISH_OPTION = typer.Option(False, "--publish", help="Mark every touched translation published")
SERVER_OPTION = typer.Option(
    None,
    "--server",
    envvar="PAGECONTENT_SERVER",
    help="Base URL of a running instance whose cache should be invalidated",
)
USERNAME_OPTION = typer.Option(None, "--username", envvar="PAGECONTENT_ADMIN_USER")
PASSWORD_OPTION = typer.Option(None, "--password", envvar="PAGECONTENT_ADMIN_PASSWORD")

app = typer.Typer(help="Localized page content tools", no_args_is_help=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v")) -> None:
    """Page content CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@app.command("init-db")
def init_db_command() -> None:
    """Create missing tables and the default locales."""
    init_db()
    db = SessionLocal()
    try:
        has_default = db.execute(
            select(Locale.code).where(Locale.is_default == True)
        ).scalars().first()
        added = 0
        for data in DEFAULT_LOCALES:
            if db.get(Locale, data["code"]) is not None:
                continue
            row = dict(data)
            if has_default:
                row["is_default"] = False
            db.add(Locale(**row))
            added += 1
        db.commit()
    finally:
        db.close()
    typer.echo(f"Database ready, {added} locale(s) added")


@app.command("create-admin")
def create_admin(
    username: str = typer.Argument(...),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
    email: Optional[str] = typer.Option(None, "--email"),
) -> None:
    """Create an admin account, or reset the password of an existing one."""
    db = SessionLocal()
    try:
        user = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
        if user is None:
            user = User(username=username, email=email)
            db.add(user)
        user.password_hash = hash_password(password)
        user.is_admin = True
        db.commit()
    finally:
        db.close()
    typer.echo(f"Admin {username} saved")


def _load_seed(path: Path) -> List[dict]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        typer.echo(f"Error: cannot read {path}: {exc}", err=True)
        raise typer.Exit(code=1) from None
    pages = data.get("pages") if isinstance(data, dict) else None
    if not isinstance(pages, list):
        typer.echo("Error: seed file must contain a \"pages\" list", err=True)
        raise typer.Exit(code=1)
    return pages


def _invalidate_remote(server: str, username: str, password: str, tags: List[str]) -> None:
    with httpx.Client(base_url=server, timeout=10.0) as client:
        login = client.post("/admin/login", data={"username": username, "password": password})
        login.raise_for_status()
        response = client.post("/api/admin/cache/invalidate", json={"tags": tags})
        response.raise_for_status()
    logger.info("Invalidated %d tag(s) on %s", len(tags), server)


@app.command()
def seed(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    mode: ReconcileMode = MODE_OPTION,
    publish: bool = PUBLISH_OPTION,
    server: Optional[str] = SERVER_OPTION,
    username: Optional[str] = USERNAME_OPTION,
    password: Optional[str] = PASSWORD_OPTION,
) -> None:
    """Reconcile page blocks from a JSON file into the database.

    Pages that do not exist yet are created. Running the same file twice
    changes nothing the second time.
    """
    pages = _load_seed(file)
    # this process has no warm entries; the running server's cache is the one to bust
    cache = TaggedCache(enabled=False)
    changed = unchanged = failed = 0
    touched: List[str] = []

    db = SessionLocal()
    try:
        for entry in pages:
            entry = entry if isinstance(entry, dict) else {}
            slug = slugify(entry.get("slug") or "")
            locales = entry.get("locales") or {}
            if not slug or not isinstance(locales, dict):
                typer.echo(f"Skipping malformed entry {entry!r}", err=True)
                failed += 1
                continue
            exists = db.execute(select(Page.id).where(Page.slug == slug)).scalar_one_or_none()
            if not exists:
                provision_page(db, cache, slug, entry.get("title"))
                typer.echo(f"Created page {slug}")
            for code, blocks in locales.items():
                try:
                    result = apply_page_blocks(
                        db,
                        cache,
                        slug,
                        code,
                        blocks or [],
                        mode=mode,
                        publish=publish,
                        updated_by="seed",
                        validate=True,
                    )
                except (LocaleNotFoundError, BlockValidationError, TypeError) as exc:
                    db.rollback()
                    typer.echo(f"{slug} ({code}): {exc}", err=True)
                    failed += 1
                    continue
                if result.changed:
                    changed += 1
                    touched.append(page_cache_tag(slug, code))
                else:
                    unchanged += 1
    finally:
        db.close()

    typer.echo(f"{changed} changed, {unchanged} unchanged, {failed} failed")

    if touched and server:
        if not (username and password):
            typer.echo("Error: --server needs --username and --password", err=True)
            raise typer.Exit(code=1)
        try:
            _invalidate_remote(server, username, password, touched + [all_pages_cache_tag()])
        except httpx.HTTPError as exc:
            typer.echo(f"Error: cache invalidation on {server} failed: {exc}", err=True)
            raise typer.Exit(code=1) from None
    if failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
