from typing import Collection

from fastapi import Request

LANG_COOKIE = "lang"
LANG_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


def pick_lang(request: Request, valid: Collection[str], default_lang: str) -> str:
    q = request.query_params.get("lang")
    if q in valid:
        return q
    cookie = request.cookies.get(LANG_COOKIE)
    if cookie in valid:
        return cookie
    return default_lang
