from fastapi import HTTPException, Request
from passlib.context import CryptContext

from pagecontent.services.cache import TaggedCache

password_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    default="pbkdf2_sha256",
    deprecated="auto",
)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return password_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def hash_password(password: str) -> str:
    return password_context.hash(password)


def get_session_admin(request: Request):
    return request.session.get("admin")


def require_admin(request: Request) -> dict:
    admin = get_session_admin(request)
    if not admin:
        raise HTTPException(status_code=401, detail="Please login")
    return admin


def get_cache(request: Request) -> TaggedCache:
    return request.app.state.cache
