import json
from urllib.parse import unquote

from fastapi import Request
from fastapi.responses import RedirectResponse

from core.logger import get_logger
from core.security import TOKEN_COOKIE, USER_COOKIE
from models.user import UserRole

logger = get_logger(__name__)

GUARDED_PREFIXES = ("/manager", "/developer")
PAGE_ROLES = {role.value for role in UserRole}


def is_guarded_page(path: str) -> bool:
    if path in ("/", "/login"):
        return True
    return any(path == prefix or path.startswith(prefix + "/") for prefix in GUARDED_PREFIXES)


def role_from_user_cookie(raw: str | None) -> str:
    role = "developer"
    if not raw:
        return role
    try:
        parsed = json.loads(unquote(raw)).get("role")
    except (ValueError, AttributeError) as e:
        logger.error(f"Error parsing user cookie: {e}")
        return role
    return parsed if parsed in PAGE_ROLES else role


async def page_guard_middleware(request: Request, call_next):
    """Redirect page requests by session cookie presence.

    Signed-in visitors skip the login page, anonymous visitors are sent to
    it. API routes are untouched; they answer 401 on their own.
    """
    path = request.url.path
    if not is_guarded_page(path):
        return await call_next(request)

    has_token = bool(request.cookies.get(TOKEN_COOKIE))

    if has_token and path == "/login":
        role = role_from_user_cookie(request.cookies.get(USER_COOKIE))
        return RedirectResponse(f"/{role}", status_code=303)

    if not has_token and path != "/login":
        return RedirectResponse("/login", status_code=303)

    return await call_next(request)
