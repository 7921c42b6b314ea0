# ============================================================================
# FILE: app/core/cookies.py
# Session cookie transport policy
# ============================================================================
from fastapi import Request, Response
from typing import Optional
from app.config import settings


def cookie_policy() -> dict:
    """
    Cookie attributes for the current deployment.

    Development runs frontend and backend same-site over plain HTTP, so the
    cookie is Lax and not Secure. Everywhere else the frontend is hosted on a
    different site, which needs SameSite=None, and browsers only accept that
    together with Secure.
    """
    dev = settings.is_development
    return {
        "httponly": True,
        "secure": not dev,
        "samesite": "lax" if dev else "none",
        "path": "/",
    }


def set_session_cookie(response: Response, token: str, max_age: int) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=max_age,
        **cookie_policy(),
    )


def clear_session_cookie(response: Response) -> None:
    # Attributes must match the ones used to set it or browsers keep the cookie
    response.delete_cookie(key=settings.COOKIE_NAME, **cookie_policy())


def read_session_token(request: Request) -> Optional[str]:
    return request.cookies.get(settings.COOKIE_NAME) or None
