# ============================================================================
# FILE: app/api/dependencies.py
# ============================================================================
from dataclasses import dataclass
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.cookies import read_session_token
from app.core.errors import NotAuthenticatedError
from app.core.security import PasswordHasher, TokenCodec, get_password_hasher, get_token_codec
from app.services.auth_service import Authenticator
from app.services.user_service import CredentialStore
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, valid for the current request only"""
    user_id: int


def require_auth(
    request: Request,
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthContext:
    """
    Session gate for protected routes.
    No token or a token that fails verification -> 401. Never queries storage.
    """
    token = read_session_token(request)
    if token is None:
        raise NotAuthenticatedError()

    try:
        user_id = codec.verify(token)
    except NotAuthenticatedError as e:
        logger.debug(f"Session rejected on {request.url.path}: {type(e).__name__}")
        raise

    return AuthContext(user_id=user_id)


def get_credential_store(db: Session = Depends(get_db)) -> CredentialStore:
    return CredentialStore(db)


def get_authenticator(
    store: CredentialStore = Depends(get_credential_store),
    codec: TokenCodec = Depends(get_token_codec),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> Authenticator:
    return Authenticator(store=store, codec=codec, hasher=hasher)
