# ============================================================================
# FILE: app/services/auth_service.py
# Signup / login / logout / identity lookup
# ============================================================================
from typing import Optional, Tuple
from fastapi.concurrency import run_in_threadpool
from app.core.errors import (
    InvalidCredentialsError,
    NotAuthenticatedError,
    UserNotFoundError,
    ConflictError,
    ValidationError,
)
from app.core.security import BCRYPT_MAX_BYTES, PasswordHasher, TokenCodec
from app.db.models.user import User
from app.services.user_service import CredentialStore
import logging

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class Authenticator:
    """
    The only component that creates or checks raw credentials.

    Store calls and bcrypt run in the threadpool so one slow request never
    holds up the event loop.
    """

    def __init__(self, store: CredentialStore, codec: TokenCodec, hasher: PasswordHasher):
        self.store = store
        self.codec = codec
        self.hasher = hasher

    async def signup(self, username: Optional[str], email: Optional[str], password: Optional[str]) -> Tuple[User, str]:
        """Create an account and return it with a fresh session token"""
        if not username or not email or not password:
            raise ValidationError("All fields are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")

        existing = await run_in_threadpool(self.store.find_by_username_or_email, username, email)
        if existing:
            raise ConflictError()

        password_hash = await run_in_threadpool(self.hasher.hash, password)
        user = await run_in_threadpool(self.store.insert, username, email, password_hash)

        token = self.codec.issue(user.id)
        return user, token

    async def login(self, username: Optional[str], password: Optional[str]) -> Tuple[User, str]:
        """
        Check credentials and mint a new token.
        Unknown user and wrong password raise the same InvalidCredentialsError.
        """
        if not username or not password:
            raise ValidationError("Username and password are required")

        user = await run_in_threadpool(self.store.find_by_username, username)
        if user is None:
            await run_in_threadpool(self.hasher.burn, password)
            logger.info("Login failed")
            raise InvalidCredentialsError()

        valid = await run_in_threadpool(self.hasher.verify, password, user.password_hash)
        if not valid:
            logger.info("Login failed")
            raise InvalidCredentialsError()

        token = self.codec.issue(user.id)
        logger.info(f"User logged in: id={user.id}")
        return user, token

    async def logout(self) -> None:
        # Stateless: nothing to invalidate server side, the cookie is cleared
        # by the caller
        return None

    async def get_current_user(self, token: Optional[str]) -> User:
        """Resolve the user behind token; the token is verified before any lookup"""
        if not token:
            raise NotAuthenticatedError()

        user_id = self.codec.verify(token)

        user = await run_in_threadpool(self.store.find_by_id, user_id)
        if user is None:
            raise UserNotFoundError()
        return user
