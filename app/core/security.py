# ============================================================================
# FILE: app/core/security.py
# Password hashing (bcrypt) and session token signing/verification (JWT)
# ============================================================================
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
import bcrypt
import jwt
import logging
from app.config import settings
from app.core.errors import ExpiredTokenError, InvalidTokenError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72

USER_ID_CLAIM = "userId"


class PasswordHasher:
    """Salted bcrypt hashing with a configurable work factor"""

    def __init__(self, rounds: int = None):
        self._rounds = rounds
        # Compared against when the user does not exist so both login
        # failure paths spend the same time in bcrypt
        self._dummy_hash = None

    @property
    def rounds(self) -> int:
        return self._rounds or settings.BCRYPT_ROUNDS

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Over-long input or a corrupt stored hash
            return False

    def burn(self, password: str) -> None:
        """Run one comparison against a throwaway hash and ignore the result"""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("not-a-real-password")
        self.verify(password, self._dummy_hash)


class TokenCodec:
    """
    Stateless issuer/verifier for session tokens.
    The only holder of the signing secret; never touches storage.
    """

    def __init__(
        self,
        secret_key: str = None,
        algorithm: str = None,
        ttl: timedelta = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.secret_key = secret_key or settings.SECRET_KEY
        self.algorithm = algorithm or settings.ALGORITHM
        self.ttl = ttl or timedelta(days=settings.TOKEN_TTL_DAYS)
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def issue(self, user_id: int, ttl: timedelta = None) -> str:
        """Sign a token bound to user_id, expiring at now + ttl"""
        now = self.clock()
        payload = {
            USER_ID_CLAIM: user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + (ttl or self.ttl)).timestamp()),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """
        Return the user id bound to token.

        Raises:
            ExpiredTokenError: signature is valid but exp has passed
            InvalidTokenError: bad signature, malformed token, or bad claims
        """
        if not token:
            raise InvalidTokenError()

        try:
            # Expiry is checked below against our own clock
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.PyJWTError as e:
            logger.debug(f"Token rejected: {type(e).__name__}")
            raise InvalidTokenError() from e

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise InvalidTokenError()
        if self.clock().timestamp() >= exp:
            raise ExpiredTokenError()

        user_id = payload.get(USER_ID_CLAIM)
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidTokenError()
        return user_id

    @property
    def max_age_seconds(self) -> int:
        return int(self.ttl.total_seconds())


def get_token_codec() -> TokenCodec:
    return TokenCodec()


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


_password_hasher = PasswordHasher()
