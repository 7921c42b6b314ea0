import asyncio
from datetime import datetime

import pytest

from app.core.errors import (
    ConflictError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotAuthenticatedError,
    UserNotFoundError,
    ValidationError,
)
from app.core.security import PasswordHasher, TokenCodec
from app.db.models.user import User
from app.services.auth_service import Authenticator
from app.services.user_service import CredentialStore


class FakeStore:
    """In-memory credential store that records every call"""

    def __init__(self):
        self.users = {}
        self.calls = []

    def find_by_username_or_email(self, username, email):
        self.calls.append("find_by_username_or_email")
        for user in self.users.values():
            if user.username == username or user.email == email:
                return user
        return None

    def find_by_username(self, username):
        self.calls.append("find_by_username")
        return next((u for u in self.users.values() if u.username == username), None)

    def find_by_id(self, user_id):
        self.calls.append("find_by_id")
        return self.users.get(user_id)

    def insert(self, username, email, password_hash):
        self.calls.append("insert")
        if any(u.username == username or u.email == email for u in self.users.values()):
            raise ConflictError()
        user = User(
            id=len(self.users) + 1,
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=datetime.utcnow(),
        )
        self.users[user.id] = user
        return user


@pytest.fixture()
def store():
    return FakeStore()


@pytest.fixture()
def authenticator(store):
    return Authenticator(store=store, codec=TokenCodec(), hasher=PasswordHasher(rounds=4))


def run(coro):
    return asyncio.run(coro)


def test_signup_returns_user_and_token_for_it(authenticator, store):
    user, token = run(authenticator.signup("alice", "a@x.com", "secret1"))

    assert user.username == "alice"
    assert authenticator.codec.verify(token) == user.id
    assert user.password_hash != "secret1"
    assert store.calls == ["find_by_username_or_email", "insert"]


def test_signup_then_current_user_round_trip(authenticator):
    user, token = run(authenticator.signup("alice", "a@x.com", "secret1"))
    assert run(authenticator.get_current_user(token)).id == user.id


@pytest.mark.parametrize("username,email,password", [
    ("", "a@x.com", "secret1"),
    ("alice", "", "secret1"),
    ("alice", "a@x.com", ""),
    (None, None, None),
])
def test_signup_requires_all_fields(authenticator, store, username, email, password):
    with pytest.raises(ValidationError) as exc:
        run(authenticator.signup(username, email, password))
    assert exc.value.message == "All fields are required"
    assert store.calls == []


@pytest.mark.parametrize("password", ["a", "12345", "short"])
def test_short_password_rejected_before_storage(authenticator, store, password):
    with pytest.raises(ValidationError) as exc:
        run(authenticator.signup("alice", "a@x.com", password))
    assert exc.value.message == "Password must be at least 6 characters"
    assert store.calls == []


def test_password_of_exactly_six_characters_is_accepted(authenticator):
    user, _ = run(authenticator.signup("alice", "a@x.com", "123456"))
    assert user.id == 1


def test_password_over_bcrypt_limit_rejected_before_storage(authenticator, store):
    with pytest.raises(ValidationError):
        run(authenticator.signup("alice", "a@x.com", "x" * 73))
    assert store.calls == []


@pytest.mark.parametrize("username,email", [("alice", "other@x.com"), ("bob", "a@x.com")])
def test_duplicate_username_or_email_conflicts(authenticator, store, username, email):
    run(authenticator.signup("alice", "a@x.com", "secret1"))

    with pytest.raises(ConflictError):
        run(authenticator.signup(username, email, "secret1"))
    with pytest.raises(ConflictError):
        run(authenticator.signup(username, email, "secret1"))
    assert len(store.users) == 1


def test_conflict_raised_by_store_insert_is_surfaced(authenticator, store, monkeypatch):
    # Simulate losing the race: the existence check sees nothing
    run(authenticator.signup("alice", "a@x.com", "secret1"))
    monkeypatch.setattr(store, "find_by_username_or_email", lambda username, email: None)

    with pytest.raises(ConflictError):
        run(authenticator.signup("alice2", "a@x.com", "secret1"))
    assert len(store.users) == 1


def test_login_success_issues_independent_tokens(authenticator):
    user, _ = run(authenticator.signup("alice", "a@x.com", "secret1"))

    logged_in, first = run(authenticator.login("alice", "secret1"))
    _, second = run(authenticator.login("alice", "secret1"))

    assert logged_in.id == user.id
    assert authenticator.codec.verify(first) == user.id
    assert authenticator.codec.verify(second) == user.id


def test_login_failures_are_indistinguishable(authenticator):
    run(authenticator.signup("alice", "a@x.com", "secret1"))

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        run(authenticator.login("alice", "wrong"))
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        run(authenticator.login("nobody", "secret1"))

    assert type(wrong_password.value) is type(unknown_user.value)
    assert wrong_password.value.message == unknown_user.value.message == "Invalid credentials"
    assert wrong_password.value.status_code == unknown_user.value.status_code == 401


def test_login_unknown_user_still_runs_a_hash_comparison(authenticator, monkeypatch):
    burned = []
    monkeypatch.setattr(authenticator.hasher, "burn", lambda password: burned.append(password))

    with pytest.raises(InvalidCredentialsError):
        run(authenticator.login("nobody", "secret1"))
    assert burned == ["secret1"]


def test_login_is_case_sensitive_on_username(authenticator):
    run(authenticator.signup("alice", "a@x.com", "secret1"))
    with pytest.raises(InvalidCredentialsError):
        run(authenticator.login("Alice", "secret1"))


@pytest.mark.parametrize("username,password", [("", "secret1"), ("alice", ""), (None, None)])
def test_login_requires_both_fields(authenticator, store, username, password):
    with pytest.raises(ValidationError) as exc:
        run(authenticator.login(username, password))
    assert exc.value.message == "Username and password are required"
    assert store.calls == []


def test_logout_touches_nothing(authenticator, store):
    run(authenticator.logout())
    assert store.calls == []


def test_current_user_without_token_skips_storage(authenticator, store):
    with pytest.raises(NotAuthenticatedError):
        run(authenticator.get_current_user(None))
    assert store.calls == []


def test_current_user_with_bad_token_skips_storage(authenticator, store):
    with pytest.raises(InvalidTokenError):
        run(authenticator.get_current_user("not-a-token"))
    assert store.calls == []


def test_current_user_with_expired_token_skips_storage(authenticator, store):
    from datetime import timedelta

    token = authenticator.codec.issue(1, ttl=timedelta(seconds=-1))
    with pytest.raises(ExpiredTokenError):
        run(authenticator.get_current_user(token))
    assert store.calls == []


def test_current_user_for_deleted_account(authenticator, store):
    token = authenticator.codec.issue(999)
    with pytest.raises(UserNotFoundError) as exc:
        run(authenticator.get_current_user(token))
    assert exc.value.status_code == 404
    assert store.calls == ["find_by_id"]


def test_concurrent_signups_with_same_email_on_real_store(database):
    codec = TokenCodec()
    hasher = PasswordHasher(rounds=4)
    sessions = [database.session(), database.session()]

    async def race():
        authenticators = [Authenticator(CredentialStore(s), codec, hasher) for s in sessions]
        return await asyncio.gather(
            authenticators[0].signup("alice", "a@x.com", "secret1"),
            authenticators[1].signup("alice2", "a@x.com", "secret1"),
            return_exceptions=True,
        )

    try:
        results = run(race())
    finally:
        for s in sessions:
            s.close()

    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert isinstance(failures[0], ConflictError)

    check = database.session()
    try:
        assert check.query(User).filter(User.email == "a@x.com").count() == 1
    finally:
        check.close()
