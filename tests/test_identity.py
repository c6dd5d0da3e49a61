"""Tests for account get-or-create and password hashing."""
import pytest

import config
from fest.errors import Conflict, MissingCredential, ValidationError
from fest.models import User
from fest.models.user import ROLE_ADMIN, ROLE_DEVELOPER, ROLE_INCHARGE
from fest.services import identity
from fest.services.identity import hash_password, resolve_or_create, verify_password


async def test_same_email_resolves_to_one_account(session, count):
    first = await resolve_or_create(session, "x@y.com", ROLE_INCHARGE, "X", "secret")
    await session.commit()
    second = await resolve_or_create(session, "x@y.com", ROLE_INCHARGE, "X again", "other-secret")
    await session.commit()

    assert first.id == second.id
    assert await count(User) == 1


async def test_email_is_normalized(session, count):
    first = await resolve_or_create(session, "  Captain@Fest.TEST ", ROLE_INCHARGE, "C", "secret")
    second = await resolve_or_create(session, "captain@fest.test", ROLE_INCHARGE)

    assert first.email == "captain@fest.test"
    assert second.id == first.id
    assert await count(User) == 1


async def test_new_account_requires_password(session, count):
    with pytest.raises(MissingCredential):
        await resolve_or_create(session, "new@y.com", ROLE_ADMIN, "New", None)
    with pytest.raises(MissingCredential):
        await resolve_or_create(session, "new@y.com", ROLE_ADMIN, "New", "")

    assert await count(User) == 0


async def test_existing_account_needs_no_password(session, factory):
    existing = await factory.user(ROLE_ADMIN, email="admin@fest.test")
    await session.commit()

    user = await resolve_or_create(session, "admin@fest.test", ROLE_ADMIN)

    assert user.id == existing.id


async def test_reuse_keeps_original_role(session, factory, monkeypatch):
    monkeypatch.setattr(config, "ROLE_REUSE_POLICY", "reuse")
    dev = await factory.user(ROLE_DEVELOPER, email="dev@fest.test")
    await session.commit()

    user = await resolve_or_create(session, "dev@fest.test", ROLE_INCHARGE, "Dev", "pw")

    assert user.id == dev.id
    assert user.role == ROLE_DEVELOPER


async def test_reject_policy_refuses_role_mismatch(session, factory, monkeypatch):
    monkeypatch.setattr(config, "ROLE_REUSE_POLICY", "reject")
    await factory.user(ROLE_DEVELOPER, email="dev@fest.test")
    await session.commit()

    with pytest.raises(Conflict):
        await resolve_or_create(session, "dev@fest.test", ROLE_INCHARGE, "Dev", "pw")
    same_role = await resolve_or_create(session, "dev@fest.test", ROLE_DEVELOPER)
    assert same_role.role == ROLE_DEVELOPER


async def test_concurrent_creation_rereads_winner(session, count, monkeypatch):
    """Another request created the account between our lookup and our insert."""
    winner = await resolve_or_create(session, "race@fest.test", ROLE_INCHARGE, "Winner", "pw1")
    await session.commit()
    winner_id = winner.id

    real_lookup = identity.get_user_by_email
    calls = []

    async def stale_lookup(session, email):
        calls.append(email)
        if len(calls) == 1:
            return None
        return await real_lookup(session, email)

    monkeypatch.setattr(identity, "get_user_by_email", stale_lookup)
    user = await resolve_or_create(session, "race@fest.test", ROLE_INCHARGE, "Loser", "pw2")

    assert user.id == winner_id
    assert len(calls) == 2
    assert await count(User) == 1


async def test_invalid_input(session):
    with pytest.raises(ValidationError):
        await resolve_or_create(session, "  ", ROLE_ADMIN, "No email", "pw")
    with pytest.raises(ValidationError):
        await resolve_or_create(session, "a@b.c", "SUPERUSER", "Bad role", "pw")


async def test_password_is_stored_hashed(session):
    user = await resolve_or_create(session, "hash@fest.test", ROLE_ADMIN, "H", "plaintext-pw")

    assert user.password_hash != "plaintext-pw"
    assert verify_password("plaintext-pw", user.password_hash)
    assert not verify_password("wrong", user.password_hash)


def test_long_passwords_are_prehashed():
    long_pw = "p" * 100
    hashed = hash_password(long_pw)
    assert verify_password(long_pw, hashed)
    assert not verify_password("p" * 99, hashed)


async def test_created_account_rolls_back_with_caller(session, count):
    """Account creation stays inside the caller's transaction until they commit."""
    await resolve_or_create(session, "kept@fest.test", ROLE_ADMIN, "Kept", "pw")
    await session.commit()

    await resolve_or_create(session, "discarded@fest.test", ROLE_INCHARGE, "Gone", "pw")
    await session.rollback()

    assert await count(User) == 1
    assert await count(User, User.email == "discarded@fest.test") == 0
