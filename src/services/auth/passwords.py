"""Password hashing helpers."""

from __future__ import annotations

import asyncio
import secrets

import bcrypt

from src.config import settings


def _hash(password: str, rounds: int) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode(
        "utf-8"
    )


def _verify(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


async def hash_password(password: str) -> str:
    return await asyncio.to_thread(_hash, password, settings.BCRYPT_ROUNDS)


async def verify_password(password: str, password_hash: str) -> bool:
    return await asyncio.to_thread(_verify, password, password_hash)


def generate_password(length: int = 16) -> str:
    """Random password handed out when an admin creates a supplier login."""

    return secrets.token_urlsafe(length)[:length]
