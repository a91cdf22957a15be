from __future__ import annotations

import secrets
from functools import lru_cache

import bcrypt

BCRYPT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of a secret
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def get_password_hash(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return get_password_hash("not-a-real-password")


def burn_password_check(plain_password: str) -> None:
    # Unknown usernames cost the same bcrypt work as a real check
    verify_password(plain_password, _dummy_hash())


def constant_time_equals(left: str, right: str) -> bool:
    return secrets.compare_digest(left.encode("utf-8"), right.encode("utf-8"))
