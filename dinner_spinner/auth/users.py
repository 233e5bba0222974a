from __future__ import annotations

import logging
from typing import Any

import bcrypt
from sqlalchemy.orm import Session

from ..store import repository

logger = logging.getLogger(__name__)

_BCRYPT_ROUNDS = 10


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)).decode()


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


# Checked against when the username is unknown so both failure paths do the same work
_DUMMY_HASH = hash_password("dinner-spinner-no-such-user")


def authenticate(db: Session, username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{user_id, username}`` or ``None``."""
    record = repository.get_user_by_username(db, username)
    if record is None:
        verify_password(password, _DUMMY_HASH)
        logger.info("Rejected login attempt")
        return None
    if not verify_password(password, record.password):
        logger.info("Rejected login attempt")
        return None
    return {"user_id": record.id, "username": record.username}
