"""Password hashing for local users."""

import logging

import bcrypt

from authgate.errors import InternalError, InvalidArgument

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    try:
        return password.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidArgument("Password is not valid UTF-8") from exc


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash password with bcrypt"""
    encoded = _encode(password)
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise InvalidArgument(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    try:
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode()
    except ValueError as exc:
        logger.debug(f"Failed to create password hash: {exc!r}")
        raise InternalError("Failed to create password hash") from exc


def verify_password(password: str, password_digest: str) -> bool:
    """Verify password against hash"""
    try:
        return bcrypt.checkpw(_encode(password), password_digest.encode())
    except InvalidArgument:
        return False
    except ValueError as exc:
        logger.warning(f"Unusable password digest or input: {exc!r}")
        return False
