"""
Security Service

Handles password hashing and JWT token operations.

Security Features:
==================
1. Password hashing with bcrypt (passlib), cost factor from settings
2. JWT token generation and validation (HS256, 1 hour lifetime)
3. Fail-fast check for a missing signing secret

Usage:
    from catalog.services.security import hash_password, verify_password

    hashed = hash_password("SecurePass123")
    is_valid = verify_password("SecurePass123", hashed)
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from catalog.config import get_settings
from catalog.errors import ConfigurationError

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# bcrypt__rounds is the bcrypt cost factor (10 unless configured otherwise)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=get_settings().password_hash_rounds,
)


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hashed = hash_password("SecurePass123")
        >>> hashed.startswith("$2b$10$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Uses constant-time comparison to prevent timing attacks.
    """
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# JWT Token Configuration
# -------------------------------------------------------------------------
ALGORITHM = "HS256"


def require_jwt_secret() -> str:
    """
    Return the configured signing secret.

    Raises:
        ConfigurationError: If JWT_SECRET is not configured. This is a
            server problem, distinct from bad credentials.
    """
    secret = get_settings().jwt_secret
    if not secret:
        logger.error("JWT_SECRET is not configured; refusing to issue tokens")
        raise ConfigurationError(
            "Token signing is not configured on the server",
            code="SERVER_MISCONFIGURED",
        )
    return secret


def create_access_token(
    data: dict,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Payload data to encode in the token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string

    Raises:
        ConfigurationError: If no signing secret is configured
    """
    secret = require_jwt_secret()
    to_encode = data.copy()

    if expires_delta is None:
        expires_delta = timedelta(minutes=get_settings().token_expire_minutes)

    to_encode.update({"exp": datetime.now(UTC) + expires_delta})

    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def create_user_token(user_id: int, username: str) -> str:
    """Create the login token for a user: subject is the id, plus the username."""
    return create_access_token({"sub": str(user_id), "username": username})


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded payload if valid, None if invalid, expired, or if the
        server has no signing secret
    """
    secret = get_settings().jwt_secret
    if not secret:
        return None

    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None
