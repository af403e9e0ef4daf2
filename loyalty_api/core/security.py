import hmac
from datetime import datetime, timedelta, UTC

import bcrypt
from jose import JWTError, jwt

from loyalty_api.config import settings
from loyalty_api.core.exceptions import UnauthorizedException

BCRYPT_ROUNDS = 12


def create_access_token(customer_id: int, expires_delta: timedelta | None = None) -> str:
    """
    Mint a signed, time-bounded access token for a customer.

    The customer id travels in the 'sub' claim as a decimal string.
    """
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(customer_id), "iat": now, "exp": now + expires_delta}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (customer id), 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")

    # jose checks 'exp' when present, but does not require it
    if payload.get("exp") is None:
        raise UnauthorizedException("Token missing expiration")

    if payload.get("sub") is None:
        raise UnauthorizedException("Token missing customer identifier")

    return payload


def authenticate(token: str) -> int:
    """
    Map a bearer token to exactly one customer id.

    Raises:
        UnauthorizedException: For any token that does not verify or whose
            subject is not a customer id
    """
    payload = decode_jwt(token)
    subject = payload["sub"]
    if not isinstance(subject, str) or not subject.isdigit():
        raise UnauthorizedException("Token has malformed customer identifier")
    return int(subject)


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt"""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is not a bcrypt hash
        return False


def secrets_match(provided: str | None, expected: str) -> bool:
    """Constant-time comparison for shared header secrets"""
    if not expected or provided is None:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
