import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from loguru import logger as custom_logger

from app.api.errors import UnauthorizedError
from app.core.config import JWT_ISSUER

JWT_ALGORITHM = "HS256"
BEARER_PREFIX = "Bearer "


class AuthError(Exception):
    pass


def get_bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise AuthError("Authorization header is missing")
    if not authorization.startswith(BEARER_PREFIX):
        raise AuthError("Authorization header is not a bearer token")

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthError("Bearer token is empty")
    return token


def make_jwt(user_id: uuid.UUID, secret: str, expires_in: timedelta = timedelta(hours=1)) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "iss": JWT_ISSUER,
        "sub": str(user_id),
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def validate_jwt(token: str, secret: str) -> uuid.UUID:
    """Verify signature, expiry and issuer; return the subject as a user id."""
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM], issuer=JWT_ISSUER)
    except JWTError as e:
        custom_logger.warning(f"JWT validation failed: {str(e)}")
        raise AuthError("Invalid token") from e

    try:
        return uuid.UUID(payload.get("sub", ""))
    except (TypeError, ValueError) as e:
        raise AuthError("Invalid token subject") from e


def authenticate_request(authorization: Optional[str], secret: str) -> uuid.UUID:
    """Resolve the caller of a request, raising ``UnauthorizedError``."""
    try:
        token = get_bearer_token(authorization)
    except AuthError as e:
        raise UnauthorizedError("Couldn't find JWT") from e

    try:
        return validate_jwt(token, secret)
    except AuthError as e:
        raise UnauthorizedError("Couldn't validate JWT") from e
