"""Bearer token verification.

Sessions are issued by the external identity provider; this service
only verifies the tokens it signs. ``create_access_token`` produces
compatible tokens for local development and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from sekolah.config import settings
from sekolah.core.auth.schemas import TokenData


def create_access_token(
    auth_id: str,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """Create a signed access token for an identity provider subject.

    Args:
        auth_id: The identity provider's user id (``sub`` claim)
        expires_delta: Optional custom expiration time
        additional_claims: Optional extra claims to include

    Returns:
        Encoded JWT access token
    """
    now = datetime.now(UTC)
    expire = now + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )

    to_encode: dict[str, Any] = {
        "sub": auth_id,
        "exp": expire,
        "iat": now,
    }
    if settings.jwt_audience:
        to_encode["aud"] = settings.jwt_audience
    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> TokenData | None:
    """Decode and validate a bearer token.

    Args:
        token: The JWT to decode

    Returns:
        TokenData if valid, None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"verify_aud": settings.jwt_audience is not None},
        )
    except JWTError:
        return None

    auth_id = payload.get("sub")
    exp = payload.get("exp")
    if not auth_id or exp is None:
        return None

    return TokenData(
        auth_id=str(auth_id),
        exp=datetime.fromtimestamp(exp, tz=UTC),
        email=payload.get("email"),
    )
