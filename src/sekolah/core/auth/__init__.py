"""Authentication module: bearer token verification and user lookup."""

from sekolah.core.auth.backend import create_access_token, decode_token
from sekolah.core.auth.dependencies import CurrentUser, get_current_user
from sekolah.core.auth.middleware import PrincipalContextMiddleware, RequestIdMiddleware
from sekolah.core.auth.schemas import TokenData


__all__ = [
    # Dependencies
    "CurrentUser",
    # Middleware
    "PrincipalContextMiddleware",
    "RequestIdMiddleware",
    # Schemas
    "TokenData",
    # Token utilities
    "create_access_token",
    "decode_token",
    "get_current_user",
]
