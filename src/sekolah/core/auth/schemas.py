"""Authentication schemas for token handling."""

from datetime import datetime

from pydantic import BaseModel


class TokenData(BaseModel):
    """Claims extracted from a verified bearer token.

    Attributes:
        auth_id: Subject of the token, the identity provider's user id
        exp: Token expiration time
        email: Email claim, if the provider includes one
    """

    auth_id: str
    exp: datetime
    email: str | None = None
