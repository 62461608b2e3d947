"""Bearer-token checks for the admin HTTP API."""

from __future__ import annotations

import hmac
from typing import Optional, Union

_PREFIX = "Bearer "


class AuthError(Exception):
    """Raised when a request is not authorised; maps to HTTP 401."""

    status_code = 401

    def __init__(self, message: str = "unauthorized") -> None:
        super().__init__(message)


def extract_bearer_token(authorization: Optional[Union[str, bytes]]) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` value.

    Raises AuthError if the value is missing, undecodable, or not Bearer.
    """
    if authorization is None:
        raise AuthError("missing Authorization header")
    if isinstance(authorization, bytes):
        try:
            authorization = authorization.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise AuthError("Authorization header is not valid UTF-8") from exc
    if not authorization.startswith(_PREFIX):
        raise AuthError("Authorization header is not a Bearer token")
    return authorization[len(_PREFIX):]


def check_authorization(
    authorization: Optional[Union[str, bytes]], password: str
) -> str:
    """Validate the header against the admin password and return the token."""
    token = extract_bearer_token(authorization)
    if not hmac.compare_digest(token.encode("utf-8"), password.encode("utf-8")):
        raise AuthError("invalid token")
    return token