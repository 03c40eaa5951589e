"""FastAPI dependencies shared by the marketplace routers."""

from fastapi import Header

from marketplace.access.principal import Principal, resolve_principal
from marketplace.errors import AuthorizationError


def bearer_token(authorization: str | None = Header(default=None)) -> str:
    """Return the token from ``Authorization: Bearer <token>``.

    Commands carry the token as their actor id and resolve it inside their
    own unit of work.
    """
    token = authorization.removeprefix("Bearer ").strip() if authorization else ""
    if not token:
        raise AuthorizationError("No credentials presented")
    return token


def current_principal(authorization: str | None = Header(default=None)) -> Principal:
    return resolve_principal(bearer_token(authorization))
