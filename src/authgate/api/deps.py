"""API dependencies."""

import logging

from fastapi import Depends, Header, HTTPException, Request

from authgate.auth.context import ActiveRoleSet
from authgate.auth.token import TokenManager
from authgate.engine.core import IdentityEngine
from authgate.errors import BadToken

logger = logging.getLogger("authgate.api")

TOKEN_HEADER = "X-Auth-Token"


def get_engine(request: Request) -> IdentityEngine:
    """Identity engine created at startup."""
    return request.app.state.engine


def get_token_manager(request: Request) -> TokenManager:
    return request.app.state.token_manager


async def require_token(
    x_auth_token: str | None = Header(None, alias=TOKEN_HEADER),
    tokens: TokenManager = Depends(get_token_manager),
) -> ActiveRoleSet:
    """
    Validate the caller's token.

    A missing token is 401; a token that fails validation is 400.
    """
    if not x_auth_token:
        raise HTTPException(status_code=401, detail=f"Missing {TOKEN_HEADER} header")

    try:
        return await tokens.parse_token(x_auth_token)
    except BadToken as e:
        raise HTTPException(status_code=400, detail=e.message)


async def require_admin(
    role_set: ActiveRoleSet = Depends(require_token),
) -> ActiveRoleSet:
    """Reject callers whose highest role is not admin."""
    if not role_set.is_admin:
        logger.info(f"Denied admin route to {role_set.username!r}")
        raise HTTPException(status_code=403, detail="Admin role required")
    return role_set
