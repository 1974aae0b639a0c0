"""REST API router."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse

from authgate import __version__
from authgate.api import helpers
from authgate.api.deps import get_engine, get_token_manager, require_admin, require_token
from authgate.api.helpers import Result, StatusCategory
from authgate.api.schemas import (
    AuthorizationResponse,
    HealthResponse,
    LoginRequest,
    LoginResponse,
    MetricsResponse,
)
from authgate.auth.context import ActiveRoleSet
from authgate.auth.token import TokenManager
from authgate.engine.core import IdentityEngine
from authgate.errors import AuthenticationFailed, InternalError
from authgate.models import (
    LdapMappingCreate,
    LdapMappingUpdate,
    LocalUserCreate,
    LocalUserUpdate,
    to_authorization_view,
)
from authgate.observability.metrics import metrics

logger = logging.getLogger("authgate.api")

router = APIRouter(prefix="/api/v1/auth_proxy")

_HTTP_STATUS = {
    StatusCategory.CREATED: 201,
    StatusCategory.OK: 200,
    StatusCategory.NO_CONTENT: 204,
    StatusCategory.NOT_FOUND: 404,
    StatusCategory.BAD_REQUEST: 400,
    StatusCategory.INTERNAL_ERROR: 500,
}


def to_response(result: Result) -> Response:
    """Render a typed result as an HTTP response."""
    category, payload = result
    status_code = _HTTP_STATUS[category]
    if payload is None:
        return Response(status_code=status_code)
    return JSONResponse(status_code=status_code, content=payload)


# ============================================================================
# Health & Login
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    engine: IdentityEngine = Depends(get_engine),
    tokens: TokenManager = Depends(get_token_manager),
):
    """Authenticate a local user and return a token."""
    try:
        role_set = await engine.authenticate_local_user(request.username, request.password)
    except AuthenticationFailed as e:
        raise HTTPException(status_code=401, detail=e.message)
    except InternalError as e:
        logger.error(f"Login of {request.username!r} failed: {e!r}")
        raise HTTPException(status_code=500, detail=helpers.GENERIC_ERROR)

    return LoginResponse(token=tokens.issue_for(role_set))


@router.get("/authorizations", response_model=list[AuthorizationResponse])
async def list_authorizations(role_set: ActiveRoleSet = Depends(require_token)):
    """Authorization claims carried by the caller's token."""
    return [
        AuthorizationResponse(**to_authorization_view(claim).model_dump())
        for claim in role_set.authorizations()
    ]


@router.get("/metrics", response_model=MetricsResponse, dependencies=[Depends(require_admin)])
async def get_metrics():
    """Snapshot of process metrics."""
    return MetricsResponse(**metrics.snapshot())


# ============================================================================
# Local users
# ============================================================================


@router.get("/local_users", dependencies=[Depends(require_admin)])
async def list_local_users(engine: IdentityEngine = Depends(get_engine)):
    """List local users."""
    return to_response(await helpers.get_local_users(engine))


@router.post("/local_users", dependencies=[Depends(require_admin)])
async def create_local_user(
    request: LocalUserCreate,
    engine: IdentityEngine = Depends(get_engine),
):
    """Create a local user."""
    return to_response(await helpers.add_local_user(engine, request))


@router.get("/local_users/{username}", dependencies=[Depends(require_admin)])
async def get_local_user(username: str, engine: IdentityEngine = Depends(get_engine)):
    """Get a local user by username."""
    return to_response(await helpers.get_local_user(engine, username))


@router.patch("/local_users/{username}", dependencies=[Depends(require_admin)])
async def update_local_user(
    username: str,
    request: LocalUserUpdate,
    engine: IdentityEngine = Depends(get_engine),
):
    """Update password, role, or disabled state of a local user."""
    return to_response(await helpers.update_local_user(engine, username, request))


@router.delete("/local_users/{username}", dependencies=[Depends(require_admin)])
async def delete_local_user(username: str, engine: IdentityEngine = Depends(get_engine)):
    """Delete a local user."""
    return to_response(await helpers.delete_local_user(engine, username))


# ============================================================================
# LDAP mappings
# ============================================================================


@router.get("/ldap_mappings", dependencies=[Depends(require_admin)])
async def list_ldap_mappings(engine: IdentityEngine = Depends(get_engine)):
    """List LDAP group mappings."""
    return to_response(await helpers.get_ldap_mappings(engine))


@router.post("/ldap_mappings", dependencies=[Depends(require_admin)])
async def create_ldap_mapping(
    request: LdapMappingCreate,
    engine: IdentityEngine = Depends(get_engine),
):
    """Map an LDAP group to a role."""
    return to_response(await helpers.add_ldap_mapping(engine, request))


@router.get("/ldap_mappings/{group_name:path}", dependencies=[Depends(require_admin)])
async def get_ldap_mapping(group_name: str, engine: IdentityEngine = Depends(get_engine)):
    """Get the role mapping of an LDAP group."""
    return to_response(await helpers.get_ldap_mapping(engine, group_name))


@router.patch("/ldap_mappings/{group_name:path}", dependencies=[Depends(require_admin)])
async def update_ldap_mapping(
    group_name: str,
    request: LdapMappingUpdate,
    engine: IdentityEngine = Depends(get_engine),
):
    """Change the role an LDAP group maps to."""
    return to_response(await helpers.update_ldap_mapping(engine, group_name, request))


@router.delete("/ldap_mappings/{group_name:path}", dependencies=[Depends(require_admin)])
async def delete_ldap_mapping(group_name: str, engine: IdentityEngine = Depends(get_engine)):
    """Delete the role mapping of an LDAP group."""
    return to_response(await helpers.delete_ldap_mapping(engine, group_name))
