import logging
from typing import Annotated
from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from ..api.exceptions import UnauthorizedException
from ..auth.keycloak_admin import IdentityProviderError, KeycloakAdminClient, get_identity_provider
from ..database import get_db
from ..services.users import effective_role, ensure_user_profile
from .gate import require_admin
from .principal import Principal

logger = logging.getLogger(__name__)


def parse_authorization_header(request: Request) -> str:
    """Extract the bearer token of the request"""
    authorization = request.headers.get("Authorization")
    if not authorization:
        raise UnauthorizedException("No authorization provided")
    
    scheme, param = get_authorization_scheme_param(authorization)
    
    if not param:
        raise UnauthorizedException("Invalid authorization format")
    
    if scheme.lower() != "bearer":
        raise UnauthorizedException(f"Unsupported auth scheme: {scheme}")
    
    return param


async def get_current_principal(
    token: Annotated[str, Depends(parse_authorization_header)],
    db: Annotated[Session, Depends(get_db)],
    identity: Annotated[KeycloakAdminClient, Depends(get_identity_provider)],
) -> Principal:
    """Resolve the bearer token to a profile, creating it on first sign-in."""
    try:
        user = await identity.userinfo(token)
    except IdentityProviderError as e:
        logger.warning(f"Rejected token: {e}")
        raise UnauthorizedException("Invalid or expired token")
    
    profile = ensure_user_profile(db, user.id, user.email)
    return Principal(user_id=profile.uid, email=profile.email, role_global=effective_role(profile))


async def get_admin_principal(
    principal: Annotated[Principal, Depends(get_current_principal)]
) -> Principal:
    return require_admin(principal)
