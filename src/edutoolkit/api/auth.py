"""
Account endpoints under ``/api/auth``.

``register`` and ``reset-link`` are public; ``promote`` is restricted to
administrators.
"""

import logging
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, InternalServerException, NotFoundException
from ..auth.keycloak_admin import (
    IdentityProviderError,
    KeycloakAdminClient,
    UserExistsError,
    UserNotFoundError,
    get_identity_provider,
)
from ..database import get_db
from ..interface.auth import (
    PromoteRequest,
    PromoteResponse,
    RegisterRequest,
    RegisterResponse,
    ResetLinkRequest,
    ResetLinkResponse,
)
from ..permissions.auth import get_admin_principal
from ..permissions.principal import Principal
from ..services.email_service import EmailDeliveryError, EmailService, get_email_service
from ..services.registration import promote_user, register_user, send_reset_link

logger = logging.getLogger(__name__)

auth_router = APIRouter()


@auth_router.post("/promote", response_model=PromoteResponse)
async def promote(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    request: PromoteRequest,
    db: Session = Depends(get_db),
    identity: KeycloakAdminClient = Depends(get_identity_provider)
):
    if not request.email:
        raise BadRequestException("Email is required")

    role = request.role.value if request.role else None
    try:
        uid = await promote_user(db, identity, request.email, role)
    except IdentityProviderError as e:
        logger.error(f"Error promoting {request.email}: {e}")
        raise InternalServerException(str(e))

    return PromoteResponse(success=True, uid=uid)


@auth_router.post("/reset-link", response_model=ResetLinkResponse)
async def reset_link(
    request: ResetLinkRequest,
    identity: KeycloakAdminClient = Depends(get_identity_provider),
    mailer: EmailService = Depends(get_email_service)
):
    if not request.email:
        raise BadRequestException("Email is required")

    try:
        await send_reset_link(identity, mailer, request.email)
    except UserNotFoundError:
        raise NotFoundException("No account exists for this email")
    except (IdentityProviderError, EmailDeliveryError) as e:
        logger.error(f"Error in reset-link process: {e}")
        raise InternalServerException(str(e))

    return ResetLinkResponse()


@auth_router.post("/register", response_model=RegisterResponse)
async def register(
    request: RegisterRequest,
    db: Session = Depends(get_db),
    identity: KeycloakAdminClient = Depends(get_identity_provider)
):
    if not request.email or not request.password:
        raise BadRequestException("Email and password are required")

    try:
        uid, courses = await register_user(db, identity, request.email, request.password)
    except UserExistsError:
        raise BadRequestException("An account already exists for this email")
    except IdentityProviderError as e:
        logger.error(f"Error registering {request.email}: {e}")
        raise InternalServerException(str(e))

    return RegisterResponse(uid=uid, email=request.email.strip().lower(), courses=courses)
