"""
Account flows that span the identity provider and the profile store.

Self-registration is only open to emails that already hold at least one
non-expired course grant; otherwise the freshly created account is deleted
again.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..api.exceptions import UnauthorizedRegistrationException
from ..auth.keycloak_admin import IdentityProviderError, KeycloakAdminClient
from .email_service import EmailService
from .permissions_store import get_authorized_courses_for_user, normalize_email
from .users import ensure_user_profile, upsert_user_profile

logger = logging.getLogger(__name__)


async def _discard_account(identity: KeycloakAdminClient, uid: str, email: str) -> None:
    # A failed cleanup is only logged; the registration error still propagates
    try:
        await identity.delete_user(uid)
    except IdentityProviderError as e:
        logger.error(f"Could not remove account {uid} of unauthorized registration {email}: {e}")


async def register_user(db: Session, identity: KeycloakAdminClient, email: str, password: str) -> tuple[str, List[str]]:
    """
    Create an account and keep it only if the email is authorized.

    Returns:
        (uid, authorized course ids)

    Raises:
        UnauthorizedRegistrationException: If the email holds no active grant
    """
    email = normalize_email(email)
    uid = await identity.create_user(email, password)

    try:
        courses = get_authorized_courses_for_user(db, email)
    except Exception:
        logger.error(f"Authorization check failed while registering {email}, removing account {uid}")
        await _discard_account(identity, uid, email)
        raise

    if not courses:
        logger.info(f"Registration of {email} rejected: no authorized courses")
        await _discard_account(identity, uid, email)
        raise UnauthorizedRegistrationException()

    ensure_user_profile(db, uid, email)
    logger.info(f"Registered {email} with access to {len(courses)} courses")
    return uid, courses


async def promote_user(db: Session, identity: KeycloakAdminClient, email: str, role: Optional[str]) -> str:
    """Look up or create the account for ``email`` and set its global role."""
    email = normalize_email(email)
    uid = await identity.get_or_create_user(email)
    profile = upsert_user_profile(db, uid, email, role)
    logger.info(f"Promoted {email} to {profile.role_global}")
    return uid


async def send_reset_link(identity: KeycloakAdminClient, mailer: EmailService, email: str) -> None:
    """
    Raises:
        UserNotFoundError: If no account has this email
        EmailDeliveryError: If the email could not be sent
    """
    link = await identity.generate_password_reset_link(email)
    await mailer.send_password_reset(email, link)
