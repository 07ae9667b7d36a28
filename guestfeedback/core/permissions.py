"""
Role-based access control with per-request tenant isolation

`authorize` is a pure function of the identity and the requested resource.
It never looks anything up and never caches, so callers pass the owning
tenant they just read from the store.
"""

from dataclasses import dataclass
from typing import Optional
import uuid

import structlog

from guestfeedback.core.errors import Forbidden, NotFound
from guestfeedback.core.session_validator import Identity
from guestfeedback.models import UserRole

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check"""
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def deny(reason: str) -> Decision:
    return Decision(False, reason)


def authorize(
    identity: Identity,
    required_role: UserRole,
    resource_tenant_id: Optional[uuid.UUID] = None,
) -> Decision:
    """Decide whether `identity` may act on a resource needing `required_role`"""
    if identity.role != required_role:
        return deny("role")

    if required_role == UserRole.PLATFORM_ADMIN:
        return ALLOW

    # Tenant admin resources
    if identity.tenant_id is None:
        return deny("no_tenant")
    if resource_tenant_id is not None and resource_tenant_id != identity.tenant_id:
        return deny("cross_tenant")
    return ALLOW


def authorize_ownership(identity: Identity, owner_tenant_id: uuid.UUID) -> Decision:
    """Resource owned by a tenant, owner read fresh from the store"""
    return authorize(identity, UserRole.TENANT_ADMIN, owner_tenant_id)


def enforce(
    identity: Identity,
    required_role: UserRole,
    resource_tenant_id: Optional[uuid.UUID] = None,
) -> Identity:
    """Raise Forbidden unless authorized"""
    decision = authorize(identity, required_role, resource_tenant_id)
    if not decision:
        logger.warning(
            "Access denied",
            user_id=str(identity.user_id),
            role=identity.role.value,
            required_role=required_role.value,
            reason=decision.reason,
        )
        raise Forbidden()
    return identity


def owned(identity: Identity, resource, noun: str = "Resource"):
    """
    Return `resource` if it belongs to the caller's tenant.

    Missing and foreign resources produce the same NotFound, so a caller
    cannot test other tenants for existence.
    """
    if resource is None:
        raise NotFound(f"{noun} not found")

    decision = authorize_ownership(identity, resource.hotel_id)
    if not decision:
        logger.warning(
            "Cross-tenant access denied",
            user_id=str(identity.user_id),
            tenant_id=str(identity.tenant_id),
            resource=noun,
            resource_id=str(resource.id),
            reason=decision.reason,
        )
        raise NotFound(f"{noun} not found")
    return resource
