"""
Tenant access guard.

Every company-scoped operation receives a TenantContext built here instead of
reading a company id from the request body or a global. The context is the
only place downstream services take a company id from.
"""
import logging
from typing import NamedTuple, Optional

from ..exceptions import Forbidden, MissingCompanyContext, Unauthenticated
from ..models import EntityMembership

logger = logging.getLogger(__name__)

# Session key holding the user's selected company
ACTIVE_COMPANY_SESSION_KEY = "active_company_id"


class TenantContext(NamedTuple):
    """Authorized (user, company) pair for one request."""

    company_id: int
    user_id: int
    role: str


def resolve_company_id(*candidates) -> int:
    """
    Return the first usable company id among `candidates`.

    Candidates are checked in order (path, body, session); None and "" are
    skipped. The chosen value must be a positive integer.
    """
    for value in candidates:
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            raise MissingCompanyContext("Company ID must be a positive integer")
        try:
            company_id = int(str(value).strip())
        except (TypeError, ValueError):
            raise MissingCompanyContext("Company ID must be a positive integer")
        if company_id <= 0:
            raise MissingCompanyContext("Company ID must be a positive integer")
        return company_id
    raise MissingCompanyContext()


def authorize_company(user, *candidates) -> TenantContext:
    """
    Resolve the target company and check the user is an active member.

    Raises Unauthenticated, MissingCompanyContext or Forbidden.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        raise Unauthenticated()

    company_id = resolve_company_id(*candidates)

    # Fresh membership lookup on every request
    membership = (
        EntityMembership.objects.filter(
            user_id=user.pk, company_id=company_id, is_active=True
        )
        .only("role")
        .first()
    )
    if membership is None:
        logger.warning(
            "Company access denied",
            extra={"user_id": user.pk, "company_id": company_id},
        )
        raise Forbidden()

    return TenantContext(company_id=company_id, user_id=user.pk, role=membership.role)


def session_company_id(request) -> Optional[int]:
    session = getattr(request, "session", None)
    if session is None:
        return None
    return session.get(ACTIVE_COMPANY_SESSION_KEY)
