# jobify/core/permissions.py
"""
Who may do what.

ROLE_POLICY is the single table of operation -> required role. Routes declare
the operation they implement (see `require_role` in jobify.api.v1.auth) and the
check runs once in a shared dependency.
"""
from typing import NamedTuple, Optional

from jobify.core.config import settings
from jobify.core.errors import PolicyError
from jobify.db.documents import Role

JOB_SEEKER_DENIED = "Job Seeker not allowed to access this resource."
EMPLOYER_DENIED = "Employer not allowed to access this resource."


class RoleRule(NamedTuple):
    role: Role
    message: str


ROLE_POLICY: dict[str, RoleRule] = {
    "job:create": RoleRule(Role.EMPLOYER, JOB_SEEKER_DENIED),
    "job:update": RoleRule(Role.EMPLOYER, JOB_SEEKER_DENIED),
    "job:delete": RoleRule(Role.EMPLOYER, JOB_SEEKER_DENIED),
    "job:list-own": RoleRule(Role.EMPLOYER, JOB_SEEKER_DENIED),
    "application:create": RoleRule(Role.JOB_SEEKER, "Employer is not allowed to apply for jobs."),
    "application:list-own": RoleRule(Role.JOB_SEEKER, EMPLOYER_DENIED),
    "application:delete": RoleRule(Role.JOB_SEEKER, EMPLOYER_DENIED),
}


def check_role(user, operation: str) -> None:
    rule = ROLE_POLICY[operation]
    if user.role != rule.role:
        raise PolicyError(403, rule.message)


def ensure_owner(user, owner_id, enforce: Optional[bool] = None) -> None:
    """Ownership check, active only when ENFORCE_OWNERSHIP is on."""
    if enforce is None:
        enforce = settings.ENFORCE_OWNERSHIP
    if enforce and str(user.id) != str(owner_id):
        raise PolicyError(403, "You are not allowed to modify this resource.")
