# tests/test_permissions.py
from types import SimpleNamespace

import pytest

from jobify.core import permissions
from jobify.core.errors import PolicyError
from jobify.core.permissions import ROLE_POLICY, check_role, ensure_owner
from jobify.db.documents import Role

seeker = SimpleNamespace(id="u1", role=Role.JOB_SEEKER)
employer = SimpleNamespace(id="u2", role=Role.EMPLOYER)


def test_every_operation_names_one_role():
    assert {rule.role for rule in ROLE_POLICY.values()} == {Role.JOB_SEEKER, Role.EMPLOYER}
    for op in ("job:create", "job:update", "job:delete", "job:list-own"):
        assert ROLE_POLICY[op].role == Role.EMPLOYER


@pytest.mark.parametrize(
    "user,operation,message",
    [
        (seeker, "job:create", "Job Seeker not allowed to access this resource."),
        (employer, "application:create", "Employer is not allowed to apply for jobs."),
        (employer, "application:delete", "Employer not allowed to access this resource."),
    ],
)
def test_check_role_denies(user, operation, message):
    with pytest.raises(PolicyError) as exc:
        check_role(user, operation)
    assert exc.value.status_code == 403
    assert exc.value.message == message


def test_check_role_allows():
    check_role(employer, "job:update")
    check_role(seeker, "application:list-own")


def test_ensure_owner(monkeypatch):
    ensure_owner(seeker, "someone-else", enforce=False)
    ensure_owner(seeker, "u1", enforce=True)
    with pytest.raises(PolicyError) as exc:
        ensure_owner(seeker, "someone-else", enforce=True)
    assert exc.value.status_code == 403

    monkeypatch.setattr(permissions.settings, "ENFORCE_OWNERSHIP", True)
    with pytest.raises(PolicyError):
        ensure_owner(employer, "u1")
