# tests/test_lifecycle.py
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from jobify.core.config import settings
from jobify.core.errors import PolicyError
from jobify.services import lifecycle

POSTED = datetime(2026, 1, 1, 9, 0, 0)


def _job(posted_on=POSTED, days=7):
    return SimpleNamespace(posted_on=posted_on, time_left_to_expire=days, expired=False)


def test_expiry_boundary_is_strict():
    deadline = POSTED + timedelta(days=7)
    assert lifecycle.expires_at(POSTED, 7) == deadline
    assert lifecycle.is_expired(POSTED, 7, now=deadline) is False
    assert lifecycle.is_expired(POSTED, 7, now=deadline + timedelta(seconds=1)) is True
    assert lifecycle.is_expired(POSTED, 7, now=POSTED) is False


def test_expiry_recomputation_is_idempotent():
    now = POSTED + timedelta(days=8)
    results = {lifecycle.is_expired(POSTED, 7, now=now) for _ in range(5)}
    assert results == {True}


def test_refresh_expired_updates_persisted_flag():
    job = _job()
    lifecycle.refresh_expired(job, now=POSTED + timedelta(days=8))
    assert job.expired is True
    lifecycle.refresh_expired(job, now=POSTED + timedelta(days=1))
    assert job.expired is False


def test_check_can_apply_rejects_expired_job():
    job = _job()
    lifecycle.check_can_apply(job, now=POSTED + timedelta(days=2))
    with pytest.raises(PolicyError) as exc:
        lifecycle.check_can_apply(job, now=POSTED + timedelta(days=10))
    assert exc.value.status_code == 400


@pytest.mark.parametrize(
    "fixed,low,high,expected",
    [
        (800000, 500000, 900000, "800000"),
        (None, 500000, 900000, "500000 - 900000"),
        (None, 500000, None, "500000+"),
        (None, None, 900000, "Up to 900000"),
        (None, None, None, "Not disclosed"),
    ],
)
def test_describe_salary_precedence(fixed, low, high, expected):
    assert lifecycle.describe_salary(fixed, low, high) == expected


def test_salary_range_must_be_ordered():
    lifecycle.validate_salary_range(100, 200)
    lifecycle.validate_salary_range(None, 200)
    with pytest.raises(PolicyError):
        lifecycle.validate_salary_range(300, 200)


def test_page_window_defaults_and_caps():
    assert lifecycle.page_window(None, None) == (1, settings.DEFAULT_PAGE_LIMIT, 0)
    assert lifecycle.page_window(0, -5) == (1, settings.DEFAULT_PAGE_LIMIT, 0)
    assert lifecycle.page_window("abc", "xyz") == (1, settings.DEFAULT_PAGE_LIMIT, 0)
    assert lifecycle.page_window("3", "5") == (3, 5, 10)
    assert lifecycle.page_window("2.5", "") == (1, settings.DEFAULT_PAGE_LIMIT, 0)
    assert lifecycle.page_window(2, 10) == (2, 10, 10)
    page, limit, _ = lifecycle.page_window(1, settings.MAX_PAGE_LIMIT + 50)
    assert limit == settings.MAX_PAGE_LIMIT


def test_total_pages():
    assert lifecycle.total_pages(15, 10) == 2
    assert lifecycle.total_pages(20, 10) == 2
    assert lifecycle.total_pages(0, 10) == 0
