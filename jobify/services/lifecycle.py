# jobify/services/lifecycle.py
"""
Job lifecycle rules: expiry, salary display precedence, pagination windows and
application eligibility. Everything here is pure; callers pass `now` when they
need a fixed clock.
"""
import math
from datetime import datetime, timedelta
from typing import Optional

from jobify.core.config import settings
from jobify.core.errors import PolicyError
from jobify.db.documents import Job, utcnow


def expires_at(posted_on: datetime, time_left_to_expire: int) -> datetime:
    return posted_on + timedelta(days=time_left_to_expire)


def is_expired(posted_on: datetime, time_left_to_expire: int, now: Optional[datetime] = None) -> bool:
    now = now or utcnow()
    return now > expires_at(posted_on, time_left_to_expire)


def job_is_expired(job: Job, now: Optional[datetime] = None) -> bool:
    return is_expired(job.posted_on, job.time_left_to_expire, now)


def refresh_expired(job: Job, now: Optional[datetime] = None) -> Job:
    """Write-time refresh of the persisted flag."""
    job.expired = job_is_expired(job, now)
    return job


def validate_salary_range(salary_from: Optional[int], salary_to: Optional[int]) -> None:
    if salary_from is not None and salary_to is not None and salary_from > salary_to:
        raise PolicyError(400, "salaryFrom cannot be greater than salaryTo.")


def describe_salary(fixed_salary: Optional[int], salary_from: Optional[int], salary_to: Optional[int]) -> str:
    # figures stay in stored units; formatting (LPA etc.) is the client's job
    if fixed_salary:
        return f"{fixed_salary}"
    if salary_from and salary_to:
        return f"{salary_from} - {salary_to}"
    if salary_from:
        return f"{salary_from}+"
    if salary_to:
        return f"Up to {salary_to}"
    return "Not disclosed"


def _positive_int(value) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number >= 1 else None


def page_window(page, limit) -> tuple[int, int, int]:
    """
    Normalise raw page/limit query values. Whatever does not parse to a positive
    int falls back to page 1 / DEFAULT_PAGE_LIMIT. Returns (page, limit, skip).
    """
    page = _positive_int(page) or 1
    limit = min(_positive_int(limit) or settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)
    return page, limit, (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def check_can_apply(job: Job, now: Optional[datetime] = None) -> None:
    if job_is_expired(job, now):
        raise PolicyError(400, "This job has expired.")
