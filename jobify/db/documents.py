# jobify/db/documents.py
"""Beanie document models backing the users, jobs and applications collections.

Field names are snake_case in MongoDB; the camelCase wire format lives in
``jobify.api.v1.schemas``.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from bson import ObjectId
from pydantic import BaseModel, Field


def utcnow() -> datetime:
    # naive UTC, matching what MongoDB hands back
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_object_id(value) -> Optional[PydanticObjectId]:
    """Parse a path id; None for anything that is not a valid ObjectId."""
    if value is None or not ObjectId.is_valid(str(value)):
        return None
    return PydanticObjectId(str(value))


class Role(str, Enum):
    JOB_SEEKER = "Job Seeker"
    EMPLOYER = "Employer"


class ExperienceLevel(str, Enum):
    ENTRY = "Entry Level"
    MID = "Mid Level"
    SENIOR = "Senior Level"


class ResumeRef(BaseModel):
    public_id: str
    url: str


class SavedBy(BaseModel):
    user_id: PydanticObjectId
    saved_at: datetime = Field(default_factory=utcnow)


class User(Document):
    name: str
    email: Indexed(str, unique=True)
    phone: int
    password_hash: str
    role: Role
    skillset: list[str] = Field(default_factory=list)
    resume: Optional[ResumeRef] = None
    created_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "users"


class Job(Document):
    company: str
    title: str
    description: str
    category: str
    country: str
    city: str
    location: str
    skills_required: list[str] = Field(default_factory=list)
    experience_level: ExperienceLevel
    fixed_salary: Optional[int] = None
    salary_from: Optional[int] = None
    salary_to: Optional[int] = None
    posted_on: datetime = Field(default_factory=utcnow)
    posted_by: PydanticObjectId
    time_left_to_expire: int
    # refreshed on every write; reads recompute it from posted_on
    expired: bool = False
    saved_by_users: list[SavedBy] = Field(default_factory=list)

    class Settings:
        name = "jobs"


class Application(Document):
    name: str
    email: str
    cover_letter: str
    phone: int
    address: str
    applicant_id: PydanticObjectId
    employer_id: PydanticObjectId
    job_id: PydanticObjectId
    resume: ResumeRef
    created_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "applications"


DOCUMENT_MODELS = [User, Job, Application]
