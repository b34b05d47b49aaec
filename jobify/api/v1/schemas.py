# jobify/api/v1/schemas.py
from datetime import datetime, timezone
from typing import Annotated, ClassVar, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from jobify.core.errors import PolicyError
from jobify.db.documents import Application, ExperienceLevel, Job, ResumeRef, Role, User
from jobify.services import lifecycle

_email_adapter = TypeAdapter(EmailStr)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def blank_fields(self, names) -> list[str]:
        """Names among `names` that are absent or whitespace-only."""
        blank = []
        for name in names:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                blank.append(name)
        return blank


def normalize_email(value: str) -> str:
    try:
        return _email_adapter.validate_python(value.strip()).lower()
    except ValidationError:
        raise PolicyError(400, "Please provide a valid email address.")


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _clean_skills(value: list[str]) -> list[str]:
    return [s.strip() for s in value if s and s.strip()]


SkillList = Annotated[list[str], AfterValidator(_clean_skills)]
NaiveUtcDatetime = Annotated[datetime, AfterValidator(_naive_utc)]


# ---- users ----

class RegisterIn(CamelModel):
    # all optional so a missing field reaches the route's own presence check
    name: Optional[str] = Field(default=None, min_length=3, max_length=30)
    email: Optional[str] = None
    phone: Optional[int] = None
    password: Optional[str] = Field(default=None, min_length=8)
    role: Optional[Role] = None
    skillset: SkillList = Field(default_factory=list)

    REQUIRED: ClassVar[tuple[str, ...]] = ("name", "email", "phone", "password", "role")

    @field_validator("name", "email", "password", mode="before")
    @classmethod
    def _blank_as_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def missing_fields(self) -> list[str]:
        return self.blank_fields(self.REQUIRED)


class LoginIn(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdate(CamelModel):
    # role and password are deliberately absent; unknown keys are rejected
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    name: Optional[str] = Field(default=None, min_length=3, max_length=30)
    email: Optional[EmailStr] = None
    phone: Optional[int] = None
    skillset: Optional[SkillList] = None

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


class ResumeOut(BaseModel):
    public_id: str
    url: str


def _resume_out(ref: Optional[ResumeRef], storage=None) -> Optional[ResumeOut]:
    if ref is None:
        return None
    url = storage.resolve_url(ref) if storage is not None else ref.url
    return ResumeOut(public_id=ref.public_id, url=url)


class UserOut(CamelModel):
    id: str = Field(serialization_alias="_id")
    name: str
    email: str
    phone: int
    role: Role
    skillset: list[str]
    resume: Optional[ResumeOut] = None
    created_at: datetime

    @classmethod
    def from_document(cls, user: User, storage=None) -> "UserOut":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            phone=user.phone,
            role=user.role,
            skillset=list(user.skillset),
            resume=_resume_out(user.resume, storage),
            created_at=user.created_at,
        )


def dump_user(user: User, storage=None) -> dict:
    return UserOut.from_document(user, storage).model_dump(by_alias=True, mode="json")


# ---- jobs ----

class JobCreate(CamelModel):
    company: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    category: str = Field(min_length=1)
    country: str = Field(min_length=1)
    city: str = Field(min_length=1)
    location: str = Field(min_length=1)
    skills_required: SkillList = Field(default_factory=list)
    experience_level: ExperienceLevel
    fixed_salary: Optional[int] = Field(default=None, ge=0)
    salary_from: Optional[int] = Field(default=None, ge=0)
    salary_to: Optional[int] = Field(default=None, ge=0)
    time_left_to_expire: int = Field(ge=1)
    posted_on: Optional[NaiveUtcDatetime] = None


class JobUpdate(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    company: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    location: Optional[str] = None
    skills_required: Optional[list[str]] = None
    experience_level: Optional[ExperienceLevel] = None
    fixed_salary: Optional[int] = None
    salary_from: Optional[int] = None
    salary_to: Optional[int] = None
    time_left_to_expire: Optional[int] = None
    posted_on: Optional[datetime] = None


# fields JobUpdate may touch, in document (snake_case) form
JOB_EDITABLE_FIELDS = tuple(JobUpdate.model_fields)


class SavedByOut(CamelModel):
    user_id: str
    saved_at: datetime


class JobOut(CamelModel):
    id: str = Field(serialization_alias="_id")
    company: str
    title: str
    description: str
    category: str
    country: str
    city: str
    location: str
    skills_required: list[str]
    experience_level: ExperienceLevel
    fixed_salary: Optional[int] = None
    salary_from: Optional[int] = None
    salary_to: Optional[int] = None
    salary_text: str
    posted_on: datetime
    posted_by: str
    time_left_to_expire: int
    expires_on: datetime
    expired: bool
    saved_by_users: list[SavedByOut] = Field(default_factory=list)

    @classmethod
    def from_document(cls, job: Job, now: Optional[datetime] = None) -> "JobOut":
        return cls(
            id=str(job.id),
            company=job.company,
            title=job.title,
            description=job.description,
            category=job.category,
            country=job.country,
            city=job.city,
            location=job.location,
            skills_required=list(job.skills_required),
            experience_level=job.experience_level,
            fixed_salary=job.fixed_salary,
            salary_from=job.salary_from,
            salary_to=job.salary_to,
            salary_text=lifecycle.describe_salary(job.fixed_salary, job.salary_from, job.salary_to),
            posted_on=job.posted_on,
            posted_by=str(job.posted_by),
            time_left_to_expire=job.time_left_to_expire,
            expires_on=lifecycle.expires_at(job.posted_on, job.time_left_to_expire),
            # computed on read so a posting past its window never reports active
            expired=lifecycle.job_is_expired(job, now),
            saved_by_users=[SavedByOut(user_id=str(s.user_id), saved_at=s.saved_at) for s in job.saved_by_users],
        )


def dump_job(job: Job, now: Optional[datetime] = None) -> dict:
    return JobOut.from_document(job, now).model_dump(by_alias=True, mode="json")


# ---- applications ----

class ApplicationIn(CamelModel):
    name: Optional[str] = None
    # format is checked after the blank check, see normalize_email
    email: Optional[str] = None
    cover_letter: Optional[str] = None
    phone: Optional[int] = None
    address: Optional[str] = None
    job_id: Optional[str] = None

    def missing_fields(self) -> list[str]:
        return self.blank_fields(type(self).model_fields)


class ApplicationOut(CamelModel):
    id: str = Field(serialization_alias="_id")
    name: str
    email: str
    cover_letter: str
    phone: int
    address: str
    applicant_id: str = Field(serialization_alias="applicantID")
    employer_id: str = Field(serialization_alias="employerID")
    job_id: str
    resume: ResumeOut
    created_at: datetime

    @classmethod
    def from_document(cls, application: Application, storage=None) -> "ApplicationOut":
        return cls(
            id=str(application.id),
            name=application.name,
            email=application.email,
            cover_letter=application.cover_letter,
            phone=application.phone,
            address=application.address,
            applicant_id=str(application.applicant_id),
            employer_id=str(application.employer_id),
            job_id=str(application.job_id),
            resume=_resume_out(application.resume, storage),
            created_at=application.created_at,
        )


def dump_application(application: Application, storage=None) -> dict:
    return ApplicationOut.from_document(application, storage).model_dump(by_alias=True, mode="json")
