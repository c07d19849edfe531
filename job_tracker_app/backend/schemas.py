from datetime import date, datetime
from typing import Annotated, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from .models.enums import DocumentType, InterviewOutcome, InterviewType, JobStatus, Priority

URL_PATTERN = r"^https?://.+"
EMAIL_PATTERN = r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$"
MAX_SALARY = 10_000_000


def _new_id() -> str:
    return uuid4().hex


def _blank_to_none(value):
    # Form clients send "" for untouched optional inputs
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CamelModel(BaseModel):
    """Base for records exchanged with the frontend as camelCase JSON."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        str_strip_whitespace = True


# Token Schemas
class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    email: Optional[str] = None


# User Schemas
class UserBase(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")


class UserCreate(UserBase):
    password: str = Field(..., min_length=8, max_length=128)


class User(UserBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True


# Sub-document Schemas
class Contact(CamelModel):
    id: str = Field(default_factory=_new_id)
    name: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, max_length=20)
    role: Optional[str] = Field(None, max_length=50)

    @field_validator("name", "email", "phone", "role", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower() if v else v


class Interview(CamelModel):
    id: str = Field(default_factory=_new_id)
    date: datetime
    type: InterviewType
    interviewer: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)
    outcome: InterviewOutcome = InterviewOutcome.PENDING


class Document(CamelModel):
    id: str = Field(default_factory=_new_id)
    name: str = Field(..., min_length=1, max_length=100)
    type: DocumentType
    url: Optional[str] = None
    upload_date: datetime = Field(default_factory=datetime.utcnow)


class Reminder(CamelModel):
    id: str = Field(default_factory=_new_id)
    date: datetime
    message: str = Field(..., min_length=1, max_length=200)
    is_completed: bool = False


Tag = Annotated[str, Field(max_length=30)]


# Job Application Schemas
class JobApplicationBase(CamelModel):
    company: str = Field(..., min_length=1, max_length=100, examples=["Acme"])
    position: str = Field(..., min_length=1, max_length=100, examples=["Engineer"])
    status: JobStatus = JobStatus.APPLIED
    date_applied: date
    salary: Optional[float] = Field(None, ge=0, le=MAX_SALARY)
    location: Optional[str] = Field(None, max_length=100)
    job_url: Optional[str] = Field(None, pattern=URL_PATTERN)
    notes: Optional[str] = Field(None, max_length=1000)
    priority: Priority = Priority.MEDIUM
    contacts: List[Contact] = []
    interviews: List[Interview] = []
    documents: List[Document] = []
    reminders: List[Reminder] = []
    tags: List[Tag] = []

    @field_validator("salary", "location", "job_url", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class JobApplicationCreate(JobApplicationBase):
    """Candidate record. Owner, id and timestamps are assigned by the store."""


class JobApplicationUpdate(CamelModel):
    """Partial update. Only fields present in the request body are merged."""

    company: Optional[str] = Field(None, min_length=1, max_length=100)
    position: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[JobStatus] = None
    date_applied: Optional[date] = None
    salary: Optional[float] = Field(None, ge=0, le=MAX_SALARY)
    location: Optional[str] = Field(None, max_length=100)
    job_url: Optional[str] = Field(None, pattern=URL_PATTERN)
    notes: Optional[str] = Field(None, max_length=1000)
    priority: Optional[Priority] = None
    contacts: Optional[List[Contact]] = None
    interviews: Optional[List[Interview]] = None
    documents: Optional[List[Document]] = None
    reminders: Optional[List[Reminder]] = None
    tags: Optional[List[Tag]] = None
    is_archived: Optional[bool] = None

    @field_validator("salary", "location", "job_url", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class JobApplication(JobApplicationBase):
    id: int
    user_id: int
    is_archived: bool
    last_updated: datetime
    created_at: datetime
    updated_at: datetime
    days_since_application: int
    is_overdue_for_follow_up: bool


class JobStats(CamelModel):
    total: int
    applied: int
    interview: int
    offer: int
    rejected: int
    withdrawn: int
    success_rate: float
    interview_rate: float


# Response envelopes
class JobResponse(BaseModel):
    message: str
    job: JobApplication


class JobListResponse(BaseModel):
    message: str
    count: int
    jobs: List[JobApplication]


class JobStatsResponse(BaseModel):
    message: str
    stats: JobStats


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    message: str
    errors: List[FieldError] = []
