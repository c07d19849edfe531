import math
from datetime import datetime, time

from sqlalchemy import (
    Boolean, Column, Date, DateTime, Enum, Float, ForeignKey, Index, Integer, JSON, String, Text,
)
from sqlalchemy.orm import relationship

from .database import Base
from ..enums import JobStatus, Priority
from ...config.settings import get_settings


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class JobApplication(Base):
    __tablename__ = "job_applications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    company = Column(String(100), nullable=False)
    position = Column(String(100), nullable=False)
    status = Column(
        Enum(JobStatus, values_callable=_enum_values, native_enum=False, validate_strings=True),
        nullable=False,
        default=JobStatus.APPLIED,
    )
    date_applied = Column(Date, nullable=False)
    salary = Column(Float, nullable=True)
    location = Column(String(100), nullable=True)
    job_url = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    priority = Column(
        Enum(Priority, values_callable=_enum_values, native_enum=False, validate_strings=True),
        nullable=False,
        default=Priority.MEDIUM,
    )

    # Sub-documents are owned by the row and stored as ordered JSON arrays
    contacts = Column(JSON, nullable=False, default=list)
    interviews = Column(JSON, nullable=False, default=list)
    documents = Column(JSON, nullable=False, default=list)
    reminders = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)

    is_archived = Column(Boolean, nullable=False, default=False)
    last_updated = Column(DateTime, nullable=False, default=datetime.utcnow)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="jobs")

    __table_args__ = (
        Index("ix_job_applications_user_status", "user_id", "status"),
        Index("ix_job_applications_user_date_applied", user_id, date_applied.desc()),
        Index("ix_job_applications_user_company", "user_id", "company"),
        Index("ix_job_applications_user_archived", "user_id", "is_archived"),
    )

    def touch(self, now: datetime = None) -> None:
        """Stamp ``last_updated``; never moves it backwards."""
        now = now or datetime.utcnow()
        if self.last_updated is None or now > self.last_updated:
            self.last_updated = now

    @property
    def days_since_application(self) -> int:
        if self.date_applied is None:
            return 0
        applied_at = datetime.combine(self.date_applied, time.min)
        elapsed = abs(datetime.utcnow() - applied_at)
        return math.ceil(elapsed.total_seconds() / 86400)

    @property
    def is_overdue_for_follow_up(self) -> bool:
        settings = get_settings()
        days = self.days_since_application
        if self.status == JobStatus.APPLIED and days > settings.follow_up_days_applied:
            return True
        if self.status == JobStatus.INTERVIEW and days > settings.follow_up_days_interview:
            return True
        return False

    def __repr__(self):
        return f"<JobApplication {self.id} {self.company} - {self.position} ({self.status})>"
