"""
Owner-scoped persistence for job applications.

Every query filters on ``user_id`` so a caller can never observe another
user's rows; a foreign id behaves exactly like a missing one.
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.db.job import JobApplication
from .. import schemas
from ..exceptions import JobTrackerError, JobValidationError
from ..utils.api_helpers import format_validation_errors

logger = logging.getLogger(__name__)

NESTED_FIELDS = ("contacts", "interviews", "documents", "reminders", "tags")
MAX_JOB_ID = 2 ** 63 - 1


@contextmanager
def _guard(db: Session, action: str):
    """Turn storage faults into a generic error; the cause only goes to the log."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Database error while %s", action)
        raise JobTrackerError(f"Server error {action}") from exc


def _commit(db: Session, action: str) -> None:
    with _guard(db, action):
        db.commit()


def _to_columns(job: schemas.JobApplicationBase) -> dict:
    columns = job.model_dump(exclude=set(NESTED_FIELDS))
    columns.update(job.model_dump(mode="json", include=set(NESTED_FIELDS)))
    return columns


def get_job_by_id(db: Session, job_id: int, user_id: int) -> Optional[JobApplication]:
    # Ids outside the 64-bit key range cannot exist and would overflow the driver
    if not 0 < job_id <= MAX_JOB_ID:
        return None
    with _guard(db, "fetching job"):
        return db.query(JobApplication).filter(
            JobApplication.id == job_id,
            JobApplication.user_id == user_id,
        ).first()


def get_jobs_for_user(
    db: Session,
    user_id: int,
    include_archived: bool = False,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[JobApplication]:
    """List a user's jobs, newest application first. Archived rows are hidden by default."""
    with _guard(db, "fetching jobs"):
        query = db.query(JobApplication).filter(JobApplication.user_id == user_id)
        if not include_archived:
            query = query.filter(JobApplication.is_archived.is_(False))
        query = query.order_by(JobApplication.date_applied.desc(), JobApplication.id.desc())
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()


def create_job_for_user(db: Session, job: schemas.JobApplicationCreate, user_id: int) -> JobApplication:
    now = datetime.utcnow()
    db_job = JobApplication(
        **_to_columns(job), user_id=user_id, is_archived=False, created_at=now, updated_at=now
    )
    db_job.touch(now)
    db.add(db_job)
    _commit(db, "creating job")
    db.refresh(db_job)
    logger.info("Created job %s (%s / %s) for user %s", db_job.id, db_job.company, db_job.position, user_id)
    return db_job


def update_job(
    db: Session, job_id: int, job_update: schemas.JobApplicationUpdate, user_id: int
) -> Optional[JobApplication]:
    """
    Merge a partial update onto the stored record and re-validate the result.

    Returns None when the job does not exist for this user. Raises
    JobValidationError, leaving the row untouched, when the merged record
    breaks a field rule.
    """
    db_job = get_job_by_id(db=db, job_id=job_id, user_id=user_id)
    if db_job is None:
        return None

    update_data = job_update.model_dump(exclude_unset=True)
    is_archived = update_data.pop("is_archived", None)

    current = schemas.JobApplicationCreate.model_validate(db_job).model_dump()
    try:
        merged = schemas.JobApplicationCreate.model_validate({**current, **update_data})
    except ValidationError as exc:
        logger.info("Rejected update of job %s: %d invalid field(s)", job_id, exc.error_count())
        raise JobValidationError(format_validation_errors(exc.errors())) from exc

    for key, value in _to_columns(merged).items():
        setattr(db_job, key, value)
    if is_archived is not None:
        db_job.is_archived = is_archived
    db_job.touch()

    _commit(db, "updating job")
    db.refresh(db_job)
    logger.info("Updated job %s for user %s (fields: %s)", job_id, user_id, ", ".join(sorted(update_data)) or "-")
    return db_job


def archive_job(db: Session, job_id: int, user_id: int) -> Optional[JobApplication]:
    """Soft-delete: the row stays, flagged as archived."""
    db_job = get_job_by_id(db=db, job_id=job_id, user_id=user_id)
    if db_job is None:
        return None
    db_job.is_archived = True
    db_job.touch()
    _commit(db, "archiving job")
    db.refresh(db_job)
    logger.info("Archived job %s for user %s", job_id, user_id)
    return db_job
