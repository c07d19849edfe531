from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..config.settings import get_settings
from ..services import job_store
from ..services import statistics as statistics_service
from ..models.db.database import get_db
from ..utils.api_helpers import check_resource_exists
from .auth import get_current_active_user

router = APIRouter()
settings = get_settings()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": schemas.ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": schemas.ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": schemas.ErrorResponse},
}


def _job_out(db_job) -> schemas.JobApplication:
    return schemas.JobApplication.model_validate(db_job)


@router.post(
    "",
    response_model=schemas.JobResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_job(
    job: schemas.JobApplicationCreate,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
):
    """
    Create a job application for the current user.
    Any owner supplied in the body is ignored.
    """
    db_job = job_store.create_job_for_user(db=db, job=job, user_id=current_user.id)
    return {"message": "Job application added successfully", "job": _job_out(db_job)}


@router.get("", response_model=schemas.JobListResponse, responses=ERROR_RESPONSES)
def read_jobs(
    include_archived: bool = Query(False, alias="includeArchived"),
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=settings.max_jobs_per_page),
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
):
    """
    Retrieve the current user's job applications, newest application first.
    Without ``limit`` every matching job is returned.
    """
    jobs = job_store.get_jobs_for_user(
        db, user_id=current_user.id, include_archived=include_archived, skip=skip, limit=limit
    )
    return {
        "message": "Jobs retrieved successfully",
        "count": len(jobs),
        "jobs": [_job_out(job) for job in jobs],
    }


@router.get("/stats", response_model=schemas.JobStatsResponse, responses=ERROR_RESPONSES)
def read_job_stats(
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
):
    """
    Per-status counts and funnel rates over the user's non-archived jobs.
    """
    stats = statistics_service.get_user_stats(db, user_id=current_user.id)
    return {"message": "Statistics retrieved successfully", "stats": stats}


@router.get("/{job_id}", response_model=schemas.JobResponse, responses=ERROR_RESPONSES)
def read_job(
    job_id: int,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
):
    db_job = job_store.get_job_by_id(db, job_id=job_id, user_id=current_user.id)
    check_resource_exists(db_job, job_id)
    return {"message": "Job retrieved successfully", "job": _job_out(db_job)}


@router.put("/{job_id}", response_model=schemas.JobResponse, responses=ERROR_RESPONSES)
def update_job(
    job_id: int,
    job: schemas.JobApplicationUpdate,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
):
    """
    Merge the supplied fields onto the job and re-validate the whole record.
    """
    db_job = job_store.update_job(db, job_id=job_id, job_update=job, user_id=current_user.id)
    check_resource_exists(db_job, job_id)
    return {"message": "Job updated successfully", "job": _job_out(db_job)}


@router.delete("/{job_id}", response_model=schemas.JobResponse, responses=ERROR_RESPONSES)
def archive_job(
    job_id: int,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
):
    """
    Archive a job application. Nothing is physically deleted.
    """
    db_job = job_store.archive_job(db, job_id=job_id, user_id=current_user.id)
    check_resource_exists(db_job, job_id)
    return {"message": "Job archived successfully", "job": _job_out(db_job)}
