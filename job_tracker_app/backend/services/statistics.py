import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Mapping

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.db.job import JobApplication
from ..models.enums import JobStatus
from .. import schemas
from ..exceptions import JobTrackerError

logger = logging.getLogger(__name__)


def _rate(part: int, total: int) -> float:
    """Percentage of ``total`` rounded half-up to one decimal; 0 for an empty funnel."""
    if total == 0:
        return 0.0
    pct = Decimal(part) * 100 / Decimal(total)
    return float(pct.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def compute_stats(status_counts: Mapping[str, int]) -> schemas.JobStats:
    """
    Build the funnel summary from per-status counts.

    Statuses missing from ``status_counts`` count as zero. An offer also counts
    towards the interview rate, since reaching an offer implies interviewing.
    """
    counts: Dict[str, int] = {s.value: 0 for s in JobStatus}
    for status, count in status_counts.items():
        counts[JobStatus(status).value] += count

    total = sum(counts.values())
    return schemas.JobStats(
        total=total,
        **counts,
        success_rate=_rate(counts[JobStatus.OFFER.value], total),
        interview_rate=_rate(counts[JobStatus.INTERVIEW.value] + counts[JobStatus.OFFER.value], total),
    )


def get_user_stats(db: Session, user_id: int) -> schemas.JobStats:
    """Group the user's non-archived jobs by status and summarise them."""
    try:
        rows = (
            db.query(JobApplication.status, func.count(JobApplication.id))
            .filter(JobApplication.user_id == user_id, JobApplication.is_archived.is_(False))
            .group_by(JobApplication.status)
            .all()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error calculating statistics for user %s", user_id)
        raise JobTrackerError("Server error calculating statistics") from exc

    stats = compute_stats({JobStatus(status).value: count for status, count in rows})
    logger.debug("Stats for user %s: %s", user_id, stats.model_dump())
    return stats
