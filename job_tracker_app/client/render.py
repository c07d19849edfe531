from datetime import date
from typing import Any, Dict, List


def format_date(value) -> str:
    """'2024-01-05' -> 'Jan 5, 2024'. Unparseable input is returned unchanged."""
    if not value:
        return ""
    try:
        d = value if isinstance(value, date) else date.fromisoformat(str(value)[:10])
    except ValueError:
        return str(value)
    return f"{d:%b} {d.day}, {d.year}"


def format_salary(value) -> str:
    if value in (None, ""):
        return ""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return str(value)
    return f"${round(amount):,}"


def render_job_card(job: Dict[str, Any]) -> str:
    status = (job.get("status") or "").capitalize()
    job_id = job.get("id", job.get("_id", ""))
    lines = [
        f"[{job_id}] {job.get('company', '')} - {job.get('position', '')}  ({status})",
        f"    Applied: {format_date(job.get('dateApplied'))}",
    ]
    if job.get("salary") not in (None, ""):
        lines.append(f"    Salary: {format_salary(job['salary'])}")
    if job.get("location"):
        lines.append(f"    Location: {job['location']}")
    if job.get("jobUrl"):
        lines.append(f"    Posting: {job['jobUrl']}")
    if job.get("notes"):
        lines.append(f"    Notes: {job['notes']}")
    if job.get("tags"):
        lines.append(f"    Tags: {', '.join(job['tags'])}")
    if job.get("isOverdueForFollowUp"):
        lines.append(f"    ! Follow-up overdue ({job.get('daysSinceApplication')} days since applying)")
    return "\n".join(lines)


def render_empty_state(has_any_jobs: bool) -> str:
    if has_any_jobs:
        return "No job applications found. Try adjusting your search or filter criteria."
    return "No job applications found. Add your first job application with `jobtracker add`."


def render_job_list(visible: List[Dict[str, Any]], has_any_jobs: bool) -> str:
    if not visible:
        return render_empty_state(has_any_jobs)
    return "\n\n".join(render_job_card(job) for job in visible)


def render_stats(stats: Dict[str, Any]) -> str:
    if "total" not in stats:
        # Local summary counts
        return "\n".join([
            f"Total applied: {stats['totalApplied']}",
            f"Interviews:    {stats['totalInterviews']}",
            f"Offers:        {stats['totalOffers']}",
            f"Rejected:      {stats['totalRejected']}",
        ])
    return "\n".join([
        f"Total:          {stats['total']}",
        f"Applied:        {stats['applied']}",
        f"Interview:      {stats['interview']}",
        f"Offer:          {stats['offer']}",
        f"Rejected:       {stats['rejected']}",
        f"Withdrawn:      {stats['withdrawn']}",
        f"Success rate:   {stats['successRate']}%",
        f"Interview rate: {stats['interviewRate']}%",
    ])
