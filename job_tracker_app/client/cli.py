"""
Command-line front end for the Job Tracker.

Talks to the API by default; ``--local FILE`` switches to the offline,
file-backed store.
"""
import argparse
import getpass
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from .api_client import ApiError, JobTrackerClient, TokenStore
from .local_store import LocalJobStore
from .render import format_date, render_job_card, render_job_list, render_stats
from .settings import get_client_settings
from .state import STATUSES, TrackerState

logger = logging.getLogger(__name__)

PRIORITIES = ("low", "medium", "high")
SERVER_FIELDS = {
    "id", "_id", "userId", "user", "isArchived", "lastUpdated", "createdAt", "updatedAt",
    "daysSinceApplication", "isOverdueForFollowUp", "dateAdded",
}


class CliError(Exception):
    pass


def _add_job_options(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("--company", required=required)
    parser.add_argument("--position", required=required)
    parser.add_argument("--status", choices=STATUSES)
    parser.add_argument("--date", dest="date_applied", help="date applied, YYYY-MM-DD")
    parser.add_argument("--salary", type=float)
    parser.add_argument("--location")
    parser.add_argument("--url", dest="job_url")
    parser.add_argument("--notes")
    parser.add_argument("--priority", choices=PRIORITIES)
    parser.add_argument("--tag", dest="tags", action="append", help="repeat for several tags")


def build_parser() -> argparse.ArgumentParser:
    settings = get_client_settings()
    parser = argparse.ArgumentParser(prog="jobtracker", description="Track your job applications")
    parser.add_argument("--api-url", default=settings.api_url, help="API base URL (default: %(default)s)")
    parser.add_argument("--token-file", type=Path, default=settings.token_file)
    parser.add_argument("--local", type=Path, metavar="FILE", help="use a local JSON file instead of the API")
    parser.add_argument("--verbose", "-v", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    for name in ("register", "login"):
        p = sub.add_parser(name)
        p.add_argument("email")
        p.add_argument("--password", help="prompted for when omitted")
    sub.add_parser("logout")

    p = sub.add_parser("list", help="list job applications")
    p.add_argument("--search", default="", help="match company or position")
    p.add_argument("--status", default="", choices=("",) + STATUSES)
    p.add_argument("--all", action="store_true", help="include archived jobs")

    p = sub.add_parser("show")
    p.add_argument("job_id")

    _add_job_options(sub.add_parser("add", help="add a job application"), required=True)

    p = sub.add_parser("update", help="change fields of a job application")
    p.add_argument("job_id")
    _add_job_options(p, required=False)

    p = sub.add_parser("archive", aliases=["delete"], help="archive (API) or delete (local) a job")
    p.add_argument("job_id")

    sub.add_parser("stats")

    p = sub.add_parser("export")
    p.add_argument("--output", type=Path, help="defaults to job-applications-<today>.json")

    p = sub.add_parser("import")
    p.add_argument("file", type=Path)

    return parser


def job_fields_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    mapping = {
        "company": args.company,
        "position": args.position,
        "status": args.status,
        "dateApplied": args.date_applied,
        "salary": args.salary,
        "location": args.location,
        "jobUrl": args.job_url,
        "notes": args.notes,
        "priority": args.priority,
        "tags": args.tags,
    }
    return {key: value for key, value in mapping.items() if value is not None}


def _password(args) -> str:
    return args.password or getpass.getpass("Password: ")


def _client(args, token_store: TokenStore, require_login: bool = True) -> JobTrackerClient:
    settings = get_client_settings()
    token = token_store.load()
    if require_login and not token:
        raise CliError("Not logged in. Run `jobtracker login EMAIL` first.")
    return JobTrackerClient(args.api_url, token=token, timeout=settings.request_timeout)


def run_local(args, out) -> None:
    store = LocalJobStore(args.local)
    state = TrackerState(store.all())

    if args.command == "list":
        print(render_job_list(state.visible(args.search, args.status), bool(state.jobs)), file=out)
    elif args.command == "show":
        job = state.find(args.job_id)
        if job is None:
            raise CliError("Job not found")
        print(render_job_card(job), file=out)
    elif args.command == "add":
        fields = job_fields_from_args(args)
        fields.setdefault("status", "applied")
        fields.setdefault("dateApplied", date.today().isoformat())
        job = store.add(fields)
        print(f"Job application added successfully! [{job['id']}]", file=out)
    elif args.command == "update":
        if store.update(args.job_id, job_fields_from_args(args)) is None:
            raise CliError("Job not found")
        print("Job application updated successfully!", file=out)
    elif args.command in ("archive", "delete"):
        if not store.delete(args.job_id):
            raise CliError("Job not found")
        print("Job application deleted successfully!", file=out)
    elif args.command == "stats":
        print(render_stats(state.summary()), file=out)
    elif args.command == "export":
        _export(state, args, out)
    elif args.command == "import":
        count = state.import_json(args.file.read_text(encoding="utf-8"))
        store.save_all(state.jobs)
        print(f"Data imported successfully! ({count} jobs)", file=out)
    else:
        raise CliError(f"`{args.command}` needs the API; drop --local")


def run_api(args, out) -> None:
    token_store = TokenStore(args.token_file)

    if args.command == "register":
        client = _client(args, token_store, require_login=False)
        user = client.register(args.email, _password(args))
        print(f"Registered {user['email']}. Now run `jobtracker login {user['email']}`.", file=out)
        return
    if args.command == "login":
        client = _client(args, token_store, require_login=False)
        token_store.save(client.login(args.email, _password(args)))
        print("Logged in.", file=out)
        return
    if args.command == "logout":
        token_store.clear()
        print("Logged out.", file=out)
        return

    client = _client(args, token_store)
    if args.command == "list":
        state = TrackerState(client.list_jobs(include_archived=args.all))
        print(render_job_list(state.visible(args.search, args.status), bool(state.jobs)), file=out)
    elif args.command == "show":
        print(render_job_card(client.get_job(args.job_id)), file=out)
    elif args.command == "add":
        fields = job_fields_from_args(args)
        fields.setdefault("dateApplied", date.today().isoformat())
        job = client.create_job(fields)
        print(f"Job application added successfully! [{job['id']}] applied {format_date(job['dateApplied'])}", file=out)
    elif args.command == "update":
        fields = job_fields_from_args(args)
        if not fields:
            raise CliError("Nothing to update; pass at least one field option")
        client.update_job(args.job_id, fields)
        print("Job application updated successfully!", file=out)
    elif args.command in ("archive", "delete"):
        client.archive_job(args.job_id)
        print("Job application archived successfully!", file=out)
    elif args.command == "stats":
        print(render_stats(client.get_stats()), file=out)
    elif args.command == "export":
        _export(TrackerState(client.list_jobs(include_archived=True)), args, out)
    elif args.command == "import":
        state = TrackerState()
        state.import_json(args.file.read_text(encoding="utf-8"))
        for job in state.jobs:
            client.create_job({k: v for k, v in job.items() if k not in SERVER_FIELDS})
        print(f"Data imported successfully! ({len(state.jobs)} jobs)", file=out)


def _export(state: TrackerState, args, out) -> None:
    target = args.output or Path(f"job-applications-{date.today().isoformat()}.json")
    target.write_text(state.export_json(), encoding="utf-8")
    print(f"Exported {len(state.jobs)} jobs to {target}", file=out)


def main(argv: Optional[list] = None, out=None) -> int:
    out = out or sys.stdout
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.local:
            run_local(args, out)
        else:
            run_api(args, out)
    except (ApiError, CliError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
