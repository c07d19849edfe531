"""
HTTP client and command-line front end.
"""
import io
import json
from unittest.mock import Mock, patch

import pytest
import requests

from client import cli
from client.api_client import ApiError, JobTrackerClient, TokenStore


def _response(status_code=200, body=None):
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = body if body is not None else {}
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


class TestJobTrackerClient:

    def test_list_jobs_sends_bearer_token(self, session):
        session.request.return_value = _response(body={"message": "ok", "count": 1, "jobs": [{"id": 1}]})
        client = JobTrackerClient("http://api.test/", token="abc", session=session)

        jobs = client.list_jobs()

        assert jobs == [{"id": 1}]
        method, url = session.request.call_args.args
        assert (method, url) == ("GET", "http://api.test/api/jobs")
        assert session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer abc"

    def test_login_stores_token(self, session):
        session.request.return_value = _response(body={"access_token": "tok", "token_type": "bearer"})
        client = JobTrackerClient("http://api.test", session=session)

        assert client.login("me@example.com", "secret123") == "tok"
        assert client.token == "tok"
        assert session.request.call_args.kwargs["data"] == {"username": "me@example.com", "password": "secret123"}

    def test_crud_paths(self, session):
        session.request.return_value = _response(body={"job": {"id": 9}, "stats": {"total": 0}})
        client = JobTrackerClient("http://api.test", token="t", session=session)

        client.create_job({"company": "Acme"})
        assert session.request.call_args.args == ("POST", "http://api.test/api/jobs")
        client.get_job(9)
        assert session.request.call_args.args == ("GET", "http://api.test/api/jobs/9")
        client.update_job(9, {"status": "offer"})
        assert session.request.call_args.args == ("PUT", "http://api.test/api/jobs/9")
        assert session.request.call_args.kwargs["json"] == {"status": "offer"}
        client.archive_job(9)
        assert session.request.call_args.args == ("DELETE", "http://api.test/api/jobs/9")
        assert client.get_stats() == {"total": 0}

    def test_validation_error_carries_every_field(self, session):
        session.request.return_value = _response(400, {
            "message": "Validation failed",
            "errors": [
                {"field": "salary", "message": "Input should be greater than or equal to 0"},
                {"field": "jobUrl", "message": "String should match pattern"},
            ],
        })
        client = JobTrackerClient("http://api.test", token="t", session=session)

        with pytest.raises(ApiError) as exc_info:
            client.create_job({"salary": -1, "jobUrl": "ftp://x"})

        error = exc_info.value
        assert error.status_code == 400
        assert [e["field"] for e in error.errors] == ["salary", "jobUrl"]
        assert "salary" in str(error) and "jobUrl" in str(error)

    def test_not_found_and_auth_messages(self, session):
        client = JobTrackerClient("http://api.test", token="t", session=session)

        session.request.return_value = _response(404, {"message": "Job not found"})
        with pytest.raises(ApiError, match="Job not found"):
            client.get_job(1)

        session.request.return_value = _response(401, {"detail": "Could not validate credentials"})
        with pytest.raises(ApiError, match="Could not validate credentials"):
            client.list_jobs()

    def test_connection_failure(self, session):
        session.request.side_effect = requests.exceptions.ConnectionError("refused")
        client = JobTrackerClient("http://api.test", session=session)

        with pytest.raises(ApiError, match="Could not reach the server"):
            client.list_jobs()


class TestTokenStore:

    def test_save_load_clear(self, tmp_path):
        store = TokenStore(tmp_path / "nested" / "token")

        assert store.load() is None
        store.save("tok")
        assert store.load() == "tok"
        store.clear()
        assert store.load() is None


class TestCli:

    def test_local_add_list_stats(self, tmp_path):
        jobs_file = tmp_path / "jobs.json"
        out = io.StringIO()

        assert cli.main(["--local", str(jobs_file), "add", "--company", "Acme", "--position", "Engineer",
                         "--date", "2024-01-01"], out=out) == 0
        assert cli.main(["--local", str(jobs_file), "add", "--company", "Globex", "--position", "Analyst",
                         "--status", "interview", "--date", "2024-02-01"], out=out) == 0

        out = io.StringIO()
        assert cli.main(["--local", str(jobs_file), "list", "--search", "acme"], out=out) == 0
        assert "Acme - Engineer" in out.getvalue()
        assert "Globex" not in out.getvalue()

        out = io.StringIO()
        assert cli.main(["--local", str(jobs_file), "stats"], out=out) == 0
        assert "Total applied: 2" in out.getvalue()
        assert "Interviews:    1" in out.getvalue()

    def test_local_add_keeps_zero_salary_priority_and_tags(self, tmp_path):
        jobs_file = tmp_path / "jobs.json"

        assert cli.main(["--local", str(jobs_file), "add", "--company", "A", "--position", "B",
                         "--salary", "0", "--priority", "high", "--tag", "py", "--tag", "remote"],
                        out=io.StringIO()) == 0

        stored = json.loads(jobs_file.read_text(encoding="utf-8"))[0]
        assert stored["salary"] == 0
        assert stored["priority"] == "high"
        assert stored["tags"] == ["py", "remote"]
        assert stored["location"] == ""

    def test_local_update_and_delete(self, tmp_path):
        jobs_file = tmp_path / "jobs.json"
        cli.main(["--local", str(jobs_file), "add", "--company", "A", "--position", "B"], out=io.StringIO())
        job_id = json.loads(jobs_file.read_text(encoding="utf-8"))[0]["id"]

        assert cli.main(["--local", str(jobs_file), "update", job_id, "--tag", "urgent", "--status", "offer"],
                        out=io.StringIO()) == 0
        stored = json.loads(jobs_file.read_text(encoding="utf-8"))
        assert len(stored) == 1
        assert stored[0]["tags"] == ["urgent"]
        assert stored[0]["status"] == "offer"

        assert cli.main(["--local", str(jobs_file), "delete", job_id], out=io.StringIO()) == 0
        assert json.loads(jobs_file.read_text(encoding="utf-8")) == []

    def test_local_import_rejects_bad_file(self, tmp_path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"not": "a list"}), encoding="utf-8")

        code = cli.main(["--local", str(tmp_path / "jobs.json"), "import", str(bad)], out=io.StringIO())

        assert code == 1
        assert "Invalid file format" in capsys.readouterr().err

    def test_local_export(self, tmp_path):
        jobs_file = tmp_path / "jobs.json"
        target = tmp_path / "export.json"
        cli.main(["--local", str(jobs_file), "add", "--company", "Acme", "--position", "Engineer"], out=io.StringIO())

        assert cli.main(["--local", str(jobs_file), "export", "--output", str(target)], out=io.StringIO()) == 0
        exported = json.loads(target.read_text(encoding="utf-8"))
        assert exported[0]["company"] == "Acme"

    def test_api_command_requires_login(self, tmp_path, capsys):
        code = cli.main(["--token-file", str(tmp_path / "token"), "list"], out=io.StringIO())

        assert code == 1
        assert "Not logged in" in capsys.readouterr().err

    def test_api_list_renders_jobs(self, tmp_path):
        token_file = tmp_path / "token"
        TokenStore(token_file).save("tok")
        out = io.StringIO()

        with patch.object(cli.JobTrackerClient, "list_jobs", return_value=[
            {"id": 1, "company": "Acme", "position": "Engineer", "status": "offer", "dateApplied": "2024-01-01"},
        ]) as list_jobs:
            code = cli.main(["--token-file", str(token_file), "list", "--status", "offer"], out=out)

        assert code == 0
        list_jobs.assert_called_once_with(include_archived=False)
        assert "Acme - Engineer  (Offer)" in out.getvalue()

    def test_api_update_sends_only_given_fields(self, tmp_path):
        token_file = tmp_path / "token"
        TokenStore(token_file).save("tok")

        with patch.object(cli.JobTrackerClient, "update_job", return_value={"id": 3}) as update_job:
            code = cli.main(["--token-file", str(token_file), "update", "3", "--status", "rejected"],
                            out=io.StringIO())

        assert code == 0
        update_job.assert_called_once_with("3", {"status": "rejected"})

    def test_api_error_reported(self, tmp_path, capsys):
        token_file = tmp_path / "token"
        TokenStore(token_file).save("tok")

        with patch.object(cli.JobTrackerClient, "archive_job", side_effect=ApiError("Job not found", 404)):
            code = cli.main(["--token-file", str(token_file), "archive", "77"], out=io.StringIO())

        assert code == 1
        assert "Error: Job not found" in capsys.readouterr().err

    def test_login_saves_token(self, tmp_path):
        token_file = tmp_path / "token"

        with patch.object(cli.JobTrackerClient, "login", return_value="fresh-token"):
            code = cli.main(["--token-file", str(token_file), "login", "me@example.com", "--password", "pw123456"],
                            out=io.StringIO())

        assert code == 0
        assert TokenStore(token_file).load() == "fresh-token"
