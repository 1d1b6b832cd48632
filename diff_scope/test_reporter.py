import json

import pytest

import requests

from .errors import ConfigurationError, GithubApiError, ScannerReportError
from .github_client import GithubClient, GithubCommitComment
from .reporter import CommitCommentsReporter
from .violations import (
    ScannerResult,
    ScannerViolation,
    ScopedViolation,
    filter_violations,
    load_scanner_results,
    relative_path,
)

SCANNER_OUTPUT = [
    {
        "engine": "pmd",
        "fileName": "/workspace/repo/src/a.ts",
        "violations": [
            {"line": "4", "column": "1", "severity": 1, "ruleName": "NoVar", "category": "Style",
             "url": "https://example.com/NoVar", "message": " Avoid var \n"},
            {"line": 7, "severity": 3, "ruleName": "Naming", "message": "Rename it"},
            {"line": 10, "endLine": 12, "severity": 2, "ruleName": "Complexity", "message": "Too complex"},
        ],
    },
    {
        "engine": "eslint",
        "fileName": "src/untouched.ts",
        "violations": [{"line": 1, "severity": 1, "ruleName": "semi", "message": "Missing semicolon"}],
    },
]


class FakeResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = text

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def post(self, url, headers=None, json=None):
        self.calls.append({"url": url, "headers": headers, "json": json})
        return self.response


@pytest.fixture
def results():
    return [ScannerResult.model_validate(item) for item in SCANNER_OUTPUT]


def test_load_scanner_results(tmp_path):
    report = tmp_path / "scan.json"
    report.write_text(json.dumps(SCANNER_OUTPUT))

    loaded = load_scanner_results(report)

    assert loaded[0].file_name == "/workspace/repo/src/a.ts"
    assert loaded[0].violations[0].line == 4
    assert loaded[0].violations[2].end_line == 12
    assert loaded[1].violations[0].rule_name == "semi"


def test_load_malformed_report(tmp_path):
    report = tmp_path / "scan.json"
    report.write_text("[{\"engine\": ")

    with pytest.raises(ScannerReportError) as excinfo:
        load_scanner_results(report)

    assert "Invalid scanner report" in str(excinfo.value)


def test_load_report_with_the_wrong_shape(tmp_path):
    report = tmp_path / "scan.json"
    report.write_text(json.dumps([{"engine": "pmd", "violations": []}]))

    with pytest.raises(ScannerReportError) as excinfo:
        load_scanner_results(report)

    assert excinfo.value.details["reason"]


def test_relative_path():
    assert relative_path("/workspace/repo/src/a.ts", "/workspace/repo") == "src/a.ts"
    assert relative_path("src/a.ts", "/workspace/repo") == "src/a.ts"


def test_filter_keeps_only_changed_lines(results):
    change_set = {"src/a.ts": {4, 10}, "src/new.ts": {1}}

    scoped = filter_violations(results, change_set, "/workspace/repo")

    assert [(item.path, item.violation.rule_name) for item in scoped] == [
        ("src/a.ts", "NoVar"),
        ("src/a.ts", "Complexity"),
    ]
    assert scoped[0].engine == "pmd"


def test_filter_with_empty_change_set(results):
    assert filter_violations(results, {}, "/workspace/repo") == []


def scoped_violation(line, severity=2, end_line=None):
    return ScopedViolation(
        path="src/a.ts",
        engine="pmd",
        violation=ScannerViolation(
            line=line,
            end_line=end_line,
            severity=severity,
            rule_name="NoVar",
            url="https://example.com/NoVar",
            message=" Avoid var ",
        ),
    )


def test_translate_violation():
    reporter = CommitCommentsReporter("abc123")

    comment = reporter.translate_violation(scoped_violation(4))

    assert comment == GithubCommitComment(
        commit_sha="abc123",
        path="src/a.ts",
        position=5,
        body="pmd NoVar (severity 2): Avoid var https://example.com/NoVar",
    )
    assert reporter.issues == [comment]


def test_translate_violation_spanning_lines():
    reporter = CommitCommentsReporter("abc123")

    assert reporter.translate_violation(scoped_violation(10, end_line=12)).position == 12


def test_halting_error_threshold():
    reporter = CommitCommentsReporter("abc123", severity_threshold=1)
    reporter.translate([scoped_violation(4, severity=2)])
    assert not reporter.has_halting_error()

    reporter.translate([scoped_violation(5, severity=1)])
    assert reporter.has_halting_error()


def test_write_posts_each_comment():
    session = FakeSession(FakeResponse(201, {"html_url": "https://github.com/o/r/commit/abc123#c1"}))
    client = GithubClient("o/r", token="secret", session=session)
    reporter = CommitCommentsReporter("abc123", client)
    reporter.translate([scoped_violation(4), scoped_violation(10, end_line=12)])

    urls = reporter.write()

    assert urls == ["https://github.com/o/r/commit/abc123#c1"] * 2
    assert len(session.calls) == 2
    call = session.calls[0]
    assert call["url"] == "https://api.github.com/repos/o/r/commits/abc123/comments"
    assert call["headers"]["Authorization"] == "Bearer secret"
    assert call["json"] == {
        "body": "pmd NoVar (severity 2): Avoid var https://example.com/NoVar",
        "path": "src/a.ts",
        "position": 5,
    }


def test_write_requires_a_client():
    reporter = CommitCommentsReporter("abc123")
    with pytest.raises(ValueError):
        reporter.write()


def test_github_client_error():
    session = FakeSession(FakeResponse(422, text="Validation Failed"))
    client = GithubClient("o/r", session=session, api_url="https://ghe.example.com/api/v3/")
    comment = GithubCommitComment(commit_sha="abc123", path="src/a.ts", position=1, body="x")

    with pytest.raises(GithubApiError) as excinfo:
        client.create_commit_comment(comment)

    assert excinfo.value.status_code == 422
    assert "Authorization" not in session.calls[0]["headers"]
    assert session.calls[0]["url"].startswith("https://ghe.example.com/api/v3/repos/o/r/")


def test_github_client_connection_error():
    class BrokenSession:
        def post(self, url, headers=None, json=None):
            raise requests.ConnectionError("Name or service not known")

    client = GithubClient("o/r", session=BrokenSession())
    comment = GithubCommitComment(commit_sha="abc123", path="src/a.ts", position=1, body="x")

    with pytest.raises(GithubApiError) as excinfo:
        client.create_commit_comment(comment)

    assert excinfo.value.status_code is None
    assert "Name or service not known" in str(excinfo.value)


def test_github_client_requires_a_repository():
    with pytest.raises(ConfigurationError):
        GithubClient("")


def test_github_client_requires_a_commit_sha():
    session = FakeSession(FakeResponse(201))
    client = GithubClient("o/r", session=session)

    with pytest.raises(ConfigurationError):
        client.create_commit_comment(GithubCommitComment(commit_sha="", path="src/a.ts", position=1, body="x"))

    assert session.calls == []
