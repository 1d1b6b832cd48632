"""Turn scoped violations into commit comments."""

import logging
from typing import List, Optional

from .github_client import GithubClient, GithubCommitComment
from .violations import ScopedViolation

logger = logging.getLogger(__name__)


class CommitCommentsReporter:
    """Collects commit comments for violations and writes them to GitHub

    A violation whose severity is at or below ``severity_threshold`` (1 is the
    most severe) counts as a halting error.
    """

    def __init__(
        self,
        commit_sha: str,
        client: Optional[GithubClient] = None,
        severity_threshold: int = 0,
    ):
        self.commit_sha = commit_sha
        self.client = client
        self.severity_threshold = severity_threshold
        self.issues: List[GithubCommitComment] = []
        self._halting = False

    def translate_violation(self, scoped: ScopedViolation) -> GithubCommitComment:
        violation = scoped.violation
        start_line = violation.line
        end_line = violation.end_line or start_line
        if end_line == start_line:
            end_line += 1

        if violation.severity <= self.severity_threshold:
            self._halting = True

        body = f"{scoped.engine} {violation.rule_name} (severity {violation.severity}): {violation.message.strip()}"
        if violation.url:
            body += f" {violation.url}"
        comment = GithubCommitComment(
            commit_sha=self.commit_sha,
            path=scoped.path,
            position=end_line,
            body=body,
        )
        self.issues.append(comment)
        return comment

    def translate(self, violations: List[ScopedViolation]) -> List[GithubCommitComment]:
        return [self.translate_violation(scoped) for scoped in violations]

    def has_halting_error(self) -> bool:
        return self._halting

    def write(self) -> List[str]:
        """Post every collected comment, one request at a time"""
        if self.client is None:
            raise ValueError("A GithubClient is required to write comments")
        logger.info("Writing %d commit comments using GitHub REST API...", len(self.issues))
        return [self.client.create_commit_comment(comment) for comment in self.issues]
