import logging
from typing import Optional

import requests
from pydantic import BaseModel

from .errors import ConfigurationError, GithubApiError

logger = logging.getLogger(__name__)


class GithubCommitComment(BaseModel):
    """Payload for the commit comments endpoint"""

    commit_sha: str
    path: str
    position: int
    body: str


class GithubClient:
    """Minimal client for the GitHub REST endpoints the reporter needs"""

    def __init__(
        self,
        repository: str,
        token: Optional[str] = None,
        api_url: str = "https://api.github.com",
        session: Optional[requests.Session] = None,
    ):
        if not repository:
            raise ConfigurationError("A GitHub repository (owner/name) is required to post comments")
        self.repository = repository
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.headers = {"Accept": "application/vnd.github+json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def create_commit_comment(self, comment: GithubCommitComment) -> str:
        """Adds a comment to a commit and returns its URL"""
        if not comment.commit_sha:
            raise ConfigurationError("A commit sha is required to post comments")
        url = f"{self.api_url}/repos/{self.repository}/commits/{comment.commit_sha}/comments"
        data = {"body": comment.body, "path": comment.path, "position": comment.position}
        try:
            response = self.session.post(url, headers=self.headers, json=data)
        except requests.RequestException as exc:
            raise GithubApiError(f"Failed to post comment: {exc}") from exc

        if response.status_code == 201:
            html_url = response.json().get("html_url", "")
            logger.debug("Posted comment on %s: %s", comment.path, html_url)
            return html_url
        raise GithubApiError(
            f"Failed to post comment: {response.status_code} - {response.text}",
            response.status_code,
            response.text,
        )
