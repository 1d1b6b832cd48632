import logging
from typing import Sequence

import git
from git.exc import GitCommandError, GitError

from .errors import DiffToolError, RefResolutionError, RemoteRegistrationError

logger = logging.getLogger(__name__)


def _stderr(exc: GitError) -> str:
    if isinstance(exc, GitCommandError):
        return (exc.stderr or "").strip() or str(exc)
    return str(exc)


class GitClient:
    """Thin handle over a local repository used for diffing refs

    One instance is created per workflow run and passed to whatever needs it.
    """

    def __init__(self, repo_path: str = "."):
        try:
            self.repo = git.Repo(repo_path, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as exc:
            raise DiffToolError(
                f"Not a git repository: {repo_path}", {"path": str(repo_path)}
            ) from exc

    @property
    def working_dir(self) -> str:
        return str(self.repo.working_tree_dir)

    def add_remote(self, name: str, url: str) -> None:
        """Register ``url`` under ``name``, replacing the URL of an existing remote"""
        try:
            if name in [remote.name for remote in self.repo.remotes]:
                remote = self.repo.remote(name)
                if url not in list(remote.urls):
                    logger.info("Pointing existing remote %s at %s", name, url)
                    remote.set_url(url)
                return
            logger.info("Adding remote %s -> %s", name, url)
            self.repo.create_remote(name, url)
        except GitError as exc:
            raise RemoteRegistrationError(name, url, _stderr(exc)) from exc

    def update_remote(self, name: str) -> None:
        """Fetch the refs of a registered remote"""
        url = ""
        try:
            url = next(iter(self.repo.remote(name).urls), "")
            logger.info("Updating remote %s", name)
            self.repo.git.remote("update", name)
        except (GitError, ValueError) as exc:
            reason = _stderr(exc) if isinstance(exc, GitError) else str(exc)
            raise RemoteRegistrationError(name, url, reason) from exc

    def verify_ref(self, ref: str) -> str:
        """Resolve ``ref`` to a commit sha"""
        try:
            return self.repo.git.rev_parse("--verify", "--quiet", f"{ref}^{{commit}}")
        except GitCommandError as exc:
            raise RefResolutionError(ref, _stderr(exc)) from exc

    def diff(self, refs: Sequence[str]) -> str:
        """Return the unified diff for the given ref expression"""
        args = ["--no-color", "--no-ext-diff", "--src-prefix=a/", "--dst-prefix=b/", *refs, "--"]
        logger.debug("git diff %s", " ".join(args))
        try:
            return self.repo.git(c="core.quotePath=false").diff(*args)
        except GitCommandError as exc:
            raise DiffToolError(
                "git diff failed", {"refs": " ".join(refs), "stderr": _stderr(exc)}
            ) from exc
