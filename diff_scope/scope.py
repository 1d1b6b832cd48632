"""Compute the lines a pull request touches, file by file."""

import logging
from typing import List, Optional, Sequence, Union

from .config import DiffScopeSettings
from .git_client import GitClient
from .models import (
    DELETION_SENTINEL,
    Addition,
    ChangeSet,
    Deletion,
    Diff,
    RefPair,
    SingleRef,
    ref_spec_from_sequence,
)
from .parser import DiffParser

logger = logging.getLogger(__name__)


def collect_changed_lines(diff: Diff) -> ChangeSet:
    """Map each surviving file to the line numbers of its additions and deletions.

    Additions are numbered in the post-change file and deletions carry the
    line number the diff reports for them. Context lines never count. Files
    that were deleted, or that end up with no changed lines, are left out.
    """
    change_set: ChangeSet = {}
    for file_change in diff.files:
        if not file_change.file_path or file_change.file_path == DELETION_SENTINEL:
            continue
        changed_lines = {
            change.line_number
            for change in file_change.changes
            if isinstance(change, (Addition, Deletion))
        }
        if changed_lines:
            change_set.setdefault(file_change.file_path, set()).update(changed_lines)
    return change_set


class DiffScope:
    """Scope a pull request down to the lines it changed

    Args:
        client: handle on the repository being diffed
        settings: remote names; defaults are read from the environment
        parser: unified diff parser
    """

    def __init__(
        self,
        client: GitClient,
        settings: Optional[DiffScopeSettings] = None,
        parser: Optional[DiffParser] = None,
    ):
        self.client = client
        self.settings = settings or DiffScopeSettings()
        self.parser = parser or DiffParser()

    def qualify(self, spec: Union[SingleRef, RefPair], remote_registered: bool = False) -> List[str]:
        """Prefix each ref with the remote it is resolved against, base first"""
        origin = self.settings.origin_remote
        if isinstance(spec, SingleRef):
            return [f"{origin}/{spec.ref}"]
        target_remote = self.settings.destination_remote if remote_registered else origin
        return [f"{origin}/{spec.base}", f"{target_remote}/{spec.target}"]

    def register_remote(self, remote_url: str) -> None:
        """Add the destination remote for ``remote_url`` and fetch its refs"""
        name = self.settings.destination_remote
        self.client.add_remote(name, remote_url)
        self.client.update_remote(name)

    def compute_changed_lines(
        self,
        refs: Sequence[Optional[str]],
        remote_url: Optional[str] = None,
    ) -> ChangeSet:
        """Return the changed line numbers per file between the given refs.

        Args:
            refs: one or two ref names; empty entries are ignored
            remote_url: optional repository (e.g. a fork) to fetch the target ref from

        Raises:
            RemoteRegistrationError: the remote could not be added or fetched
            RefResolutionError: a ref does not exist on its remote
            DiffToolError: git diff itself failed
            ValueError: more than two refs were given
        """
        logger.info("Getting difference within the pull request %s", list(refs))
        spec = ref_spec_from_sequence(refs)
        if remote_url:
            self.register_remote(remote_url)

        if spec is None:
            logger.warning("No refs supplied, nothing to diff")
            return {}

        qualified = self.qualify(spec, remote_registered=bool(remote_url))
        for ref in qualified:
            self.client.verify_ref(ref)

        diff_text = self.client.diff(qualified)
        diff = self.parser.parse(
            diff_text,
            base_ref=qualified[0],
            head_ref=qualified[1] if len(qualified) > 1 else None,
        )
        change_set = collect_changed_lines(diff)
        logger.info(
            "Found %d changed lines across %d files",
            sum(len(lines) for lines in change_set.values()),
            len(change_set),
        )
        return change_set


def compute_changed_lines(
    refs: Sequence[Optional[str]],
    remote_url: Optional[str] = None,
    repo_path: str = ".",
) -> ChangeSet:
    """Convenience wrapper building a one-off client for ``repo_path``"""
    return DiffScope(GitClient(repo_path)).compute_changed_lines(refs, remote_url)
