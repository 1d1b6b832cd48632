import logging
import re
from typing import List, Optional

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError
from unidiff.patch import Hunk, PatchedFile

from .models import (
    DELETION_SENTINEL,
    Addition,
    Context,
    Deletion,
    Diff,
    DiffHunk,
    FileChange,
    LineChange,
)

logger = logging.getLogger(__name__)

_FILE_START_RE = re.compile(r"^diff --git ", re.MULTILINE)


def _split_files(diff_text: str) -> List[str]:
    """Cut a git diff into one chunk of text per file"""
    starts = [match.start() for match in _FILE_START_RE.finditer(diff_text)]
    if not starts or starts[0] != 0:
        starts.insert(0, 0)
    ends = starts[1:] + [len(diff_text)]
    blocks = [diff_text[start:end] for start, end in zip(starts, ends)]
    return [block if block.endswith("\n") else block + "\n" for block in blocks if block.strip()]


def _strip_prefix(path: Optional[str], prefix: str) -> Optional[str]:
    if path is None or path == DELETION_SENTINEL:
        return path
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


class DiffParser:
    """Parser for converting unified diff text into structured data

    Each file of the diff is parsed on its own; a file that cannot be
    parsed is logged and dropped without affecting the others.
    """

    def parse(
        self,
        diff_text: str,
        base_ref: Optional[str] = None,
        head_ref: Optional[str] = None,
    ) -> Diff:
        """Parse a unified diff into per-file hunks"""
        files: List[FileChange] = []
        for block in _split_files(diff_text):
            try:
                patch = PatchSet.from_string(block)
            except UnidiffParseError as exc:
                header = block.splitlines()[0]
                logger.warning("Skipping unparsable diff for %s: %s", header, exc)
                continue
            files.extend(self._parse_file_change(patched_file) for patched_file in patch)

        return Diff(files=files, base_ref=base_ref, head_ref=head_ref)

    def _parse_file_change(self, patched_file: PatchedFile) -> FileChange:
        """Parse a single file's changes"""
        # is_removed_file also matches files emptied but kept in the tree
        is_deleted = patched_file.target_file == DELETION_SENTINEL
        is_new = patched_file.is_added_file or patched_file.source_file == DELETION_SENTINEL

        if is_deleted:
            file_path = DELETION_SENTINEL
        else:
            file_path = _strip_prefix(patched_file.target_file, "b/") or patched_file.path

        return FileChange(
            file_path=file_path,
            old_file_path=None if is_new else _strip_prefix(patched_file.source_file, "a/"),
            hunks=[self._parse_hunk(hunk) for hunk in patched_file],
            is_binary=patched_file.is_binary_file,
            is_renamed=patched_file.is_rename,
            is_deleted=is_deleted,
            is_new=is_new,
        )

    def _parse_hunk(self, hunk: Hunk) -> DiffHunk:
        """Parse the lines of a hunk into line changes"""
        changes: List[LineChange] = []
        for line in hunk:
            content = line.value.rstrip("\n")
            if line.is_added:
                changes.append(Addition(line_number=line.target_line_no, content=content))
            elif line.is_removed:
                changes.append(Deletion(line_number=line.source_line_no, content=content))
            elif line.is_context:
                changes.append(
                    Context(
                        line_number=line.target_line_no,
                        old_line_number=line.source_line_no,
                        content=content,
                    )
                )

        return DiffHunk(
            old_start=hunk.source_start,
            old_lines=hunk.source_length,
            new_start=hunk.target_start,
            new_lines=hunk.target_length,
            section=hunk.section_header.strip(),
            changes=changes,
        )
