from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Sequence, Set, Union

from pydantic import BaseModel, Field

DELETION_SENTINEL = "/dev/null"

# Post-change path -> changed line numbers. Files without changes are absent.
ChangeSet = Dict[str, Set[int]]


class ChangeType(str, Enum):
    """Types of changes that can occur in a diff"""

    ADDITION = "addition"
    DELETION = "deletion"
    CONTEXT = "context"


class Addition(BaseModel):
    """A line added by the diff, numbered in the post-change file"""

    change_type: Literal[ChangeType.ADDITION] = ChangeType.ADDITION
    line_number: int
    content: str = ""


class Deletion(BaseModel):
    """A line removed by the diff, numbered in the pre-change file"""

    change_type: Literal[ChangeType.DELETION] = ChangeType.DELETION
    line_number: int
    content: str = ""


class Context(BaseModel):
    """An unchanged line shown around a change"""

    change_type: Literal[ChangeType.CONTEXT] = ChangeType.CONTEXT
    line_number: int
    old_line_number: Optional[int] = None
    content: str = ""


LineChange = Annotated[
    Union[Addition, Deletion, Context], Field(discriminator="change_type")
]


class DiffHunk(BaseModel):
    """A contiguous block of changes within one file"""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    section: str = ""
    changes: List[LineChange] = Field(default_factory=list)


class FileChange(BaseModel):
    """Represents changes to a single file in a diff"""

    file_path: str
    old_file_path: Optional[str] = None  # For renamed files
    hunks: List[DiffHunk] = Field(default_factory=list)
    is_binary: bool = False
    is_renamed: bool = False
    is_deleted: bool = False
    is_new: bool = False

    @property
    def changes(self) -> List[LineChange]:
        return [change for hunk in self.hunks for change in hunk.changes]


class Diff(BaseModel):
    """Represents a complete diff with changes across multiple files"""

    files: List[FileChange] = Field(default_factory=list)
    base_ref: Optional[str] = None
    head_ref: Optional[str] = None


class SingleRef(BaseModel):
    """Compare the working tree against one ref"""

    kind: Literal["single"] = "single"
    ref: str = Field(min_length=1)


class RefPair(BaseModel):
    """Compare a base ref against a target ref"""

    kind: Literal["pair"] = "pair"
    base: str = Field(min_length=1)
    target: str = Field(min_length=1)


RefSpec = Annotated[Union[SingleRef, RefPair], Field(discriminator="kind")]


def ref_spec_from_sequence(refs: Sequence[Optional[str]]) -> Optional[Union[SingleRef, RefPair]]:
    """Turn a loosely sized ref list into a SingleRef or RefPair.

    Empty entries are discarded. Returns None when nothing is left.
    """
    cleaned = [ref for ref in refs if ref]
    if not cleaned:
        return None
    if len(cleaned) == 1:
        return SingleRef(ref=cleaned[0])
    if len(cleaned) == 2:
        return RefPair(base=cleaned[0], target=cleaned[1])
    raise ValueError(f"Expected at most two refs, got {len(cleaned)}: {cleaned}")
