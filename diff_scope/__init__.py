from .config import DiffScopeSettings
from .errors import (
    ConfigurationError,
    DiffScopeError,
    DiffToolError,
    GithubApiError,
    RefResolutionError,
    RemoteRegistrationError,
    ScannerReportError,
)
from .git_client import GitClient
from .models import (
    DELETION_SENTINEL,
    Addition,
    ChangeSet,
    ChangeType,
    Context,
    Deletion,
    Diff,
    DiffHunk,
    FileChange,
    LineChange,
    RefPair,
    RefSpec,
    SingleRef,
    ref_spec_from_sequence,
)
from .parser import DiffParser
from .scope import DiffScope, collect_changed_lines, compute_changed_lines

__all__ = [
    "DiffScope",
    "compute_changed_lines",
    "collect_changed_lines",
    "DiffParser",
    "GitClient",
    "DiffScopeSettings",
    "Diff",
    "DiffHunk",
    "FileChange",
    "LineChange",
    "Addition",
    "Deletion",
    "Context",
    "ChangeType",
    "ChangeSet",
    "RefSpec",
    "SingleRef",
    "RefPair",
    "ref_spec_from_sequence",
    "DELETION_SENTINEL",
    "DiffScopeError",
    "RefResolutionError",
    "RemoteRegistrationError",
    "DiffToolError",
    "GithubApiError",
    "ScannerReportError",
    "ConfigurationError",
]
