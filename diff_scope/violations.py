"""Scanner output models and filtering against a ChangeSet."""

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import ScannerReportError
from .models import ChangeSet

logger = logging.getLogger(__name__)


class ScannerViolation(BaseModel):
    """A single rule violation reported by the scanner"""

    model_config = ConfigDict(populate_by_name=True)

    line: int
    end_line: Optional[int] = Field(default=None, alias="endLine")
    column: Optional[int] = None
    severity: int
    rule_name: str = Field(alias="ruleName")
    category: str = ""
    url: str = ""
    message: str = ""


class ScannerResult(BaseModel):
    """All violations one engine found in one file"""

    model_config = ConfigDict(populate_by_name=True)

    engine: str
    file_name: str = Field(alias="fileName")
    violations: List[ScannerViolation] = Field(default_factory=list)


class ScopedViolation(BaseModel):
    """A violation that falls on a changed line"""

    path: str
    engine: str
    violation: ScannerViolation


_RESULTS_ADAPTER = TypeAdapter(List[ScannerResult])


def load_scanner_results(path: Union[str, Path]) -> List[ScannerResult]:
    """Read the scanner's JSON report"""
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        return _RESULTS_ADAPTER.validate_python(payload)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
        reason = next(iter(str(exc).splitlines()), type(exc).__name__)
        raise ScannerReportError(f"Invalid scanner report: {path}", {"reason": reason}) from exc


def relative_path(file_name: str, repo_root: Union[str, Path]) -> str:
    """Express a scanner file name relative to the repository root"""
    path = Path(file_name)
    if path.is_absolute():
        try:
            path = path.relative_to(Path(repo_root).resolve())
        except ValueError:
            try:
                path = path.relative_to(Path(repo_root))
            except ValueError:
                return PurePosixPath(*path.parts).as_posix()
    return PurePosixPath(*path.parts).as_posix()


def filter_violations(
    results: Iterable[ScannerResult],
    change_set: ChangeSet,
    repo_root: Union[str, Path] = ".",
) -> List[ScopedViolation]:
    """Keep only the violations reported on a line the pull request touched"""
    scoped: List[ScopedViolation] = []
    for result in results:
        path = relative_path(result.file_name, repo_root)
        changed_lines = change_set.get(path)
        if not changed_lines:
            logger.debug("Skipping %s, file not changed", path)
            continue
        for violation in result.violations:
            if violation.line in changed_lines:
                scoped.append(ScopedViolation(path=path, engine=result.engine, violation=violation))
    logger.info("%d violations fall on changed lines", len(scoped))
    return scoped
