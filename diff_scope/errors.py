"""Error taxonomy for diff scoping and reporting."""

from typing import Dict, Optional


class DiffScopeError(Exception):
    """Base exception for all diff-scope errors."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class RefResolutionError(DiffScopeError):
    """A ref could not be resolved against its remote."""

    def __init__(self, ref: str, reason: str = ""):
        details = {"ref": ref}
        if reason:
            details["reason"] = reason
        super().__init__(f"Unable to resolve ref '{ref}'", details)
        self.ref = ref


class RemoteRegistrationError(DiffScopeError):
    """The optional remote could not be registered or fetched."""

    def __init__(self, name: str, url: str, reason: str = ""):
        details = {"remote": name, "url": url}
        if reason:
            details["reason"] = reason
        super().__init__(f"Unable to register remote '{name}'", details)
        self.name = name
        self.url = url


class DiffToolError(DiffScopeError):
    """git failed for a reason other than ref resolution."""


class GithubApiError(DiffScopeError):
    """The GitHub REST API rejected a request."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message, {"status": str(status_code)} if status_code is not None else None)
        self.status_code = status_code
        self.body = body


class ScannerReportError(DiffScopeError):
    """The scanner report could not be read or does not match the expected shape."""


class ConfigurationError(DiffScopeError):
    """A setting required for the requested operation is missing."""
