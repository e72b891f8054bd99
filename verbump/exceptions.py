"""Custom exceptions for verbump.

Provides structured error handling with categorized exceptions
and a standardized error report format.

Every error is scoped to one file or one version slot; callers processing
many files catch ``VerbumpException`` per file and carry on with the rest.
"""

from typing import Optional, Dict, Any


class VerbumpException(Exception):
    """Base exception for all verbump errors.

    Provides structured error report format with:
    - error_code: Machine-readable error identifier
    - message: Human-readable error description
    - details: Optional additional context (path, slot, offending text)
    """

    error_code: str = "VERBUMP_ERROR"
    recoverable: bool = False

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Return structured error report dict."""
        report = {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            report["details"] = self.details
        return report


# ============ Version Errors (recoverable) ============


class FormatError(VerbumpException):
    """A version token or pattern does not satisfy the component grammar."""

    error_code = "FORMAT_ERROR"
    recoverable = True

    def __init__(self, token: str, reason: str = "Invalid version string"):
        super().__init__(f"{reason}: {token!r}", details={"token": token, "reason": reason})
        self.token = token
        self.reason = reason


class VersionOverflowError(VerbumpException):
    """Incrementing a component pushed it past the maximum value."""

    error_code = "VERSION_OVERFLOW"
    recoverable = True

    def __init__(self, component: str, value: Optional[int] = None):
        details: Dict[str, Any] = {"component": component}
        if value is not None:
            details["value"] = value
        super().__init__(f"Version component overflow: {component}", details=details)
        self.component = component


# ============ File Errors (fatal for one file) ============


class FileAccessError(VerbumpException):
    """File is missing, empty, unreadable or unwritable."""

    error_code = "FILE_ACCESS_ERROR"

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot access {path}: {reason}", details={"path": path, "reason": reason})
        self.path = path


class InvariantViolation(VerbumpException):
    """A version slot located earlier can no longer be found in the buffer."""

    error_code = "INVARIANT_VIOLATION"

    def __init__(self, path: str, slot: str, anchor: str):
        super().__init__(
            f"Version text for {slot} not found in {path} (looked for {anchor})",
            details={"path": path, "slot": slot, "anchor": anchor},
        )
        self.path = path
        self.slot = slot


class UnsupportedSlotError(VerbumpException):
    """The file format does not carry the requested version slot."""

    error_code = "UNSUPPORTED_SLOT"

    def __init__(self, path: str, slot: str, format_name: str):
        super().__init__(
            f"{format_name} file {path} does not carry {slot}",
            details={"path": path, "slot": slot, "format": format_name},
        )


class UnsupportedFormatError(VerbumpException):
    """No version stream adapter recognizes the file."""

    error_code = "UNSUPPORTED_FORMAT"

    def __init__(self, path: str):
        super().__init__(f"No version format recognized for {path}", details={"path": path})


# ============ Configuration Errors ============


class ConfigurationError(VerbumpException):
    """Configuration issue."""

    error_code = "CONFIGURATION_ERROR"

    def __init__(self, setting: str, message: str):
        super().__init__(f"Configuration error for {setting}: {message}", details={"setting": setting})


# ============ Utility Functions ============


def error_report(exception: VerbumpException, path: Optional[str] = None) -> Dict[str, Any]:
    """Create a report dict for one failed file.

    Adds ``path`` to the details when the exception itself does not carry it.
    """
    report = exception.to_dict()
    if path and "path" not in exception.details:
        report.setdefault("details", {})["path"] = path
    return report
