"""Custom exception hierarchy for smol-workspace.

All application-specific exceptions inherit from SmolWorkspaceError,
which carries an error code that tool results and CLI reports reuse.
"""

from __future__ import annotations


class SmolWorkspaceError(Exception):
    """Base exception for all smol-workspace errors."""

    def __init__(self, message: str, *, code: str = "INTERNAL_ERROR") -> None:
        super().__init__(message)
        self.code = code


class ConfigError(SmolWorkspaceError):
    """Invalid or missing configuration (CLI arguments, environment)."""

    def __init__(self, message: str, *, code: str = "CONFIG_ERROR") -> None:
        super().__init__(message, code=code)


class RemoteUnavailableError(SmolWorkspaceError):
    """A remote collaborator failed (network, auth, rate limit, API error).

    The only error class allowed to abort a whole invocation.
    """

    def __init__(self, message: str, *, code: str = "REMOTE_UNAVAILABLE") -> None:
        super().__init__(message, code=code)


class IssueTrackerError(RemoteUnavailableError):
    """Errors fetching issue metadata from the issue tracker."""

    def __init__(self, message: str, *, code: str = "ISSUE_TRACKER_ERROR") -> None:
        super().__init__(message, code=code)


class ToolError(SmolWorkspaceError):
    """Errors during tool execution. Contained to the call's ToolResult."""

    def __init__(self, message: str, *, code: str = "TOOL_ERROR") -> None:
        super().__init__(message, code=code)


class ToolArgumentsError(ToolError):
    """Tool argument payload is malformed or misses a required field."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_ARGS")


class FileStoreError(ToolError):
    """Generic I/O failure in the file store."""

    def __init__(self, message: str, *, code: str = "IO_ERROR") -> None:
        super().__init__(message, code=code)


class FileNotFoundInStoreError(FileStoreError):
    """Requested path does not exist in the file store."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}", code="FILE_NOT_FOUND")
        self.path = path


class AccessDeniedError(FileStoreError):
    """Path is absolute or resolves outside the workspace root."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="ACCESS_DENIED")
