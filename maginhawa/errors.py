"""Exception types raised by the Maginhawa pipeline."""

from pathlib import Path


class MaginhawaError(Exception):
    """Base class for all Maginhawa errors."""


class CollectionError(MaginhawaError):
    """The records directory cannot be turned into a publishable collection.

    Raised when the directory is missing, empty or unreadable, or when any
    record in it fails validation. Builders treat this as fatal.
    """

    def __init__(self, message: str, failures: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.failures = failures or {}


class ArtifactWriteError(MaginhawaError):
    """A published artifact could not be written."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path


class GitHubError(MaginhawaError):
    """The GitHub REST API rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SubmissionRejected(MaginhawaError):
    """A change proposal was refused before reaching GitHub."""

    def __init__(self, status_code: int, message: str, details: list | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details or []
