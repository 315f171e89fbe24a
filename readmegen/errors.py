"""Error kinds shared by the relay and the client collector.

None of these are retried anywhere; each one ends the current attempt.
"""


class ReadmeGenError(Exception):
    """Base for every error raised by readmegen."""


class ConfigurationError(ReadmeGenError):
    """Required configuration is missing or unusable."""


class InputValidationError(ReadmeGenError):
    """A request field is missing, malformed or empty."""


class FileReadError(ReadmeGenError):
    """A selected file or directory could not be read."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class InvalidUrlError(ReadmeGenError, ValueError):
    """The string does not look like a GitHub repository URL."""


class ProviderError(ReadmeGenError):
    """The completion provider call failed."""


class EmptyResponseError(ProviderError):
    """The provider call succeeded but returned no content."""


class NetworkError(ReadmeGenError):
    """The relay or the GitHub API could not be reached, or refused the call."""


class RepoNotFoundError(NetworkError):
    """404 — repository doesn't exist or is private."""


class RateLimitError(NetworkError):
    """403/429 — GitHub rate limit exceeded."""

    def __init__(self, message: str, reset_timestamp: int | None = None):
        super().__init__(message)
        self.reset_timestamp = reset_timestamp
