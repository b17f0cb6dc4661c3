# OCSYNC Exceptions
# Error taxonomy shared by scanner, registry loader and sync executor


class OcsyncError(Exception):
    """Base exception for all ocsync errors."""


class RegistryError(OcsyncError):
    """Registry document could not be read or is invalid."""


class ScanError(OcsyncError):
    """A directory could not be read during a scan."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Cannot read {path}: {message}")


class FrontmatterParseError(OcsyncError):
    """Front matter block is malformed. Callers degrade to defaults."""


class FilesystemError(OcsyncError):
    """Writing or deleting an installed file failed."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class FetchError(OcsyncError):
    """Base class for content fetch failures."""

    retryable = False

    def __init__(self, location: str, message: str, status: int | None = None):
        self.location = location
        self.status = status
        super().__init__(message)


class NotFoundError(FetchError):
    """Content does not exist at the source location (404)."""


class ClientError(FetchError):
    """Non-retryable client error (4xx other than 404)."""


class ServerError(FetchError):
    """Transient server error (5xx)."""

    retryable = True


class FetchTimeoutError(FetchError):
    """A single fetch attempt timed out."""

    retryable = True


class NetworkError(FetchError):
    """Connection-level failure."""


class RetryExhaustedError(FetchError):
    """All attempts of a retryable fetch failed."""

    def __init__(self, location: str, attempts: int, last_error: FetchError):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            location,
            f"Failed to fetch {location} after {attempts} attempts: {last_error}",
            status=last_error.status,
        )
