"""Custom exceptions for devfile-scout."""


class ScanError(Exception):
    """Base exception for all scan errors."""


class ConfigError(ScanError):
    """Raised when an environment setting cannot be interpreted."""


class InvalidSourceURLError(ScanError):
    """Raised when a source repository URL cannot be turned into a hosted link."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        message = f"invalid source URL {url!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CatalogLookupError(ScanError):
    """Raised when the devfile registry is unreachable or has no such entry."""


class InvalidDevfileError(ScanError):
    """Raised when a devfile cannot be read, fetched or parsed."""

    def __init__(self, location: str, reason: str) -> None:
        self.location = location
        self.reason = reason
        super().__init__(f"failed to parse the devfile content from {location}: {reason}")


class ScanIOError(ScanError):
    """Raised when the repository tree cannot be read."""

    def __init__(self, path: str, cause: OSError) -> None:
        self.path = path
        super().__init__(f"failed to read {path}: {cause}")


class NoDevfileFoundError(ScanError):
    """No devfile could be matched for a component.

    Soft failure: the resolver logs it and the component simply gets no
    catalog-derived entries.
    """

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"unable to find any devfiles in dir: {location}")


class NoMatchingDevfileTypeError(ScanError):
    """Raised by a classifier when no candidate devfile type fits a path."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"No valid devfile found for project in {path}")
