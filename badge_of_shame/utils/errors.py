"""Failures that degrade a badge request to the empty badge.

Every pipeline step raises one of these; ``BadgeService.resolve`` catches them
in one place, logs the message and answers with the 1x1 SVG.
"""


class BadgeError(Exception):
    """Base class for any failure while resolving a badge."""


class UpstreamStatusError(BadgeError):
    def __init__(self, request_name: str, status: int, url: str) -> None:
        super().__init__(f"{request_name} returned {status} for {url}")
        self.status = status


class UpstreamUnavailableError(BadgeError):
    def __init__(self, request_name: str, exc: Exception) -> None:
        super().__init__(f"{request_name} returned error: {exc!r}")


class InvalidJSONError(BadgeError):
    def __init__(self, request_name: str) -> None:
        super().__init__(f"{request_name} returned invalid JSON")


class MissingDataError(BadgeError):
    def __init__(self, response_name: str) -> None:
        super().__init__(f"{response_name} missing data")


class CommitNotFoundError(BadgeError):
    pass


class CacheUnavailableError(BadgeError):
    def __init__(self, key: str, exc: Exception) -> None:
        super().__init__(f"Badge cache write failed for {key}: {exc!r}")
