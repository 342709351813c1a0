"""Exceptions raised by the lookup core."""

from typing import Optional


class InvalidInputError(ValueError):
    """The identifier list passed to a batch lookup is unusable."""


class RateLimitedError(Exception):
    """The directory answered HTTP 429."""

    def __init__(self, identifier: str, retry_after: Optional[str] = None):
        self.identifier = identifier
        self.retry_after = retry_after
        super().__init__(f"Rate limited while checking {identifier} (Retry-After: {retry_after})")
