"""Input exceptions: JSON documents handed to the CLI."""

from .base import AttributionError


class InvalidInputError(AttributionError):
    """Raised when an input document cannot be read or has the wrong shape."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Invalid input: {source}", details={"source": source, "reason": reason})
        self.source = source
        self.reason = reason
