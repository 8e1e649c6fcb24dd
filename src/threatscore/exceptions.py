"""Exception types raised by the threat scoring package."""


class ThreatScoreError(Exception):
    """Base class for all threatscore errors."""


class DecodeError(ThreatScoreError):
    """Raised when a raw event buffer cannot be decoded into an Event."""


class ClientError(ThreatScoreError):
    """
    Raised by ThreatScoreClient when the scoring service answers with an
    error status or cannot be reached.

    Attributes:
        status_code: HTTP status returned by the server, None if no response
    """

    def __init__(self, message: str, status_code=None) -> None:
        super().__init__(message)
        self.status_code = status_code
