"""
Domain errors raised by the stores.

Only "record not found" is reclassified; every other persistence failure
(constraint violations, connectivity, aborted transactions) reaches the
caller as the original SQLAlchemy exception.
"""


class NotFoundError(LookupError):
    """A record addressed by identity does not exist."""

    entity = "record"

    def __init__(self, record_id, cause: str = ""):
        self.record_id = record_id
        self.cause = cause
        message = f"{self.entity} not found (id {record_id})"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)


class LeaderboardNotFoundError(NotFoundError):
    entity = "leaderboard"


class PlayerNotFoundError(NotFoundError):
    entity = "player"
