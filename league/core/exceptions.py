"""Errors raised by the league engine, services and store."""


class LeagueError(Exception):
    """Base class for domain errors.

    These are recoverable: the admin or player sees the message and may retry.
    """

    code = "league_error"


class InsufficientPlayers(LeagueError):
    """Not enough approved players to run a draw."""

    code = "insufficient_players"


class InvalidScore(LeagueError):
    """A reported score is negative, not an integer, or a knockout draw."""

    code = "invalid_score"


class WrongState(LeagueError):
    """A match or player is not in the state the operation requires."""

    code = "wrong_state"


class NotEnoughQualifiers(LeagueError):
    code = "not_enough_qualifiers"


class OddQualifierCount(LeagueError):
    code = "odd_qualifier_count"


class UploadFailed(LeagueError):
    """The image host rejected or never received an upload."""

    code = "upload_failed"


class DuplicateName(LeagueError):
    code = "duplicate_name"


class CapacityReached(LeagueError):
    code = "capacity_reached"


class TransitionNotAllowed(LeagueError):
    """A tournament lifecycle step was requested out of order."""

    code = "transition_not_allowed"


# ========== Store errors ==========


class StoreError(Exception):
    """Failure in the document store. Never a domain error."""


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, document_id: str):
        super().__init__(f"No document '{document_id}' in '{collection}'.")
        self.collection = collection
        self.document_id = document_id
