"""
Failure classification for Stampbook.

Every known failure carries a FailureKind so the API layer can turn it into
a FailureDetail payload through one exception handler. Codec and
persistence failures are normally absorbed before reaching a user; they
only surface from the strict endpoints that ask for them.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Share token failures
    MALFORMED_TOKEN = "malformed_token"
    UNEXPECTED_SHAPE = "unexpected_shape"

    # Input validation failures
    INVALID_INPUT = "invalid_input"

    # Resource failures
    NOT_FOUND = "not_found"

    # Session constraints
    READ_ONLY = "read_only"

    # Storage failures
    PERSISTENCE_READ_FAILED = "persistence_read_failed"

    # Unknown
    UNKNOWN = "unknown"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail payload."""
        return FailureDetail(kind=self.kind, message=self.message, detail=self.detail)


class TokenDecodeError(KnownError):
    """A share token could not be turned into a snapshot."""


class MalformedTokenError(TokenDecodeError):
    """Base64, percent-encoding, UTF-8 or JSON layer is broken."""

    def __init__(self, detail: str):
        super().__init__(
            kind=FailureKind.MALFORMED_TOKEN,
            message="The shared link is damaged and cannot be read.",
            detail=detail,
            status_code=422,
        )


class UnexpectedShapeError(TokenDecodeError):
    """Token parsed, but the payload is not a card."""

    def __init__(self, detail: str):
        super().__init__(
            kind=FailureKind.UNEXPECTED_SHAPE,
            message="The shared link does not describe a stamp card.",
            detail=detail,
            status_code=422,
        )


class PersistenceReadError(KnownError):
    """Stored collection is corrupt or fails validation."""

    def __init__(self, detail: str):
        super().__init__(
            kind=FailureKind.PERSISTENCE_READ_FAILED,
            message="Saved cards could not be read.",
            detail=detail,
            status_code=500,
        )


class CardNotFoundError(KnownError):
    def __init__(self, card_id: int):
        self.card_id = card_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Card {card_id} not found.",
            status_code=404,
        )


class InvalidCardNameError(KnownError):
    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message="Card name cannot be empty.",
        )


class StampIndexError(KnownError):
    def __init__(self, index: int, capacity: int):
        self.index = index
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=f"Stamp index must be between 0 and {capacity - 1}.",
            detail=f"index={index}",
        )


class ReadOnlySessionError(KnownError):
    """Mutation attempted while viewing a snapshot."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.READ_ONLY,
            message="Cards cannot be changed while viewing a shared card.",
            status_code=409,
        )
