"""
Failure envelope and typed domain errors.

Every failure that reaches the presentation layer is classified. Domain code
raises a ``KnownError`` subclass; the API turns it into an ``ApiResponse``
with a known-failure outcome and the error's HTTP status.

Failure types:
- KnownFailure: System knows why it failed
- UnknownFailure: System does not know why it failed
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    INVALID_ARGUMENT = "invalid_argument"

    # Resource failures
    NOT_FOUND = "not_found"
    EMPTY_CATALOG = "empty_catalog"

    # Concurrency
    REQUEST_IN_PROGRESS = "request_in_progress"

    # Service failures
    EXTERNAL_API_ERROR = "external_api_error"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


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
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel):
    """
    Response envelope for failures surfaced by the API.

    Known failures carry a classified ``FailureDetail``; unknown failures use
    a fixed message so nothing unexplained reaches the user.
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    failure: FailureDetail = Field(
        ...,
        description="Failure details",
    )

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse":
        """Create a known failure response."""
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def unknown_failure(cls, detail: str | None = None) -> "ApiResponse":
        """Create an unknown failure response with the standard message."""
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="Something went wrong and the cause is unknown. Please try again.",
                detail=detail,
                suggestion="If this persists, please report the issue.",
            ),
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
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class InvalidInputError(KnownError):
    """Raised when the scanner receives a payload that is not an image."""

    def __init__(
        self,
        content_type: str | None,
        detail: str | None = None,
        message: str = "Invalid file type. Please select an image file.",
        status_code: int = 415,
    ):
        self.content_type = content_type
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=message,
            detail=detail or f"Unsupported content type: {content_type!r}",
            suggestion="Upload a JPEG or PNG photo of the card.",
            status_code=status_code,
        )


class EmptyImageError(InvalidInputError):
    """Raised when the scanner receives an image payload with no bytes."""

    def __init__(self, content_type: str | None):
        super().__init__(
            content_type,
            detail=f"Empty {content_type} payload",
            message="The uploaded image is empty. Please take the photo again.",
            status_code=400,
        )


class CatalogEmptyError(KnownError):
    """Raised when identification has no catalog to choose from."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.EMPTY_CATALOG,
            message="Card identification is unavailable right now.",
            detail="Identification catalog is empty",
            status_code=503,
        )


class InvalidArgumentError(KnownError):
    """Raised when an enumerated argument has an unrecognized value."""

    def __init__(self, argument: str, value: object, allowed: list[str]):
        self.argument = argument
        self.value = value
        self.allowed = allowed
        super().__init__(
            kind=FailureKind.INVALID_ARGUMENT,
            message=f"Unrecognized {argument}: {value!r}",
            detail=f"Valid values: {', '.join(allowed)}",
            status_code=422,
        )


class EntryNotFoundError(KnownError):
    """Raised when a collection has no entry for the given card id."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Card '{card_id}' is not in this collection.",
            status_code=404,
        )


class CardNotInCatalogError(KnownError):
    """Raised when a card id does not exist in the catalog."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Card '{card_id}' does not exist in the catalog.",
            suggestion="Scan the card first, then add the identified card.",
            status_code=404,
        )


class RequestInProgressError(KnownError):
    """Raised when the same operation is already running for a caller."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            kind=FailureKind.REQUEST_IN_PROGRESS,
            message=f"A {operation} request is already in progress.",
            suggestion="Wait for the current request to finish.",
            status_code=409,
        )


class IdentificationServiceError(KnownError):
    """Raised when the remote recognition service fails."""

    def __init__(self, detail: str):
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message="Could not identify this card. Try a clearer image.",
            detail=detail,
            status_code=502,
        )
