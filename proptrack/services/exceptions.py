# proptrack/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
The router layer is responsible for mapping these to appropriate HTTP responses.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   ├── InvalidPeriodError
    │   ├── InvalidSortKeyError
    │   ├── InvalidSortOrderError
    │   ├── InvalidStatusError
    │   └── InvalidMetricError
    └── NotFoundError
        └── OwnerNotFoundError

Failures raised by the underlying stores (e.g. SQLAlchemy OperationalError)
are NOT wrapped: they propagate to the caller unchanged.
"""

from collections.abc import Iterable


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when a caller passes a value outside a closed enumeration.

    This is a caller programming error, not a runtime data condition.

    Attributes:
        field: The field that failed validation (optional)
        valid_options: Accepted values for the field (optional)
    """

    def __init__(
            self,
            message: str,
            field: str | None = None,
            valid_options: Iterable[str] | None = None,
    ) -> None:
        self.field = field
        self.valid_options = list(valid_options) if valid_options is not None else None
        super().__init__(message)


class _InvalidChoiceError(ValidationError):
    """Shared shape for the closed-enumeration errors below."""

    field_name: str = ""
    label: str = ""

    def __init__(self, value: object, valid_options: Iterable[str]) -> None:
        self.value = value
        options = list(valid_options)
        super().__init__(
            f"Invalid {self.label}: '{value}'. Valid options: {', '.join(options)}",
            field=self.field_name,
            valid_options=options,
        )


class InvalidPeriodError(_InvalidChoiceError):
    """Raised for a reporting period other than monthly, quarterly, annual."""

    field_name = "period"
    label = "period"


class InvalidSortKeyError(_InvalidChoiceError):
    """Raised for an unknown property metrics sort key."""

    field_name = "sort_by"
    label = "sort key"


class InvalidSortOrderError(_InvalidChoiceError):
    """Raised for a sort direction other than asc or desc."""

    field_name = "sort_order"
    label = "sort order"


class InvalidStatusError(_InvalidChoiceError):
    """Raised for a property status filter other than active or sold."""

    field_name = "status"
    label = "status"


class InvalidMetricError(_InvalidChoiceError):
    """Raised for a performer ranking metric that is not a property metric."""

    field_name = "metric"
    label = "metric"


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for resource not found errors.

    Attributes:
        resource_type: Type of resource (e.g., "Owner")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: int | str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class OwnerNotFoundError(NotFoundError):
    """
    Raised when the portfolio owner does not exist.

    Attributes:
        owner_id: ID of the user that was not found
    """

    def __init__(self, owner_id: int) -> None:
        self.owner_id = owner_id
        super().__init__(
            f"Portfolio owner {owner_id} not found",
            resource_type="Owner",
            resource_id=owner_id,
        )
