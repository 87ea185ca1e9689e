"""Domain errors raised by the customer services.

Routes translate these into HTTP responses; nothing here knows about HTTP.
"""


class CustomerServiceError(Exception):
    """Base class for customer service errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CustomerNotFoundError(CustomerServiceError):
    """No active customer with the requested id."""


class CustomerConflictError(CustomerServiceError):
    """Email already used by another active customer."""


class InvalidArgumentError(CustomerServiceError):
    """Out-of-range paging, sorting or bulk-count argument."""


class StorageUnavailableError(CustomerServiceError):
    """The customer store could not be reached."""
