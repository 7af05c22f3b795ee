"""Error types raised while syncing a contact's address."""

from fastapi import status


class AddressSyncError(Exception):
    """Base error for the validate-and-update workflow.

    ``message`` is what the caller sees in the response body.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, detail=None):
        super().__init__(message)
        self.message = message
        # Raw upstream payload; logged, never returned.
        self.detail = detail


class MissingInputError(AddressSyncError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Missing record_id"):
        super().__init__(message)


class MissingRequiredFieldsError(AddressSyncError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Missing one or more required address fields"):
        super().__init__(message)


class AuthError(AddressSyncError):
    """An OAuth token endpoint rejected the credentials or was unreachable."""


class NotFoundError(AddressSyncError):
    """The CRM has no contact with the requested id."""


class UpstreamError(AddressSyncError):
    """Any other non-2xx or transport failure from the CRM or USPS."""


class ValidationError(AddressSyncError):
    """USPS could not standardize the address."""
