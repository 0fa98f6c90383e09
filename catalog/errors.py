"""Catalog error taxonomy.

The HTTP layer maps each class to a status code in one place, so components
raise these and never build responses themselves. ``StoreError`` from
``commonlib.storage`` is deliberately absent: persistence failures propagate
to the generic handler.
"""


class CatalogError(Exception):
    """Base class for all catalog errors."""

    status_code = 500

    def __init__(self, message: str, *, cause: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.cause:
            body["error"] = self.cause
        return body


class NotFoundError(CatalogError):
    """A requested record does not exist."""

    status_code = 404


class ValidationFailure(CatalogError):
    """A payload or a required field was rejected."""

    status_code = 400


class MalformedPayload(ValidationFailure):
    """Structured data accompanying a product request could not be parsed."""

    status_code = 500


class UploadRejected(ValidationFailure):
    """An uploaded file is not an accepted image."""


class UploadTooLarge(UploadRejected):
    status_code = 413


class InvalidCredentials(CatalogError):
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Invalid credentials")
