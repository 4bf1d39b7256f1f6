from typing import Any

from rest_framework import status

from apps.api.exceptions import ApplicationError


class ResourceNotFoundError(ApplicationError):
    """A category or product id that does not exist."""

    default_code = "NOT_FOUND"
    default_status = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, field: str, value: Any):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(
            f"{resource} not found with {field}: {value}",
            details={"resource": resource, "field": field, "value": value},
        )


class DuplicateResourceError(ApplicationError):
    """A name that is already taken (product within its category, or category)."""

    default_code = "CONFLICT"
    default_status = status.HTTP_409_CONFLICT

    def __init__(self, resource: str, field: str, value: Any):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(
            f"{resource} with {field} '{value}' already exists",
            details={"resource": resource, "field": field, "value": value},
        )


class FileStorageError(ApplicationError):
    default_code = "STORAGE_ERROR"
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR


class InvalidImageNameError(FileStorageError):
    default_code = "VALIDATION_ERROR"
    default_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(
            "Image file name must have an extension",
            details={"image": filename},
        )


class InvalidCommandError(ApplicationError):
    """A service input value that cannot be parsed, e.g. a non-numeric price."""

    default_code = "VALIDATION_ERROR"
    default_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, value: Any, expected: str):
        self.field = field
        self.value = value
        super().__init__(
            "Validation failed",
            details={field: [f"A valid {expected} is required, got {value!r}."]},
        )
