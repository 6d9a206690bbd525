"""
Domain exceptions raised by the services layer.

Each carries the HTTP status it maps to so the application can translate
them with a single exception handler.
"""

from fastapi import status


class PrepError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Server error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(PrepError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ForbiddenError(PrepError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class ValidationFailure(PrepError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class StorageUnavailable(PrepError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage unavailable, please retry later"
