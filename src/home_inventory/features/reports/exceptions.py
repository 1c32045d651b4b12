"""Error kinds raised while building an inventory report.

Every report component raises one of these and nothing else; the report
router turns them into the standard response envelope in one place.
"""

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError


class ReportError(Exception):
    """Base exception for report generation failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "report_error"
    public_message: str = "The report could not be generated."

    def __init__(self, detail: str = "", *, stage: str = ""):
        super().__init__(detail or self.public_message)
        self.detail = detail
        self.stage = stage

    @property
    def message(self) -> str:
        """Text that is safe to show the caller."""
        return self.public_message


class ReportValidationError(ReportError):
    """Malformed date, inverted range, or unparseable filter value."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"
    public_message = "Invalid report request."

    @property
    def message(self) -> str:
        return self.detail or self.public_message


class ReportAuthorizationError(ReportError):
    """An explicitly requested inventory is outside the caller's scope."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "access_denied"
    public_message = "Access denied."


class ReportInfrastructureError(ReportError):
    """The database could not be reached or the query failed."""

    error = "internal_error"
    public_message = "The report could not be generated. Please try again later."


class ReportSerializationError(ReportError):
    """The query succeeded but the export could not be rendered."""

    error = "export_error"
    public_message = "The report was generated but could not be exported."


# Driver faults surface either wrapped by SQLAlchemy or, for refused
# connections, as plain socket errors.
DATABASE_ERRORS = (SQLAlchemyError, OSError)
