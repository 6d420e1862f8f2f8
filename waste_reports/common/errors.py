"""Domain errors and failure typing."""


class ReportingError(Exception):
    """Base class for reporting pipeline failures."""

    error_code = "REPORTING_ERROR"
    user_message = "Something went wrong. Please try again."


class ConfigError(ReportingError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"
    user_message = "Reporting is not configured correctly."


class AuthorizationError(ReportingError):
    """Raised by the authorization gate before any report work starts."""

    error_code = "AUTHORIZATION_ERROR"
    user_message = "Failed to verify access permissions."


class Unauthenticated(AuthorizationError):
    error_code = "UNAUTHENTICATED"
    user_message = "You must be logged in to access reports."


class Forbidden(AuthorizationError):
    error_code = "FORBIDDEN"
    user_message = "Reports & Analytics is only available to administrators."


class AccountNotFound(Forbidden):
    error_code = "ACCOUNT_NOT_FOUND"
    user_message = "User data not found. Please contact support."


class StoreUnavailable(ReportingError):
    """Raised when a record set cannot be read from the document store."""

    error_code = "STORE_UNAVAILABLE"
    user_message = "Some report data could not be loaded."


class UnsupportedReportType(ReportingError):
    error_code = "UNSUPPORTED_REPORT_TYPE"
    user_message = "Failed to generate report"


class ExportFailed(ReportingError):
    error_code = "EXPORT_FAILED"
    user_message = "Failed to export report. Please try again."
