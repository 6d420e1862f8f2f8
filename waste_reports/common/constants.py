"""Application constants."""

USER_AGENT = "waste-reports/1.0 (+reporting; contact: configured-email)"
COMMANDS = (
    "catalog",
    "overview",
    "report",
    "export",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "request_id",
    "stage",
    "report_type",
    "source",
    "event",
    "status",
    "attempt",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)

COLLECTIONS_SOURCE = "collections"
SCHEDULES_SOURCE = "schedules"
USERS_SOURCE = "users"

SCHEDULE_STATUSES = ("Scheduled", "Cancelled", "In Progress")
COMPLETED_STATUS = "Completed"
PAYMENT_STATUSES = ("Paid", "Unpaid", "Pending Verification")
DEFAULT_WASTE_TYPE = "Mixed"
UNKNOWN_AREA = "Unknown"
TABULAR_ALL_WASTE_TYPES = "All"

DEFAULT_BRAND_NAME = "Smart Waste Management System"
DEFAULT_REPORT_TITLE = "Report"
ALL_TIME_LABEL = "All time"

FALLBACK_COLOR = "#6B7280"
WASTE_TYPE_COLORS = {
    "Organic": "#10B981",
    "Recyclable": "#3B82F6",
    "Electronic": "#F59E0B",
    "Mixed": "#6B7280",
}
SCHEDULE_STATUS_COLORS = {
    "Completed": "#10B981",
    "Scheduled": "#3B82F6",
    "Cancelled": "#EF4444",
    "In Progress": "#F59E0B",
}
PAYMENT_STATUS_COLORS = {
    "Paid": "#10B981",
    "Unpaid": "#EF4444",
    "Pending Verification": "#F59E0B",
}
