"""Error codes and user-friendly messages.

This module defines the error catalog for the expense category backfill.
Each error has:
- code: Unique identifier
- message: Technical description (returned as ``error`` and logged)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the caller
- retry_allowed: Whether the request can simply be re-sent
"""

ERROR_CATALOG: dict[str, dict] = {
    "RECON_001": {
        "code": "RECON_001",
        "message": "Trip ID is required",
        "user_message": "We couldn't tell which trip to repair.",
        "suggestion": "Send the trip_id of the trip whose expenses should be fixed.",
        "retry_allowed": False,
    },
    "RECON_002": {
        "code": "RECON_002",
        "message": "Failed to fix expense categories",
        "user_message": "We couldn't load the trip data needed to fix expense categories.",
        "suggestion": "Nothing was changed. Please try again in a few moments.",
        "retry_allowed": True,
    },
    "RECON_003": {
        "code": "RECON_003",
        "message": "Failed to fix expense categories: every update failed",
        "user_message": "We found expenses to fix but couldn't save any of them.",
        "suggestion": "Please try again. Already-fixed expenses are skipped on the next run.",
        "retry_allowed": True,
    },
    "VAL_001": {
        "code": "VAL_001",
        "message": "Invalid request data",
        "user_message": "The request data is incomplete or invalid.",
        "suggestion": "Please check your input and try again.",
        "retry_allowed": False,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database operation failed",
        "user_message": "A database error occurred.",
        "suggestion": "Please try again later.",
        "retry_allowed": True,
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "user_message": "An unexpected error occurred.",
        "suggestion": "Please try again later or contact support.",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details. Unknown codes get a generic definition.
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    """Get user-friendly message for an error code."""
    return get_error(error_code)["user_message"]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
