"""
Error taxonomy shared by services and API handlers

Every error carries the HTTP status it maps to and a machine-readable code.
Extra keyword arguments become part of the JSON error body.
"""

from typing import Any, Dict, List, Optional


class FeedbackError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code: int = 500
    code: str = "error"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.message, "code": self.code}
        body.update(self.details)
        return body


class Unauthenticated(FeedbackError):
    status_code = 401
    code = "unauthenticated"
    default_message = "Authentication required"


class AccountDeleted(FeedbackError):
    status_code = 403
    code = "account_deleted"
    default_message = "Account has been deleted. Please contact admin."


class AccountDeactivated(FeedbackError):
    status_code = 403
    code = "account_deactivated"
    default_message = "Account has been deactivated. Please contact admin."


class EmailNotVerified(FeedbackError):
    status_code = 403
    code = "email_not_verified"
    default_message = "Please verify your email address before logging in."

    def __init__(self, email: str):
        super().__init__(requires_verification=True, email=email)


class Forbidden(FeedbackError):
    status_code = 403
    code = "forbidden"
    default_message = "You are not authorized to access this resource"


class NotFound(FeedbackError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class ValidationError(FeedbackError):
    """Invalid or incomplete payload; `problems` lists field-level issues"""

    status_code = 400
    code = "validation_error"
    default_message = "Validation error"

    def __init__(self, problems: List[Dict[str, Any]], message: Optional[str] = None):
        self.problems = problems
        super().__init__(message, problems=problems)


class PlanLimitExceeded(FeedbackError):
    status_code = 400
    code = "plan_limit_exceeded"
    default_message = "Your subscription plan does not allow this form"


class Conflict(FeedbackError):
    status_code = 409
    code = "conflict"
    default_message = "Resource already exists"


class DependencyFailure(FeedbackError):
    status_code = 500
    code = "internal_error"
    default_message = "Internal server error"
