"""
Custom Exceptions for Campus Ops
================================

Every failure the request lifecycle can report has its own type so the API
layer can map it to an HTTP status without string matching.

Usage:
    from app.core.exceptions import InsufficientStockError

    if requested > available:
        raise InsufficientStockError(item_id, requested, available)

    try:
        await lifecycle.approve(request_id, actor_id)
    except InvalidTransitionError as e:
        logger.warning(f"Approve refused: {e}")
        raise
"""

from typing import Optional, Any, Dict


class CampusOpsError(Exception):
    """Base exception for all Campus Ops errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(CampusOpsError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(CampusOpsError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(CampusOpsError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class ItemNotFoundError(ResourceNotFoundError):
    """Inventory item not found"""

    def __init__(self, item_id: str):
        super().__init__("Item", item_id)


class RequestNotFoundError(ResourceNotFoundError):
    """Resource request not found"""

    def __init__(self, request_id: str):
        super().__init__("Request", request_id)


class ProjectNotFoundError(ResourceNotFoundError):
    """Project not found"""

    def __init__(self, project_id: str):
        super().__init__("Project", project_id)


class UserNotFoundError(ResourceNotFoundError):
    """User not found"""

    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class FacultyNotFoundError(ResourceNotFoundError):
    """Faculty profile not found"""

    def __init__(self, faculty_id: str):
        super().__init__("Faculty", faculty_id)


class CourseNotFoundError(ResourceNotFoundError):
    """Course not found"""

    def __init__(self, course_id: str):
        super().__init__("Course", course_id)


class ScheduleNotFoundError(ResourceNotFoundError):
    """Class schedule not found"""

    def __init__(self, schedule_id: str):
        super().__init__("Schedule", schedule_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(CampusOpsError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ProjectNotApprovedError(CampusOpsError):
    """Requests can only be raised against an ongoing project"""

    status_code = 400

    def __init__(self, project_id: str, project_status: Optional[str] = None):
        super().__init__(
            "You can only request components for approved projects",
            code="PROJECT_NOT_APPROVED",
            details={"project_id": project_id, "project_status": project_status}
        )


class InsufficientStockError(CampusOpsError):
    """Requested quantity exceeds what is available"""

    status_code = 400

    def __init__(self, item_id: str, requested: int, available: int):
        super().__init__(
            f"Requested quantity exceeds available quantity. Requested: {requested}, Available: {available}",
            code="INSUFFICIENT_STOCK",
            details={"item_id": item_id, "requested": requested, "available": available}
        )


# ============================================
# State Errors (409-type)
# ============================================

# Wording for the refusal message, keyed by lifecycle action
TRANSITION_PHRASES = {
    "approve": "approve",
    "reject": "reject",
    "collect": "hand out",
    "confirm_return": "confirm the return of",
    "verify_return": "verify the return of",
    "reopen": "reopen",
}


class InvalidTransitionError(CampusOpsError):
    """Request is not in a state that allows the transition"""

    status_code = 409

    def __init__(self, request_id: str, current_status: str, action: str):
        phrase = TRANSITION_PHRASES.get(action, action.replace("_", " "))
        super().__init__(
            f"Cannot {phrase} a request that is {current_status}",
            code="INVALID_TRANSITION",
            details={"request_id": request_id, "current_status": current_status, "action": action}
        )


class ScheduleConflictError(CampusOpsError):
    """Room or faculty member already booked for an overlapping slot"""

    status_code = 409

    def __init__(self, resource: str, conflicting_id: str, message: str):
        super().__init__(
            message,
            code="SCHEDULE_CONFLICT",
            details={"resource": resource, "conflicting_schedule_id": conflicting_id}
        )


class OverReleaseError(CampusOpsError):
    """Releasing stock would push available above total"""

    status_code = 409

    def __init__(self, item_id: str, quantity: int, available: int, total: int):
        super().__init__(
            f"Releasing {quantity} would exceed total quantity ({available}/{total} available)",
            code="OVER_RELEASE",
            details={"item_id": item_id, "quantity": quantity, "available": available, "total": total}
        )


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: CampusOpsError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "error": error.to_dict()
    }
