"""
Unit Tests for the exception hierarchy
"""
import pytest

from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CampusOpsError,
    CourseNotFoundError,
    FacultyNotFoundError,
    InsufficientStockError,
    InvalidTransitionError,
    ItemNotFoundError,
    OverReleaseError,
    ProjectNotApprovedError,
    ProjectNotFoundError,
    RequestNotFoundError,
    ScheduleConflictError,
    ScheduleNotFoundError,
    ValidationError,
    error_response,
)


class TestErrorCodes:
    """Each error maps to one code and HTTP status"""

    @pytest.mark.parametrize(
        "error,code,status",
        [
            (ValidationError("bad", field="quantity"), "VALIDATION_ERROR", 400),
            (ProjectNotApprovedError("p1", "PENDING"), "PROJECT_NOT_APPROVED", 400),
            (InsufficientStockError("i1", 3, 1), "INSUFFICIENT_STOCK", 400),
            (ItemNotFoundError("i1"), "ITEM_NOT_FOUND", 404),
            (RequestNotFoundError("r1"), "REQUEST_NOT_FOUND", 404),
            (ProjectNotFoundError("p1"), "PROJECT_NOT_FOUND", 404),
            (FacultyNotFoundError("f1"), "FACULTY_NOT_FOUND", 404),
            (CourseNotFoundError("c1"), "COURSE_NOT_FOUND", 404),
            (ScheduleNotFoundError("s1"), "SCHEDULE_NOT_FOUND", 404),
            (InvalidTransitionError("r1", "APPROVED", "approve"), "INVALID_TRANSITION", 409),
            (OverReleaseError("i1", 2, 4, 5), "OVER_RELEASE", 409),
            (ScheduleConflictError("room", "s1", "Room 101 is booked"), "SCHEDULE_CONFLICT", 409),
            (AuthenticationError(), "AUTH_FAILED", 401),
            (AuthorizationError(), "NOT_AUTHORIZED", 403),
        ],
    )
    def test_code_and_status(self, error, code, status):
        assert isinstance(error, CampusOpsError)
        assert error.code == code
        assert error.status_code == status

    def test_error_response_shape(self):
        body = error_response(InsufficientStockError("i1", 3, 1))

        assert body["success"] is False
        assert body["error"]["code"] == "INSUFFICIENT_STOCK"
        assert body["error"]["details"] == {"item_id": "i1", "requested": 3, "available": 1}
        assert "Requested: 3" in body["error"]["message"]

    def test_validation_error_without_field(self):
        assert ValidationError("bad").details == {}

    @pytest.mark.parametrize(
        "action,status,message",
        [
            ("approve", "APPROVED", "Cannot approve a request that is APPROVED"),
            ("collect", "PENDING", "Cannot hand out a request that is PENDING"),
            ("confirm_return", "PENDING", "Cannot confirm the return of a request that is PENDING"),
            ("verify_return", "COLLECTED", "Cannot verify the return of a request that is COLLECTED"),
        ],
    )
    def test_transition_message(self, action, status, message):
        error = InvalidTransitionError("r1", status, action)
        assert str(error) == message
        assert error.details["action"] == action
