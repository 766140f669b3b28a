from app.services.inventory_store import InventoryStore
from app.services.project_gate import ProjectGate
from app.services.audit_trail import AuditTrail
from app.services.request_lifecycle import RequestLifecycleService
from app.services.faculty_service import FacultyService
from app.services.course_service import CourseService
from app.services.class_schedule_service import ClassScheduleService

__all__ = [
    # Stock and lifecycle
    "InventoryStore",
    "ProjectGate",
    "RequestLifecycleService",
    # Supporting services
    "AuditTrail",
    "FacultyService",
    # Teaching timetable
    "CourseService",
    "ClassScheduleService",
]
