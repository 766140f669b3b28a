# Re-export all models for convenient imports
from app.models.user import User, UserRole, COORDINATOR_ROLES
from app.models.faculty import Faculty
from app.models.inventory import InventoryItem, ItemKind
from app.models.project import Project, ProjectStatus, project_components
from app.models.resource_request import ResourceRequest, RequestStatus
from app.models.audit_log import AuditLog
from app.models.course import Course, CourseUnit, Enrollment
from app.models.class_schedule import ClassSchedule, Weekday

__all__ = [
    # Users
    "User",
    "UserRole",
    "COORDINATOR_ROLES",
    "Faculty",
    # Inventory
    "InventoryItem",
    "ItemKind",
    # Projects
    "Project",
    "ProjectStatus",
    "project_components",
    # Requests
    "ResourceRequest",
    "RequestStatus",
    # Teaching
    "Course",
    "CourseUnit",
    "Enrollment",
    "ClassSchedule",
    "Weekday",
    # Admin
    "AuditLog",
]
