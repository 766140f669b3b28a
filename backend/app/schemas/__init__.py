# Pydantic schemas
from app.schemas.auth import UserLogin, UserResponse, LoginResponse
from app.schemas.faculty import FacultyCreate, FacultyResponse, FacultyListResponse
from app.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemUpdate,
    InventoryItemResponse,
    InventoryItemListResponse,
)
from app.schemas.project import ProjectCreate, ProjectStatusUpdate, ProjectResponse, ProjectListResponse
from app.schemas.resource_request import (
    ResourceRequestCreate,
    ResourceRequestStatusUpdate,
    ResourceRequestResponse,
    ResourceRequestListResponse,
    AuditEntryResponse,
)
from app.schemas.course import (
    CourseCreate,
    CourseUpdate,
    EnrollmentCreate,
    CourseResponse,
    CourseListResponse,
)
from app.schemas.class_schedule import ClassScheduleCreate, ClassScheduleResponse, ClassScheduleListResponse
