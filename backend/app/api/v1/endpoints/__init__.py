# API endpoints
from . import auth, class_schedules, component_requests, courses, faculty, health, inventory, projects

__all__ = ["auth", "class_schedules", "component_requests", "courses", "faculty", "health", "inventory", "projects"]
