from fastapi import APIRouter
from app.api.v1.endpoints import auth, class_schedules, component_requests, courses, faculty, health, projects
from app.api.v1.endpoints.inventory import lab_components_router, library_items_router

api_router = APIRouter()

# Probes (/health/live, /health/ready)
api_router.include_router(health.router)

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(component_requests.router)
api_router.include_router(lab_components_router)
api_router.include_router(library_items_router)
api_router.include_router(projects.router)
api_router.include_router(faculty.router)

# Teaching timetable
api_router.include_router(courses.router)
api_router.include_router(class_schedules.router)
