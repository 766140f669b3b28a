from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime, time

from app.models.class_schedule import Weekday
from app.schemas.course import SECTION_PATTERN


class ClassScheduleCreate(BaseModel):
    """Body of POST /class-schedules and PUT /class-schedules/{id}"""
    course_id: str
    faculty_id: str
    room: str = Field(..., min_length=1, max_length=100)
    day_of_week: Weekday
    start_time: time
    end_time: time
    section: str = Field(..., pattern=SECTION_PATTERN)

    @field_validator("day_of_week", mode="before")
    @classmethod
    def capitalise_day(cls, v):
        # "monday" and "MONDAY" are accepted
        return v.strip().capitalize() if isinstance(v, str) else v

    @field_validator("room")
    @classmethod
    def strip_room(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("room is required")
        return v

    @field_validator("section")
    @classmethod
    def upper_section(cls, v: str) -> str:
        return v.upper()


class ScheduleCourse(BaseModel):
    id: str
    course_code: str
    course_name: str


class ScheduleFaculty(BaseModel):
    id: str
    faculty_id: str
    name: Optional[str] = None
    email: str
    department: str


class ClassScheduleResponse(BaseModel):
    id: str
    course_id: str
    course: ScheduleCourse
    faculty_id: str
    faculty: ScheduleFaculty
    room: str
    day_of_week: Weekday
    start_time: time
    end_time: time
    section: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class ClassScheduleListResponse(BaseModel):
    schedules: List[ClassScheduleResponse]
    total: int
