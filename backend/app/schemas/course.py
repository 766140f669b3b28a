from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime


SECTION_PATTERN = r"^[A-Za-z0-9]{1,10}$"


def _normalise_code(v):
    if v is None:
        return v
    v = v.strip().upper()
    if not v:
        raise ValueError("course code is required")
    return v


def _unique_unit_numbers(units):
    if units is None:
        return units
    numbers = [unit.unit_number for unit in units]
    if len(numbers) != len(set(numbers)):
        raise ValueError("unit numbers must be unique")
    return units


class CourseUnitSchema(BaseModel):
    unit_number: int = Field(..., ge=1)
    unit_name: str = Field(..., min_length=1, max_length=255)
    unit_description: str = Field(..., min_length=1)
    assignment_count: int = Field(0, ge=0)
    hours_per_unit: int = Field(1, ge=1)


class CourseCreate(BaseModel):
    """Body of POST /courses; names follow the admin form"""
    course_code: str = Field(..., min_length=1, max_length=50)
    course_name: str = Field(..., min_length=1, max_length=255)
    course_description: str = Field(..., min_length=1)
    course_start_date: date
    course_end_date: date
    course_units: List[CourseUnitSchema] = Field(..., min_length=1)

    @field_validator("course_code")
    @classmethod
    def normalise_code(cls, v: str) -> str:
        return _normalise_code(v)

    @field_validator("course_units")
    @classmethod
    def check_units(cls, v):
        return _unique_unit_numbers(v)


class CourseUpdate(BaseModel):
    """PATCH body; course_units, when present, replaces the whole syllabus"""
    course_code: Optional[str] = Field(None, min_length=1, max_length=50)
    course_name: Optional[str] = Field(None, min_length=1, max_length=255)
    course_description: Optional[str] = Field(None, min_length=1)
    course_start_date: Optional[date] = None
    course_end_date: Optional[date] = None
    course_units: Optional[List[CourseUnitSchema]] = Field(None, min_length=1)

    @field_validator("*")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("course_code")
    @classmethod
    def normalise_code(cls, v: Optional[str]) -> Optional[str]:
        return _normalise_code(v)

    @field_validator("course_units")
    @classmethod
    def check_units(cls, v):
        return _unique_unit_numbers(v)


class EnrollmentCreate(BaseModel):
    student_id: str
    section: str = Field(..., pattern=SECTION_PATTERN)

    @field_validator("section")
    @classmethod
    def upper_section(cls, v: str) -> str:
        return v.upper()


class CourseUnitResponse(CourseUnitSchema):
    id: str


class EnrollmentResponse(BaseModel):
    student_id: str
    section: str
    enrolled_at: datetime


class CourseCreator(BaseModel):
    id: str
    name: Optional[str] = None
    email: str


class CourseResponse(BaseModel):
    id: str
    course_code: str
    course_name: str
    course_description: str
    course_start_date: date
    course_end_date: date
    course_units: List[CourseUnitResponse] = []
    course_enrollments: List[EnrollmentResponse] = []
    created_by: Optional[str] = None
    creator: Optional[CourseCreator] = None
    modified_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class CourseListResponse(BaseModel):
    courses: List[CourseResponse]
    total: int
