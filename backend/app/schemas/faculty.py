from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List


class FacultyCreate(BaseModel):
    """Body of POST /faculty; names follow the admin form"""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    phone: Optional[str] = Field(None, max_length=20)
    department: str = Field(..., min_length=1)
    office: str = Field(..., min_length=1)
    specialization: str = Field(..., min_length=1)
    faculty_id: str = Field(..., min_length=1, max_length=50)
    office_hours: str = Field(..., min_length=1)


class FacultyUser(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None


class FacultyResponse(BaseModel):
    id: str
    user_id: str
    faculty_id: str
    department: str
    office: str
    specialization: str
    office_hours: str
    profile_photo_url: str
    user: FacultyUser


class FacultyListResponse(BaseModel):
    faculty: List[FacultyResponse]
