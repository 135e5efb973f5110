"""
Student request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class StudentResponse(BaseModel):
    """Student information response (excludes credentials)."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Student ID")
    first_name: str
    last_name: str
    email: EmailStr
    created_at: datetime = Field(..., description="Account creation date")
    updated_at: datetime


class StudentUpdate(BaseModel):
    """Student update request. Omitted fields are left unchanged."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = Field(None, description="New email address")


class StudentList(BaseModel):
    """Paginated list of students."""
    students: list[StudentResponse]
    total: int = Field(..., description="Total number of students")
    limit: int
    offset: int
