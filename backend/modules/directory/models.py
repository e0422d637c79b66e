"""
Directory module data models.

Courses, reviews and enquiries reference their institute by account ID.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from modules.accounts.models import utcnow


class CourseCreate(BaseModel):
    """Request to publish a course."""

    title: str = Field(..., description="Course title")
    description: str = ""
    duration: str = Field(default="", description="Free-form duration, e.g. '6 months'")
    fee: Optional[float] = Field(None, ge=0)


class Course(BaseModel):
    id: str
    institute_id: str
    title: str
    description: str = ""
    duration: str = ""
    fee: Optional[float] = None
    created_at: datetime = Field(default_factory=utcnow)


class Review(BaseModel):
    id: str
    institute_id: str
    user_id: str
    user_name: str = ""
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    created_at: datetime = Field(default_factory=utcnow)


class Enquiry(BaseModel):
    id: str
    institute_id: str
    user_id: str
    user_name: str = ""
    user_email: str = ""
    message: str
    status: str = "new"
    created_at: datetime = Field(default_factory=utcnow)


class ReviewSummary(BaseModel):
    """Reviews of one institute with their average rating."""

    institute_id: str
    reviews: list[Review] = Field(default_factory=list)
    average_rating: Optional[float] = Field(None, description="None when there are no reviews")

    @property
    def count(self) -> int:
        return len(self.reviews)
