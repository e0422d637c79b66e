"""
Directory module.

Courses, reviews and enquiries owned by institutes, and search over
approved institutes.

Public API:
- IDirectoryService: Interface for directory operations
- DirectoryService: Implementation
- DirectoryRepository: Course, review and enquiry collections
"""

from .interfaces import IDirectoryService
from .models import Course, CourseCreate, Enquiry, Review, ReviewSummary
from .exceptions import (
    DirectoryValidationError,
    InstituteNotApprovedError,
    InstituteNotFoundError,
    PermissionRequiredError,
    UserNotApprovedError,
    UserNotFoundError,
)
from .repository import DirectoryRepository
from .service import DirectoryService

__all__ = [
    # Interface
    "IDirectoryService",
    # Models
    "Course",
    "CourseCreate",
    "Enquiry",
    "Review",
    "ReviewSummary",
    # Exceptions
    "DirectoryValidationError",
    "InstituteNotApprovedError",
    "InstituteNotFoundError",
    "PermissionRequiredError",
    "UserNotApprovedError",
    "UserNotFoundError",
    # Repository / Service
    "DirectoryRepository",
    "DirectoryService",
]
