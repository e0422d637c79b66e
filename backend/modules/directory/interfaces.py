"""
Directory module interface.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import Identity

from .models import Course, CourseCreate, Enquiry, Review, ReviewSummary


@runtime_checkable
class IDirectoryService(Protocol):
    """
    Interface for institute-owned records and institute search.

    Only approved accounts holding the matching permission may write.
    Failures are raised (NotFoundError, AuthorizationError,
    ValidationError subclasses).
    """

    def add_course(self, institute_id: str, course: CourseCreate) -> Course:
        """
        Publish a course for an institute.

        Raises:
            InstituteNotFoundError: If the institute does not exist
            InstituteNotApprovedError: If the institute is not approved
            PermissionRequiredError: If it lacks manage_courses
        """
        ...

    def list_courses(self, institute_id: str) -> list[Course]:
        ...

    def add_review(
        self,
        user_id: str,
        institute_id: str,
        rating: int,
        comment: str = "",
    ) -> Review:
        """Add a 1-5 rating from an approved user to an approved institute."""
        ...

    def list_reviews(self, institute_id: str) -> ReviewSummary:
        ...

    def add_enquiry(self, user_id: str, institute_id: str, message: str) -> Enquiry:
        """Send an enquiry; it starts in status "new"."""
        ...

    def list_enquiries(self, institute_id: str) -> list[Enquiry]:
        """Enquiries for an institute holding view_enquiries."""
        ...

    def search_institutes(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        city: Optional[str] = None,
    ) -> list[Identity]:
        ...
