"""
Directory service implementation.

Courses, reviews and enquiries around approved institutes. Who may write
what is decided from the stored account (status and permissions), not
from a cached session.
"""

import logging
import uuid
from typing import Optional

from shared.models import AccountStatus, Identity, Role
from modules.accounts.models import Account
from modules.accounts.repository import AccountRepository

from .exceptions import (
    DirectoryValidationError,
    InstituteNotApprovedError,
    InstituteNotFoundError,
    PermissionRequiredError,
    UserNotApprovedError,
    UserNotFoundError,
)
from .interfaces import IDirectoryService
from .models import Course, CourseCreate, Enquiry, Review, ReviewSummary
from .repository import DirectoryRepository

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("description", "category", "city")


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class DirectoryService(IDirectoryService):
    """Implementation of the institute directory."""

    def __init__(self, repository: DirectoryRepository, accounts: AccountRepository):
        self._repo = repository
        self._accounts = accounts

    # -------------------------------------------------------------------------
    # Courses
    # -------------------------------------------------------------------------

    def add_course(self, institute_id: str, course: CourseCreate) -> Course:
        if not course.title.strip():
            raise DirectoryValidationError("Course title is required", "title")

        with self._accounts.store.transaction():
            self._require_institute(institute_id, "manage_courses")
            created = self._repo.add_course(Course(
                id=_new_id("course"),
                institute_id=institute_id,
                **course.model_dump(),
            ))

        logger.info("Institute %s added course %s", institute_id, created.id)
        return created

    def list_courses(self, institute_id: str) -> list[Course]:
        return self._repo.list_courses(institute_id)

    # -------------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------------

    def add_review(
        self,
        user_id: str,
        institute_id: str,
        rating: int,
        comment: str = "",
    ) -> Review:
        if not 1 <= rating <= 5:
            raise DirectoryValidationError("Rating must be between 1 and 5", "rating")

        with self._accounts.store.transaction():
            user = self._require_user(user_id, "submit_reviews")
            self._require_institute(institute_id)
            review = self._repo.add_review(Review(
                id=_new_id("review"),
                institute_id=institute_id,
                user_id=user.id,
                user_name=user.name,
                rating=rating,
                comment=comment,
            ))

        logger.info("User %s reviewed institute %s", user_id, institute_id)
        return review

    def list_reviews(self, institute_id: str) -> ReviewSummary:
        reviews = self._repo.list_reviews(institute_id)
        average = None
        if reviews:
            average = round(sum(r.rating for r in reviews) / len(reviews), 1)
        return ReviewSummary(institute_id=institute_id, reviews=reviews, average_rating=average)

    # -------------------------------------------------------------------------
    # Enquiries
    # -------------------------------------------------------------------------

    def add_enquiry(self, user_id: str, institute_id: str, message: str) -> Enquiry:
        if not message.strip():
            raise DirectoryValidationError("Enquiry message is required", "message")

        with self._accounts.store.transaction():
            user = self._require_user(user_id, "submit_enquiries")
            self._require_institute(institute_id)
            enquiry = self._repo.add_enquiry(Enquiry(
                id=_new_id("enquiry"),
                institute_id=institute_id,
                user_id=user.id,
                user_name=user.name,
                user_email=user.email,
                message=message,
            ))

        logger.info("User %s sent enquiry %s to %s", user_id, enquiry.id, institute_id)
        return enquiry

    def list_enquiries(self, institute_id: str) -> list[Enquiry]:
        self._require_institute(institute_id, "view_enquiries")
        return self._repo.list_enquiries(institute_id)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search_institutes(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        city: Optional[str] = None,
    ) -> list[Identity]:
        """
        Find approved institutes.

        query matches name, description, category or city; category and
        city narrow the result further. All matching is case-insensitive
        substring matching.
        """
        results = []
        for account in self._accounts.list_all(role=Role.INSTITUTE, status=AccountStatus.APPROVED):
            fields = {f: str(account.profile.get(f) or "") for f in SEARCH_FIELDS}
            if query and not any(
                _contains(value, query) for value in (account.name, *fields.values())
            ):
                continue
            if category and not _contains(fields["category"], category):
                continue
            if city and not _contains(fields["city"], city):
                continue
            results.append(account.to_identity())
        return sorted(results, key=lambda i: i.name.casefold())

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def _require_institute(self, institute_id: str, permission: Optional[str] = None) -> Account:
        account = self._accounts.get(institute_id)
        if account is None or account.role != Role.INSTITUTE:
            raise InstituteNotFoundError(institute_id)
        if account.status != AccountStatus.APPROVED:
            raise InstituteNotApprovedError(institute_id)
        if permission and permission not in account.permissions:
            raise PermissionRequiredError(institute_id, permission)
        return account

    def _require_user(self, user_id: str, permission: str) -> Account:
        account = self._accounts.get(user_id)
        if account is None or account.role != Role.USER:
            raise UserNotFoundError(user_id)
        if account.status != AccountStatus.APPROVED:
            raise UserNotApprovedError(user_id)
        if permission not in account.permissions:
            raise PermissionRequiredError(user_id, permission)
        return account


def _contains(value: str, needle: str) -> bool:
    return needle.casefold() in value.casefold()
