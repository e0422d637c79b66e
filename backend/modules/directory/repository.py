"""
Directory repository for record store access.

Each record type lives in its own collection and is filtered by
institute ID on read.
"""

from typing import TypeVar

from pydantic import BaseModel

from shared.repository import BaseRepository
from modules.store.models import CollectionKey

from .models import Course, Enquiry, Review

M = TypeVar("M", bound=BaseModel)


class DirectoryRepository(BaseRepository[BaseModel]):
    """Repository for courses, reviews and enquiries."""

    def list_courses(self, institute_id: str) -> list[Course]:
        return self._for_institute(CollectionKey.COURSES.value, Course, institute_id)

    def add_course(self, course: Course) -> Course:
        return self._append(CollectionKey.COURSES.value, Course, course)

    def list_reviews(self, institute_id: str) -> list[Review]:
        return self._for_institute(CollectionKey.REVIEWS.value, Review, institute_id)

    def add_review(self, review: Review) -> Review:
        return self._append(CollectionKey.REVIEWS.value, Review, review)

    def list_enquiries(self, institute_id: str) -> list[Enquiry]:
        return self._for_institute(CollectionKey.ENQUIRIES.value, Enquiry, institute_id)

    def add_enquiry(self, enquiry: Enquiry) -> Enquiry:
        return self._append(CollectionKey.ENQUIRIES.value, Enquiry, enquiry)

    def _for_institute(self, key: str, model: type[M], institute_id: str) -> list[M]:
        return [
            item for item in self._load_models(key, model)
            if item.institute_id == institute_id
        ]

    def _append(self, key: str, model: type[M], item: M) -> M:
        items, unreadable = self._load_collection(key, model)
        items.append(item)
        self._save_models(key, items, unreadable)
        return item
