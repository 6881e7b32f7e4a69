import asyncio
from datetime import datetime, timezone
from typing import List

from pydantic import TypeAdapter, ValidationError as ModelValidationError

from spa_booking.core.errors import NotFoundError, PersistenceError, ValidationError
from spa_booking.core.logger import logger
from spa_booking.models.testimonial_models import Testimonial, TestimonialRequest
from spa_booking.services.booking_service import is_blank
from spa_booking.services.scheduling import to_canonical
from spa_booking.services.storage_service import IdGenerator, JsonFileRepository

MIN_RATING = 1
MAX_RATING = 5
DEFAULT_TITLE = "No Title"

_testimonial_list = TypeAdapter(List[Testimonial])


class TestimonialStore:
    __test__ = False

    def __init__(self, repository: JsonFileRepository):
        self._repository = repository
        self._lock = asyncio.Lock()
        self._testimonials: List[Testimonial] = self._load()
        self._ids = IdGenerator(max((t.id for t in self._testimonials), default=0))

    def _load(self) -> List[Testimonial]:
        records = self._repository.load()
        try:
            return _testimonial_list.validate_python(records)
        except ModelValidationError as e:
            logger.warning(f"⚠️ Testimonial file {self._repository.path} is corrupt ({e.error_count()} errors), starting empty.")
            return []

    async def create(self, request: TestimonialRequest) -> Testimonial:
        required = (request.reviewer_name, request.reviewer_email, request.review_text,
                    request.rating, request.genuine_opinion)
        if any(is_blank(value) for value in required):
            raise ValidationError("Reviewer name, email, review text, rating, and genuine opinion are required.")

        if not MIN_RATING <= request.rating <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}.")

        title = request.review_title if request.review_title and request.review_title.strip() else DEFAULT_TITLE

        async with self._lock:
            testimonial = Testimonial(
                id=self._ids.next_id(),
                reviewer_name=request.reviewer_name,
                reviewer_email=request.reviewer_email,
                review_title=title,
                review_text=request.review_text,
                rating=request.rating,
                genuine_opinion=request.genuine_opinion,
                created_at=to_canonical(datetime.now(timezone.utc)),
            )
            self._testimonials.append(testimonial)
            try:
                await self._persist()
            except PersistenceError:
                self._testimonials.pop()
                raise

        logger.info(f"⭐ Testimonial {testimonial.id} added ({testimonial.rating}/5)")
        return testimonial

    async def list(self) -> List[Testimonial]:
        """Newest first."""
        async with self._lock:
            return sorted(self._testimonials, key=lambda t: (t.created_at, t.id), reverse=True)

    async def delete(self, testimonial_id: int) -> Testimonial:
        async with self._lock:
            for index, testimonial in enumerate(self._testimonials):
                if testimonial.id == testimonial_id:
                    break
            else:
                raise NotFoundError(f"Testimonial with ID {testimonial_id} not found.")

            removed = self._testimonials.pop(index)
            try:
                await self._persist()
            except PersistenceError:
                self._testimonials.insert(index, removed)
                raise

        logger.info(f"🗑️ Testimonial {testimonial_id} deleted")
        return removed

    async def _persist(self):
        snapshot = [t.model_dump() for t in self._testimonials]
        await asyncio.to_thread(self._repository.save, snapshot)
