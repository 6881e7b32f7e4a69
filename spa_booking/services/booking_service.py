import asyncio
from datetime import datetime, timezone, tzinfo
from typing import Callable, List, Optional, Set

from pydantic import TypeAdapter, ValidationError as ModelValidationError

from spa_booking.core.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from spa_booking.core.logger import logger
from spa_booking.models.booking_models import Booking, BookingRequest
from spa_booking.services.notification_service import TelegramNotifier
from spa_booking.services.scheduling import (
    has_conflict,
    is_usable_duration,
    parse_duration_minutes,
    parse_start_instant,
    to_canonical,
    window_of,
)
from spa_booking.services.storage_service import IdGenerator, JsonFileRepository

# (attribute, JSON name)
REQUIRED_FIELDS = [
    ("service", "service"),
    ("duration", "duration"),
    ("price", "price"),
    ("gender", "gender"),
    ("phone", "phone"),
    ("start_time", "datetime"),
]

_booking_list = TypeAdapter(List[Booking])


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class BookingStore:
    """
    Owns the booking collection.

    Mutations hold an asyncio.Lock across "check conflict, append, persist" so two
    overlapping requests can never both be admitted. The snapshot is written before
    a mutation is acknowledged; if the write fails the mutation is undone.
    Telegram alerts go out after the lock is released and never affect the result.
    """

    def __init__(self, repository: JsonFileRepository, notifier: TelegramNotifier, tz: tzinfo):
        self._repository = repository
        self._notifier = notifier
        self._tz = tz
        self._lock = asyncio.Lock()
        self._pending: Set[asyncio.Task] = set()
        self._bookings: List[Booking] = self._load()
        self._ids = IdGenerator(max((b.id for b in self._bookings), default=0))

    def _load(self) -> List[Booking]:
        records = self._repository.load()
        try:
            bookings = _booking_list.validate_python(records)
        except ModelValidationError as e:
            logger.warning(f"⚠️ Booking file {self._repository.path} is corrupt ({e.error_count()} errors), starting empty.")
            return []

        usable = []
        for booking in bookings:
            try:
                parse_start_instant(booking.start_time, self._tz)
            except ValidationError:
                logger.warning(f"⚠️ Skipping booking {booking.id}: unreadable datetime {booking.start_time!r}")
                continue
            if not is_usable_duration(parse_duration_minutes(booking.duration)):
                logger.warning(f"⚠️ Skipping booking {booking.id}: unusable duration {booking.duration!r}")
                continue
            usable.append(booking)

        logger.info(f"📅 {len(usable)} bookings loaded")
        return usable

    async def create(self, request: BookingRequest) -> Booking:
        missing = [name for attr, name in REQUIRED_FIELDS if is_blank(getattr(request, attr))]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}.")

        minutes = parse_duration_minutes(request.duration)
        if not is_usable_duration(minutes):
            raise ValidationError(f"Cannot determine duration in minutes from: {request.duration}")

        start = parse_start_instant(request.start_time, self._tz)
        candidate = window_of(start, request.duration)

        async with self._lock:
            if has_conflict(self._windows(), candidate):
                logger.info(f"⛔ Conflict detected at {to_canonical(start)} ({minutes} min)")
                raise ConflictError("This time slot is already booked. Please select a different time.")

            booking = Booking(
                id=self._ids.next_id(),
                service=request.service,
                requested_therapist=request.requested_therapist,
                duration=request.duration,
                price=request.price,
                gender=request.gender,
                phone=request.phone,
                start_time=to_canonical(start),
                aroma_oil=request.aroma_oil,
                pressure=request.pressure,
                focus_area=request.focus_area,
                avoid_area=request.avoid_area,
                booked_on=to_canonical(datetime.now(timezone.utc)),
            )

            self._bookings.append(booking)
            try:
                await self._persist()
            except PersistenceError:
                self._bookings.pop()
                logger.error(f"❌ Booking {booking.id} rolled back, snapshot write failed")
                raise

        logger.info(f"✅ Booking {booking.id} created: {booking.service} at {booking.start_time}")
        self._dispatch(self._notifier.send_booking_alert, booking)
        return booking

    async def list(self) -> List[Booking]:
        async with self._lock:
            return list(self._bookings)

    async def get(self, booking_id: int) -> Booking:
        async with self._lock:
            index = self._index_of(booking_id)
            if index is None:
                raise NotFoundError("Booking not found.")
            return self._bookings[index]

    async def cancel(self, booking_id: int) -> Booking:
        async with self._lock:
            index = self._index_of(booking_id)
            if index is None:
                raise NotFoundError("Booking not found.")

            removed = self._bookings.pop(index)
            try:
                await self._persist()
            except PersistenceError:
                self._bookings.insert(index, removed)
                logger.error(f"❌ Cancellation of booking {booking_id} rolled back, snapshot write failed")
                raise

        logger.info(f"🗑️ Booking {booking_id} cancelled")
        self._dispatch(self._notifier.send_cancellation_alert, removed)
        return removed

    async def drain(self):
        """Waits for alerts that are still being delivered."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _windows(self):
        for booking in self._bookings:
            yield window_of(parse_start_instant(booking.start_time, self._tz), booking.duration)

    def _index_of(self, booking_id: int) -> Optional[int]:
        for index, booking in enumerate(self._bookings):
            if booking.id == booking_id:
                return index
        return None

    async def _persist(self):
        snapshot = [b.model_dump(by_alias=True) for b in self._bookings]
        await asyncio.to_thread(self._repository.save, snapshot)

    def _dispatch(self, send: Callable[[Booking], bool], booking: Booking):
        task = asyncio.create_task(asyncio.to_thread(send, booking))
        self._pending.add(task)
        task.add_done_callback(self._on_notification_done)

    def _on_notification_done(self, task: asyncio.Task):
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error(f"❌ Notification dispatch failed: {exc}")
