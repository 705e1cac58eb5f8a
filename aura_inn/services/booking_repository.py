"""Booking persistence: the repository interface and its two backends.

``SqlBookingRepository`` keeps bookings in the application database; each
mutating call commits its own transaction, so concurrent writers that touch
different bookings never overwrite each other.

``JsonBookingRepository`` keeps the legacy layout: one ``bookings.json``
array, read and rewritten whole on every mutation. An ``asyncio.Lock`` shared
through the owning store serialises read-modify-write cycles inside one
process. Separate processes writing the same file are not isolated from each
other; the last writer wins.

Callers never construct repositories directly. They open one from a
``BookingStore``::

    async with store.open() as bookings:
        booking = await bookings.get(booking_id)
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from aura_inn.models.booking import Booking
from aura_inn.schemas.booking import BookingRecord

logger = logging.getLogger(__name__)

_CREATE_ATTEMPTS = 3


class BookingPersistenceError(Exception):
    """Raised when the booking store cannot be read or written."""


class BookingRepository(Protocol):
    """Operations every booking backend provides."""

    async def create(self, booking: Booking) -> Booking: ...

    async def get(self, booking_id: int) -> Booking | None: ...

    async def update_status(self, booking_id: int, status: str) -> Booking | None: ...

    async def list_all(self, status: str | None = None) -> list[Booking]: ...

    async def clear_all(self) -> int: ...

    async def mark_pre_arrival_sent(self, booking_id: int) -> None: ...

    async def record_notification(self, booking_id: int, kind: str, ok: bool) -> None: ...


class BookingStore(Protocol):
    """Opens repositories bound to one unit of work."""

    def open(self) -> AbstractAsyncContextManager[BookingRepository]: ...


def next_booking_id(last_id: int | None, now: datetime | None = None) -> int:
    """Millisecond timestamp id, bumped past ``last_id`` on collision."""
    now = now or datetime.now(timezone.utc)
    candidate = int(now.timestamp() * 1000)
    if last_id is not None and candidate <= last_id:
        candidate = last_id + 1
    return candidate


# ---------------------------------------------------------------------------
# SQL backend
# ---------------------------------------------------------------------------


class SqlBookingRepository:
    """Booking repository backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Failed to persist booking changes")
            raise BookingPersistenceError("Could not save booking changes") from exc

    async def create(self, booking: Booking) -> Booking:
        if booking.created_at is None:
            booking.created_at = datetime.now(timezone.utc)

        for attempt in range(1, _CREATE_ATTEMPTS + 1):
            last_id = (await self.session.execute(select(func.max(Booking.id)))).scalar_one_or_none()
            booking.id = next_booking_id(last_id)
            self.session.add(booking)
            try:
                await self.session.commit()
            except IntegrityError:
                # Another writer took the same millisecond id.
                await self.session.rollback()
                logger.warning("Booking id %s already taken (attempt %d)", booking.id, attempt)
                continue
            except SQLAlchemyError as exc:
                await self.session.rollback()
                logger.exception("Failed to store new booking")
                raise BookingPersistenceError("Could not save booking") from exc
            return booking

        raise BookingPersistenceError("Could not allocate a booking id")

    async def get(self, booking_id: int) -> Booking | None:
        return await self.session.get(Booking, booking_id)

    async def update_status(self, booking_id: int, status: str) -> Booking | None:
        booking = await self.get(booking_id)
        if booking is None:
            return None
        booking.status = status
        await self._commit()
        return booking

    async def list_all(self, status: str | None = None) -> list[Booking]:
        query = select(Booking).order_by(Booking.id.desc())
        if status is not None:
            query = query.where(Booking.status == status)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def clear_all(self) -> int:
        result = await self.session.execute(delete(Booking))
        await self._commit()
        return result.rowcount or 0

    async def mark_pre_arrival_sent(self, booking_id: int) -> None:
        booking = await self.get(booking_id)
        if booking is None:
            return
        booking.pre_arrival_email_sent = True
        await self._commit()

    async def record_notification(self, booking_id: int, kind: str, ok: bool) -> None:
        booking = await self.get(booking_id)
        if booking is None:
            return
        booking.last_notification_kind = kind
        booking.last_notification_ok = ok
        booking.last_notification_at = datetime.now(timezone.utc)
        await self._commit()


class SqlBookingStore:
    """Opens one session-backed repository per unit of work."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    @asynccontextmanager
    async def open(self) -> AsyncIterator[SqlBookingRepository]:
        async with self.session_factory() as session:
            yield SqlBookingRepository(session)


# ---------------------------------------------------------------------------
# Flat-file backend
# ---------------------------------------------------------------------------


def booking_to_document(booking: Booking) -> dict:
    """Serialise a booking to its camelCase JSON document form."""
    return BookingRecord.model_validate(booking).model_dump(mode="json", by_alias=True)


def booking_from_document(document: dict) -> Booking:
    """Build a (session-less) booking from a camelCase JSON document."""
    record = BookingRecord.model_validate(document)
    return Booking(**record.model_dump())


class JsonBookingRepository:
    """Booking repository over a single JSON array file."""

    def __init__(self, path: Path, lock: asyncio.Lock) -> None:
        self.path = path
        self._lock = lock

    def _read_sync(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Error reading %s: %s", self.path, exc)
            raise BookingPersistenceError(f"Could not read {self.path.name}") from exc
        if not isinstance(data, list):
            raise BookingPersistenceError(f"{self.path.name} does not contain a list")
        return data

    def _write_sync(self, documents: list[dict]) -> None:
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(documents, indent=4), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.error("Error writing %s: %s", self.path, exc)
            raise BookingPersistenceError(f"Could not write {self.path.name}") from exc

    async def _read(self) -> list[dict]:
        return await asyncio.to_thread(self._read_sync)

    async def _write(self, documents: list[dict]) -> None:
        await asyncio.to_thread(self._write_sync, documents)

    async def _mutate(self, booking_id: int, change: Callable[[dict], None]) -> Booking | None:
        async with self._lock:
            documents = await self._read()
            for document in documents:
                if _document_id(document) == booking_id:
                    change(document)
                    await self._write(documents)
                    return booking_from_document(document)
        return None

    async def create(self, booking: Booking) -> Booking:
        if booking.created_at is None:
            booking.created_at = datetime.now(timezone.utc)
        async with self._lock:
            documents = await self._read()
            ids = [i for i in map(_document_id, documents) if i is not None]
            last_id = max(ids, default=None)
            booking.id = next_booking_id(last_id)
            documents.append(booking_to_document(booking))
            await self._write(documents)
        return booking

    async def get(self, booking_id: int) -> Booking | None:
        for document in await self._read():
            if _document_id(document) == booking_id:
                return booking_from_document(document)
        return None

    async def update_status(self, booking_id: int, status: str) -> Booking | None:
        return await self._mutate(booking_id, lambda d: d.update(status=status))

    async def list_all(self, status: str | None = None) -> list[Booking]:
        bookings = [booking_from_document(d) for d in reversed(await self._read())]
        if status is not None:
            bookings = [b for b in bookings if b.status == status]
        return bookings

    async def clear_all(self) -> int:
        async with self._lock:
            count = len(await self._read())
            await self._write([])
        return count

    async def mark_pre_arrival_sent(self, booking_id: int) -> None:
        await self._mutate(booking_id, lambda d: d.update(preArrivalEmailSent=True))

    async def record_notification(self, booking_id: int, kind: str, ok: bool) -> None:
        at = datetime.now(timezone.utc).isoformat()
        await self._mutate(
            booking_id,
            lambda d: d.update(lastNotificationKind=kind, lastNotificationOk=ok, lastNotificationAt=at),
        )


def _document_id(document: dict) -> int | None:
    try:
        return int(document.get("id"))
    except (TypeError, ValueError):
        return None


class JsonBookingStore:
    """Flat-file store; all repositories share one file lock."""

    def __init__(self, data_dir: Path) -> None:
        self.path = Path(data_dir) / "bookings.json"
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def open(self) -> AsyncIterator[JsonBookingRepository]:
        yield JsonBookingRepository(self.path, self._lock)


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


def build_booking_store(backend: str, data_dir: Path, session_factory=None) -> BookingStore:
    """Create the store for the configured backend."""
    if backend == "json":
        return JsonBookingStore(data_dir)
    if session_factory is None:
        from aura_inn.database import async_session_factory

        session_factory = async_session_factory
    return SqlBookingStore(session_factory)


@lru_cache
def get_booking_store() -> BookingStore:
    """Process-wide booking store (FastAPI dependency)."""
    from aura_inn.config import settings

    return build_booking_store(settings.booking_store, settings.data_dir)
