"""Room types and site documents — reference data read during booking and export."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from aura_inn.models.booking import Booking
from aura_inn.models.room_type import RoomType
from aura_inn.models.site_document import LIST_DOCUMENTS, SiteDocument
from aura_inn.schemas.booking import BookingRecord
from aura_inn.schemas.room_type import RoomTypeResponse

logger = logging.getLogger(__name__)

# Shown when a room type has no rooms assigned on any floor.
DEFAULT_TOTAL_ROOMS = 5
DEFAULT_AVAILABLE_ROOMS = 3


async def get_room_type_by_name(db: AsyncSession, name: str | None) -> RoomType | None:
    if not name:
        return None
    result = await db.execute(select(RoomType).where(RoomType.name == name))
    return result.scalar_one_or_none()


async def list_room_types(db: AsyncSession) -> list[RoomType]:
    result = await db.execute(select(RoomType).order_by(RoomType.id))
    return list(result.scalars().all())


async def get_document(db: AsyncSession, key: str) -> Any:
    """Return a stored document, or an empty list/object when absent."""
    document = await db.get(SiteDocument, key)
    if document is None:
        return [] if key in LIST_DOCUMENTS else {}
    return document.data


async def put_document(db: AsyncSession, key: str, data: Any) -> None:
    """Replace a document wholesale."""
    document = await db.get(SiteDocument, key)
    if document is None:
        db.add(SiteDocument(key=key, data=data))
    else:
        document.data = data
    await db.flush()
    logger.info("Site document %s replaced", key)


async def get_admin_email(db: AsyncSession) -> str | None:
    """Owner address set from the dashboard (``generalData.adminEmail``)."""
    general = await get_document(db, "generalData")
    admin_email = general.get("adminEmail") if isinstance(general, dict) else None
    if isinstance(admin_email, str) and admin_email.strip():
        return admin_email.strip()
    return None


def _floor_rooms(floor: dict) -> list[str]:
    return [str(room) for room in floor.get("rooms") or []]


def _room_status(floor: dict, room: str) -> str:
    return (floor.get("roomStatuses") or {}).get(room, "Available")


def room_availability(room_type: RoomType, floors: list[dict]) -> dict[str, Any]:
    """Count a room type's rooms across floors and how many are Available."""
    assigned = {str(room) for room in room_type.assigned_rooms or []}
    total = available = 0
    for floor in floors:
        for room in _floor_rooms(floor):
            if room not in assigned:
                continue
            total += 1
            if _room_status(floor, room) == "Available":
                available += 1

    if total == 0:
        total, available = DEFAULT_TOTAL_ROOMS, DEFAULT_AVAILABLE_ROOMS

    return {"available": available > 0, "available_count": available, "total_count": total}


def occupancy_percent(floors: list[dict]) -> int:
    """Share of rooms marked Occupied across all floors, as a whole percentage."""
    total = occupied = 0
    for floor in floors:
        for room in _floor_rooms(floor):
            total += 1
            if _room_status(floor, room) == "Occupied":
                occupied += 1
    return round(occupied * 100 / total) if total else 0


async def build_export(db: AsyncSession, bookings: list[Booking]) -> dict[str, Any]:
    """Assemble the full backup document.

    Bookings are listed in insertion order, matching the stored collection.
    """
    room_types = await list_room_types(db)
    return {
        "bookings": [
            BookingRecord.model_validate(b).model_dump(mode="json", by_alias=True) for b in reversed(bookings)
        ],
        "reviews": await get_document(db, "reviews"),
        "roomTypes": [
            RoomTypeResponse.model_validate(rt).model_dump(mode="json", by_alias=True) for rt in room_types
        ],
        "floors": await get_document(db, "floors"),
        "generalData": await get_document(db, "generalData"),
        "homeData": await get_document(db, "homeData"),
        "aboutData": await get_document(db, "aboutData"),
    }
