"""Import a legacy ``data/`` directory of JSON files into the database.

Reads ``bookings.json``, ``roomTypes.json``, ``floors.json``, ``reviews.json``,
``generalData.json``, ``homeData.json`` and ``aboutData.json``. Missing files
are skipped. Bookings keep their original ids; ones already present are left
as they are, so the import can be re-run safely.

    python -m scripts.import_legacy_data path/to/data
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Add project root to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import ValidationError
from sqlalchemy import select

from aura_inn.config import settings
from aura_inn.database import Base, async_session_factory, engine
from aura_inn.models.booking import Booking
from aura_inn.models.room_type import RoomType
from aura_inn.services.booking_repository import booking_from_document
from aura_inn.services.site_content import put_document

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("import_legacy_data")

DOCUMENT_FILES = {
    "floors": "floors.json",
    "reviews": "reviews.json",
    "generalData": "generalData.json",
    "homeData": "homeData.json",
    "aboutData": "aboutData.json",
}


def _load(path: Path) -> Any:
    if not path.exists():
        logger.info("Skipping %s (not found)", path.name)
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def _with_created_at(document: dict) -> dict:
    """Older records have no createdAt; their id is the creation time in ms."""
    if document.get("createdAt") or document.get("id") is None:
        return document
    created = datetime.fromtimestamp(int(document["id"]) / 1000, tz=timezone.utc)
    return {**document, "createdAt": created.isoformat()}


def _room_type_from_document(document: dict) -> RoomType:
    return RoomType(
        name=document["name"],
        price=int(document.get("price") or 0),
        description=document.get("description"),
        capacity=document.get("capacity"),
        image_url=document.get("image") or document.get("imageUrl"),
        assigned_rooms=[str(room) for room in document.get("assignedRooms") or []],
    )


def parse_booking(document: dict) -> Booking | None:
    """Build a booking from a legacy record, or None when it is malformed."""
    try:
        return booking_from_document(_with_created_at(document))
    except ValidationError as exc:
        logger.warning("Skipping malformed booking %s: %s", document.get("id"), exc.errors()[:1])
    except ValueError as exc:
        logger.warning("Skipping malformed booking %s: %s", document.get("id"), exc)
    return None


async def import_data(data_dir: Path) -> dict[str, int]:
    counts = {"bookings": 0, "bookings_skipped": 0, "room_types": 0, "documents": 0}
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as session:
        room_types = _load(data_dir / "roomTypes.json") or []
        for document in room_types:
            existing = (
                await session.execute(select(RoomType).where(RoomType.name == document["name"]))
            ).scalar_one_or_none()
            if existing is not None:
                await session.delete(existing)
                await session.flush()
            session.add(_room_type_from_document(document))
            counts["room_types"] += 1

        for key, filename in DOCUMENT_FILES.items():
            data = _load(data_dir / filename)
            if data is None:
                continue
            await put_document(session, key, data)
            counts["documents"] += 1

        for document in _load(data_dir / "bookings.json") or []:
            booking = parse_booking(document)
            if booking is None:
                counts["bookings_skipped"] += 1
                continue
            if await session.get(Booking, booking.id) is not None:
                counts["bookings_skipped"] += 1
                continue
            session.add(booking)
            counts["bookings"] += 1

        await session.commit()

    await engine.dispose()
    return counts


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("data_dir", type=Path, help="directory holding the legacy JSON files")
    args = parser.parse_args()

    if not args.data_dir.is_dir():
        parser.error(f"{args.data_dir} is not a directory")

    counts = asyncio.run(import_data(args.data_dir))
    logger.info(
        "Imported %d bookings (%d skipped), %d room types, %d documents",
        counts["bookings"],
        counts["bookings_skipped"],
        counts["room_types"],
        counts["documents"],
    )


if __name__ == "__main__":
    main()
