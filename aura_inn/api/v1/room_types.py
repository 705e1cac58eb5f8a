"""Public room type listing with live availability."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aura_inn.api.deps import get_db
from aura_inn.schemas.room_type import RoomTypeAvailability, RoomTypeResponse
from aura_inn.services.site_content import get_document, list_room_types, room_availability

router = APIRouter(prefix="/api/v1/room-types", tags=["room-types"])


@router.get("", response_model=list[RoomTypeAvailability], summary="List room types")
async def get_room_types(db: AsyncSession = Depends(get_db)) -> list[RoomTypeAvailability]:
    """Every room type with how many of its rooms are currently Available."""
    floors = await get_document(db, "floors")
    return [
        RoomTypeAvailability(
            **RoomTypeResponse.model_validate(room_type).model_dump(),
            **room_availability(room_type, floors),
        )
        for room_type in await list_room_types(db)
    ]
