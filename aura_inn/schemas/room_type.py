"""Pydantic v2 schemas for room type endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class RoomTypeResponse(BaseModel):
    """A room type as stored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    name: str
    price: int
    description: str | None = None
    capacity: int | None = None
    image_url: str | None = None
    assigned_rooms: list[str] = Field(default_factory=list)

    @field_validator("assigned_rooms", mode="before")
    @classmethod
    def _room_numbers_as_text(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(room) for room in value]
        return value


class RoomTypeAvailability(RoomTypeResponse):
    """Room type with availability derived from the floor plan."""

    available: bool
    available_count: int
    total_count: int
