"""Room type model — nightly price reference data used at booking time."""

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from aura_inn.database import Base


class RoomType(Base):
    """A sellable category of room (e.g. "Deluxe") with its nightly price."""

    __tablename__ = "room_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    capacity: Mapped[int | None] = mapped_column(Integer, default=None)
    image_url: Mapped[str | None] = mapped_column(String(512), default=None)
    assigned_rooms: Mapped[list] = mapped_column(JSON, default=list)

    def __repr__(self) -> str:
        return f"<RoomType(id={self.id}, name={self.name!r}, price={self.price})>"
