"""SQLAlchemy models for the Aura Inn booking backend.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from aura_inn.models.booking import Booking
from aura_inn.models.room_type import RoomType
from aura_inn.models.site_document import SiteDocument
from aura_inn.models.user import User

__all__ = [
    "Booking",
    "RoomType",
    "SiteDocument",
    "User",
]
