"""Site document model — whole JSON documents keyed by name.

Holds the content collections that are always read and rewritten wholesale:
``generalData``, ``homeData``, ``aboutData``, ``floors`` and ``reviews``.
"""

from datetime import datetime

from sqlalchemy import JSON, String, func
from sqlalchemy.orm import Mapped, mapped_column

from aura_inn.database import Base

DOCUMENT_KEYS = ("generalData", "homeData", "aboutData", "floors", "reviews")
LIST_DOCUMENTS = ("floors", "reviews")


class SiteDocument(Base):
    """A named JSON document (object or array)."""

    __tablename__ = "site_documents"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[dict | list] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<SiteDocument key={self.key!r}>"
