"""
Venue model. Venue names are matched exactly (no case folding).
"""

from sqlalchemy import Column, Integer, String

from fastbreak.db.base import Base, TimestampMixin

VENUE_NAME_MAX_LENGTH = 255


class Venue(Base, TimestampMixin):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(VENUE_NAME_MAX_LENGTH), unique=True, nullable=False)
    address = Column(String(500), nullable=False)

    def __repr__(self) -> str:
        return f"<Venue(id={self.id}, name={self.name})>"
