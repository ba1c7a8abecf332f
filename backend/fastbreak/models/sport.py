"""
Sport model. Names are stored lowercased and are unique, so a lookup by the
lowercased name is the case-insensitive match.
"""

from sqlalchemy import Column, Integer, String

from fastbreak.db.base import Base, TimestampMixin


class Sport(Base, TimestampMixin):
    __tablename__ = "sports"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Sport(id={self.id}, name={self.name})>"
