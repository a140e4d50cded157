from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from unidirectory.core.database import Base


class Favorite(Base):
    """Bookmark linking to a University"""
    __tablename__ = "favorites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    university_id = Column(
        "universityId",
        Integer,
        ForeignKey("universities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        "createdAt", DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )

    university = relationship("University", back_populates="favorites")

    def __repr__(self):
        return f"<Favorite {self.id} -> University {self.university_id}>"
