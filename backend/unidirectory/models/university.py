from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from unidirectory.core.database import Base


class University(Base):
    """University model - seeded once, read-only through the API"""
    __tablename__ = "universities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    country = Column(String(100), nullable=False, index=True)
    state_province = Column("stateProvince", String(100), nullable=True)
    website = Column(String(500), nullable=False)

    favorites = relationship("Favorite", back_populates="university", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<University {self.name} ({self.country})>"
