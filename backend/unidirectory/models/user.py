from sqlalchemy import Column, Integer, String

from unidirectory.core.database import Base


class User(Base):
    """Credential record. Provisioned outside this service."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    # bcrypt hash, never plaintext
    password = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<User {self.email}>"
