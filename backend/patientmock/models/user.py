"""Legacy user model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from patientmock.database import Base


class User(Base):
    """Flat user row with an auto-increment key."""

    __tablename__ = "users"

    # Deleted ids are never reused
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name})>"
