"""
Team records.

Teams are managed by the teams subsystem. The policy stores only read
this table to check that a team exists inside an organization.
"""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, UlidPrimaryKeyMixin


class Team(Base, UlidPrimaryKeyMixin, TimestampMixin):
    """A team of users inside one organization."""
    __tablename__ = "teams"
    
    org_id: Mapped[str] = mapped_column(String(26), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(190), nullable=False)
    
    def __repr__(self) -> str:
        return f"<Team(id={self.id}, name={self.name!r}, org_id={self.org_id})>"
