"""
CapTrack - Developer Model

Actors that log, confirm and approve time.
"""

from enum import Enum

from sqlalchemy import Boolean, Enum as SQLEnum, String
from sqlalchemy.orm import Mapped, mapped_column

from captrack.models.base import BaseModel


class DeveloperRole(str, Enum):
    """Role of an actor."""
    DEVELOPER = "developer"
    MANAGER = "manager"
    ADMIN = "admin"


class Developer(BaseModel):
    """A person whose time is tracked, or who reviews tracked time."""

    __tablename__ = "developers"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[DeveloperRole] = mapped_column(
        SQLEnum(DeveloperRole),
        default=DeveloperRole.DEVELOPER,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    @property
    def is_reviewer(self) -> bool:
        """Managers and admins may approve, reject and act on others' entries."""
        return self.role in (DeveloperRole.MANAGER, DeveloperRole.ADMIN)
