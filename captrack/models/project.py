"""
CapTrack - Project Model

Projects carry the capitalization phase and the approval requirement.
A project with a parent is an enhancement layered onto that parent.
"""

import uuid
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, Enum as SQLEnum, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from captrack.models.base import BaseModel


class ProjectPhase(str, Enum):
    """Software development phase; only application_development is capitalized."""
    PRELIMINARY = "preliminary"
    APPLICATION_DEVELOPMENT = "application_development"
    POST_IMPLEMENTATION = "post_implementation"


class Project(BaseModel):
    """A project time can be logged against."""

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phase: Mapped[ProjectPhase] = mapped_column(
        SQLEnum(ProjectPhase),
        default=ProjectPhase.PRELIMINARY,
        nullable=False,
    )
    parent_project_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Set for enhancement projects",
    )
    requires_manager_approval: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False,
        comment="Confirmed daily entries go to pending_approval",
    )

    @property
    def is_enhancement(self) -> bool:
        return self.parent_project_id is not None
