from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database.database import Base


class Milestone(Base):
    """Catalog entry for an achievement type."""
    __tablename__ = "milestones"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    achievements = relationship(
        "ParticipantMilestone", back_populates="milestone", cascade="all", passive_deletes=True
    )


class ParticipantMilestone(Base):
    __tablename__ = "participant_milestones"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    milestone_id = Column(Integer, ForeignKey("milestones.id", ondelete="CASCADE"), nullable=True)
    custom_title = Column(String(255), nullable=True)
    achieved_at = Column(DateTime, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="milestones")
    milestone = relationship("Milestone", back_populates="achievements")

    @property
    def display_title(self) -> str:
        return self.custom_title or self.milestone.title
