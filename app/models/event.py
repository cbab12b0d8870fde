from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database.database import Base


class EventTemplate(Base):
    """A recurring event definition, e.g. a monthly support group."""
    __tablename__ = "event_templates"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    recurrence_pattern = Column(String(50), nullable=True)  # monthly, quarterly, biannual
    default_capacity = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    events = relationship("Event", back_populates="template", passive_deletes=True)


class Event(Base):
    """A concrete scheduled occurrence."""
    __tablename__ = "events"
    __table_args__ = (
        Index("idx_events_start_time", "start_time"),
    )

    id = Column(Integer, primary_key=True)
    event_template_id = Column(Integer, ForeignKey("event_templates.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)
    location = Column(String(255), nullable=True)
    # Advisory only; enforced by app.services.events
    capacity = Column(Integer, nullable=True)
    registration_deadline = Column(DateTime, nullable=True)
    image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    template = relationship("EventTemplate", back_populates="events")
    registrations = relationship(
        "EventRegistration", back_populates="event", cascade="all", passive_deletes=True
    )
    surveys = relationship("Survey", back_populates="event", cascade="all", passive_deletes=True)
