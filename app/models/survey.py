from sqlalchemy import Column, Integer, Text, DateTime, Numeric, ForeignKey, CheckConstraint, Enum, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database.database import Base
import enum

RATING_COLUMNS = (
    "satisfaction_rating",
    "usefulness_rating",
    "instructor_rating",
    "recommendation_rating",
)


class NetPromoterBucket(str, enum.Enum):
    PROMOTER = "Promoter"
    PASSIVE = "Passive"
    DETRACTOR = "Detractor"


class Survey(Base):
    """Post-event feedback tied to one registration.

    ``overall_score`` and ``net_promoter_score`` are derived values written by
    the caller (see app.services.surveys); the database only range-checks them.
    """
    __tablename__ = "surveys"
    __table_args__ = tuple(
        CheckConstraint(f"{column} BETWEEN 1 AND 5", name=f"ck_surveys_{column}")
        for column in RATING_COLUMNS
    ) + (
        Index("idx_surveys_user", "user_id"),
        Index("idx_surveys_event", "event_id"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=True)
    registration_id = Column(Integer, ForeignKey("event_registrations.id", ondelete="CASCADE"), nullable=True)
    satisfaction_rating = Column(Integer, nullable=True)
    usefulness_rating = Column(Integer, nullable=True)
    instructor_rating = Column(Integer, nullable=True)
    recommendation_rating = Column(Integer, nullable=True)
    overall_score = Column(Numeric(3, 2), nullable=True)
    net_promoter_score = Column(
        Enum(
            NetPromoterBucket,
            name="ck_surveys_net_promoter_score",
            native_enum=False,
            create_constraint=True,
            length=20,
            values_callable=lambda buckets: [b.value for b in buckets],
        ),
        nullable=True,
    )
    additional_feedback = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="surveys")
    event = relationship("Event", back_populates="surveys")
    registration = relationship("EventRegistration", back_populates="surveys")
