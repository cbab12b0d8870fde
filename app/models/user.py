from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, Enum, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database.database import Base
import enum


class UserRole(str, enum.Enum):
    PARTICIPANT = "participant"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        Index("idx_users_email", "email"),
        Index("idx_users_role", "role"),
    )

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(
            UserRole,
            name="ck_users_role",
            native_enum=False,
            create_constraint=True,
            length=50,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=UserRole.PARTICIPANT,
        server_default=UserRole.PARTICIPANT.value,
    )
    date_of_birth = Column(Date, nullable=True)
    phone = Column(String(20), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(2), nullable=True)
    zip = Column(String(10), nullable=True)
    school_or_employer = Column(String(255), nullable=True)
    field_of_interest = Column(String(100), nullable=True)
    # Maintained by app.services.donation_totals only
    total_donations = Column(Numeric(10, 2), nullable=False, default=0, server_default="0")
    login_count = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    registrations = relationship(
        "EventRegistration", back_populates="user", cascade="all", passive_deletes=True
    )
    surveys = relationship("Survey", back_populates="user", cascade="all", passive_deletes=True)
    milestones = relationship(
        "ParticipantMilestone", back_populates="user", cascade="all", passive_deletes=True
    )
    enrollments = relationship(
        "ProgramEnrollment", back_populates="user", cascade="all", passive_deletes=True
    )
    # The database nulls donations.user_id; the ORM must not touch donation rows
    donations = relationship("Donation", back_populates="user", passive_deletes="all")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
