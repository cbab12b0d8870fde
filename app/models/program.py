from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database.database import Base
import enum


class EnrollmentStatus(str, enum.Enum):
    ACTIVE = "active"
    WITHDRAWN = "withdrawn"
    COMPLETED = "completed"


class Program(Base):
    __tablename__ = "programs"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    age_range = Column(String(100), nullable=True)
    schedule = Column(String(255), nullable=True)
    fee = Column(Numeric(10, 2), nullable=True)
    additional_info = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    enrollments = relationship(
        "ProgramEnrollment", back_populates="program", cascade="all", passive_deletes=True
    )


class ProgramEnrollment(Base):
    __tablename__ = "program_enrollments"
    __table_args__ = (
        UniqueConstraint("user_id", "program_id", name="uq_program_enrollments_user_program"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    program_id = Column(Integer, ForeignKey("programs.id", ondelete="CASCADE"), nullable=True)
    enrolled_at = Column(DateTime, server_default=func.now())
    # Free-form in the schema; EnrollmentStatus lists the values the services write
    status = Column(String(50), default=EnrollmentStatus.ACTIVE.value, server_default=EnrollmentStatus.ACTIVE.value)

    # Relationships
    user = relationship("User", back_populates="enrollments")
    program = relationship("Program", back_populates="enrollments")
