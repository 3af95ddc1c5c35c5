"""
Medication and medication tracking models.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from core.database import Base, utcnow
from models.enums import MedicationStatus, enum_type


class Medication(Base):
    """Medication model for medication management."""

    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, index=True)
    elderly_profile_id = Column(Integer, ForeignKey("elderly_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    dosage = Column(String(100), nullable=False)  # e.g. "10mg", "1 tablet"
    frequency = Column(String(100), nullable=False)  # e.g. "Twice daily"
    time = Column(String(50), nullable=False)  # e.g. "08:00" or "Morning"
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    elderly_profile = relationship("ElderlyProfile", back_populates="medications")
    tracking = relationship("MedicationTracking", back_populates="medication", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Medication(id={self.id}, name='{self.name}', elderly_profile_id={self.elderly_profile_id})>"


class MedicationTracking(Base):
    __tablename__ = "medication_tracking"

    id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id", ondelete="CASCADE"), nullable=False, index=True)
    scheduled_datetime = Column(DateTime(timezone=True), nullable=False)
    taken_datetime = Column(DateTime(timezone=True), nullable=True)
    status = Column(enum_type(MedicationStatus, "medication_status"), nullable=False)
    notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow)

    medication = relationship("Medication", back_populates="tracking")
