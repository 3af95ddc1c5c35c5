from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from core.database import Base, utcnow
from models.enums import EventType, enum_type


class SpecialEvent(Base):
    """Birthdays, appointments and visits the companion should bring up."""

    __tablename__ = "special_events"

    id = Column(Integer, primary_key=True, index=True)
    elderly_profile_id = Column(Integer, ForeignKey("elderly_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    event_name = Column(String(255), nullable=False)
    event_date = Column(Date, nullable=False)
    event_type = Column(enum_type(EventType, "event_type"), nullable=False)
    description = Column(Text, nullable=False, default="")
    is_recurring = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    elderly_profile = relationship("ElderlyProfile", back_populates="special_events")
