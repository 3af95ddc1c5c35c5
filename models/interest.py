from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from core.database import Base, utcnow


class Interest(Base):
    __tablename__ = "interests"

    id = Column(Integer, primary_key=True, index=True)
    elderly_profile_id = Column(Integer, ForeignKey("elderly_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    interest = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    elderly_profile = relationship("ElderlyProfile", back_populates="interests")
