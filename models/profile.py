"""
Account, profile and elderly profile models.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from core.database import Base, utcnow
from models.enums import RegistrationType, CallTimePreference, enum_type


class AuthUser(Base):
    """Login identity created at sign-up, before any profile exists."""

    __tablename__ = "auth_users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(25), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    profile = relationship("Profile", back_populates="auth_user", uselist=False)

    def __repr__(self):
        return f"<AuthUser(id={self.id}, email='{self.email}')>"


class Profile(Base):
    """The registering account: the elderly user or their caregiver."""

    __tablename__ = "profiles"
    __table_args__ = (
        UniqueConstraint("phone_number", "country_code", name="uq_profiles_phone"),
    )

    id = Column(Integer, primary_key=True, index=True)
    auth_user_id = Column(Integer, ForeignKey("auth_users.id", ondelete="CASCADE"), unique=True, nullable=False)
    phone_number = Column(String(20), nullable=False)
    country_code = Column(String(5), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(20), nullable=True)
    language = Column(String(40), nullable=False)
    marital_status = Column(String(20), nullable=True)
    registration_type = Column(enum_type(RegistrationType, "registration_type"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    auth_user = relationship("AuthUser", back_populates="profile")

    def __repr__(self):
        return f"<Profile(id={self.id}, registration_type='{self.registration_type}')>"


class ElderlyProfile(Base):
    """The care recipient that every companion feature attaches to."""

    __tablename__ = "elderly_profiles"

    id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=True, index=True)
    caregiver_profile_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=True, index=True)
    phone_number = Column(String(20), nullable=False)
    country_code = Column(String(5), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(20), nullable=False)
    language = Column(String(40), nullable=False)
    marital_status = Column(String(20), nullable=False)
    call_time_preference = Column(
        enum_type(CallTimePreference, "call_time_preference"),
        nullable=False,
        default=CallTimePreference.AFTERNOON,
    )
    relationship_to_caregiver = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    medications = relationship("Medication", back_populates="elderly_profile", cascade="all, delete-orphan")
    interests = relationship("Interest", back_populates="elderly_profile", cascade="all, delete-orphan")
    special_events = relationship("SpecialEvent", back_populates="elderly_profile", cascade="all, delete-orphan")
    calls = relationship("Call", back_populates="elderly_profile", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<ElderlyProfile(id={self.id}, name='{self.first_name} {self.last_name}')>"
