"""
AI companion call records and their analysis, transcript and cost sub-records.
"""

from sqlalchemy import (
    Column, Integer, String, Text, Date, DateTime, Boolean, Float, ForeignKey, JSON, UniqueConstraint
)
from sqlalchemy.orm import relationship

from core.database import Base, utcnow
from models.enums import CallType, CallStatus, UserSentiment, enum_type


class Call(Base):
    __tablename__ = "calls"

    id = Column(Integer, primary_key=True, index=True)
    # Null until the post-call webhook fills a pre-populated row
    retell_call_id = Column(String(100), unique=True, nullable=True, index=True)
    elderly_profile_id = Column(Integer, ForeignKey("elderly_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    call_type = Column(enum_type(CallType, "call_type"), nullable=False)
    call_status = Column(enum_type(CallStatus, "call_status"), nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    duration_seconds = Column(Integer, nullable=False, default=0)
    agent_id = Column(String(100), nullable=True)
    raw_webhook_data = Column(JSON, nullable=False, default=dict)
    retell_webhook_received = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    elderly_profile = relationship("ElderlyProfile", back_populates="calls")
    call_analysis = relationship("CallAnalysis", back_populates="call", cascade="all, delete-orphan", lazy="selectin")
    call_transcripts = relationship("CallTranscript", back_populates="call", cascade="all, delete-orphan", lazy="selectin")
    call_costs = relationship("CallCost", back_populates="call", cascade="all, delete-orphan", lazy="selectin")

    def __repr__(self):
        return f"<Call(id={self.id}, retell_call_id='{self.retell_call_id}', status='{self.call_status}')>"


class CallAnalysis(Base):
    __tablename__ = "call_analysis"

    id = Column(Integer, primary_key=True, index=True)
    call_id = Column(Integer, ForeignKey("calls.id", ondelete="CASCADE"), nullable=False, index=True)
    call_summary = Column(Text, nullable=False, default="")
    user_sentiment = Column(enum_type(UserSentiment, "user_sentiment"), nullable=True)
    call_successful = Column(Boolean, nullable=False, default=False)
    in_voicemail = Column(Boolean, nullable=False, default=False)
    medicine_taken = Column(Boolean, nullable=True)
    custom_analysis_data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    call = relationship("Call", back_populates="call_analysis")


class CallTranscript(Base):
    __tablename__ = "call_transcripts"

    id = Column(Integer, primary_key=True, index=True)
    call_id = Column(Integer, ForeignKey("calls.id", ondelete="CASCADE"), nullable=False, index=True)
    transcript_text = Column(Text, nullable=True)
    speaker_segments = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    call = relationship("Call", back_populates="call_transcripts")


class CallCost(Base):
    __tablename__ = "call_costs"

    id = Column(Integer, primary_key=True, index=True)
    call_id = Column(Integer, ForeignKey("calls.id", ondelete="CASCADE"), nullable=False, index=True)
    combined_cost = Column(Float, nullable=False, default=0)
    llm_tokens_used = Column(Integer, nullable=False, default=0)
    llm_average_tokens = Column(Float, nullable=False, default=0)
    llm_num_requests = Column(Integer, nullable=False, default=0)
    llm_token_values = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    call = relationship("Call", back_populates="call_costs")


class DailyMedicineLog(Base):
    """One row per profile per day, written from call analysis."""

    __tablename__ = "daily_medicine_log"
    __table_args__ = (
        UniqueConstraint("elderly_profile_id", "log_date", name="uq_daily_medicine_log_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    elderly_profile_id = Column(Integer, ForeignKey("elderly_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    log_date = Column(Date, nullable=False)
    medicine_taken = Column(Boolean, nullable=False)
    call_id = Column(Integer, ForeignKey("calls.id", ondelete="SET NULL"), nullable=True)
    logged_at = Column(DateTime(timezone=True), default=utcnow)
