"""
SQLAlchemy ORM models for Aasha Backend.

Contains all database models organized by module.
"""

from .profile import AuthUser, Profile, ElderlyProfile
from .medication import Medication, MedicationTracking
from .interest import Interest
from .special_event import SpecialEvent
from .call import Call, CallAnalysis, CallTranscript, CallCost, DailyMedicineLog
from .family import FamilyMemberAlert, SharedContent, FamilyActivityLog, ConversationPrompt
from .authentication import OtpSession, UserSession

__all__ = [
    "AuthUser",
    "Profile",
    "ElderlyProfile",
    "Medication",
    "MedicationTracking",
    "Interest",
    "SpecialEvent",
    "Call",
    "CallAnalysis",
    "CallTranscript",
    "CallCost",
    "DailyMedicineLog",
    "FamilyMemberAlert",
    "SharedContent",
    "FamilyActivityLog",
    "ConversationPrompt",
    "OtpSession",
    "UserSession",
]
