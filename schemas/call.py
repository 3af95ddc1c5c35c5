from datetime import datetime, date
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from models.enums import CallType, CallStatus, UserSentiment


# -------- Retell post-call payload --------

class RetellCallAnalysis(BaseModel):
    call_summary: Optional[str] = None
    user_sentiment: Optional[str] = None
    call_successful: Optional[bool] = None
    in_voicemail: Optional[bool] = None
    custom_analysis_data: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="allow")


class RetellCallCost(BaseModel):
    combined_cost: Optional[float] = None
    llm_tokens_used: Optional[int] = None
    llm_average_tokens: Optional[float] = None
    llm_num_requests: Optional[int] = None
    llm_token_values: Optional[List[Any]] = None

    model_config = ConfigDict(extra="allow")


class RetellWebhookData(BaseModel):
    call_id: str
    call_type: CallType
    call_status: CallStatus
    start_timestamp: int
    end_timestamp: Optional[int] = None
    agent_id: Optional[str] = None
    transcript: Optional[str] = None
    transcript_with_tool_calls: Optional[List[Any]] = None
    recording_url: Optional[str] = None
    public_log_url: Optional[str] = None
    call_analysis: Optional[RetellCallAnalysis] = None
    disconnection_reason: Optional[str] = None
    call_cost: Optional[RetellCallCost] = None

    # Retell sends many more fields; they are kept verbatim in raw_webhook_data
    model_config = ConfigDict(extra="allow")


class WebhookProcessingResult(BaseModel):
    call_id: str
    success: bool
    error: Optional[str] = None


# -------- Stored records --------

class CallAnalysisInDB(BaseModel):
    id: int
    call_id: int
    call_summary: str
    user_sentiment: Optional[UserSentiment] = None
    call_successful: bool
    in_voicemail: bool
    medicine_taken: Optional[bool] = None
    custom_analysis_data: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CallTranscriptInDB(BaseModel):
    id: int
    call_id: int
    transcript_text: Optional[str] = None
    speaker_segments: Any = None
    created_at: Optional[datetime] = None
    expires_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CallCostInDB(BaseModel):
    id: int
    call_id: int
    combined_cost: float
    llm_tokens_used: int
    llm_average_tokens: float
    llm_num_requests: int
    llm_token_values: Any = None

    model_config = ConfigDict(from_attributes=True)


class CallInDB(BaseModel):
    id: int
    retell_call_id: Optional[str] = None
    elderly_profile_id: int
    call_type: CallType
    call_status: CallStatus
    started_at: datetime
    ended_at: Optional[datetime] = None
    duration_seconds: int
    agent_id: Optional[str] = None
    retell_webhook_received: bool
    call_analysis: List[CallAnalysisInDB] = []
    call_transcripts: List[CallTranscriptInDB] = []
    call_costs: List[CallCostInDB] = []

    model_config = ConfigDict(from_attributes=True)


class DailyMedicineLogInDB(BaseModel):
    id: int
    elderly_profile_id: int
    log_date: date
    medicine_taken: bool
    call_id: Optional[int] = None
    logged_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# -------- Analytics --------

class SentimentCounts(BaseModel):
    Positive: int = 0
    Negative: int = 0
    Neutral: int = 0


class CallAnalytics(BaseModel):
    total_calls: int
    successful_calls: int
    voicemail_calls: int
    failed_calls: int
    total_duration: int
    avg_duration: int
    total_cost: str
    sentiment_counts: SentimentCounts
    calls: List[CallInDB] = []


class MedicineAdherence(BaseModel):
    total_days: int
    taken_days: int
    missed_days: int
    adherence_rate: int
    logs: List[DailyMedicineLogInDB] = []
