import hashlib
import hmac
import json
import time
from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from core.config import settings
from models.call import Call, DailyMedicineLog
from models.enums import AlertType, CallStatus, CallType, UserSentiment
from models.family import FamilyMemberAlert
from scripts.utils import as_utc
from services.call_service import CallService, unwrap_webhook_payload
from tests.factories import sign_in


def retell_call(call_id="call_abc", minutes_ago=60, duration=300, **overrides):
    start = int(time.time()) - minutes_ago * 60
    call = {
        "call_id": call_id,
        "call_type": "daily_checkin",
        "call_status": "successful",
        "start_timestamp": start,
        "end_timestamp": start + duration,
        "agent_id": "agent_1",
        "transcript": "Agent: Good morning Rosa!\nUser: Good morning.",
        "transcript_with_tool_calls": [{"role": "agent", "content": "Good morning Rosa!"}],
        "call_analysis": {
            "call_summary": "Rosa talked about her garden.",
            "user_sentiment": "Positive",
            "call_successful": True,
            "in_voicemail": False,
            "custom_analysis_data": {"medicine_taken": True},
        },
        "call_cost": {"combined_cost": 1.25, "llm_tokens_used": 900, "llm_num_requests": 3},
    }
    call.update(overrides)
    return {"event": "call_analyzed", "call": call}


def sign(body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


async def get_call(db, retell_call_id):
    query = select(Call).where(Call.retell_call_id == retell_call_id).execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one()


# ── Webhook processing ───────────────────────────────────────────────────────


def test_unwrap_accepts_both_envelopes():
    assert unwrap_webhook_payload({"event": "call_ended", "call": {"call_id": "x"}}) == {"call_id": "x"}
    assert unwrap_webhook_payload({"call_id": "x"}) == {"call_id": "x"}


async def test_webhook_creates_call_with_sub_records(db_session, myself_user):
    _, elderly_profile = myself_user

    result = await CallService(db_session).process_retell_webhook(elderly_profile.id, retell_call())

    assert result.success is True
    assert result.error is None

    call = await get_call(db_session, "call_abc")
    assert str(call.id) == result.call_id
    assert call.call_type == CallType.DAILY_CHECKIN
    assert call.duration_seconds == 300
    assert call.retell_webhook_received is True
    assert call.raw_webhook_data["call_id"] == "call_abc"
    assert call.call_analysis[0].call_summary == "Rosa talked about her garden."
    assert call.call_analysis[0].medicine_taken is True
    assert call.call_costs[0].combined_cost == 1.25

    transcript = call.call_transcripts[0]
    retention = as_utc(transcript.expires_at) - datetime.now(timezone.utc)
    assert timedelta(days=settings.TRANSCRIPT_RETENTION_DAYS - 1) < retention <= timedelta(
        days=settings.TRANSCRIPT_RETENTION_DAYS
    )


async def test_webhook_fills_pre_populated_call(db_session, myself_user):
    _, elderly_profile = myself_user
    placed = Call(
        elderly_profile_id=elderly_profile.id,
        call_type=CallType.DAILY_CHECKIN,
        call_status=CallStatus.FAILED,
    )
    db_session.add(placed)
    await db_session.commit()

    result = await CallService(db_session).process_retell_webhook(elderly_profile.id, retell_call())

    assert result.call_id == str(placed.id)
    call = await get_call(db_session, "call_abc")
    assert call.call_status == CallStatus.SUCCESSFUL
    assert len((await db_session.execute(select(Call))).scalars().all()) == 1


async def test_duplicate_webhook_is_acknowledged_once(db_session, myself_user):
    _, elderly_profile = myself_user
    service = CallService(db_session)
    first = await service.process_retell_webhook(elderly_profile.id, retell_call())

    second = await service.process_retell_webhook(elderly_profile.id, retell_call())

    assert second.success is True
    assert second.error == "Call already processed"
    assert second.call_id == first.call_id
    assert len((await db_session.execute(select(Call))).scalars().all()) == 1


async def test_webhook_for_unknown_profile_fails(db_session):
    result = await CallService(db_session).process_retell_webhook(999, retell_call())

    assert result.success is False
    assert "999" in result.error


async def test_webhook_with_invalid_payload_fails(db_session, myself_user):
    _, elderly_profile = myself_user

    result = await CallService(db_session).process_retell_webhook(elderly_profile.id, {"call_id": "x"})

    assert result.success is False
    assert result.call_id == ""


async def test_missed_medicine_alerts_the_caregiver(db_session, caregiver):
    profile, elderly_profile = caregiver
    payload = retell_call()
    payload["call"]["call_analysis"]["custom_analysis_data"] = {"medicine_taken": "false"}

    result = await CallService(db_session).process_retell_webhook(elderly_profile.id, payload)

    log = (await db_session.execute(select(DailyMedicineLog))).scalar_one()
    assert log.medicine_taken is False
    assert str(log.call_id) == result.call_id

    alert = (await db_session.execute(select(FamilyMemberAlert))).scalar_one()
    assert alert.alert_type == AlertType.MEDICATION_MISSED
    assert alert.family_member_id == profile.id
    assert alert.related_entity_id == result.call_id


async def test_later_call_overwrites_the_days_medicine_answer(db_session, myself_user):
    _, elderly_profile = myself_user
    service = CallService(db_session)
    missed = retell_call("call_1")
    missed["call"]["call_analysis"]["custom_analysis_data"] = {"medicine_taken": False}
    await service.process_retell_webhook(elderly_profile.id, missed)

    await service.process_retell_webhook(elderly_profile.id, retell_call("call_2", minutes_ago=10))

    logs = (await db_session.execute(select(DailyMedicineLog))).scalars().all()
    assert len(logs) == 1
    assert logs[0].medicine_taken is True
    # No caregiver to alert for a self-registered user
    assert (await db_session.execute(select(FamilyMemberAlert))).scalars().all() == []


# ── Analytics ────────────────────────────────────────────────────────────────


async def test_call_analytics(db_session, myself_user):
    _, elderly_profile = myself_user
    service = CallService(db_session)
    await service.process_retell_webhook(elderly_profile.id, retell_call("call_1", duration=100))
    voicemail = retell_call("call_2", minutes_ago=30, duration=31, call_status="voicemail")
    voicemail["call"]["call_analysis"]["user_sentiment"] = "Neutral"
    voicemail["call"]["call_cost"]["combined_cost"] = 0.5
    await service.process_retell_webhook(elderly_profile.id, voicemail)
    old = retell_call("call_3", minutes_ago=60 * 24 * 40)
    await service.process_retell_webhook(elderly_profile.id, old)

    analytics = await service.get_call_analytics(elderly_profile.id, days=30)

    assert analytics.total_calls == 2
    assert analytics.successful_calls == 1
    assert analytics.voicemail_calls == 1
    assert analytics.failed_calls == 0
    assert analytics.total_duration == 131
    assert analytics.avg_duration == 66
    assert analytics.total_cost == "1.75"
    assert analytics.sentiment_counts.Positive == 1
    assert analytics.sentiment_counts.Neutral == 1
    assert [c.retell_call_id for c in analytics.calls] == ["call_2", "call_1"]


async def test_unrecognised_sentiment_keeps_the_call(db_session, myself_user):
    _, elderly_profile = myself_user
    payload = retell_call()
    payload["call"]["call_analysis"]["user_sentiment"] = "Unknown"
    service = CallService(db_session)

    result = await service.process_retell_webhook(elderly_profile.id, payload)

    assert result.success is True
    call = await get_call(db_session, "call_abc")
    assert call.call_analysis[0].user_sentiment is None
    assert call.call_analysis[0].call_summary == "Rosa talked about her garden."

    analytics = await service.get_call_analytics(elderly_profile.id)
    assert analytics.total_calls == 1
    assert analytics.sentiment_counts.model_dump() == {"Positive": 0, "Negative": 0, "Neutral": 0}


async def test_analytics_without_calls(db_session, myself_user):
    _, elderly_profile = myself_user

    analytics = await CallService(db_session).get_call_analytics(elderly_profile.id)

    assert analytics.total_calls == 0
    assert analytics.avg_duration == 0
    assert analytics.total_cost == "0.00"


async def test_medicine_adherence(db_session, myself_user):
    _, elderly_profile = myself_user
    today = datetime.now(timezone.utc).date()
    for days, taken in ((0, True), (1, False), (2, True), (40, False)):
        db_session.add(DailyMedicineLog(
            elderly_profile_id=elderly_profile.id,
            log_date=today - timedelta(days=days),
            medicine_taken=taken,
        ))
    await db_session.commit()

    adherence = await CallService(db_session).get_medicine_adherence(elderly_profile.id, days=30)

    assert adherence.total_days == 3
    assert adherence.taken_days == 2
    assert adherence.missed_days == 1
    assert adherence.adherence_rate == 67
    assert [log.log_date for log in adherence.logs] == [today - timedelta(days=d) for d in (0, 1, 2)]


# ── HTTP ─────────────────────────────────────────────────────────────────────


async def test_webhook_endpoint(client, db_session, myself_user):
    _, elderly_profile = myself_user

    response = await client.post(f"/api/v1/calls/webhook/{elderly_profile.id}", json=retell_call())

    assert response.status_code == 200
    assert response.json()["success"] is True


async def test_webhook_endpoint_reports_failure(client):
    response = await client.post("/api/v1/calls/webhook/999", json=retell_call())

    assert response.status_code == 500
    assert response.json()["success"] is False


async def test_webhook_endpoint_rejects_bad_json(client, myself_user):
    _, elderly_profile = myself_user

    response = await client.post(
        f"/api/v1/calls/webhook/{elderly_profile.id}",
        content=b"not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid JSON payload"


async def test_webhook_signature(client, myself_user, monkeypatch):
    _, elderly_profile = myself_user
    monkeypatch.setattr(settings, "RETELL_WEBHOOK_SECRET", "retell-secret")
    url = f"/api/v1/calls/webhook/{elderly_profile.id}"
    body = json.dumps(retell_call()).encode("utf-8")

    response = await client.post(url, content=body)
    assert response.status_code == 401
    assert response.json()["message"] == "Missing signature"

    response = await client.post(url, content=body, headers={"x-retell-signature": sign(body, "wrong")})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid signature"

    response = await client.post(url, content=body, headers={"x-retell-signature": sign(body, "retell-secret")})
    assert response.status_code == 200


async def test_dashboard_call_views(client, db_session, myself_user):
    profile, elderly_profile = myself_user
    await CallService(db_session).process_retell_webhook(elderly_profile.id, retell_call())
    await sign_in(client, db_session, profile)

    calls = (await client.get("/api/v1/dashboard/calls")).json()
    assert len(calls) == 1
    assert calls[0]["call_analysis"][0]["user_sentiment"] == UserSentiment.POSITIVE.value

    response = await client.get(f"/api/v1/dashboard/calls/{calls[0]['id']}")
    assert response.status_code == 200
    assert response.json()["call_transcripts"][0]["transcript_text"].startswith("Agent:")

    response = await client.get("/api/v1/dashboard/adherence")
    assert response.json()["taken_days"] == 1
