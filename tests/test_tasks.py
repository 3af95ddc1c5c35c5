from datetime import date, datetime, timedelta, timezone

from sqlalchemy import select

from models.call import Call, CallTranscript
from models.enums import AlertType, CallStatus, CallTimePreference, CallType, RegistrationType
from models.family import FamilyMemberAlert
from models.profile import AuthUser, ElderlyProfile, Profile
from tasks.maintenance_tasks import purge_expired_transcripts, raise_no_conversation_alerts


def add_caregiver_with_loved_one(db, phone_number="5559876543"):
    auth_user = AuthUser(email=f"{phone_number}@aasha-temp.com", phone=f"+1{phone_number}")
    db.add(auth_user)
    db.flush()
    caregiver = Profile(
        auth_user_id=auth_user.id,
        phone_number=phone_number,
        country_code="+1",
        first_name="Ana",
        last_name="Lopez",
        language="English",
        registration_type=RegistrationType.LOVED_ONE,
    )
    db.add(caregiver)
    db.flush()
    elderly_profile = ElderlyProfile(
        caregiver_profile_id=caregiver.id,
        phone_number="5550001111",
        country_code="+1",
        first_name="Rosa",
        last_name="Lopez",
        date_of_birth=date(1942, 3, 9),
        gender="female",
        language="English",
        marital_status="widowed",
        call_time_preference=CallTimePreference.MORNING,
        relationship_to_caregiver="mother",
    )
    db.add(elderly_profile)
    db.commit()
    return caregiver, elderly_profile


def add_call(db, elderly_profile, hours_ago, call_status=CallStatus.SUCCESSFUL):
    call = Call(
        elderly_profile_id=elderly_profile.id,
        call_type=CallType.DAILY_CHECKIN,
        call_status=call_status,
        started_at=datetime.now(timezone.utc) - timedelta(hours=hours_ago),
    )
    db.add(call)
    db.commit()
    return call


def alerts(db):
    return db.execute(select(FamilyMemberAlert)).scalars().all()


def test_purge_removes_only_expired_transcripts(sync_session):
    _, elderly_profile = add_caregiver_with_loved_one(sync_session)
    call = add_call(sync_session, elderly_profile, hours_ago=1)
    now = datetime.now(timezone.utc)
    sync_session.add_all([
        CallTranscript(call_id=call.id, transcript_text="old", expires_at=now - timedelta(days=1)),
        CallTranscript(call_id=call.id, transcript_text="fresh", expires_at=now + timedelta(days=89)),
    ])
    sync_session.commit()

    assert purge_expired_transcripts(sync_session) == 1

    sync_session.expire_all()
    remaining = sync_session.execute(select(CallTranscript.transcript_text)).scalars().all()
    assert remaining == ["fresh"]


def test_purge_with_nothing_expired(sync_session):
    assert purge_expired_transcripts(sync_session) == 0


def test_silent_loved_one_raises_one_alert(sync_session):
    caregiver, elderly_profile = add_caregiver_with_loved_one(sync_session)
    add_call(sync_session, elderly_profile, hours_ago=72)

    assert raise_no_conversation_alerts(sync_session, days=2) == 1
    # An open alert is not duplicated
    assert raise_no_conversation_alerts(sync_session, days=2) == 0

    [alert] = alerts(sync_session)
    assert alert.alert_type == AlertType.NO_CONVERSATION
    assert alert.family_member_id == caregiver.id
    assert alert.description == "Rosa has not had a conversation in the last 2 days."


def test_acknowledged_alert_allows_a_new_one(sync_session):
    _, elderly_profile = add_caregiver_with_loved_one(sync_session)
    raise_no_conversation_alerts(sync_session, days=2)
    [alert] = alerts(sync_session)
    alert.is_acknowledged = True
    sync_session.commit()

    assert raise_no_conversation_alerts(sync_session, days=2) == 1
    assert len(alerts(sync_session)) == 2


def test_recent_successful_call_suppresses_alert(sync_session):
    _, elderly_profile = add_caregiver_with_loved_one(sync_session)
    add_call(sync_session, elderly_profile, hours_ago=5)

    assert raise_no_conversation_alerts(sync_session, days=2) == 0
    assert alerts(sync_session) == []


def test_recent_failed_call_does_not_count(sync_session):
    _, elderly_profile = add_caregiver_with_loved_one(sync_session)
    add_call(sync_session, elderly_profile, hours_ago=5, call_status=CallStatus.VOICEMAIL)

    assert raise_no_conversation_alerts(sync_session, days=2) == 1


def test_self_registered_users_are_not_alerted(sync_session):
    auth_user = AuthUser(email="5551234567@aasha-temp.com", phone="+15551234567")
    sync_session.add(auth_user)
    sync_session.flush()
    profile = Profile(
        auth_user_id=auth_user.id,
        phone_number="5551234567",
        country_code="+1",
        first_name="Maria",
        last_name="Lopez",
        language="English",
        registration_type=RegistrationType.MYSELF,
    )
    sync_session.add(profile)
    sync_session.flush()
    sync_session.add(ElderlyProfile(
        profile_id=profile.id,
        phone_number="5551234567",
        country_code="+1",
        first_name="Maria",
        last_name="Lopez",
        date_of_birth=date(1950, 5, 17),
        gender="female",
        language="English",
        marital_status="widowed",
        call_time_preference=CallTimePreference.EVENING,
    ))
    sync_session.commit()

    assert raise_no_conversation_alerts(sync_session, days=2) == 0
