from sqladmin import Admin, ModelView
from core.database import engine
from models import Profile, ElderlyProfile, Medication, Call, FamilyMemberAlert
from admin.auth import AdminAuth
from core.config import settings


class ProfileAdmin(ModelView, model=Profile):
    column_list = [
        Profile.id,
        Profile.first_name,
        Profile.last_name,
        Profile.country_code,
        Profile.phone_number,
        Profile.registration_type,
        Profile.created_at,
    ]
    column_searchable_list = [Profile.phone_number, Profile.last_name]


class ElderlyProfileAdmin(ModelView, model=ElderlyProfile):
    column_list = "__all__"
    column_searchable_list = [ElderlyProfile.phone_number, ElderlyProfile.last_name]


class MedicationAdmin(ModelView, model=Medication):
    column_list = "__all__"


class CallAdmin(ModelView, model=Call):
    column_list = [
        Call.id,
        Call.retell_call_id,
        Call.elderly_profile_id,
        Call.call_type,
        Call.call_status,
        Call.started_at,
        Call.duration_seconds,
    ]
    can_create = False


class AlertAdmin(ModelView, model=FamilyMemberAlert):
    name = "Alert"
    name_plural = "Alerts"
    column_list = "__all__"


def setup_admin(app):
    admin = Admin(
        app,
        engine,
        authentication_backend=AdminAuth(
            secret_key=settings.SECRET_KEY
        ),
    )

    admin.add_view(ProfileAdmin)
    admin.add_view(ElderlyProfileAdmin)
    admin.add_view(MedicationAdmin)
    admin.add_view(CallAdmin)
    admin.add_view(AlertAdmin)
    return admin
