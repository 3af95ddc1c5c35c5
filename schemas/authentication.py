from pydantic import BaseModel


class PhoneRequest(BaseModel):
    phone_number: str
    country_code: str


class VerifyOtpRequest(BaseModel):
    session_id: str
    otp: str
