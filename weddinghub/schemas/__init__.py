from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, Dict
from uuid import UUID
from datetime import datetime, date
from enum import Enum

class RSVPStatus(str, Enum):
    pending = "pending"
    attending = "attending"
    not_attending = "not_attending"
    maybe = "maybe"

class SubmittableStatus(str, Enum):
    """Attendance values a guest can submit through the RSVP form."""
    attending = "attending"
    not_attending = "not_attending"

class FollowUp(str, Enum):
    celebration = "celebration"
    acknowledgment = "acknowledgment"

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class TokenResponse(BaseModel):
    """Token response with refresh token."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

class RefreshTokenRequest(BaseModel):
    refresh_token: str

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)

class AdminOut(BaseModel):
    id: UUID
    email: EmailStr
    full_name: Optional[str]
    role: str

    @field_validator("role", mode="before")
    @classmethod
    def role_value(cls, v):
        return getattr(v, "value", v)

    class Config:
        from_attributes = True

class InviteLookupRequest(BaseModel):
    code: str

class InviteGuestOut(BaseModel):
    """What a guest learns about themselves after entering their code."""
    id: UUID
    name: str
    plus_one_allowed: bool

    class Config:
        from_attributes = True

class RSVPSubmit(BaseModel):
    invite_code: str
    status: SubmittableStatus
    plus_one_name: Optional[str] = None
    dietary_notes: Optional[str] = None
    message: Optional[str] = None

class RSVPOut(BaseModel):
    id: UUID
    guest_id: UUID
    status: RSVPStatus
    dietary_notes: Optional[str]
    plus_one_name: Optional[str]
    message: Optional[str]
    responded_at: Optional[datetime]

    class Config:
        from_attributes = True

class RSVPSubmitResult(BaseModel):
    attending: bool
    follow_up: FollowUp
    detail: str = "Thank you for your response!"
    rsvp: RSVPOut

class RSVPFormConfig(BaseModel):
    enable_dietary: bool = True
    song_request_required: bool = True

class GuestCreate(BaseModel):
    name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    plus_one_allowed: bool = False
    invite_code: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Guest name is required")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

class GuestUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    plus_one_allowed: Optional[bool] = None
    invite_code: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Guest name cannot be blank")
        return v

    @field_validator("plus_one_allowed")
    @classmethod
    def plus_one_not_null(cls, v: Optional[bool]) -> Optional[bool]:
        if v is None:
            raise ValueError("plus_one_allowed must be true or false")
        return v

class GuestOut(BaseModel):
    id: UUID
    name: str
    email: Optional[str]
    phone: Optional[str]
    invite_code: str
    plus_one_allowed: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True

class GuestWithRSVPOut(GuestOut):
    rsvp: Optional[RSVPOut] = None

class InviteLinkOut(BaseModel):
    invite_code: str
    url: str

class GuestStats(BaseModel):
    total: int
    attending: int
    not_attending: int
    maybe: int
    pending: int

class SettingsUpdate(BaseModel):
    values: Dict[str, Optional[str]]

class TimeLeftOut(BaseModel):
    months: int
    days: int
    hours: int

class CountdownOut(BaseModel):
    wedding_date: Optional[date]
    time_left: TimeLeftOut

class WeddingInfoOut(BaseModel):
    wedding_date: Optional[date]
    time_left: TimeLeftOut
    form: RSVPFormConfig
    watermark_url: Optional[str] = None
    venue_text: Optional[str] = None
    directions_text: Optional[str] = None
    directions_map_url: Optional[str] = None
    accommodation_text: Optional[str] = None
    notes_text: Optional[str] = None
    weather_location: str
    weather_url: str
