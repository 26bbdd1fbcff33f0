from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import Optional

class SignupRequest(BaseModel):
    name: str
    email: str
    password: str

class LoginRequest(BaseModel):
    email: str
    password: str

class DentistInfo(BaseModel):
    id: UUID
    name: str
    email: str
    photo_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class LoginResponse(BaseModel):
    access_token: str
    token_type: str
    dentist: DentistInfo

class AdminLoginRequest(BaseModel):
    username: str
    password: str
