from enum import Enum
from pydantic import BaseModel, model_validator
from uuid import UUID
from datetime import datetime
from typing import Optional

class AppointmentType(str, Enum):
    CONSULTATION = "Consultation"
    CLEANING = "Cleaning"
    EMERGENCY = "Emergency"
    FOLLOW_UP = "Follow-up"

class AppointmentCreate(BaseModel):
    patient_name: str
    type: AppointmentType = AppointmentType.CONSULTATION
    start: datetime
    end: datetime
    description: str = ""

    @model_validator(mode="after")
    def check_time_range(self):
        if self.end <= self.start:
            raise ValueError("Appointment end must be after its start")
        return self

class AppointmentResponse(BaseModel):
    id: UUID
    patient_name: str
    type: str
    start: datetime
    end: datetime
    description: str
    title: Optional[str] = None

    class Config:
        from_attributes = True
