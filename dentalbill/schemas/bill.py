from enum import Enum
from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import List, Optional

class BillStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"

class Consultation(BaseModel):
    description: str = ""
    amount: Optional[float] = Field(default=None, ge=0)

class BillCreate(BaseModel):
    patient_name: str
    consultations: List[Consultation]
    patient_id: Optional[UUID] = None

class PatientKind(str, Enum):
    NEW = "new"
    EXISTING = "existing"

class GenerateBillRequest(BaseModel):
    patient_type: PatientKind = PatientKind.NEW
    patient_id: Optional[UUID] = None
    patient_name: str = ""
    phone: str = ""
    consultations: List[Consultation]

class BillResponse(BaseModel):
    id: UUID
    dentist_id: UUID
    patient_id: Optional[UUID] = None
    patient_name: str
    consultations: List[Consultation]
    status: BillStatus
    created_at: datetime
    paid_at: Optional[datetime] = None
    total_amount: float

    class Config:
        from_attributes = True

class GenerateBillResponse(BaseModel):
    bill: BillResponse
    patient_id: Optional[UUID] = None
    sms_sent: bool
    sms_error: Optional[str] = None
    message: str

class SaveBillRequest(BaseModel):
    """Body of the public save endpoint, which keeps the camelCase keys."""
    patient_name: Optional[str] = Field(default=None, alias="patientName")
    consultations: Optional[List[Consultation]] = None
    patient_id: Optional[UUID] = Field(default=None, alias="patientId")

    class Config:
        populate_by_name = True
