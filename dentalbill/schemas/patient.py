from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import List, Optional

class PatientCreate(BaseModel):
    name: str
    phone: str

class PatientUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None

class PatientDocument(BaseModel):
    name: str
    type: str
    url: str
    path: str = ""
    uploaded_at: str

class PatientResponse(BaseModel):
    id: UUID
    name: str
    phone: str
    created_at: datetime
    documents: List[PatientDocument] = []

    class Config:
        from_attributes = True
