from sqlmodel import SQLModel, Field
from sqlalchemy import JSON, Column, DateTime
from typing import Optional, List
from datetime import datetime
from uuid import UUID, uuid4

class ClinicProfile(SQLModel, table=True):
    __tablename__ = "clinic_profiles"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    dentist_id: UUID = Field(foreign_key="dentists.id", unique=True, index=True)
    clinic_name: str = ""
    reg_no: str = ""
    gst_no: str = ""
    operating_hours: str = ""
    logo_url: str = ""
    logo_path: str = ""
    signature_url: str = ""
    signature_path: str = ""
    dentists: List[str] = Field(default=[], sa_column=Column(JSON))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
