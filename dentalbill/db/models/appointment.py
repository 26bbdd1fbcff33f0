from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime
from datetime import datetime
from uuid import UUID, uuid4

from dentalbill.core.utils import utcnow

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    dentist_id: UUID = Field(foreign_key="dentists.id", index=True)
    patient_name: str
    type: str # Consultation, Cleaning, Emergency, Follow-up
    # Stored in UTC
    start: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    end: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    description: str = ""
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
