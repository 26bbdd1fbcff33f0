from sqlmodel import SQLModel, Field
from sqlalchemy import JSON, Column, DateTime
from typing import List
from datetime import datetime
from uuid import UUID, uuid4

from dentalbill.core.utils import utcnow

class Patient(SQLModel, table=True):
    __tablename__ = "patients"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    dentist_id: UUID = Field(foreign_key="dentists.id", index=True)
    name: str
    phone: str = ""
    # [{name, type, url, path, uploaded_at}]
    documents: List[dict] = Field(default=[], sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
