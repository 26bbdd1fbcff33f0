from sqlmodel import SQLModel, Field
from sqlalchemy import JSON, Column, DateTime
from typing import Optional, List
from datetime import datetime
from uuid import UUID, uuid4

from dentalbill.core.utils import utcnow

class Bill(SQLModel, table=True):
    __tablename__ = "bills"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    dentist_id: UUID = Field(foreign_key="dentists.id", index=True)
    # Plain reference: deleting a patient leaves its bills in place
    patient_id: Optional[UUID] = Field(default=None, index=True)
    # Snapshot of the name at billing time; later patient renames do not touch it
    patient_name: str
    # Ordered [{description, amount}]
    consultations: List[dict] = Field(default=[], sa_column=Column(JSON))
    status: str = Field(default="unpaid") # unpaid, paid
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
    paid_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))

    @property
    def total_amount(self) -> float:
        return sum(float(item.get("amount") or 0) for item in self.consultations or [])
