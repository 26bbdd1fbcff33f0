from uuid import uuid4

import pytest
from sqlalchemy import DateTime

from dentalbill.db.models import Appointment, Bill, ClinicProfile, Dentist, Patient
from dentalbill.schemas.bill import Consultation
from dentalbill.services.bill_service import BillService


@pytest.mark.parametrize("column", [
    Dentist.__table__.c.created_at,
    Patient.__table__.c.created_at,
    Appointment.__table__.c.start,
    Appointment.__table__.c.end,
    Appointment.__table__.c.created_at,
    Bill.__table__.c.created_at,
    Bill.__table__.c.paid_at,
    ClinicProfile.__table__.c.updated_at,
])
def test_timestamp_columns_keep_timezone(column):
    assert isinstance(column.type, DateTime)
    assert column.type.timezone


def test_default_timestamps_are_aware():
    bill = Bill(dentist_id=uuid4(), patient_name="Ravi", consultations=[])
    assert bill.created_at.utcoffset() is not None
    patient = Patient(dentist_id=uuid4(), name="Ravi")
    assert patient.created_at.utcoffset() is not None


@pytest.mark.asyncio
async def test_timestamps_survive_a_database_round_trip(session, ctx):
    service = BillService(session)
    bill = await service.create_bill(ctx.dentist_id, None, "Ravi", [Consultation(amount=100)])
    paid = await service.mark_paid(ctx, bill.id)

    # SQLite drops the offset on read, PostgreSQL keeps it
    assert paid.paid_at.replace(tzinfo=None) >= paid.created_at.replace(tzinfo=None)
