from typing import List, Optional, Sequence, Tuple, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from dentalbill.core.config import settings
from dentalbill.core.exceptions import BillNotFound, DuplicatePatient, ValidationFailed
from dentalbill.core.logger import logger
from dentalbill.core.utils import format_amount, normalize_name, utcnow
from dentalbill.db.models import Bill
from dentalbill.schemas.bill import (
    BillResponse,
    BillStatus,
    Consultation,
    GenerateBillRequest,
    GenerateBillResponse,
    PatientKind,
)
from dentalbill.services.patient_service import DUPLICATE_PHONE, PatientService, validate_patient_fields
from dentalbill.services.sms_service import SmsService, sms_service, to_e164
from dentalbill.services.tenant_service import (
    TenantBillRepository,
    TenantContext,
    lookup_bill_across_tenants,
    resolve_tenant_id,
)

SMS_FAILED_NOTICE = "Bill saved but SMS not sent."


def parse_bill_id(raw: Union[str, UUID, None]) -> UUID:
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw))
    except ValueError:
        raise BillNotFound()


def bill_total(consultations: Sequence[Union[Consultation, dict]]) -> float:
    total = 0.0
    for item in consultations:
        amount = item.amount if isinstance(item, Consultation) else item.get("amount")
        total += float(amount or 0)
    return total


def can_generate_bill(consultations: Sequence[Consultation]) -> bool:
    """At least one line item must be above the minimum billable amount."""
    return any(c.amount is not None and c.amount > settings.MIN_BILL_AMOUNT for c in consultations)


def build_bill_sms(patient_name: str, consultations: Sequence[Consultation], bill_id: UUID) -> str:
    first = consultations[0].description if consultations and consultations[0].description else "your treatment"
    treatment = f"{first} and {len(consultations) - 1} more" if len(consultations) > 1 else first
    total = bill_total(consultations)
    amount = format_amount(total, 0 if float(total).is_integer() else 2)
    link = f"{settings.PUBLIC_BASE_URL.rstrip('/')}/api/get-bill-pdf?id={bill_id}"
    return (
        f"Dear {patient_name}, your dental bill of ₹{amount} for {treatment} is ready. "
        f"Download your bill here: {link}"
    )


class BillService:
    def __init__(self, session: AsyncSession, sms: Optional[SmsService] = None):
        self.session = session
        self.sms = sms or sms_service

    async def create_bill(self, dentist_id: UUID, patient_id: Optional[UUID], patient_name: str,
                          consultations: Sequence[Consultation]) -> Bill:
        """Persist a bill as given; amount checks belong to the caller."""
        bill = Bill(
            dentist_id=dentist_id,
            patient_id=patient_id,
            patient_name=patient_name.strip(),
            consultations=[c.model_dump() for c in consultations],
            status=BillStatus.UNPAID.value,
        )
        self.session.add(bill)
        await self.session.commit()
        await self.session.refresh(bill)
        logger.info(f"Bill created: {bill.id} for dentist {dentist_id} ({len(consultations)} items)")
        return bill

    async def get_bill(self, ctx: TenantContext, bill_id: Union[str, UUID]) -> Tuple[Bill, UUID]:
        """
        Look a bill up for the current dentist, falling back to a scan of every
        dentist when there is no tenant or the bill is not theirs.

        Returns the bill together with its owning dentist id.
        """
        bill_uuid = parse_bill_id(bill_id)
        if ctx.is_authenticated:
            bill = await TenantBillRepository(self.session, resolve_tenant_id(ctx)).get(bill_uuid)
            if bill is not None:
                return bill, bill.dentist_id

        match = await lookup_bill_across_tenants(self.session, bill_uuid)
        if match is None:
            raise BillNotFound()
        return match

    async def list_bills_for_tenant(self, ctx: TenantContext) -> List[Bill]:
        return await TenantBillRepository(self.session, resolve_tenant_id(ctx)).list()

    async def list_bills_for_patient(self, ctx: TenantContext, patient: str) -> List[Bill]:
        """Fetch the dentist's bills and keep those matching a patient name or id."""
        bills = await self.list_bills_for_tenant(ctx)
        wanted = normalize_name(patient)
        return [
            bill for bill in bills
            if normalize_name(bill.patient_name) == wanted
            or (bill.patient_id is not None and str(bill.patient_id) == patient.strip())
        ]

    async def list_all_bills(self) -> List[Bill]:
        result = await self.session.execute(select(Bill).order_by(Bill.created_at))
        return list(result.scalars().all())

    async def mark_paid(self, ctx: TenantContext, bill_id: Union[str, UUID]) -> Bill:
        bill = await TenantBillRepository(self.session, resolve_tenant_id(ctx)).get(parse_bill_id(bill_id))
        if bill is None:
            raise BillNotFound()
        if bill.status != BillStatus.PAID.value:
            bill.status = BillStatus.PAID.value
            bill.paid_at = utcnow()
            self.session.add(bill)
            await self.session.commit()
            await self.session.refresh(bill)
            logger.info(f"Bill {bill.id} marked as paid")
        return bill

    async def generate_bill(self, ctx: TenantContext, data: GenerateBillRequest,
                            patients: Optional[PatientService] = None) -> GenerateBillResponse:
        """
        The create-bill screen flow: register a new patient if needed, save the
        bill, then text the patient a link to the receipt.

        The SMS is best effort. A gateway failure is reported in the response
        and the saved bill stays.
        """
        dentist_id = resolve_tenant_id(ctx)
        patients = patients or PatientService(self.session)

        if data.patient_type == PatientKind.EXISTING:
            if data.patient_id is None:
                raise ValidationFailed("Select an existing patient", field="patient_id")
            patient = await patients.get_patient(ctx, data.patient_id)
            patient_id, patient_name, phone = patient.id, patient.name, patient.phone
        else:
            patient_name, phone = data.patient_name, data.phone
            if not patient_name.strip():
                raise ValidationFailed("Enter patient name", field="patient_name")
            patient_id = None

        if not can_generate_bill(data.consultations):
            raise ValidationFailed(
                f"Add at least one treatment above {format_amount(settings.MIN_BILL_AMOUNT, 0)}",
                field="consultations",
            )

        if data.patient_type == PatientKind.NEW:
            validate_patient_fields(patient_name, phone)
            existing, _ = await patients.find_duplicate(dentist_id, patient_name, phone)
            if existing is None:
                patient_id = await patients.add_patient(ctx, patient_name, phone)
            elif normalize_name(existing.name) == normalize_name(patient_name):
                # Same person entered again: bill the stored record under its stored name
                patient_id, patient_name = existing.id, existing.name
            else:
                raise DuplicatePatient(DUPLICATE_PHONE, field="phone")

        bill = await self.create_bill(dentist_id, patient_id, patient_name, data.consultations)

        sms_error = None
        if phone:
            message = build_bill_sms(bill.patient_name, data.consultations, bill.id)
            result = await self.sms.send_bill_sms(to_e164(phone), message)
            sms_error = None if result.success else (result.error or "Unknown error")
        else:
            sms_error = "Patient has no phone number"

        if sms_error:
            logger.warning(f"Bill {bill.id} saved but SMS not sent: {sms_error}")

        return GenerateBillResponse(
            bill=BillResponse.model_validate(bill),
            patient_id=patient_id,
            sms_sent=sms_error is None,
            sms_error=sms_error,
            message="Bill generated successfully!" if sms_error is None else SMS_FAILED_NOTICE,
        )
