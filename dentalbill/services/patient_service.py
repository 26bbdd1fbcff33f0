from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from dentalbill.core.exceptions import DuplicatePatient, PatientNotFound, ValidationFailed
from dentalbill.core.logger import logger
from dentalbill.core.utils import is_valid_phone, normalize_name, normalize_phone, safe_filename, utcnow
from dentalbill.db.models import Patient
from dentalbill.schemas.patient import PatientUpdate
from dentalbill.services.storage_service import StorageService, storage_service
from dentalbill.services.tenant_service import TenantContext, resolve_tenant_id

MISSING_FIELDS = "Please fill all fields before saving."
INVALID_PHONE = "Enter a valid 10-digit Indian phone number."
DUPLICATE_NAME = "Patient already exists. Please select 'Existing'."
DUPLICATE_PHONE = "Phone number already belongs to an existing patient."


def validate_patient_fields(name: str, phone: str) -> None:
    if not name.strip() or not phone.strip():
        raise ValidationFailed(MISSING_FIELDS, field="name" if not name.strip() else "phone")
    if not is_valid_phone(phone):
        raise ValidationFailed(INVALID_PHONE, field="phone")


class PatientService:
    def __init__(self, session: AsyncSession, storage: Optional[StorageService] = None):
        self.session = session
        self.storage = storage or storage_service

    async def list_patients(self, ctx: TenantContext) -> List[Patient]:
        dentist_id = resolve_tenant_id(ctx)
        stmt = select(Patient).where(Patient.dentist_id == dentist_id).order_by(Patient.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_patient(self, ctx: TenantContext, patient_id: UUID) -> Patient:
        dentist_id = resolve_tenant_id(ctx)
        stmt = select(Patient).where(Patient.id == patient_id, Patient.dentist_id == dentist_id)
        result = await self.session.execute(stmt)
        patient = result.scalars().first()
        if not patient:
            raise PatientNotFound()
        return patient

    async def find_duplicate(self, dentist_id: UUID, name: str, phone: str,
                             exclude_id: Optional[UUID] = None) -> tuple[Optional[Patient], Optional[str]]:
        """Return the first patient clashing on normalized name or phone, and which field clashed."""
        wanted_name = normalize_name(name)
        wanted_phone = normalize_phone(phone)
        stmt = select(Patient).where(Patient.dentist_id == dentist_id).order_by(Patient.created_at)
        result = await self.session.execute(stmt)
        for patient in result.scalars().all():
            if patient.id == exclude_id:
                continue
            if normalize_name(patient.name) == wanted_name:
                return patient, "name"
            if wanted_phone and normalize_phone(patient.phone) == wanted_phone:
                return patient, "phone"
        return None, None

    async def add_patient(self, ctx: TenantContext, name: str, phone: str, strict: bool = False) -> UUID:
        """
        Register a patient for the current dentist.

        Names are compared trimmed and case-insensitively, phones trimmed. On a
        clash the existing patient's id is returned, unless ``strict`` is set,
        in which case ``DuplicatePatient`` is raised instead.
        """
        dentist_id = resolve_tenant_id(ctx)
        validate_patient_fields(name, phone)

        existing, field = await self.find_duplicate(dentist_id, name, phone)
        if existing:
            if strict:
                raise DuplicatePatient(DUPLICATE_NAME if field == "name" else DUPLICATE_PHONE, field=field)
            logger.info(f"Patient matched existing record {existing.id} on {field}")
            return existing.id

        patient = Patient(dentist_id=dentist_id, name=name.strip(), phone=normalize_phone(phone))
        self.session.add(patient)
        await self.session.commit()
        await self.session.refresh(patient)
        logger.info(f"Patient created: {patient.id} for dentist {dentist_id}")
        return patient.id

    async def update_patient(self, ctx: TenantContext, patient_id: UUID, data: PatientUpdate) -> Patient:
        patient = await self.get_patient(ctx, patient_id)
        # A field sent as null keeps its stored value
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        name = update_data.get("name", patient.name)
        phone = update_data.get("phone", patient.phone)
        validate_patient_fields(name, phone)

        existing, field = await self.find_duplicate(patient.dentist_id, name, phone, exclude_id=patient.id)
        if existing:
            raise DuplicatePatient(DUPLICATE_NAME if field == "name" else DUPLICATE_PHONE, field=field)

        patient.name = name.strip()
        patient.phone = normalize_phone(phone)
        self.session.add(patient)
        await self.session.commit()
        await self.session.refresh(patient)
        return patient

    async def delete_patient(self, ctx: TenantContext, patient_id: UUID) -> None:
        patient = await self.get_patient(ctx, patient_id)
        await self.session.delete(patient)
        await self.session.commit()
        logger.info(f"Patient deleted: {patient_id}")

    async def add_document(self, ctx: TenantContext, patient_id: UUID, name: str, doc_type: str,
                           filename: str, content: bytes, content_type: Optional[str]) -> Patient:
        if not name.strip() or not doc_type.strip() or not content:
            raise ValidationFailed("Please fill all fields")
        patient = await self.get_patient(ctx, patient_id)

        path = f"documents/{patient.id}/{safe_filename(filename)}"
        url = await self.storage.upload(path, content, content_type)

        document = {
            "name": name.strip(),
            "type": doc_type.strip(),
            "url": url,
            "path": path,
            "uploaded_at": utcnow().isoformat(),
        }
        # Reassign so the JSON column is flagged as changed
        patient.documents = [*(patient.documents or []), document]
        self.session.add(patient)
        await self.session.commit()
        await self.session.refresh(patient)
        return patient
