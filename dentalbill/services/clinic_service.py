from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from dentalbill.core.exceptions import ValidationFailed
from dentalbill.core.logger import logger
from dentalbill.core.utils import format_operating_hours, safe_filename, utcnow
from dentalbill.db.models import ClinicProfile
from dentalbill.schemas.clinic import ClinicProfileUpdate, ReceiptBranding
from dentalbill.services.storage_service import StorageService, check_upload_size, storage_service
from dentalbill.services.tenant_service import TenantContext, resolve_tenant_id

IMAGE_KINDS = ("logo", "signature")

class ClinicService:
    def __init__(self, session: AsyncSession, storage: Optional[StorageService] = None):
        self.session = session
        self.storage = storage or storage_service

    async def load_profile(self, dentist_id: UUID) -> Optional[ClinicProfile]:
        stmt = select(ClinicProfile).where(ClinicProfile.dentist_id == dentist_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_profile(self, ctx: TenantContext) -> ClinicProfile:
        dentist_id = resolve_tenant_id(ctx)
        profile = await self.load_profile(dentist_id)
        if profile is None:
            profile = ClinicProfile(dentist_id=dentist_id)
            self.session.add(profile)
            await self.session.commit()
            await self.session.refresh(profile)
        return profile

    async def update_profile(self, ctx: TenantContext, data: ClinicProfileUpdate) -> ClinicProfile:
        profile = await self.get_profile(ctx)
        update_data = data.model_dump(exclude_unset=True, exclude={"operating_hours"})
        for key, value in update_data.items():
            if value is None:
                continue
            if key == "dentists":
                value = [name.strip() for name in value if name.strip()]
            elif isinstance(value, str):
                value = value.strip()
            setattr(profile, key, value)

        if data.operating_hours is not None:
            hours = data.operating_hours
            profile.operating_hours = format_operating_hours(hours.days, hours.start_time, hours.end_time)

        profile.updated_at = utcnow()
        self.session.add(profile)
        await self.session.commit()
        await self.session.refresh(profile)
        logger.info(f"Clinic profile updated for dentist {profile.dentist_id}")
        return profile

    async def upload_image(self, ctx: TenantContext, kind: str, filename: str,
                           content: bytes, content_type: Optional[str]) -> ClinicProfile:
        if kind not in IMAGE_KINDS:
            raise ValidationFailed(f"Unknown image kind: {kind}")
        check_upload_size(len(content))
        profile = await self.get_profile(ctx)

        path = f"dentists/{profile.dentist_id}/{kind}/{safe_filename(filename)}"
        url = await self.storage.upload(path, content, content_type)
        setattr(profile, f"{kind}_url", url)
        setattr(profile, f"{kind}_path", path)
        profile.updated_at = utcnow()
        self.session.add(profile)
        await self.session.commit()
        await self.session.refresh(profile)
        return profile

    async def delete_image(self, ctx: TenantContext, kind: str) -> ClinicProfile:
        if kind not in IMAGE_KINDS:
            raise ValidationFailed(f"Unknown image kind: {kind}")
        profile = await self.get_profile(ctx)
        path = getattr(profile, f"{kind}_path")
        if not path and not getattr(profile, f"{kind}_url"):
            raise ValidationFailed("No file to delete.")
        if path:
            await self.storage.delete(path)

        setattr(profile, f"{kind}_url", "")
        setattr(profile, f"{kind}_path", "")
        profile.updated_at = utcnow()
        self.session.add(profile)
        await self.session.commit()
        await self.session.refresh(profile)
        return profile

    async def get_branding(self, dentist_id: UUID) -> ReceiptBranding:
        """Profile values for printing, with defaults for anything left blank."""
        profile = await self.load_profile(dentist_id)
        if profile is None:
            return ReceiptBranding()
        values = {
            key: value
            for key, value in profile.model_dump(exclude={"id", "dentist_id", "updated_at"}).items()
            if value
        }
        return ReceiptBranding(**values)
