"""
Tenant (dentist) resolution.

Every data operation is scoped by a ``TenantContext`` built once per request
and passed explicitly into the services. The context prefers the verified
session identity and falls back to the dentist id the client persisted at
login; when neither exists it carries no identity at all.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from dentalbill.core.exceptions import NotAuthenticated
from dentalbill.core.logger import logger
from dentalbill.db.models import Bill, Dentist


class TenantSource(str, Enum):
    SESSION = "session"
    CACHED = "cached"
    NONE = "none"


@dataclass(frozen=True)
class TenantContext:
    dentist_id: Optional[UUID] = None
    source: TenantSource = TenantSource.NONE

    @classmethod
    def from_session(cls, dentist_id: UUID) -> "TenantContext":
        return cls(dentist_id=dentist_id, source=TenantSource.SESSION)

    @classmethod
    def from_cache(cls, dentist_id: UUID) -> "TenantContext":
        return cls(dentist_id=dentist_id, source=TenantSource.CACHED)

    @classmethod
    def anonymous(cls) -> "TenantContext":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.dentist_id is not None


def resolve_tenant_id(ctx: TenantContext) -> UUID:
    if ctx.dentist_id is None:
        raise NotAuthenticated()
    return ctx.dentist_id


def parse_tenant_id(raw: Optional[str]) -> Optional[UUID]:
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError:
        return None


class TenantBillRepository:
    """Bill lookups bound to a single dentist."""

    def __init__(self, session: AsyncSession, dentist_id: UUID):
        self.session = session
        self.dentist_id = dentist_id

    async def get(self, bill_id: UUID) -> Optional[Bill]:
        stmt = select(Bill).where(Bill.id == bill_id, Bill.dentist_id == self.dentist_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list(self) -> list[Bill]:
        stmt = select(Bill).where(Bill.dentist_id == self.dentist_id).order_by(Bill.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


async def lookup_bill_across_tenants(session: AsyncSession, bill_id: UUID) -> Optional[Tuple[Bill, UUID]]:
    """
    Find a bill without knowing its owner by asking every dentist's repository
    in turn. Used only by the public bill links.

    This is O(number of dentists) round trips and is not meant for a large
    tenant count.
    """
    result = await session.execute(select(Dentist.id).order_by(Dentist.created_at))
    dentist_ids = result.scalars().all()
    for dentist_id in dentist_ids:
        bill = await TenantBillRepository(session, dentist_id).get(bill_id)
        if bill is not None:
            logger.info(f"Bill {bill_id} resolved by cross-tenant scan to dentist {dentist_id}")
            return bill, dentist_id
    return None
