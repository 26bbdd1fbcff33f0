from typing import Any, Optional

from fastapi.concurrency import run_in_threadpool
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from dentalbill.core.config import settings
from dentalbill.core.logger import logger
from dentalbill.schemas.sms import SmsResult

NOT_CONFIGURED = "SMS gateway is not configured"


class SmsService:
    """Thin pass-through to the Twilio messaging service. Never raises on gateway errors."""

    def __init__(self, client: Any = None):
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or settings.sms_enabled

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        return self._client

    async def send_bill_sms(self, to: str, message: str) -> SmsResult:
        if not self.enabled:
            logger.warning("SMS requested but Twilio credentials are not set")
            return SmsResult(success=False, error=NOT_CONFIGURED)
        try:
            response = await run_in_threadpool(
                self.client.messages.create,
                body=message,
                messaging_service_sid=settings.TWILIO_MESSAGING_SID,
                to=to,
            )
        except (TwilioException, OSError) as e:
            logger.error(f"Twilio SMS error for {to}: {e}")
            return SmsResult(success=False, error=str(e))
        logger.info(f"SMS sent to {to}: {response.sid}")
        return SmsResult(success=True, sid=response.sid)


def to_e164(phone: str, country_code: Optional[str] = None) -> str:
    phone = phone.strip()
    if phone.startswith("+"):
        return phone
    return f"{country_code or settings.SMS_COUNTRY_CODE}{phone}"


sms_service = SmsService()
