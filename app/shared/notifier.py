import logging
from typing import Optional, Protocol

from app.config.setting import Settings
from app.shared.sms_service import TwilioSMSAPI
from app.shared.whatsapp_service import WhatsAppAPI

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send_text_message(self, recipient: str, body: str): ...


def _twilio_configured(settings: Settings) -> bool:
    return bool(settings.twilio_account_sid and settings.twilio_auth_token and settings.twilio_phone_number)


def _whatsapp_configured(settings: Settings) -> bool:
    return bool(settings.whatsapp_api_url and settings.whatsapp_session)


def _twilio(settings: Settings) -> TwilioSMSAPI:
    return TwilioSMSAPI(
        settings.twilio_account_sid,
        settings.twilio_auth_token,
        settings.twilio_phone_number,
        timeout=settings.notifier_timeout_seconds,
    )


def _whatsapp(settings: Settings) -> WhatsAppAPI:
    return WhatsAppAPI(
        settings.whatsapp_api_url,
        settings.whatsapp_session,
        timeout=settings.notifier_timeout_seconds,
    )


def build_notifier(settings: Settings) -> Optional[Notifier]:
    """
    Pick the delivery channel from settings.

    Returns None when no channel is usable, which leaves the OTP service on the
    development fallback path.
    """
    provider = settings.sms_provider.strip().lower()

    if provider == "none":
        logger.warning("OTP delivery disabled by configuration")
        return None

    if provider not in ("", "twilio", "whatsapp"):
        raise ValueError(f"Unknown sms_provider: {settings.sms_provider!r}")

    if provider == "twilio" and not _twilio_configured(settings):
        raise ValueError("sms_provider is 'twilio' but TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_PHONE_NUMBER are not all set")

    if provider == "whatsapp" and not _whatsapp_configured(settings):
        raise ValueError("sms_provider is 'whatsapp' but WHATSAPP_API_URL and WHATSAPP_SESSION are not both set")

    if provider in ("", "twilio") and _twilio_configured(settings):
        logger.info("Twilio SMS notifier initialized")
        return _twilio(settings)

    if provider in ("", "whatsapp") and _whatsapp_configured(settings):
        logger.info("WhatsApp notifier initialized")
        return _whatsapp(settings)

    logger.warning("No OTP delivery channel configured:")
    logger.warning(f"  TWILIO_ACCOUNT_SID: {'Found' if settings.twilio_account_sid else 'Missing'}")
    logger.warning(f"  TWILIO_AUTH_TOKEN: {'Found' if settings.twilio_auth_token else 'Missing'}")
    logger.warning(f"  TWILIO_PHONE_NUMBER: {'Found' if settings.twilio_phone_number else 'Missing'}")
    if settings.development_mode:
        logger.warning("OTPs will be returned in the API response for development.")
    return None
