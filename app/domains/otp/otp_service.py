import logging
import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Union

from starlette.concurrency import run_in_threadpool

from app.domains.auth.jwt_service import JWTService
from app.domains.otp.phone import format_phone_number
from app.domains.users.service import UserService
from app.shared.exceptions import (
    DeliveryError,
    ExpiredError,
    InvalidCodeError,
    NotFoundError,
    StateError,
    ValidationError,
)
from app.shared.notifier import Notifier

logger = logging.getLogger(__name__)

OTP_PATTERN = re.compile(r"^\d{6}$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Mongo hands back naive datetimes that are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class OTPIssueResult:
    phone_number: str
    message: str
    otp: str
    expires_at: datetime
    delivered: bool
    development_mode: bool

    def development_payload(self) -> Optional[dict]:
        """Code and expiry for the dev fallback response; never populated in production."""
        if self.delivered or not self.development_mode:
            return None
        return {"otp": self.otp, "expiresAt": self.expires_at.isoformat()}


class OTPService:
    def __init__(
        self,
        user_service: UserService,
        jwt_service: JWTService,
        notifier: Optional[Notifier] = None,
        *,
        development_mode: bool,
        expiry_minutes: int = 10,
        country_code: str = "91",
        brand: str = "Travease",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize OTP Service.

        Args:
            user_service (UserService): Store holding the outstanding OTP per phone number.
            jwt_service (JWTService): Signs session tokens after a successful verification.
            notifier (Notifier): Delivery channel. None means codes are only returned in development.
            development_mode (bool): Enables the dev fallback and non-fatal delivery failures.
            expiry_minutes (int): OTP validity duration in minutes. Default is 10 minutes.
            country_code (str): Country code prepended to numbers entered without one.
            brand (str): Product name used in the outgoing message.
            clock (callable): Returns the current aware UTC datetime.
        """
        self.user_service = user_service
        self.jwt_service = jwt_service
        self.notifier = notifier
        self.development_mode = development_mode
        self.expiry_minutes = expiry_minutes
        self.country_code = country_code
        self.brand = brand
        self.clock = clock or _utcnow

    def normalize(self, phone_number: str) -> str:
        return format_phone_number(phone_number, self.country_code)

    @staticmethod
    def generate_otp() -> str:
        """Generate a 6-digit OTP in the range 100000-999999."""
        return str(100000 + secrets.randbelow(900000))

    def build_message(self, otp: str) -> str:
        return f"Your {self.brand} verification code is: {otp}. Valid for {self.expiry_minutes} minutes."

    async def send_otp(self, phone_number: Optional[str]) -> OTPIssueResult:
        """
        Generate, store and deliver an OTP for a phone number.

        A new OTP overwrites any code still outstanding for the same number.

        Args:
            phone_number (str): Raw phone number entered by the user.

        Returns:
            OTPIssueResult: What was issued and whether it reached the notifier.
        """
        if not phone_number or not str(phone_number).strip():
            raise ValidationError("Phone number is required")

        formatted_phone_number = self.normalize(str(phone_number))
        logger.info(f"Issuing OTP for {formatted_phone_number}")

        otp = self.generate_otp()
        otp_expires = self.clock() + timedelta(minutes=self.expiry_minutes)

        await self.user_service.create_or_update(formatted_phone_number, otp, otp_expires)

        delivered = await self._deliver(formatted_phone_number, otp)
        if delivered:
            message = "OTP sent successfully"
        else:
            logger.warning(f"OTP for {formatted_phone_number} not delivered, returning it in the response (development mode)")
            message = "OTP generated successfully"

        return OTPIssueResult(
            phone_number=formatted_phone_number,
            message=message,
            otp=otp,
            expires_at=otp_expires,
            delivered=delivered,
            development_mode=self.development_mode,
        )

    async def _deliver(self, phone_number: str, otp: str) -> bool:
        if self.notifier is None:
            if not self.development_mode:
                logger.error("OTP requested but no delivery channel is configured")
                raise DeliveryError("SMS delivery is not configured")
            return False

        try:
            await run_in_threadpool(self.notifier.send_text_message, phone_number, self.build_message(otp))
        except DeliveryError:
            if not self.development_mode:
                raise
            logger.warning(f"Delivery to {phone_number} failed, falling back to development response")
            return False
        return True

    async def verify_otp(self, phone_number: Optional[str], otp: Union[str, int, None]) -> str:
        """
        Verify an OTP and consume it.

        Args:
            phone_number (str): Raw phone number entered by the user.
            otp (str | int): Candidate code.

        Returns:
            str: Signed session token for the verified number.
        """
        if not phone_number or not str(phone_number).strip():
            raise ValidationError("Phone number is required")
        if otp is None or otp == "":
            raise ValidationError("OTP is required")

        clean_otp = str(otp).strip()
        if not OTP_PATTERN.match(clean_otp):
            raise ValidationError("Please enter a valid 6-digit OTP")

        formatted_phone_number = self.normalize(str(phone_number))
        user = await self.user_service.find_by_phone_number(formatted_phone_number)
        if user is None:
            logger.warning(f"No user found with phone number {formatted_phone_number}")
            raise NotFoundError("User not found")

        if not user.has_outstanding_otp:
            logger.warning(f"No outstanding OTP for {formatted_phone_number}")
            raise StateError("No OTP found. Please request a new OTP")

        # An expired code stays stored until the next issue overwrites it
        if user.otp_expires is not None and _as_utc(user.otp_expires) < self.clock():
            logger.warning(f"Expired OTP presented for {formatted_phone_number}")
            raise ExpiredError("OTP has expired. Please request a new OTP")

        if str(user.otp).strip() != clean_otp:
            logger.warning(f"Invalid OTP presented for {formatted_phone_number}")
            raise InvalidCodeError("Invalid OTP. Please try again")

        if not await self.user_service.clear_otp(formatted_phone_number, user.otp):
            logger.warning(f"OTP for {formatted_phone_number} was consumed or replaced during verification")
            raise StateError("No OTP found. Please request a new OTP")
        logger.info(f"OTP consumed for {formatted_phone_number}")

        token = self.jwt_service.create_access_token(user.id, formatted_phone_number)
        logger.info(f"Session token issued for user {user.id}")
        return token
