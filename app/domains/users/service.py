import datetime
import logging
from typing import Optional
from pymongo import ReturnDocument
from app.domains.users.models import UserRecord

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, collection):
        """
        Args:
            collection: Motor collection holding user records keyed by normalized phone number.
        """
        self.users = collection

    async def ensure_indexes(self):
        await self.users.create_index("phone_number", unique=True)

    async def find_by_phone_number(self, phone_number: str) -> Optional[UserRecord]:
        doc = await self.users.find_one({"phone_number": phone_number})
        if doc is None:
            return None
        return UserRecord.from_document(doc)

    async def create_or_update(
        self,
        phone_number: str,
        otp: str,
        otp_expires: datetime.datetime
    ) -> UserRecord:
        # Concurrent calls for the same number are not serialized; the last write wins.
        now = datetime.datetime.now(datetime.timezone.utc)
        doc = await self.users.find_one_and_update(
            {"phone_number": phone_number},
            {
                "$setOnInsert": {"created_at": now},
                "$set": {
                    "otp": otp,
                    "otp_expires": otp_expires,
                    "updated_at": now,
                },
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        logger.info(f"OTP stored for {phone_number}")
        return UserRecord.from_document(doc)

    async def clear_otp(self, phone_number: str, otp: str) -> bool:
        """
        Consume `otp` for a phone number.

        The update only matches while `otp` is still the stored code, so a code
        re-issued after the caller's lookup is left in place.

        Returns:
            bool: False when the stored code no longer matches.
        """
        result = await self.users.update_one(
            {"phone_number": phone_number, "otp": otp},
            {
                "$set": {
                    "otp": None,
                    "otp_expires": None,
                    "updated_at": datetime.datetime.now(datetime.timezone.utc),
                }
            },
        )
        return result.modified_count == 1
