# app/domains/users/models.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserRecord(BaseModel):
    id: str
    phone_number: str
    otp: Optional[str] = None
    otp_expires: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_outstanding_otp(self) -> bool:
        return self.otp is not None

    @classmethod
    def from_document(cls, doc: dict) -> "UserRecord":
        return cls(
            id=str(doc["_id"]),
            phone_number=doc["phone_number"],
            otp=doc.get("otp"),
            otp_expires=doc.get("otp_expires"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )
