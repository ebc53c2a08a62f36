import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional


class JWTService:
    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_days: int = 7):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire = timedelta(days=expire_days)

    def create_access_token(self, user_id: str, phone_number: str) -> str:
        """Create a signed session token for a verified phone number."""
        now = datetime.now(timezone.utc)

        to_encode = {
            "id": user_id,
            "phoneNumber": phone_number,
            "sub": phone_number,
            "iat": now,
            "exp": now + self.access_token_expire
        }

        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Optional[dict]:
        """Verify a session token and return its claims if valid."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None
        if payload.get("phoneNumber") is None:
            return None
        return payload
