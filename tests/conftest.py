"""
Pytest configuration and fixtures for the OTP auth tests.

Provides in-memory stand-ins for the user store and notifier so the OTP
service and routes run without MongoDB or an SMS provider.
"""
import sys
import pathlib
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.domains.auth.jwt_service import JWTService
from app.domains.auth.routes import router as auth_router
from app.domains.otp.otp_service import OTPService
from app.domains.users.models import UserRecord
from app.shared.exceptions import DeliveryError, register_exception_handlers

TEST_SECRET = "test-secret"


class FakeUserService:
    """Dict-backed user store with the same async surface as UserService."""

    def __init__(self):
        self.records = {}
        self.calls = []
        self.before_clear = None
        self._next_id = 1

    async def find_by_phone_number(self, phone_number):
        self.calls.append(("find_by_phone_number", phone_number))
        record = self.records.get(phone_number)
        return record.model_copy() if record else None

    async def create_or_update(self, phone_number, otp, otp_expires):
        self.calls.append(("create_or_update", phone_number))
        record = self.records.get(phone_number)
        if record is None:
            record = UserRecord(id=f"user-{self._next_id}", phone_number=phone_number)
            self._next_id += 1
        record = record.model_copy(update={"otp": otp, "otp_expires": otp_expires})
        self.records[phone_number] = record
        return record.model_copy()

    async def clear_otp(self, phone_number, otp):
        self.calls.append(("clear_otp", phone_number))
        if self.before_clear is not None:
            await self.before_clear()
        record = self.records.get(phone_number)
        if record is None or record.otp != otp:
            return False
        self.records[phone_number] = record.model_copy(update={"otp": None, "otp_expires": None})
        return True


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def send_text_message(self, recipient, body):
        self.sent.append((recipient, body))
        return {"status": "queued"}


class FailingNotifier:
    def __init__(self):
        self.attempts = 0

    def send_text_message(self, recipient, body):
        self.attempts += 1
        raise DeliveryError("Failed to send OTP via SMS")


class FakeClock:
    def __init__(self, now=None):
        self.now = now or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def user_service():
    return FakeUserService()


@pytest.fixture
def jwt_service():
    return JWTService(TEST_SECRET)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_otp_service(user_service, jwt_service, clock):
    def _make(notifier=None, development_mode=True, country_code="91"):
        return OTPService(
            user_service,
            jwt_service,
            notifier,
            development_mode=development_mode,
            country_code=country_code,
            clock=clock,
        )
    return _make


@pytest.fixture
def otp_service(make_otp_service):
    return make_otp_service()


@pytest.fixture
def make_client():
    def _make(otp_service, development_mode=True):
        app = FastAPI()
        register_exception_handlers(app, include_details=development_mode)
        app.include_router(auth_router)
        app.state.otp_service = otp_service
        return TestClient(app)
    return _make


@pytest.fixture
def client(make_client, otp_service):
    return make_client(otp_service)
