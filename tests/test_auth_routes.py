"""
Tests for POST /auth/send-otp and POST /auth/verify-otp.
"""
from unittest.mock import AsyncMock

from tests.conftest import FailingNotifier, FakeNotifier


class TestSendOTP:

    def test_send_otp_development_fallback(self, client, user_service):
        response = client.post("/auth/send-otp", json={"phoneNumber": "9876543210"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "OTP generated successfully"
        assert data["development"]["otp"] == user_service.records["+919876543210"].otp
        assert "expiresAt" in data["development"]

    def test_send_otp_delivered(self, make_client, make_otp_service):
        client = make_client(make_otp_service(notifier=FakeNotifier()))

        response = client.post("/auth/send-otp", json={"phoneNumber": "9876543210"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "OTP sent successfully"}

    def test_send_otp_missing_phone(self, client):
        response = client.post("/auth/send-otp", json={})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Phone number is required"}

    def test_send_otp_malformed_body(self, client):
        response = client.post("/auth/send-otp", content="not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_send_otp_delivery_failure_in_production(self, make_client, make_otp_service):
        service = make_otp_service(notifier=FailingNotifier(), development_mode=False)
        client = make_client(service, development_mode=False)

        response = client.post("/auth/send-otp", json={"phoneNumber": "9876543210"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Failed to send OTP via SMS"}

    def test_send_otp_store_failure_is_internal_error(self, client, user_service):
        user_service.create_or_update = AsyncMock(side_effect=RuntimeError("mongo down"))

        response = client.post("/auth/send-otp", json={"phoneNumber": "9876543210"})

        assert response.status_code == 500
        data = response.json()
        assert data["message"] == "Failed to generate and send OTP"
        assert data["error"] == "mongo down"

    def test_store_failure_hides_details_in_production(self, make_client, make_otp_service, user_service):
        user_service.create_or_update = AsyncMock(side_effect=RuntimeError("mongo down"))
        client = make_client(make_otp_service(notifier=FakeNotifier(), development_mode=False), development_mode=False)

        response = client.post("/auth/send-otp", json={"phoneNumber": "9876543210"})

        assert response.status_code == 500
        assert "error" not in response.json()


class TestVerifyOTP:

    def test_full_flow(self, make_client, make_otp_service, jwt_service):
        client = make_client(make_otp_service(country_code="1"))

        sent = client.post("/auth/send-otp", json={"phoneNumber": "+15551234567"}).json()
        response = client.post(
            "/auth/verify-otp",
            json={"phoneNumber": "+15551234567", "otp": sent["development"]["otp"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "OTP verified successfully"
        assert jwt_service.verify_token(data["token"])["phoneNumber"] == "+15551234567"

    def test_verify_with_numeric_otp(self, client):
        sent = client.post("/auth/send-otp", json={"phoneNumber": "9876543210"}).json()

        response = client.post(
            "/auth/verify-otp",
            json={"phoneNumber": "9876543210", "otp": int(sent["development"]["otp"])},
        )

        assert response.status_code == 200

    def test_replay_is_rejected(self, client):
        sent = client.post("/auth/send-otp", json={"phoneNumber": "9876543210"}).json()
        body = {"phoneNumber": "9876543210", "otp": sent["development"]["otp"]}

        assert client.post("/auth/verify-otp", json=body).status_code == 200
        response = client.post("/auth/verify-otp", json=body)

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "No OTP found. Please request a new OTP"}

    def test_unknown_number(self, client):
        response = client.post("/auth/verify-otp", json={"phoneNumber": "9876543210", "otp": "123456"})

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "User not found"}

    def test_invalid_format(self, client):
        response = client.post("/auth/verify-otp", json={"phoneNumber": "9876543210", "otp": "12a45b"})

        assert response.status_code == 400
        assert response.json()["message"] == "Please enter a valid 6-digit OTP"

    def test_missing_otp(self, client):
        response = client.post("/auth/verify-otp", json={"phoneNumber": "9876543210"})

        assert response.status_code == 400
        assert response.json()["message"] == "OTP is required"

    def test_expired(self, client, clock):
        sent = client.post("/auth/send-otp", json={"phoneNumber": "9876543210"}).json()
        clock.advance(minutes=15)

        response = client.post(
            "/auth/verify-otp",
            json={"phoneNumber": "9876543210", "otp": sent["development"]["otp"]},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "OTP has expired. Please request a new OTP"

    def test_wrong_code(self, client):
        sent = client.post("/auth/send-otp", json={"phoneNumber": "9876543210"}).json()
        wrong = "100000" if sent["development"]["otp"] != "100000" else "100001"

        response = client.post("/auth/verify-otp", json={"phoneNumber": "9876543210", "otp": wrong})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid OTP. Please try again"


class TestRequestBodies:

    def test_form_encoded_body_is_rejected(self, client, user_service):
        response = client.post("/auth/send-otp", data={"phoneNumber": "9876543210"})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert user_service.calls == []
