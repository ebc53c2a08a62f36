import logging
from fastapi import APIRouter, Depends, Request
from app.domains.auth.models import SendOTPRequest, VerifyOTPRequest
from app.domains.otp.otp_service import OTPService
from app.shared.exceptions import InternalError, OTPAuthException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_otp_service(request: Request) -> OTPService:
    return request.app.state.otp_service


@router.post("/send-otp")
async def send_otp(
    request_data: SendOTPRequest,
    otp_service: OTPService = Depends(get_otp_service)
):
    try:
        result = await otp_service.send_otp(request_data.phone_number)
    except OTPAuthException:
        raise
    except Exception as e:
        logger.exception("Error in send_otp")
        raise InternalError("Failed to generate and send OTP") from e

    response = {"success": True, "message": result.message}
    development = result.development_payload()
    if development is not None:
        response["development"] = development
    return response


@router.post("/verify-otp")
async def verify_otp(
    request_data: VerifyOTPRequest,
    otp_service: OTPService = Depends(get_otp_service)
):
    try:
        token = await otp_service.verify_otp(request_data.phone_number, request_data.otp)
    except OTPAuthException:
        raise
    except Exception as e:
        logger.exception("Error verifying OTP")
        raise InternalError("Server error") from e

    return {
        "success": True,
        "message": "OTP verified successfully",
        "token": token
    }
