"""Error taxonomy for the OTP auth flow and the handlers that envelope it."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class OTPAuthException(Exception):
    """Base exception for all auth errors surfaced to API callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_response(self, include_details: bool = False) -> dict:
        body = {"success": False, "message": self.message}
        if include_details and self.__cause__ is not None:
            body["error"] = str(self.__cause__)
        return body


class ValidationError(OTPAuthException):
    """Missing or malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(OTPAuthException):
    """No user record exists for the phone number."""
    status_code = status.HTTP_404_NOT_FOUND


class StateError(OTPAuthException):
    """The user record has no outstanding OTP."""
    status_code = status.HTTP_400_BAD_REQUEST


class ExpiredError(OTPAuthException):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidCodeError(OTPAuthException):
    status_code = status.HTTP_400_BAD_REQUEST


class DeliveryError(OTPAuthException):
    """The notifier could not hand the code to the provider."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InternalError(OTPAuthException):
    """Unexpected store or signing failure."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI, include_details: bool) -> None:
    """Convert every error reaching the boundary into the `{success, message}` envelope."""

    @app.exception_handler(OTPAuthException)
    async def otp_auth_exception_handler(request: Request, exc: OTPAuthException):
        return JSONResponse(status_code=exc.status_code, content=exc.to_response(include_details))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        body = {"success": False, "message": "Invalid request body"}
        if include_details:
            body["error"] = str(exc.errors())
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        body = {"success": False, "message": "Something went wrong!"}
        if include_details:
            body["error"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
