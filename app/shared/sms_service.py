import logging
import requests
from twilio.rest import Client
from twilio.base.exceptions import TwilioException
from twilio.http.http_client import TwilioHttpClient
from app.shared.exceptions import DeliveryError

logger = logging.getLogger(__name__)


class TwilioSMSAPI:
    def __init__(self, account_sid, auth_token, from_number, timeout=10.0):
        """Notifier that sends plain SMS through Twilio's Messages resource."""
        self.client = Client(account_sid, auth_token, http_client=TwilioHttpClient(timeout=timeout))
        self.from_number = from_number

    def send_text_message(self, recipient, body):
        """
        Send an SMS to `recipient`.

        Returns:
            str: SID of the queued message.

        Raises:
            DeliveryError: When Twilio rejects the message or cannot be reached.
        """
        logger.info(f"Sending SMS to {recipient}")
        try:
            message = self.client.messages.create(
                body=body,
                from_=self.from_number,
                to=recipient
            )
        except (TwilioException, requests.RequestException) as e:
            logger.error(f"SMS delivery to {recipient} failed: {e}")
            raise DeliveryError("Failed to send OTP via SMS") from e

        logger.info(f"SMS sent successfully to {recipient}, SID: {message.sid}")
        return message.sid
