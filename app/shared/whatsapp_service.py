import requests
import logging
from app.shared.exceptions import DeliveryError

logger = logging.getLogger(__name__)


class WhatsAppAPI:
    ENDPOINTS = {
        "send_message": "/client/sendMessage/",
    }

    def __init__(self, api_url, session, timeout=10.0):
        """Notifier that delivers text through a whatsapp-web HTTP gateway session."""
        self.api_url = api_url.rstrip("/")
        self.session = session
        self.timeout = timeout

    @staticmethod
    def chat_id(recipient):
        """Gateway chat ids are bare digits followed by '@c.us'."""
        return f"{recipient.lstrip('+')}@c.us"

    def send_text_message(self, recipient, body, content_type="string"):
        url = f"{self.api_url}{self.ENDPOINTS['send_message']}{self.session}"
        headers = {"Content-Type": "application/json"}
        payload = {
            "chatId": self.chat_id(recipient),
            "contentType": content_type,
            "content": body
        }

        logger.info(f"Sending WhatsApp message to {recipient}")
        try:
            response = requests.post(url, headers=headers, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"WhatsApp delivery to {recipient} failed: {e}")
            raise DeliveryError("Failed to send OTP via WhatsApp") from e

        return response
