import logging
import requests
from .base_notifier import Notifier
from ..exceptions import DeliveryError

logger = logging.getLogger(__name__)


class WebhookNotifier(Notifier):
    """Posts the message to an IFTTT Maker-style webhook as {"value1": message}."""

    def __init__(self, webhook_url: str, timeout: int = 10):
        if not webhook_url:
            raise ValueError("Webhook URL must be provided via parameter or 'WEBHOOK_URL' environment variable")
        self.webhook_url = webhook_url
        self.timeout = timeout

    def send(self, message: str) -> None:
        payload = {"value1": message}
        try:
            response = requests.post(self.webhook_url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise DeliveryError(f"Error sending webhook request: {e}") from e

        if not response.ok:
            raise DeliveryError(f"{response.status_code}: {response.reason} - error sending webhook request")

        logger.info(f"Webhook delivered ({response.status_code}): {response.text[:200]}")
