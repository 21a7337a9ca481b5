from typing import Optional

import requests
from loguru import logger
from requests import RequestException

from models import ClientSummary, DuplicateCheckResponse, WebhookPayload


class SubmissionError(RuntimeError):
    """A new-client submission did not reach the webhook."""


class ConfigurationError(SubmissionError):
    pass


class TransportError(SubmissionError):
    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


def send_to_webhook(payload: WebhookPayload, webhook_url: Optional[str], timeout: float) -> int:
    if not webhook_url:
        raise ConfigurationError(
            "Webhook URL not configured. Please set WEBHOOK_URL in the environment or Streamlit secrets."
        )

    logger.info(f"Submitting {payload.name} to webhook {webhook_url}")
    try:
        response = requests.post(
            webhook_url,
            json=payload.model_dump(),
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
    except RequestException as e:
        logger.warning(f"Network failure when calling webhook: {e}")
        raise TransportError(f"Could not reach the webhook: {e}") from e

    if not 200 <= response.status_code < 300:
        detail = f"Webhook returned {response.status_code}: {response.reason or ''}".strip()
        logger.warning(detail)
        raise TransportError(detail, status_code=response.status_code)
    return response.status_code


def make_duplicate_lookup(check_url: str, timeout: float):
    """Build a duplicate lookup that asks an HTTP service about email/phone."""

    def lookup(email: str, phone: str) -> Optional[ClientSummary]:
        response = requests.get(check_url, params={"email": email, "phone": phone}, timeout=timeout)
        response.raise_for_status()
        data = DuplicateCheckResponse.model_validate(response.json())
        return data.client if data.exists else None

    return lookup
