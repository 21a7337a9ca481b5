from unittest.mock import patch

import pytest
import requests

from conftest import DummyResponse
from dispatcher import ConfigurationError, TransportError, make_duplicate_lookup, send_to_webhook
from models import WebhookPayload

PAYLOAD = WebhookPayload(
    name="John Smith",
    email="john@x.com",
    phone="5551234567",
    service_type="Personal Tax Return",
    source="Walk-In",
    timestamp="2026-01-01T12:00:00.000Z",
    submitted_by="staff_user",
    form_version="staff_v1",
)


@patch("dispatcher.requests.post")
def test_posts_json_payload(mock_post):
    mock_post.return_value = DummyResponse(201, "Created")
    assert send_to_webhook(PAYLOAD, "https://hooks.example.com", 5.0) == 201

    kwargs = mock_post.call_args.kwargs
    assert mock_post.call_args.args == ("https://hooks.example.com",)
    assert kwargs["json"] == PAYLOAD.model_dump()
    assert kwargs["headers"] == {"Content-Type": "application/json"}
    assert kwargs["timeout"] == 5.0


@patch("dispatcher.requests.post")
def test_missing_url_is_a_configuration_error(mock_post):
    with pytest.raises(ConfigurationError, match="Webhook URL not configured"):
        send_to_webhook(PAYLOAD, None, 5.0)
    mock_post.assert_not_called()


@patch("dispatcher.requests.post")
def test_non_success_status_is_a_transport_error(mock_post):
    mock_post.return_value = DummyResponse(500, "Internal Server Error")
    with pytest.raises(TransportError) as exc_info:
        send_to_webhook(PAYLOAD, "https://hooks.example.com", 5.0)
    assert exc_info.value.status_code == 500
    assert "Webhook returned 500" in str(exc_info.value)


@patch("dispatcher.requests.post")
def test_network_failure_is_a_transport_error(mock_post):
    mock_post.side_effect = requests.ConnectionError("connection refused")
    with pytest.raises(TransportError) as exc_info:
        send_to_webhook(PAYLOAD, "https://hooks.example.com", 5.0)
    assert exc_info.value.status_code is None


@patch("dispatcher.requests.get")
def test_duplicate_lookup_reads_existing_client(mock_get):
    mock_get.return_value = DummyResponse(
        payload={"exists": True, "client": {"name": "John Smith", "email": "john@x.com", "phone": "5551234567"}}
    )
    lookup = make_duplicate_lookup("https://hooks.example.com/check-duplicate", 5.0)
    match = lookup("john@x.com", "5551234567")
    assert match.name == "John Smith"
    assert mock_get.call_args.kwargs["params"] == {"email": "john@x.com", "phone": "5551234567"}


@patch("dispatcher.requests.get")
def test_duplicate_lookup_miss(mock_get):
    mock_get.return_value = DummyResponse(payload={"exists": False})
    lookup = make_duplicate_lookup("https://hooks.example.com/check-duplicate", 5.0)
    assert lookup("new@x.com", "") is None
