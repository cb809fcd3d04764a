import json
from urllib.parse import parse_qs

import httpx
import pytest

from skrbl.services.messaging import ResendClient, TwilioClient


@pytest.mark.unit
class TestTwilioClient:
    async def test_mock_sms_without_credentials(self):
        result = await TwilioClient(account_sid="", auth_token="", from_number="").send_sms("+15551234567", "hi")

        assert result.success is True
        assert result.provider == "twilio_mock"
        assert result.status == "mock_sent"
        assert result.message_id.startswith("mock_sms_")

    async def test_mock_call_without_credentials(self):
        result = await TwilioClient(account_sid="", auth_token="", from_number="").place_call("+15551234567", "hi")

        assert result.status == "mock_scheduled"
        assert result.message_id.startswith("mock_voice_")

    async def test_sms_posts_form_with_basic_auth(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(201, json={"sid": "SM123", "status": "queued"})

        client = TwilioClient(account_sid="AC1", auth_token="tok", from_number="+15550000000",
                              transport=httpx.MockTransport(handler))
        result = await client.send_sms("+15551234567", "Your code is 123456")

        assert result.success is True
        assert result.message_id == "SM123"
        assert seen["url"].endswith("/Accounts/AC1/Messages.json")
        assert seen["auth"].startswith("Basic ")
        assert seen["form"]["Body"] == ["Your code is 123456"]

    async def test_call_sends_escaped_twiml(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(201, json={"sid": "CA1", "status": "queued"})

        client = TwilioClient(account_sid="AC1", auth_token="tok", from_number="+15550000000",
                              transport=httpx.MockTransport(handler))
        await client.place_call("+15551234567", "Fish & chips")

        assert seen["form"]["Twiml"] == ['<Response><Say voice="alice">Fish &amp; chips</Say></Response>']

    async def test_api_error_is_failure(self):
        client = TwilioClient(
            account_sid="AC1", auth_token="tok", from_number="+15550000000",
            transport=httpx.MockTransport(lambda request: httpx.Response(400, json={"message": "Invalid To"})),
        )
        result = await client.send_sms("+1", "hi")

        assert result.success is False
        assert "Invalid To" in result.error

    async def test_non_json_success_body(self):
        client = TwilioClient(
            account_sid="AC1", auth_token="tok", from_number="+15550000000",
            transport=httpx.MockTransport(lambda request: httpx.Response(201, text="Queued")),
        )
        result = await client.send_sms("+1", "hi")

        assert result.success is True
        assert result.message_id is None


@pytest.mark.unit
class TestResendClient:
    async def test_mock_email_without_key(self):
        result = await ResendClient(api_key="").send_email("a@example.com", "Hi", "<p>Hi</p>")

        assert result.provider == "resend_mock"
        assert result.message_id.startswith("mock_email_")

    async def test_sends_with_bearer_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "re_1"})

        client = ResendClient(api_key="re_key", from_email="Percy <percy@example.com>",
                              transport=httpx.MockTransport(handler))
        result = await client.send_email("a@example.com", "Hi", "<p>Hi</p>")

        assert result.success is True
        assert result.message_id == "re_1"
        assert seen["auth"] == "Bearer re_key"
        assert seen["body"]["to"] == ["a@example.com"]
        assert seen["body"]["from"] == "Percy <percy@example.com>"

    async def test_non_json_success_body(self):
        client = ResendClient(api_key="re_key",
                              transport=httpx.MockTransport(lambda request: httpx.Response(200, text="OK")))
        result = await client.send_email("a@example.com", "Hi", "<p>Hi</p>")

        assert result.success is True
        assert result.message_id is None
        assert result.status == "sent"
