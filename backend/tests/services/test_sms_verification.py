import pytest
from datetime import timedelta
from sqlalchemy.orm import Session

from skrbl.core.config import settings
from skrbl.core.exceptions import ForbiddenError, UpstreamError
from skrbl.models import SmsVerification
from skrbl.schemas.sms import normalize_phone
from skrbl.services.messaging import DeliveryResult, TwilioClient
from skrbl.services.sms_verification_service import (
    MAX_VERIFY_ATTEMPTS,
    SmsVerificationService,
    generate_code,
    is_whitelisted,
)
from skrbl.utils.time import utc_now_naive
from tests.factories import SmsVerificationFactory

PHONE = "+15551234567"


@pytest.fixture
def twilio():
    return TwilioClient(account_sid="", auth_token="", from_number="")


@pytest.mark.unit
class TestPhoneHandling:
    @pytest.mark.parametrize("raw,expected", [
        ("+1 (555) 123-4567", "+15551234567"),
        ("15551234567", "+15551234567"),
        ("+44.20.7946.0958", "+442079460958"),
    ])
    def test_normalize_phone(self, raw, expected):
        assert normalize_phone(raw) == expected

    @pytest.mark.parametrize("raw", ["", "555", "+0123456789", "call me"])
    def test_invalid_phone(self, raw):
        with pytest.raises(ValueError):
            normalize_phone(raw)

    def test_code_is_six_digits(self):
        code = generate_code()
        assert len(code) == 6 and code.isdigit()

    def test_whitelist(self, monkeypatch):
        monkeypatch.setattr(settings, "VIP_SMS_WHITELIST", [])
        assert is_whitelisted(PHONE) is True

        monkeypatch.setattr(settings, "VIP_SMS_WHITELIST", ["+1 555 123 4567", "garbage"])
        assert is_whitelisted(PHONE) is True
        assert is_whitelisted("+15559999999") is False


@pytest.mark.unit
class TestSmsVerification:
    """Code issue and verification."""

    async def test_send_stores_code(self, db_session: Session, twilio):
        row, message_id = await SmsVerificationService.send_code(db_session, twilio, PHONE, vip_tier="gold")

        assert message_id.startswith("mock_sms_")
        stored = db_session.query(SmsVerification).one()
        assert stored.id == row.id
        assert stored.vip_tier == "gold"
        assert stored.expires_at > utc_now_naive()

    async def test_send_refused_outside_whitelist(self, db_session: Session, twilio, monkeypatch):
        monkeypatch.setattr(settings, "VIP_SMS_WHITELIST", ["+15550000000"])

        with pytest.raises(ForbiddenError):
            await SmsVerificationService.send_code(db_session, twilio, PHONE)

    async def test_send_failure_raises(self, db_session: Session, mocker):
        twilio = mocker.Mock()
        twilio.send_sms = mocker.AsyncMock(return_value=DeliveryResult(success=False, provider="twilio", error="down"))

        with pytest.raises(UpstreamError):
            await SmsVerificationService.send_code(db_session, twilio, PHONE)
        assert db_session.query(SmsVerification).count() == 0

    def test_correct_code_verifies_once(self, db_session: Session):
        db_session.add(SmsVerificationFactory(code="424242"))
        db_session.commit()

        assert SmsVerificationService.verify_code(db_session, PHONE, "424242") is True
        assert SmsVerificationService.verify_code(db_session, PHONE, "424242") is False

    def test_wrong_code_counts_attempt(self, db_session: Session):
        row = SmsVerificationFactory(code="424242")
        db_session.add(row)
        db_session.commit()

        assert SmsVerificationService.verify_code(db_session, PHONE, "000000") is False
        db_session.refresh(row)
        assert row.attempts == 1
        assert row.verified is False

    def test_attempts_exhausted(self, db_session: Session):
        db_session.add(SmsVerificationFactory(code="424242", attempts=MAX_VERIFY_ATTEMPTS))
        db_session.commit()

        assert SmsVerificationService.verify_code(db_session, PHONE, "424242") is False

    def test_expired_code_rejected(self, db_session: Session):
        db_session.add(SmsVerificationFactory(code="424242", expires_at=utc_now_naive() - timedelta(seconds=1)))
        db_session.commit()

        assert SmsVerificationService.verify_code(db_session, PHONE, "424242") is False

    def test_latest_code_wins(self, db_session: Session):
        now = utc_now_naive()
        db_session.add_all([
            SmsVerificationFactory(code="111111", created_at=now - timedelta(minutes=2)),
            SmsVerificationFactory(code="222222", created_at=now),
        ])
        db_session.commit()

        assert SmsVerificationService.verify_code(db_session, PHONE, "111111") is False
        assert SmsVerificationService.verify_code(db_session, PHONE, "222222") is True
