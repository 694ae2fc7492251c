from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from vod.core.config import OtpSettings, Settings
from vod.modules.otp import (
    InvalidOtpError,
    InvalidPhoneNumberError,
    OtpAttemptsExceededError,
    OtpRecord,
    OtpService,
    normalize_phone_number,
)


class InMemoryCodes:
    def __init__(self) -> None:
        self.records: list[OtpRecord] = []

    async def replace_code(self, phone_number, *, code_hash, expires_at):
        self.records = [record for record in self.records if record.phone_number != phone_number]
        record = OtpRecord(id=len(self.records) + 100, phone_number=phone_number, expires_at=expires_at,
                           code_hash=code_hash)
        self.records.append(record)
        return record

    async def latest_pending(self, phone_number, now):
        for record in reversed(self.records):
            if record.phone_number == phone_number and not record.is_verified and not record.is_expired(now):
                return replace(record)
        return None

    async def increment_attempts(self, otp_id):
        self._find(otp_id).attempts += 1

    async def mark_verified(self, otp_id):
        self._find(otp_id).is_verified = True

    def _find(self, otp_id):
        return next(record for record in self.records if record.id == otp_id)


class RecordingSender:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    async def send(self, phone_number, message):
        self.messages.append((phone_number, message))


PHONE = "+15551234567"


def make_service(codes=None, *, environment="test", max_attempts=3) -> tuple[OtpService, InMemoryCodes, RecordingSender]:
    codes = codes or InMemoryCodes()
    sender = RecordingSender()
    settings = Settings(environment=environment, otp=OtpSettings(max_attempts=max_attempts))
    return OtpService(codes, sender=sender, settings=settings), codes, sender


def test_phone_numbers_must_be_e164():
    assert normalize_phone_number("+1 (555) 123-4567") == PHONE
    for bad in ["5551234567", "+0123", "+1", "+1234567890123456", "phone", ""]:
        with pytest.raises(InvalidPhoneNumberError):
            normalize_phone_number(bad)


async def test_send_delivers_code_and_exposes_it_outside_production():
    service, codes, sender = make_service()
    dispatch = await service.send_otp(PHONE)

    assert dispatch.code is not None and len(dispatch.code) == 6 and dispatch.code.isdigit()
    assert dispatch.expires_in_seconds == 300
    assert sender.messages[0][0] == PHONE
    assert dispatch.code in sender.messages[0][1]
    assert codes.records[0].code_hash != dispatch.code


async def test_code_is_hidden_in_production():
    service, _, sender = make_service(environment="production")
    dispatch = await service.send_otp(PHONE)
    assert dispatch.code is None
    assert len(sender.messages) == 1


async def test_correct_code_verifies_once():
    service, _, _ = make_service()
    code = (await service.send_otp(PHONE)).code

    assert await service.verify_otp(PHONE, code) == PHONE
    with pytest.raises(InvalidOtpError):
        await service.verify_otp(PHONE, code)


async def test_new_code_replaces_previous_one():
    service, codes, _ = make_service()
    first = (await service.send_otp(PHONE)).code
    second = (await service.send_otp(PHONE)).code

    assert len(codes.records) == 1
    if first != second:
        with pytest.raises(InvalidOtpError):
            await service.verify_otp(PHONE, first)
    assert await service.verify_otp(PHONE, second) == PHONE


async def test_wrong_codes_count_until_locked():
    service, codes, _ = make_service(max_attempts=3)
    code = (await service.send_otp(PHONE)).code
    wrong = "000000" if code != "000000" else "111111"

    for _ in range(3):
        with pytest.raises(InvalidOtpError):
            await service.verify_otp(PHONE, wrong)
    assert codes.records[0].attempts == 3

    with pytest.raises(OtpAttemptsExceededError):
        await service.verify_otp(PHONE, code)


async def test_expired_code_is_rejected():
    service, codes, _ = make_service()
    code = (await service.send_otp(PHONE)).code
    codes.records[0].expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)

    with pytest.raises(InvalidOtpError):
        await service.verify_otp(PHONE, code)


async def test_unknown_number_has_no_code():
    service, _, _ = make_service()
    with pytest.raises(InvalidOtpError):
        await service.verify_otp("+15550000000", "123456")
