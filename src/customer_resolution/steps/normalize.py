from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date, datetime

from customer_resolution.config import ZipPolicy
from customer_resolution.models import NormalizedRecord, RawRecord

_NON_NAME = re.compile(r"[^a-zA-Z ]")
_NON_DIGIT = re.compile(r"[^0-9]")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_NON_ADDRESS = re.compile(r"[^a-zA-Z0-9 ]")

PHONE_DIGITS = 10
ZIP_LENGTH = 6


class RecordNormalizer:
    """Turns raw account records into comparison-ready normalized records.

    Normalization is total: anything malformed degrades to an empty or null
    field instead of raising.
    """

    def __init__(self, zip_policy: ZipPolicy = ZipPolicy.DIGITS) -> None:
        self._zip_policy = ZipPolicy(zip_policy)

    def normalize(self, record: RawRecord) -> NormalizedRecord:
        return NormalizedRecord(
            account_id=record.account_id,
            cfn=clean_name(record.first_name),
            cln=clean_name(record.last_name),
            dob=parse_dob(record.dob),
            cemail=clean_email(record.email),
            cphone=clean_phone(record.phone),
            cid=clean_gov_id(record.gov_id),
            caddr=clean_address(record.address),
            zip=extract_zip(record.address, self._zip_policy),
        )

    def normalize_all(self, records: Sequence[RawRecord]) -> list[NormalizedRecord]:
        return [self.normalize(record) for record in records]


def clean_name(value: str | None) -> str:
    if not value:
        return ""
    return _NON_NAME.sub("", value).upper().strip()


def clean_email(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip().lower() or None


def clean_phone(value: str | None) -> str | None:
    """Keep the rightmost ten digits; this is a fixed-width suffix, not a validated number."""
    if value is None:
        return None
    digits = _NON_DIGIT.sub("", value)
    return digits[-PHONE_DIGITS:] or None


def clean_gov_id(value: str | None) -> str | None:
    if value is None:
        return None
    return _NON_ALNUM.sub("", value).upper().strip() or None


def clean_address(value: str | None) -> str:
    if not value:
        return ""
    return _NON_ADDRESS.sub("", value).upper().strip()


def extract_zip(address: str | None, policy: ZipPolicy = ZipPolicy.DIGITS) -> str:
    if not address:
        return ""
    if policy == ZipPolicy.RAW_SUFFIX:
        return address.strip()[-ZIP_LENGTH:]
    return _NON_DIGIT.sub("", address)[-ZIP_LENGTH:]


def parse_dob(value: date | str | None) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None
