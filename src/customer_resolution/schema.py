from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Mapping, Sequence

from customer_resolution.models import RawRecord


class FieldTag(StrEnum):
    ACCOUNT_ID = "ACCOUNT_ID"
    ADDRESS = "ADDRESS"
    DOB = "DOB"
    EMAIL = "EMAIL"
    FIRST_NAME = "FIRST_NAME"
    GOV_ID = "GOV_ID"
    LAST_NAME = "LAST_NAME"
    PHONE = "PHONE"


@dataclass(frozen=True)
class RecordSchema:
    """Maps source-system columns to stable semantic tags."""

    tag_to_columns: Mapping[FieldTag, tuple[str, ...]]

    @classmethod
    def from_mapping(cls, mapping: Mapping[FieldTag, Sequence[str]]) -> "RecordSchema":
        frozen = {tag: tuple(columns) for tag, columns in mapping.items()}
        return cls(tag_to_columns=frozen)

    def columns_for(self, tag: FieldTag) -> tuple[str, ...]:
        return self.tag_to_columns.get(tag, ())

    def values_for(self, attributes: Mapping[str, object], tag: FieldTag) -> list[str]:
        values: list[str] = []
        for column in self.columns_for(tag):
            value = attributes.get(column)
            if value is None:
                continue
            text = str(value).strip()
            if text:
                values.append(text)
        return values

    def joined_value(self, attributes: Mapping[str, object], tag: FieldTag, sep: str = " ") -> str:
        return sep.join(self.values_for(attributes, tag)).strip()

    def to_raw_record(self, attributes: Mapping[str, object]) -> RawRecord | None:
        """Project a source row onto a RawRecord; rows without an account id are skipped."""
        account_id = self.joined_value(attributes, FieldTag.ACCOUNT_ID)
        if not account_id:
            return None
        return RawRecord(
            account_id=account_id,
            first_name=self._optional(attributes, FieldTag.FIRST_NAME),
            last_name=self._optional(attributes, FieldTag.LAST_NAME),
            dob=self._optional(attributes, FieldTag.DOB),
            email=self._optional(attributes, FieldTag.EMAIL),
            phone=self._optional(attributes, FieldTag.PHONE),
            address=self._optional(attributes, FieldTag.ADDRESS, sep=", "),
            gov_id=self._optional(attributes, FieldTag.GOV_ID),
        )

    def _optional(self, attributes: Mapping[str, object], tag: FieldTag, sep: str = " ") -> str | None:
        return self.joined_value(attributes, tag, sep=sep) or None
