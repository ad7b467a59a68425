from __future__ import annotations

from customer_resolution.schema import FieldTag, RecordSchema

# Column layout of the raw account extract.
ACCOUNT_COLUMNS = [
    "ACCT_ID",
    "FN",
    "LN",
    "DOB",
    "EMAIL",
    "PHONE",
    "ADDR",
    "GOV_ID",
]


ACCOUNT_SCHEMA = RecordSchema.from_mapping(
    {
        FieldTag.ACCOUNT_ID: ["ACCT_ID"],
        FieldTag.FIRST_NAME: ["FN"],
        FieldTag.LAST_NAME: ["LN"],
        FieldTag.DOB: ["DOB"],
        FieldTag.EMAIL: ["EMAIL"],
        FieldTag.PHONE: ["PHONE"],
        FieldTag.ADDRESS: ["ADDR"],
        FieldTag.GOV_ID: ["GOV_ID"],
    }
)
