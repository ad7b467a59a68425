from customer_resolution.datasets import ACCOUNT_COLUMNS, ACCOUNT_SCHEMA, ReferenceDatasetGenerator
from customer_resolution.models import RawRecord
from customer_resolution.schema import FieldTag, RecordSchema


def test_account_schema_maps_every_column() -> None:
    mapped = {column for tag in FieldTag for column in ACCOUNT_SCHEMA.columns_for(tag)}

    assert mapped == set(ACCOUNT_COLUMNS)


def test_row_is_projected_onto_raw_record() -> None:
    row = {
        "ACCT_ID": " ACC_7 ",
        "FN": "Jane",
        "LN": "",
        "DOB": "1990-01-02",
        "EMAIL": "jane@x.com",
        "PHONE": None,
        "ADDR": "1 Elm St",
        "GOV_ID": "  ",
    }

    record = ACCOUNT_SCHEMA.to_raw_record(row)

    assert record == RawRecord(
        account_id="ACC_7",
        first_name="Jane",
        last_name=None,
        dob="1990-01-02",
        email="jane@x.com",
        phone=None,
        address="1 Elm St",
        gov_id=None,
    )


def test_rows_without_account_id_are_skipped() -> None:
    assert ACCOUNT_SCHEMA.to_raw_record({"ACCT_ID": "", "FN": "Jane"}) is None


def test_multi_column_address_is_joined() -> None:
    schema = RecordSchema.from_mapping(
        {
            FieldTag.ACCOUNT_ID: ["ID"],
            FieldTag.ADDRESS: ["LINE1", "LINE2", "TOWN"],
        }
    )

    record = schema.to_raw_record({"ID": "1", "LINE1": "12 Market St", "LINE2": "", "TOWN": "Leeds"})

    assert record.address == "12 Market St, Leeds"


def test_generator_is_seeded_and_sized() -> None:
    first = ReferenceDatasetGenerator(seed=9).generate(size=50, duplicate_rate=0.2)
    second = ReferenceDatasetGenerator(seed=9).generate(size=50, duplicate_rate=0.2)

    assert first == second
    assert len(first) == 50
    assert len({record.account_id for record in first}) == 50
    assert ReferenceDatasetGenerator().generate(size=0) == []
