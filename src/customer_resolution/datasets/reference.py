from __future__ import annotations

import random
from dataclasses import replace

from customer_resolution.models import RawRecord

_FIRST_NAMES = [
    "Dominique",
    "Luke",
    "Alex",
    "Sofia",
    "Maya",
    "Daniel",
    "Emma",
    "Chris",
    "Olivia",
    "Noah",
    "Finn",
    "Priya",
]
_LAST_NAMES = [
    "Smith",
    "Johnson",
    "Brown",
    "Taylor",
    "Wilson",
    "Davies",
    "Martin",
    "O'Brien",
    "Fitzgerald",
    "Nakamura",
]
_STREETS = [
    "Luke Street",
    "Maple Road",
    "King Avenue",
    "River Lane",
    "Elm Street",
    "Station Road",
]
_TOWNS = ["London", "Manchester", "Leeds", "Bristol", "Birmingham", "Dublin"]
_DOMAINS = ["gmail.com", "outlook.com", "yahoo.com", "example.com"]


class ReferenceDatasetGenerator:
    """Generate synthetic account records (with intentional dupes) for tests and benchmarks."""

    def __init__(self, seed: int = 7) -> None:
        self._rng = random.Random(seed)

    def generate(self, size: int, duplicate_rate: float = 0.15) -> list[RawRecord]:
        if size <= 0:
            return []

        unique_count = int(size * (1.0 - duplicate_rate))
        unique_count = max(1, min(unique_count, size))

        records = [self._profile(i) for i in range(unique_count)]
        while len(records) < size:
            source = self._rng.choice(records[:unique_count])
            records.append(self._perturb(source, account_id=_account_id(len(records))))

        self._rng.shuffle(records)
        return records

    def _profile(self, idx: int) -> RawRecord:
        first_name = self._rng.choice(_FIRST_NAMES)
        last_name = self._rng.choice(_LAST_NAMES)
        street = self._rng.choice(_STREETS)
        town = self._rng.choice(_TOWNS)
        email_local = f"{first_name}.{last_name.replace(chr(39), '')}{idx % 97}".lower()
        has_gov_id = self._rng.random() < 0.7

        return RawRecord(
            account_id=_account_id(idx),
            first_name=first_name,
            last_name=last_name,
            dob=f"{1950 + (idx % 50)}-{(idx % 12) + 1:02d}-{(idx % 27) + 1:02d}",
            email=f"{email_local}@{self._rng.choice(_DOMAINS)}",
            phone=f"555{idx % 10000000:07d}",
            address=f"{1 + (idx % 180)} {street}, {town} {100000 + (idx % 899999)}",
            gov_id=f"ID{idx:08d}" if has_gov_id else None,
        )

    def _perturb(self, source: RawRecord, account_id: str) -> RawRecord:
        mutation = self._rng.choice(["contact", "name", "address", "identity", "mixed"])
        record = replace(source, account_id=account_id)

        if mutation in {"contact", "mixed"}:
            record = replace(
                record,
                phone=self._phone_variant(record.phone),
                email=self._email_variant(record.email),
            )
        if mutation in {"name", "mixed"}:
            record = replace(
                record,
                first_name=self._name_variant(record.first_name),
                last_name=self._surname_variant(record.last_name),
            )
        if mutation in {"address", "mixed"}:
            record = replace(record, address=self._address_variant(record.address))
        if mutation == "identity":
            record = replace(record, gov_id=self._gov_id_variant(record.gov_id))
        return record

    def _phone_variant(self, phone: str | None) -> str | None:
        if not phone:
            return phone
        variant = self._rng.choice(["intl", "dashed", "plain"])
        if variant == "intl":
            return f"+1 ({phone[:3]}) {phone[3:6]}-{phone[6:]}"
        if variant == "dashed":
            return f"{phone[:3]}-{phone[3:6]}-{phone[6:]}"
        return phone

    def _email_variant(self, email: str | None) -> str | None:
        if not email or "@" not in email:
            return email
        local, domain = email.split("@", maxsplit=1)
        variant = self._rng.choice(["case", "padded", "same"])
        if variant == "case":
            return f"{local.capitalize()}@{domain.upper()}"
        if variant == "padded":
            return f"  {email} "
        return email

    def _name_variant(self, name: str | None) -> str | None:
        if not name:
            return name
        variant = self._rng.choice(["upper", "padded", "punctuated"])
        if variant == "upper":
            return name.upper()
        if variant == "padded":
            return f" {name} "
        return f"{name}."

    def _surname_variant(self, name: str | None) -> str | None:
        if not name:
            return name
        if "'" in name:
            return name.replace("'", "")
        return self._rng.choice([name.upper(), name.lower(), f"{name}-"])

    def _address_variant(self, address: str | None) -> str | None:
        if not address:
            return address
        if "Street" in address:
            return address.replace("Street", "St")
        if "Road" in address:
            return address.replace("Road", "Rd")
        return f"Flat 2, {address}"

    def _gov_id_variant(self, gov_id: str | None) -> str | None:
        if gov_id is None:
            return None
        if self._rng.random() < 0.5:
            return None
        return f"{gov_id[:2]}-{gov_id[2:6]} {gov_id[6:]}".lower()


def _account_id(idx: int) -> str:
    return f"ACC_{idx:07d}"
