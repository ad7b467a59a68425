from __future__ import annotations

import argparse
import csv
from pathlib import Path

from customer_resolution.datasets import ACCOUNT_COLUMNS, ReferenceDatasetGenerator


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate synthetic customer account dataset")
    parser.add_argument("--size", type=int, default=10000)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--duplicate-rate", type=float, default=0.15)
    parser.add_argument("--output", type=Path, default=Path("data/reference_accounts.csv"))
    args = parser.parse_args()

    records = ReferenceDatasetGenerator(seed=args.seed).generate(
        size=args.size,
        duplicate_rate=args.duplicate_rate,
    )

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with args.output.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(ACCOUNT_COLUMNS)
        for record in records:
            writer.writerow(
                [
                    record.account_id,
                    record.first_name or "",
                    record.last_name or "",
                    record.dob or "",
                    record.email or "",
                    record.phone or "",
                    record.address or "",
                    record.gov_id or "",
                ]
            )


if __name__ == "__main__":
    main()
