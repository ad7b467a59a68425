from __future__ import annotations

import argparse
import csv
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

from customer_resolution.config import Settings, ZipPolicy, load_settings
from customer_resolution.datasets import ACCOUNT_COLUMNS, ACCOUNT_SCHEMA, ReferenceDatasetGenerator
from customer_resolution.errors import ResolutionError
from customer_resolution.logging_utils import setup_logging
from customer_resolution.models import RawRecord, ResolutionResult
from customer_resolution.runners import LocalResolutionPipeline
from customer_resolution.schema import FieldTag, RecordSchema

_REVIEW_FIELDS = ("cfn", "cln", "dob", "cphone", "cemail", "caddr", "cid")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    setup_logging(verbose=args.verbose, log_file=args.log_file)
    try:
        settings = load_settings(
            zip_policy=args.zip_policy,
            max_workers=args.max_workers,
            review_limit=args.review_limit,
        )
        if args.command == "resolve":
            resolve(input_csv=args.input_csv, output_dir=args.output_dir, settings=settings)
        elif args.command == "run-test":
            run_test(
                size=args.size,
                duplicate_rate=args.duplicate_rate,
                seed=args.seed,
                output_dir=args.output_dir,
                input_csv=args.input_csv,
                show_clusters=args.show_clusters,
                settings=settings,
            )
    except ResolutionError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


def resolve(*, input_csv: Path, output_dir: Path, settings: Settings) -> ResolutionResult:
    records = _read_records_csv(input_csv, ACCOUNT_SCHEMA)
    result = LocalResolutionPipeline.from_settings(settings).run(records)
    paths = _write_outputs(output_dir, result, dataset_path=input_csv)

    print(f"Mapping: {paths['mapping_path']}")
    print(f"Decisions: {paths['decisions_path']}")
    print(f"Summary: {paths['summary_path']}")
    return result


def run_test(
    *,
    size: int,
    duplicate_rate: float,
    seed: int,
    output_dir: Path,
    input_csv: Path | None,
    show_clusters: int | None,
    settings: Settings,
) -> ResolutionResult:
    output_dir.mkdir(parents=True, exist_ok=True)

    if input_csv is None:
        records = ReferenceDatasetGenerator(seed=seed).generate(size=size, duplicate_rate=duplicate_rate)
        dataset_path = output_dir / "test_dataset.csv"
        _write_records_csv(dataset_path, records)
    else:
        records = _read_records_csv(input_csv, ACCOUNT_SCHEMA)
        dataset_path = input_csv

    result = LocalResolutionPipeline.from_settings(settings).run(records)
    paths = _write_outputs(output_dir, result, dataset_path=dataset_path)
    summary = _build_summary(result, paths)

    print(f"Dataset: {dataset_path}")
    print(f"Mapping: {paths['mapping_path']}")
    print(f"Summary: {paths['summary_path']}")
    print("---")
    print(f"records={summary['record_count']}")
    print(f"candidate_pairs={summary['candidate_pair_count']}")
    print(f"matched_pairs={summary['matched_pair_count']}")
    print(f"clusters={summary['cluster_count']}")
    print(f"multi_member_clusters={summary['multi_member_cluster_count']}")
    print(f"max_cluster_size={summary['max_cluster_size']}")

    limit = settings.review_limit if show_clusters is None else show_clusters
    if limit > 0:
        print("---")
        print("review_clusters=")
        print(json.dumps(review_payload(result, limit=limit), indent=2))
    return result


def review_payload(result: ResolutionResult, limit: int) -> list[dict[str, Any]]:
    """Multi-member clusters with their members' normalized fields, for manual review."""
    payload: list[dict[str, Any]] = []
    for cluster in result.multi_member_clusters(limit=limit):
        members = []
        for account_id in cluster.account_ids:
            record = result.records.get(account_id)
            fields = {name: _jsonable(getattr(record, name)) for name in _REVIEW_FIELDS} if record else {}
            members.append({"account_id": account_id, **fields})
        payload.append({"customer_id": cluster.customer_id, "size": cluster.size, "members": members})
    return payload


def _build_summary(result: ResolutionResult, paths: dict[str, Path]) -> dict[str, object]:
    cluster_sizes = list(result.membership_counts().values())
    return {
        "record_count": len(result.assignments),
        "candidate_pair_count": result.candidate_count,
        "matched_pair_count": len(result.matches),
        "edge_count": result.edge_count,
        "cluster_count": len(cluster_sizes),
        "multi_member_cluster_count": sum(1 for size in cluster_sizes if size > 1),
        "max_cluster_size": max(cluster_sizes) if cluster_sizes else 0,
        "label_counts": result.label_counts(),
        **{name: str(path) for name, path in paths.items()},
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="customer-resolution", description="Customer identity resolution CLI")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--log-file", type=Path, default=None)
    parser.add_argument("--zip-policy", choices=[policy.value for policy in ZipPolicy], default=None)
    parser.add_argument("--max-workers", type=int, default=None)
    parser.add_argument("--review-limit", type=int, default=None)
    subparsers = parser.add_subparsers(dest="command")

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve accounts from a CSV and write the customer mapping + audit trail",
    )
    resolve_parser.add_argument("--input-csv", type=Path, required=True)
    resolve_parser.add_argument("--output-dir", type=Path, default=Path("data/resolution_output"))

    run_test_parser = subparsers.add_parser(
        "run-test",
        help="Generate or load a test dataset, resolve it, and print a summary + review sample",
    )
    run_test_parser.add_argument("--size", type=int, default=2000)
    run_test_parser.add_argument("--duplicate-rate", type=float, default=0.15)
    run_test_parser.add_argument("--seed", type=int, default=42)
    run_test_parser.add_argument("--input-csv", type=Path, default=None)
    run_test_parser.add_argument("--output-dir", type=Path, default=Path("data/cli_output"))
    run_test_parser.add_argument("--show-clusters", type=int, default=None)

    return parser


def _write_outputs(output_dir: Path, result: ResolutionResult, dataset_path: Path) -> dict[str, Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = {
        "dataset_path": dataset_path,
        "mapping_path": output_dir / "customer_mapping.csv",
        "decisions_path": output_dir / "match_decisions.json",
        "summary_path": output_dir / "summary.json",
    }
    _write_mapping_csv(paths["mapping_path"], result.assignments)
    _write_json(paths["decisions_path"], [asdict(decision) for decision in result.matches])
    _write_json(paths["summary_path"], _build_summary(result, paths))
    return paths


def _write_json(path: Path, payload: object) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)


def _write_mapping_csv(path: Path, assignments: dict[str, str]) -> None:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["account_id", "customer_id"])
        for account_id in sorted(assignments):
            writer.writerow([account_id, assignments[account_id]])


def _write_records_csv(path: Path, records: list[RawRecord]) -> None:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=ACCOUNT_COLUMNS)
        writer.writeheader()
        for record in records:
            values = {
                FieldTag.ACCOUNT_ID: record.account_id,
                FieldTag.FIRST_NAME: record.first_name,
                FieldTag.LAST_NAME: record.last_name,
                FieldTag.DOB: record.dob,
                FieldTag.EMAIL: record.email,
                FieldTag.PHONE: record.phone,
                FieldTag.ADDRESS: record.address,
                FieldTag.GOV_ID: record.gov_id,
            }
            writer.writerow({ACCOUNT_SCHEMA.columns_for(tag)[0]: value or "" for tag, value in values.items()})


def _read_records_csv(path: Path, schema: RecordSchema) -> list[RawRecord]:
    records: list[RawRecord] = []
    with path.open("r", newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            record = schema.to_raw_record(row)
            if record is None:
                continue
            records.append(record)
    return records


def _jsonable(value: object) -> object:
    if value is None or isinstance(value, (str, int, float)):
        return value
    return str(value)


if __name__ == "__main__":
    raise SystemExit(main())
