import csv
import json

from customer_resolution.cli import main

_HEADER = ["ACCT_ID", "FN", "LN", "DOB", "EMAIL", "PHONE", "ADDR", "GOV_ID"]


def _write_csv(path, rows) -> None:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(_HEADER)
        writer.writerows(rows)


def test_resolve_writes_mapping_decisions_and_summary(tmp_path, capsys) -> None:
    input_csv = tmp_path / "accounts.csv"
    _write_csv(
        input_csv,
        [
            ["ACC_101", "FINN", "O'BRIEN", "", "f.obrien@mail.com", "", "", ""],
            ["ACC_003", " Finn ", "OBrien", "1984-03-02", "f.obrien@mail.com", "", "", ""],
            ["ACC_200", "Quentin", "Lowe", "not a date", "q@y.org", "555 999 9999", "9 Far Rd 999999", "X-1"],
            ["", "No", "Id", "", "", "", "", ""],
        ],
    )
    output_dir = tmp_path / "out"

    exit_code = main(["resolve", "--input-csv", str(input_csv), "--output-dir", str(output_dir)])

    assert exit_code == 0
    with (output_dir / "customer_mapping.csv").open(encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert rows == [
        {"account_id": "ACC_003", "customer_id": "ACC_003"},
        {"account_id": "ACC_101", "customer_id": "ACC_003"},
        {"account_id": "ACC_200", "customer_id": "ACC_200"},
    ]

    decisions = json.loads((output_dir / "match_decisions.json").read_text(encoding="utf-8"))
    assert [(d["aid"], d["bid"], d["label"], d["reason"]) for d in decisions] == [
        ("ACC_003", "ACC_101", "RULE_04", "DIGITAL_TOKEN")
    ]

    summary = json.loads((output_dir / "summary.json").read_text(encoding="utf-8"))
    assert summary["record_count"] == 3
    assert summary["cluster_count"] == 2
    assert summary["multi_member_cluster_count"] == 1
    assert summary["label_counts"] == {"RULE_04": 1}
    assert "Mapping:" in capsys.readouterr().out


def test_run_test_generates_dataset_and_prints_review(tmp_path, capsys) -> None:
    output_dir = tmp_path / "run"

    exit_code = main(
        ["run-test", "--size", "120", "--duplicate-rate", "0.25", "--output-dir", str(output_dir), "--show-clusters", "2"]
    )

    assert exit_code == 0
    assert (output_dir / "test_dataset.csv").exists()
    summary = json.loads((output_dir / "summary.json").read_text(encoding="utf-8"))
    assert summary["record_count"] == 120

    out = capsys.readouterr().out
    assert "records=120" in out
    review = json.loads(out.split("review_clusters=\n", 1)[1])
    assert 0 < len(review) <= 2
    assert all(cluster["size"] > 1 for cluster in review)
    assert all(cluster["customer_id"] == min(m["account_id"] for m in cluster["members"]) for cluster in review)


def test_run_test_reads_back_generated_csv(tmp_path) -> None:
    first_dir = tmp_path / "first"
    second_dir = tmp_path / "second"
    assert main(["run-test", "--size", "60", "--output-dir", str(first_dir), "--show-clusters", "0"]) == 0

    exit_code = main(
        [
            "run-test",
            "--input-csv",
            str(first_dir / "test_dataset.csv"),
            "--output-dir",
            str(second_dir),
            "--show-clusters",
            "0",
        ]
    )

    assert exit_code == 0
    first = (first_dir / "customer_mapping.csv").read_text(encoding="utf-8")
    second = (second_dir / "customer_mapping.csv").read_text(encoding="utf-8")
    assert first == second


def test_invalid_configuration_exits_with_error(tmp_path, capsys) -> None:
    exit_code = main(["--review-limit", "0", "run-test", "--size", "10", "--output-dir", str(tmp_path)])

    assert exit_code == 2
    assert "invalid configuration" in capsys.readouterr().err


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "customer-resolution" in capsys.readouterr().out
