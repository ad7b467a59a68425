"""
Pytest configuration and shared fixtures for customer_resolution tests.
"""

import logging
import os

import pytest

from customer_resolution.config import Settings
from customer_resolution.models import CandidatePair, NormalizedRecord, ScoredPair
from customer_resolution.runners import LocalResolutionPipeline


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch, tmp_path):
    """Keep a developer's .env or CUSTOMER_RESOLUTION_* variables out of the tests."""
    for name in list(os.environ):
        if name.upper().startswith("CUSTOMER_RESOLUTION_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    pkg_logger = logging.getLogger("customer_resolution")
    pkg_logger.handlers = []
    pkg_logger.propagate = True
    pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture
def pipeline():
    return LocalResolutionPipeline.from_settings(Settings())


def make_record(account_id: str, **fields) -> NormalizedRecord:
    """Normalized record with neutral defaults; override any field by keyword."""
    values = {
        "cfn": "JOHN",
        "cln": "SMITH",
        "dob": None,
        "cemail": None,
        "cphone": None,
        "cid": None,
        "caddr": "",
        "zip": "",
    }
    values.update(fields)
    return NormalizedRecord(account_id=account_id, **values)


def make_scored(
    left: NormalizedRecord,
    right: NormalizedRecord,
    fn: float = 0.0,
    ln: float = 0.0,
    addr: float = 0.0,
    yob_a: int | None = None,
    yob_b: int | None = None,
    yob_fn_a: str | None = None,
    yob_fn_b: str | None = None,
) -> ScoredPair:
    return ScoredPair(
        pair=CandidatePair(left=left, right=right),
        fn_score=fn,
        ln_score=ln,
        addr_score=addr,
        yob_a=yob_a,
        yob_b=yob_b,
        yob_fn_a=yob_fn_a,
        yob_fn_b=yob_fn_b,
    )
