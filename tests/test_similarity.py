import types
from datetime import date

import pytest

from conftest import make_record
from customer_resolution.errors import ConfigurationError, SimilarityBackendError
from customer_resolution.models import CandidatePair
from customer_resolution.steps.similarity import TrigramScorer, ngrams, similarity


def test_ngrams_are_padded_and_deduplicated() -> None:
    assert ngrams("AB") == frozenset({"$$A", "$AB", "AB$", "B$$"})
    assert len(ngrams("AAAA")) == 5
    assert ngrams("") == frozenset()


def test_similarity_is_jaccard_over_trigram_sets() -> None:
    # JON: {"$$J", "$JO", "JON", "ON$", "N$$"}; JOHN shares "$$J", "$JO", "N$$"
    assert similarity("JON", "JOHN") == pytest.approx(3 / 8)
    assert similarity("OBRIEN", "OBRIEN") == 1.0
    assert similarity("JOHN", "ROBERT") == 0.0


def test_padding_never_matches_internal_spaces() -> None:
    # shared: "ANN", "NN$", "N$$"; the inner " AN" is not an edge gram
    assert similarity("ANN", "MARY ANN") == pytest.approx(3 / 12)
    assert "$$A" not in ngrams("MARY  ANN")
    assert ngrams("MARY  ANN") & ngrams("ANN") == frozenset({"ANN", "NN$", "N$$"})


def test_similarity_with_empty_side_is_zero() -> None:
    assert similarity("", "JOHN") == 0.0
    assert similarity("JOHN", "") == 0.0
    assert similarity("", "") == 0.0


@pytest.mark.parametrize(
    "left,right",
    [("JONATHAN", "JOHNATHAN"), ("12 MARKET ST", "12 MARKET STREET"), ("A", "AB"), ("", "X")],
)
def test_similarity_is_symmetric(left: str, right: str) -> None:
    assert similarity(left, right) == similarity(right, left)


def test_scorer_scores_fields_and_derives_birth_year_tokens() -> None:
    left = make_record("A1", cfn="FINN", cln="OBRIEN", caddr="7 HARBOUR VIEW", dob=date(1984, 3, 2))
    right = make_record("B2", cfn="FIN", cln="OBRIEN", caddr="7 HARBOUR VIEW", dob=None)

    scored = TrigramScorer().score(CandidatePair(left=left, right=right))

    assert scored.fn_score == pytest.approx(similarity("FINN", "FIN"))
    assert scored.ln_score == 1.0
    assert scored.addr_score == 1.0
    assert scored.yob_a == 1984
    assert scored.yob_b is None
    assert scored.yob_fn_a == "1984_FI"
    assert scored.yob_fn_b is None


def test_scorer_is_symmetric_across_pair_orientation() -> None:
    a = make_record("A1", cfn="JONATHAN", cln="SMYTHE", caddr="1 ELM ST")
    b = make_record("B2", cfn="JOHNATHAN", cln="SMITH", caddr="1 ELM STREET")
    scorer = TrigramScorer()

    forward = scorer.score(CandidatePair(left=a, right=b))
    swapped = scorer.score(CandidatePair(left=make_record("A1", **_fields(b)), right=make_record("B2", **_fields(a))))

    assert (forward.fn_score, forward.ln_score, forward.addr_score) == (
        swapped.fn_score,
        swapped.ln_score,
        swapped.addr_score,
    )


def test_verify_passes_for_working_backend() -> None:
    TrigramScorer().verify()


def test_verify_fails_fast_for_broken_backend(monkeypatch) -> None:
    monkeypatch.setattr("customer_resolution.steps.similarity.similarity", lambda *args: 0.5)

    with pytest.raises(SimilarityBackendError):
        TrigramScorer().verify()


def test_broken_backend_is_a_configuration_error(monkeypatch) -> None:
    def _boom(*args):
        raise RuntimeError("extension not installed")

    monkeypatch.setattr("customer_resolution.steps.similarity.similarity", _boom)

    with pytest.raises(ConfigurationError, match="extension not installed"):
        TrigramScorer().verify()


def _fields(record):
    return {
        "cfn": record.cfn,
        "cln": record.cln,
        "caddr": record.caddr,
    }


def test_similarity_submodule_is_not_shadowed_by_package_exports() -> None:
    import customer_resolution.steps as steps

    assert isinstance(steps.similarity, types.ModuleType)
    assert steps.similarity.similarity is similarity
