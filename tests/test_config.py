import pytest

from customer_resolution.config import RuleThresholds, Settings, ZipPolicy, load_settings
from customer_resolution.errors import ConfigurationError


def test_defaults() -> None:
    settings = load_settings()

    assert settings.zip_policy is ZipPolicy.DIGITS
    assert settings.ngram_size == 3
    assert settings.review_limit == 100
    assert settings.max_workers == 1
    assert settings.thresholds == RuleThresholds()
    assert settings.thresholds.rule_01_fn == 0.80
    assert settings.thresholds.rule_16_year_tolerance == 1


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("CUSTOMER_RESOLUTION_ZIP_POLICY", "raw_suffix")
    monkeypatch.setenv("CUSTOMER_RESOLUTION_REVIEW_LIMIT", "25")
    monkeypatch.setenv("CUSTOMER_RESOLUTION_THRESHOLDS__RULE_04_FN", "0.9")

    settings = load_settings()

    assert settings.zip_policy is ZipPolicy.RAW_SUFFIX
    assert settings.review_limit == 25
    assert settings.thresholds.rule_04_fn == 0.9
    assert settings.thresholds.rule_04_ln == 0.80


def test_dotenv_file_is_read(tmp_path) -> None:
    (tmp_path / ".env").write_text("CUSTOMER_RESOLUTION_MAX_WORKERS=3\n", encoding="utf-8")

    assert Settings().max_workers == 3


def test_explicit_overrides_win_and_none_is_ignored(monkeypatch) -> None:
    monkeypatch.setenv("CUSTOMER_RESOLUTION_REVIEW_LIMIT", "25")

    settings = load_settings(review_limit=7, max_workers=None)

    assert settings.review_limit == 7
    assert settings.max_workers == 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"review_limit": 0},
        {"ngram_size": 1},
        {"zip_policy": "postcode"},
        {"thresholds": {"rule_01_fn": 1.5}},
        {"thresholds": {"rule_16_year_tolerance": -1}},
    ],
)
def test_invalid_values_raise_configuration_error(overrides) -> None:
    with pytest.raises(ConfigurationError):
        load_settings(**overrides)


def test_invalid_environment_value_raises_configuration_error(monkeypatch) -> None:
    monkeypatch.setenv("CUSTOMER_RESOLUTION_THRESHOLDS__RULE_18_AVG", "not-a-number")

    with pytest.raises(ConfigurationError):
        load_settings()
