import pytest

from rent_vs_buy.errors import InputError
from rent_vs_buy.inputs import (
    FIELDS,
    MAX_YEARS,
    merge_settings,
    parse_overrides,
    parse_settings,
    to_settings,
)


def test_defaults_parse(settings):
    assumptions = parse_settings(settings)
    assert assumptions.home_price == 400_000.0
    assert assumptions.down_payment_pct == 20.0
    assert assumptions.loan_term_years == 30
    assert isinstance(assumptions.duration_years, int)
    assert assumptions.loan_amount == 320_000.0
    assert assumptions.down_payment_amount == 80_000.0
    assert assumptions.number_of_payments == 360


def test_every_field_is_mapped(settings):
    assert set(settings) == set(FIELDS)


def test_loan_and_down_payment_reconstruct_price(settings):
    settings["home-price"] = "537123.45"
    settings["down-payment"] = "13.7"
    assumptions = parse_settings(settings)
    assert assumptions.loan_amount + assumptions.down_payment_amount == pytest.approx(
        assumptions.home_price
    )


def test_accepts_numbers_and_thousands_separators(settings):
    settings["home-price"] = "1,250,000"
    settings["monthly-rent"] = 3100
    settings["duration"] = "12.0"
    assumptions = parse_settings(settings)
    assert assumptions.home_price == 1_250_000.0
    assert assumptions.monthly_rent == 3100.0
    assert assumptions.duration_years == 12


def test_missing_field(settings):
    del settings["monthly-income"]
    with pytest.raises(InputError) as excinfo:
        parse_settings(settings)
    assert excinfo.value.field == "monthly-income"


@pytest.mark.parametrize("raw", ["", "   ", "abc", "12abc", "nan", "inf", None])
def test_rejects_unreadable_values(settings, raw):
    settings["home-price"] = raw
    with pytest.raises(InputError, match="home-price"):
        parse_settings(settings)


@pytest.mark.parametrize("key", ["loan-term", "duration"])
def test_integer_fields_must_be_positive(settings, key):
    settings[key] = "0"
    with pytest.raises(InputError, match=key):
        parse_settings(settings)


def test_down_payment_range(settings):
    settings["down-payment"] = "101"
    with pytest.raises(InputError, match="down-payment"):
        parse_settings(settings)
    settings["down-payment"] = "100"
    assert parse_settings(settings).loan_amount == 0.0


def test_negative_costs_rejected(settings):
    settings["pmi"] = "-50"
    with pytest.raises(InputError, match="pmi"):
        parse_settings(settings)


def test_negative_growth_allowed(settings):
    settings["home-appreciation"] = "-2.5"
    settings["investment-return"] = "-1"
    assumptions = parse_settings(settings)
    assert assumptions.appreciation_rate_pct == -2.5
    assert assumptions.investment_return_pct == -1.0


def test_input_error_is_value_error(settings):
    settings["tax-rate"] = "twenty"
    with pytest.raises(ValueError):
        parse_settings(settings)


def test_to_settings_feeds_back_into_parser(settings):
    assumptions = parse_settings(settings)
    stored = to_settings(assumptions)
    assert stored["home-price"] == 400_000.0
    assert stored["duration"] == 30
    assert parse_settings(stored) == assumptions


def test_merge_settings(settings):
    merged = merge_settings(settings, {"home-price": "500000"})
    assert merged["home-price"] == "500000"
    assert settings["home-price"] == "400000"
    with pytest.raises(InputError, match="home_price"):
        merge_settings(settings, {"home_price": "1"})


def test_parse_overrides():
    assert parse_overrides(["duration=10", " pmi = 75 "]) == {
        "duration": "10",
        "pmi": "75",
    }
    with pytest.raises(InputError):
        parse_overrides(["duration"])
    with pytest.raises(InputError):
        parse_overrides(["=5"])


@pytest.mark.parametrize("key", ["loan-term", "duration"])
def test_integer_fields_are_capped(settings, key):
    settings[key] = str(MAX_YEARS)
    parse_settings(settings)
    settings[key] = "1000000000"
    with pytest.raises(InputError, match=key):
        parse_settings(settings)


@pytest.mark.parametrize("raw", [5, "home-price=1", [1, 2], None])
def test_settings_must_be_a_mapping(raw):
    with pytest.raises(InputError, match="settings"):
        parse_settings(raw)
    with pytest.raises(InputError, match="settings"):
        merge_settings(raw, {})
