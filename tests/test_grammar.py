from datetime import datetime, timezone

import pytest

from kartel.exceptions import InvalidArgumentsError
from kartel.grammar import (
    CONVERT_USAGE,
    Shape,
    classify,
    parse,
    parse_base,
    parse_convert,
    parse_date,
    parse_forex,
    parse_pair,
)
from kartel.intents import BaseRates, Convert, EmptyIntent, PairLookup

FEB_2_2022 = datetime(2022, 2, 2, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw", ["", "   ", "\t\n", None])
def test_empty_input_is_empty_intent(raw):
    assert parse(raw) == EmptyIntent()


def test_pair_lookup():
    assert parse("USD/IDR") == PairLookup(left="USD", right="IDR", date=None)


def test_pair_lookup_lowercase_is_normalized():
    assert parse("usd/idr") == PairLookup(left="USD", right="IDR", date=None)


def test_pair_lookup_mixed_case_with_date():
    ret = parse("btc/IdR 2023-12-25")
    assert ret == PairLookup(
        left="BTC", right="IDR", date=datetime(2023, 12, 25, tzinfo=timezone.utc)
    )


def test_pair_lookup_with_date_is_midnight_utc():
    ret = parse("USD/IDR 2022-02-02")
    assert isinstance(ret, PairLookup)
    assert ret.date == FEB_2_2022
    assert ret.date.tzinfo is not None
    assert ret.date.utcoffset().total_seconds() == 0


def test_pair_lookup_bad_date_fails():
    with pytest.raises(InvalidArgumentsError) as exc:
        parse("USD/IDR not-a-date")
    assert "not-a-date" in exc.value.message


def test_pair_lookup_impossible_date_fails():
    with pytest.raises(InvalidArgumentsError):
        parse("USD/IDR 2022-02-30")


def test_base_rates():
    assert parse("idr") == BaseRates(base="IDR", date=None)


def test_base_rates_with_date():
    assert parse("IDR 2022-02-02") == BaseRates(base="IDR", date=FEB_2_2022)


def test_base_rates_bad_date_fails():
    with pytest.raises(InvalidArgumentsError):
        parse("IDR 02-02-2022")


def test_extra_whitespace_around_pair():
    assert parse("   USD/IDR    2022-02-02  ") == PairLookup("USD", "IDR", FEB_2_2022)


@pytest.mark.parametrize("raw", ["USDIDR", "US/IDR", "USD/IDRX", "USD/IDR/EUR", "U5D", "12/34", "$$$"])
def test_unknown_shape_fails_with_offending_text(raw):
    with pytest.raises(InvalidArgumentsError) as exc:
        parse(raw)
    assert raw in exc.value.message


def test_classify_precedence():
    assert classify("") is Shape.EMPTY
    assert classify("USD 1 ; IDR") is Shape.CONVERT
    assert classify("USD/IDR") is Shape.PAIR
    assert classify("USD") is Shape.BASE
    assert classify("USDX") is Shape.UNKNOWN


def test_shape_parsers_in_isolation():
    assert parse_pair("eur/usd") == PairLookup("EUR", "USD")
    assert parse_base("eur") == BaseRates("EUR")
    with pytest.raises(InvalidArgumentsError):
        parse_pair("EUR")
    with pytest.raises(InvalidArgumentsError):
        parse_base("EUR/USD")


def test_parse_date_strict():
    assert parse_date("2022-02-02") == FEB_2_2022
    for bad in ("2022-2-2", "2022/02/02", "20220202", "2022-02-02T00:00:00"):
        with pytest.raises(InvalidArgumentsError):
            parse_date(bad)


# ---- conversion ----


def test_convert_integer_amount():
    assert parse("USD 1000 ; IDR") == Convert(
        from_currency="USD", from_amount="1000", to_currency="IDR", date=None
    )


def test_convert_with_date():
    assert parse("USD 1000 ; IDR ; 2022-02-02") == Convert("USD", "1000", "IDR", FEB_2_2022)


@pytest.mark.parametrize("amount", ["50,000", "0.5", "1,234,567.89", "1000.00"])
def test_convert_amount_is_kept_verbatim(amount):
    ret = parse(f"usd {amount} ; eur")
    assert isinstance(ret, Convert)
    assert ret.from_amount == amount
    assert ret.from_currency == "USD"
    assert ret.to_currency == "EUR"


def test_convert_extra_whitespace():
    assert parse("  USD   1000   ;   IDR  ") == Convert("USD", "1000", "IDR")


def test_convert_missing_semicolon_fails():
    with pytest.raises(InvalidArgumentsError):
        parse("USD 1000 IDR")
    with pytest.raises(InvalidArgumentsError):
        parse_convert("USD 1000 IDR")


@pytest.mark.parametrize(
    "raw", ["US 1000 ; IDR", "USDD 1000 ; IDR", "USD 1000 ; ID", "USD 1000 ; IDRR"]
)
def test_convert_code_length_violations(raw):
    with pytest.raises(InvalidArgumentsError):
        parse(raw)


@pytest.mark.parametrize("raw", ["USD -1000 ; IDR", "USD 100abc ; IDR", "USD 1000$ ; IDR", "USD 1.2.3 ; IDR"])
def test_convert_amount_violations(raw):
    with pytest.raises(InvalidArgumentsError) as exc:
        parse(raw)
    assert "Amount" in exc.value.message


def test_convert_code_and_amount_errors_are_distinct():
    with pytest.raises(InvalidArgumentsError) as bad_code:
        parse("U5D 1000 ; IDR")
    with pytest.raises(InvalidArgumentsError) as bad_amount:
        parse("USD 1e5 ; IDR")
    with pytest.raises(InvalidArgumentsError) as bad_target:
        parse("USD 1000 ; 1DR")
    assert "Currency code" in bad_code.value.message
    assert "Amount" in bad_amount.value.message
    assert "TO currency" in bad_target.value.message


@pytest.mark.parametrize(
    "raw",
    [
        "USD ; IDR",
        "USD 1000 extra ; IDR",
        "; IDR",
        "USD 1000 ;",
        "USD 1000 ; IDR ; 2022-02-02 ; extra",
        "USD 1000 ; IDR ; not-a-date",
        "USD 1000 ; IDR ;",
    ],
)
def test_convert_structure_violations(raw):
    with pytest.raises(InvalidArgumentsError):
        parse(raw)


def test_parse_forex_accepts_every_shape():
    assert parse_forex("") == EmptyIntent()
    assert isinstance(parse_forex("USD/IDR"), PairLookup)
    assert isinstance(parse_forex("IDR"), BaseRates)
    assert isinstance(parse_forex("USD 1 ; IDR"), Convert)


def test_parse_convert_only_accepts_conversions():
    assert parse_convert("") == EmptyIntent()
    assert parse_convert("USD 5 ; IDR") == Convert("USD", "5", "IDR")
    for raw in ("USD/IDR", "IDR", "hello"):
        with pytest.raises(InvalidArgumentsError) as exc:
            parse_convert(raw)
        assert exc.value.message == CONVERT_USAGE


def test_parse_is_deterministic():
    raw = "usd 1,000.50 ; idr ; 2022-02-02"
    assert parse(raw) == parse(raw)
