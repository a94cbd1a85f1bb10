"""Argument grammar for the /forex and /convert commands.

Turns the free-text argument of a command into one of the typed intents of
`kartel.intents`, or raises InvalidArgumentsError with a message meant for
the user. Accepted forms:

- ``""``                              -> EmptyIntent
- ``"USD/IDR [YYYY-MM-DD]"``          -> PairLookup
- ``"IDR [YYYY-MM-DD]"``              -> BaseRates
- ``"USD 50,000 ; IDR [; YYYY-MM-DD]"`` -> Convert

Shapes are classified first, in a fixed order, and only then parsed; a pair
token is never reinterpreted as a base token.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum

from .exceptions import InvalidArgumentsError
from .intents import BaseRates, CommandIntent, Convert, EmptyIntent, PairLookup

# currency code: USD, IDR, BTC, XAU. Case insensitive.
CURRENCY_FORMAT = re.compile(r'[A-Za-z]{3}')
# pair of currencies: USD/IDR, btc/usd
PAIR_FORMAT = re.compile(r'([A-Za-z]{3})/([A-Za-z]{3})')
# amount: digits with optional thousands commas and an optional decimal part
AMOUNT_FORMAT = re.compile(r'[\d,]+(?:\.\d+)?', re.ASCII)
DATE_FORMAT = re.compile(r'\d{4}-\d{2}-\d{2}', re.ASCII)

CONVERT_SEPARATOR = ';'

FOREX_USAGE = (
    "Arguments are:\n"
    "1. Pair of forex, e.g. \"USD/IDR\"\n"
    "2. Base currency for all rates, e.g. \"IDR\"\n"
    "3. (Optional) Date of rate, e.g. \"USD/IDR 2022-02-02\" or \"IDR 2022-02-02\"\n"
    "4. Conversion, e.g. \"USD 50,000 ; IDR\""
)

CONVERT_USAGE = (
    "Arguments must be in format: <FROM_CODE> <AMOUNT> ; <TO_CODE> [; <DATE>]\n"
    "Example: USD 50,000 ; IDR\n"
    "With date: USD 50,000 ; IDR ; 2022-02-02"
)


class Shape(Enum):
    EMPTY = 'empty'
    CONVERT = 'convert'
    PAIR = 'pair'
    BASE = 'base'
    UNKNOWN = 'unknown'


def classify(raw: str) -> Shape:
    """Classify the argument string by shape, in precedence order."""
    text = raw.strip()
    if not text:
        return Shape.EMPTY
    if CONVERT_SEPARATOR in text:
        return Shape.CONVERT
    first = text.split()[0]
    if PAIR_FORMAT.fullmatch(first):
        return Shape.PAIR
    if CURRENCY_FORMAT.fullmatch(first):
        return Shape.BASE
    return Shape.UNKNOWN


def parse_date(text: str) -> datetime:
    """Parse a strict YYYY-MM-DD date into midnight UTC."""
    if not DATE_FORMAT.fullmatch(text):
        raise InvalidArgumentsError(
            f"Invalid date format \"{text}\". Expected YYYY-MM-DD format."
        )
    try:
        day = datetime.strptime(text, '%Y-%m-%d')
    except ValueError as e:
        raise InvalidArgumentsError(
            f"Invalid date \"{text}\": {e}. Expected YYYY-MM-DD format."
        ) from e
    return day.replace(tzinfo=timezone.utc)


def _optional_date(tokens: list[str]) -> datetime | None:
    return parse_date(tokens[1]) if len(tokens) >= 2 else None


def parse_pair(raw: str) -> PairLookup:
    tokens = raw.split()
    m = PAIR_FORMAT.fullmatch(tokens[0]) if tokens else None
    if m is None:
        raise InvalidArgumentsError("Forex pair must be in format XXX/YYY, case insensitive")
    return PairLookup(
        left=m.group(1).upper(),
        right=m.group(2).upper(),
        date=_optional_date(tokens),
    )


def parse_base(raw: str) -> BaseRates:
    tokens = raw.split()
    if not tokens or not CURRENCY_FORMAT.fullmatch(tokens[0]):
        raise InvalidArgumentsError("Base currency must be in format XXX, case insensitive")
    return BaseRates(base=tokens[0].upper(), date=_optional_date(tokens))


def parse_conversion(raw: str) -> Convert:
    parts = [p.strip() for p in raw.strip().split(CONVERT_SEPARATOR)]
    if len(parts) not in (2, 3):
        raise InvalidArgumentsError(CONVERT_USAGE)

    from_part, to_part = parts[0], parts[1]
    if not from_part:
        raise InvalidArgumentsError(
            "FROM part is empty, it must have format: <CURRENCY_CODE> <AMOUNT>\nExample: USD 1000"
        )
    if not to_part:
        raise InvalidArgumentsError(
            "TO part is empty, it must be a currency code\nExample: USD 1000 ; IDR"
        )

    from_tokens = from_part.split()
    if len(from_tokens) != 2:
        raise InvalidArgumentsError(
            "FROM part must have format: <CURRENCY_CODE> <AMOUNT>\nExample: USD 1000"
        )
    from_currency, from_amount = from_tokens

    if not CURRENCY_FORMAT.fullmatch(from_currency):
        raise InvalidArgumentsError(
            f"Currency code must be 3 letters (case insensitive). Got: {from_currency}"
        )
    if not AMOUNT_FORMAT.fullmatch(from_amount):
        raise InvalidArgumentsError(
            "Amount must be a number with optional commas and decimal point. "
            f"Got: {from_amount}"
        )
    if not CURRENCY_FORMAT.fullmatch(to_part):
        raise InvalidArgumentsError(
            f"TO currency code must be 3 letters (case insensitive). Got: {to_part}"
        )

    date = None
    if len(parts) == 3:
        if not parts[2]:
            raise InvalidArgumentsError("Date part is empty. Expected YYYY-MM-DD format.")
        date = parse_date(parts[2])

    return Convert(
        from_currency=from_currency.upper(),
        from_amount=from_amount,
        to_currency=to_part.upper(),
        date=date,
    )


def _parse_unknown(raw: str) -> CommandIntent:
    raise InvalidArgumentsError(f"Invalid arguments: {raw.strip()}\n{FOREX_USAGE}")


_PARSERS = {
    Shape.EMPTY: lambda raw: EmptyIntent(),
    Shape.CONVERT: parse_conversion,
    Shape.PAIR: parse_pair,
    Shape.BASE: parse_base,
    Shape.UNKNOWN: _parse_unknown,
}


def parse(raw: str | None) -> CommandIntent:
    """Parse a raw argument string into a command intent.

    Raises InvalidArgumentsError with a user-facing message on malformed input.
    """
    raw = raw or ''
    return _PARSERS[classify(raw)](raw)


def parse_forex(raw: str | None) -> CommandIntent:
    """Intent of the /forex command; every shape is accepted."""
    return parse(raw)


def parse_convert(raw: str | None) -> EmptyIntent | Convert:
    """Intent of the /convert command; only empty or conversion input is accepted."""
    raw = raw or ''
    shape = classify(raw)
    if shape is Shape.EMPTY:
        return EmptyIntent()
    if shape is not Shape.CONVERT:
        raise InvalidArgumentsError(CONVERT_USAGE)
    return parse_conversion(raw)
