"""Maps command intents to pricing API queries.

A query is the endpoint kind plus the ordered query-string pairs the HTTP
layer sends. Order is kept stable so requests are reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .grammar import parse_base, parse_conversion
from .intents import BaseRates, CommandIntent, Convert, EmptyIntent, PairLookup

CONVERT = 'convert'
RATES = 'rates'

DATE_PARAM_FORMAT = '%Y-%m-%d'


@dataclass(frozen=True)
class ForexDefaults:
    """Defaults used when the user leaves parts of a request out."""

    base: str = 'USD'
    batch: tuple[tuple[str, str], ...] = (
        ('USD 1', 'IDR'),
        ('BTC 1', 'USD'),
        ('XAU 1', 'USD'),
        ('XAU 1', 'IDR'),
        ('XAG 1', 'USD'),
        ('XAG 1', 'IDR'),
    )
    conversion: tuple[str, str] = ('USD 1', 'IDR')


@dataclass(frozen=True)
class Query:
    endpoint: str
    params: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def get(self, key: str, default: str | None = None) -> str | None:
        for k, v in self.params:
            if k == key:
                return v
        return default

    def as_list(self) -> list[tuple[str, str]]:
        return list(self.params)


def format_date_param(date: datetime) -> str:
    return date.strftime(DATE_PARAM_FORMAT)


def _with_date(params: list[tuple[str, str]], date: datetime | None) -> tuple[tuple[str, str], ...]:
    if date is not None:
        params.append(('date', format_date_param(date)))
    return tuple(params)


def convert_query(from_param: str, to_param: str, date: datetime | None = None) -> Query:
    return Query(CONVERT, _with_date([('from', from_param), ('to', to_param)], date))


def build(intent: CommandIntent, defaults: ForexDefaults | None = None) -> list[Query]:
    """Build the queries answering an intent, in display order."""
    defaults = defaults or ForexDefaults()

    if isinstance(intent, EmptyIntent):
        return [convert_query(f, t) for f, t in defaults.batch]

    if isinstance(intent, PairLookup):
        return [convert_query(f"{intent.left} 1", intent.right, intent.date)]

    if isinstance(intent, BaseRates):
        params: list[tuple[str, str]] = []
        if intent.base.lower() != defaults.base.lower():
            params.append(('base', intent.base))
        return [Query(RATES, _with_date(params, intent.date))]

    if isinstance(intent, Convert):
        return [
            convert_query(
                f"{intent.from_currency} {intent.from_amount}", intent.to_currency, intent.date
            )
        ]

    raise TypeError(f"unsupported intent: {intent!r}")


def build_default_conversion(defaults: ForexDefaults | None = None) -> Query:
    """The single query /convert issues when it gets no arguments."""
    defaults = defaults or ForexDefaults()
    return convert_query(*defaults.conversion)


def intent_from_query(query: Query, defaults: ForexDefaults | None = None) -> CommandIntent:
    """Recover the intent a query was built from.

    A one-unit conversion is reported as a PairLookup, since both build the
    same query.
    """
    defaults = defaults or ForexDefaults()
    date = query.get('date')

    if query.endpoint == RATES:
        base = query.get('base') or defaults.base
        return parse_base(f"{base} {date}" if date else base)

    if query.endpoint == CONVERT:
        text = f"{query.get('from', '')} ; {query.get('to', '')}"
        if date:
            text += f" ; {date}"
        conv = parse_conversion(text)
        if conv.from_amount == '1':
            return PairLookup(left=conv.from_currency, right=conv.to_currency, date=conv.date)
        return conv

    raise ValueError(f"unknown endpoint: {query.endpoint}")
