"""Turns pricing API envelopes into Telegram HTML replies.

All functions are pure: they read the typed envelopes and build text,
escaping anything that came from the user or the API.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from html import escape

from .intents import BaseRates, CommandIntent, Convert, EmptyIntent, PairLookup
from .models import ConvertData, Envelope, RatesData
from .money import format_money

NO_DATA = "no data returned"
EMPTY_DATA = "invalid response: empty data"
EMPTY_BATCH = "Empty forex data"
INVALID_CURRENCY = "INVALID"


def format_timestamp(ts: datetime) -> str:
    """Format as ``YYYY-MM-DD HH:MM:SS +HH:MM``."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    offset = ts.strftime('%z')
    return f"{ts.strftime('%Y-%m-%d %H:%M:%S')} {offset[:3]}:{offset[3:5]}"


def api_error(message: str) -> str:
    return f"forex api error: {escape(message)}"


def _preamble(env: Envelope, is_empty: Callable[[object], bool]) -> str | None:
    """Text for the non-happy paths, or None when the data can be rendered."""
    if env.error is not None:
        return api_error(env.error)
    if env.data is None:
        return NO_DATA
    if is_empty(env.data):
        return EMPTY_DATA
    return None


def _convert_is_empty(data: ConvertData) -> bool:
    return not data.from_ or not data.to


def _pair_label(data: ConvertData) -> str:
    left = (data.from_currency or INVALID_CURRENCY).upper()
    right = (data.to_currency or INVALID_CURRENCY).upper()
    return escape(f"{left}/{right}")


def render_pair(env: Envelope[ConvertData]) -> str:
    early = _preamble(env, _convert_is_empty)
    if early is not None:
        return early
    data = env.data
    return f"{_pair_label(data)} on {format_timestamp(data.date)} is:\n<b>{escape(data.code)}</b>"


def render_conversion(env: Envelope[ConvertData]) -> str:
    early = _preamble(env, _convert_is_empty)
    if early is not None:
        return early
    data = env.data
    source = format_money((data.from_currency or INVALID_CURRENCY).upper(), data.from_amount)
    return (
        f"Conversion on {format_timestamp(data.date)}:\n"
        f"<b>{escape(source)} = {escape(data.code)}</b>"
    )


def render_batch(
    envs: Sequence[Envelope[ConvertData]], now: datetime | None = None
) -> str:
    """One heading plus one line per sub-query, in request order."""
    if not envs:
        return EMPTY_BATCH

    dated = next((e.data.date for e in envs if e.error is None and e.data is not None), None)
    if dated is None:
        dated = now or datetime.now(timezone.utc)

    lines = [f"Forex data on {format_timestamp(dated)}:"]
    for env in envs:
        if env.error is not None:
            lines.append(f"error: {escape(env.error)}")
        elif env.data is None:
            lines.append("no data")
        elif _convert_is_empty(env.data):
            lines.append(EMPTY_DATA)
        else:
            lines.append(f"- <b>{_pair_label(env.data)}= {escape(env.data.code)}</b>")
    return "\n".join(lines)


def render_rates(env: Envelope[RatesData]) -> str:
    """Base currency first and emphasized, the rest by code ascending."""
    early = _preamble(env, lambda d: not d.rates)
    if early is not None:
        return early
    data = env.data
    base = data.base.lower()

    pinned = [(k, v) for k, v in data.rates.items() if k.lower() == base]
    others = sorted(
        ((k, v) for k, v in data.rates.items() if k.lower() != base),
        key=lambda kv: (kv[0].lower(), kv[0]),
    )

    heading = f"Rates with base {escape(data.base.upper())} on {format_timestamp(data.rates_date)}:"
    lines = [heading, ""]
    for k, v in pinned:
        lines.append(f"<b>{escape(k.upper())}</b>: {escape(v)}")
    for k, v in others:
        lines.append(f"{escape(k)}: {escape(v)}")
    return "\n".join(lines)


def render(intent: CommandIntent, response: Envelope | Sequence[Envelope]) -> str:
    """Render the response of an intent with the layout matching its kind."""
    if isinstance(intent, EmptyIntent):
        if isinstance(response, Envelope):
            return render_conversion(response)
        return render_batch(response)
    if isinstance(response, Sequence):
        raise TypeError(f"{type(intent).__name__} expects a single envelope")
    if isinstance(intent, PairLookup):
        return render_pair(response)
    if isinstance(intent, BaseRates):
        return render_rates(response)
    if isinstance(intent, Convert):
        return render_conversion(response)
    raise TypeError(f"unsupported intent: {intent!r}")
