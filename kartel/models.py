"""Typed views of the pricing API responses.

The API wraps every payload in an envelope holding either ``data`` or
``error``. Decoding is strict about types so that the renderer can trust
what it receives; anything unexpected raises ValueError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Generic, TypeVar

T = TypeVar('T')


def parse_timestamp(value: Any) -> datetime:
    """Parse an RFC 3339 timestamp; naive values are taken as UTC."""
    if not isinstance(value, str) or not value:
        raise ValueError(f"invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    ts = datetime.fromisoformat(text)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _str_map(value: Any, name: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"'{name}' must be an object, got {type(value).__name__}")
    return {str(k): str(v) for k, v in value.items()}


@dataclass
class ConvertData:
    date: datetime
    from_: dict[str, str] = field(default_factory=dict)
    to: dict[str, str] = field(default_factory=dict)
    code: str = ''
    symbol: str = ''

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ConvertData:
        to = payload.get('to')
        if to is None:
            to = payload.get('result')
        return cls(
            date=parse_timestamp(payload.get('date')),
            from_=_str_map(payload.get('from'), 'from'),
            to=_str_map(to, 'to'),
            code=str(payload.get('code') or ''),
            symbol=str(payload.get('symbol') or ''),
        )

    @property
    def from_currency(self) -> str | None:
        return next(iter(self.from_), None)

    @property
    def from_amount(self) -> str | None:
        return next(iter(self.from_.values()), None)

    @property
    def to_currency(self) -> str | None:
        return next(iter(self.to), None)


@dataclass
class RatesData:
    rates_date: datetime
    base: str
    rates: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> RatesData:
        return cls(
            rates_date=parse_timestamp(payload.get('rates_date')),
            base=str(payload.get('base') or ''),
            rates=_str_map(payload.get('rates'), 'rates'),
        )


@dataclass
class Envelope(Generic[T]):
    data: T | None = None
    error: str | None = None

    @classmethod
    def from_json(
        cls, body: Any, decode: Callable[[dict[str, Any]], T]
    ) -> Envelope[T]:
        if not isinstance(body, dict):
            raise ValueError(f"response envelope must be an object, got {type(body).__name__}")
        error = body.get('error')
        raw_data = body.get('data')
        error = str(error) if error is not None else None
        data = None
        if raw_data is not None:
            try:
                if not isinstance(raw_data, dict):
                    raise ValueError("'data' must be an object")
                data = decode(raw_data)
            except ValueError:
                # an error report wins over a broken payload
                if error is None:
                    raise
        return cls(data=data, error=error)

    @classmethod
    def failure(cls, message: str) -> Envelope[T]:
        return cls(data=None, error=message)


__all__ = ['ConvertData', 'RatesData', 'Envelope', 'parse_timestamp']
